# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Schema compiler configured for PGXN metadata.

A :class:`SchemaCompiler` collects schema documents by identity, then
compiles an identity into a :class:`CompiledSchema` that can validate any
number of instances. Compilation resolves every ``$ref`` reachable from the
schema up front, so a missing fragment is reported as a
:class:`~pgxn_meta.exceptions.CompileError` instead of surfacing halfway
through a validation.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, Iterator, Optional, Set

from jsonschema import Draft202012Validator, FormatChecker
from jsonschema.exceptions import SchemaError, ValidationError, best_match
from jsonschema.validators import validator_for
from referencing import Registry, Resource
from referencing.exceptions import Unresolvable
from referencing.jsonschema import DRAFT202012

from .exceptions import CompileError, FormatViolation, UnknownSchemaIdError
from .formats import FORMATS

logger = logging.getLogger(__name__)

JsonPointer = str

# Keywords whose values are data, never subschemas.
_DATA_KEYWORDS = frozenset({"examples", "enum", "const", "default", "required"})

# Keywords whose values map arbitrary names to subschemas.
_SCHEMA_MAP_KEYWORDS = frozenset(
    {"properties", "patternProperties", "$defs", "definitions", "dependentSchemas"}
)


def _jp_escape(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def _pointer(tokens: Iterable[Any]) -> JsonPointer:
    return "".join(f"/{_jp_escape(str(t))}" for t in tokens)


@dataclass(frozen=True)
class ValidationFailure:
    """The reason an instance failed validation.

    ``instance_path`` is a JSON pointer to the offending node; for a
    ``required`` failure it points at the missing property. ``format`` and
    ``cause`` are set for format failures, ``cause`` carrying the grammar
    error reported by the format validator.
    """

    keyword: str
    instance_path: JsonPointer
    schema_path: JsonPointer
    message: str
    format: Optional[str] = None
    cause: Optional[str] = None

    def __str__(self) -> str:
        text = f"'{self.instance_path}': {self.message}"
        if self.cause:
            text = f"{text}: {self.cause}"
        return text

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_error(cls, error: ValidationError) -> "ValidationFailure":
        tokens = list(error.absolute_path)
        if error.validator == "required" and isinstance(error.instance, dict):
            for name in error.validator_value:
                if name not in error.instance and repr(name) in error.message:
                    tokens.append(name)
                    break

        return cls(
            keyword=str(error.validator),
            instance_path=_pointer(tokens),
            schema_path=_pointer(error.absolute_schema_path),
            message=error.message,
            format=error.validator_value if error.validator == "format" else None,
            cause=str(error.cause) if error.cause is not None else None,
        )


class CompiledSchema:
    """A compiled schema, reusable across any number of validations."""

    def __init__(self, identity: str, validator):
        self.identity = identity
        self._validator = validator

    def __repr__(self) -> str:
        return f"CompiledSchema({self.identity!r})"

    def iter_failures(self, instance: Any) -> Iterator[ValidationFailure]:
        """Yield every failure for ``instance``."""
        for error in self._validator.iter_errors(instance):
            yield ValidationFailure.from_error(error)

    def validate(self, instance: Any) -> Optional[ValidationFailure]:
        """Validate ``instance``; return ``None`` or the most relevant failure."""
        error = best_match(self._validator.iter_errors(instance))
        if error is None:
            return None
        return ValidationFailure.from_error(error)

    def is_valid(self, instance: Any) -> bool:
        return self._validator.is_valid(instance)


class SchemaCompiler:
    """Registry of schema documents plus the format checker to compile them with."""

    def __init__(self, format_checker: FormatChecker):
        self.format_checker = format_checker
        self._registry: Registry = Registry()
        self._compiled: Dict[str, CompiledSchema] = {}

    def add_resource(self, identity: str, document: Any) -> None:
        """Register ``document`` under ``identity``."""
        resource = Resource.from_contents(document, default_specification=DRAFT202012)
        # Crawl here so compile() and validation only ever read the registry.
        self._registry = self._registry.with_resource(uri=identity, resource=resource).crawl()
        self._compiled.clear()
        logger.debug(f"Registered schema {identity}")

    def add_document(self, document: Any, source: Any = None) -> str:
        """Register a self-identifying document under its ``$id``.

        Returns:
            The document's identity

        Raises:
            UnknownSchemaIdError: If the document has no string ``$id``
        """
        identity = document.get("$id") if isinstance(document, dict) else None
        if not isinstance(identity, str) or not identity:
            raise UnknownSchemaIdError(source)
        self.add_resource(identity, document)
        return identity

    def compile(self, identity: str) -> CompiledSchema:
        """Compile ``identity`` into an executable validator.

        Compiled schemas are cached until another resource is registered.

        Raises:
            CompileError: If the identity, or any schema it references, cannot
                be resolved, or if the schema itself is malformed
        """
        cached = self._compiled.get(identity)
        if cached is not None:
            return cached

        registry = self._registry
        try:
            resolved = registry.resolver().lookup(identity)
        except Unresolvable as e:
            raise CompileError(identity, f"unknown schema: {e}") from e

        schema = resolved.contents
        validator_cls = validator_for(schema, default=Draft202012Validator)
        try:
            validator_cls.check_schema(schema)
        except SchemaError as e:
            raise CompileError(identity, e.message) from e

        _resolve_refs(identity, schema, resolved.resolver, set())

        if "#" in identity:
            # Subschema identities have no base URI of their own.
            schema = {"$ref": identity}
        validator = validator_cls(
            schema,
            registry=registry,
            format_checker=self.format_checker,
        )

        compiled = CompiledSchema(identity, validator)
        self._compiled[identity] = compiled
        logger.debug(f"Compiled schema {identity}")
        return compiled


def _resolve_refs(identity: str, schema: Any, resolver, seen: Set[int]) -> None:
    """Resolve every ``$ref`` reachable from ``schema`` or raise CompileError."""
    if isinstance(schema, list):
        for item in schema:
            _resolve_refs(identity, item, resolver, seen)
        return
    if not isinstance(schema, dict) or id(schema) in seen:
        return
    seen.add(id(schema))

    if isinstance(schema.get("$id"), str):
        resource = Resource.from_contents(schema, default_specification=DRAFT202012)
        resolver = resolver.in_subresource(resource)

    ref = schema.get("$ref")
    if isinstance(ref, str):
        try:
            resolved = resolver.lookup(ref)
        except Unresolvable as e:
            raise CompileError(identity, f"unresolved reference {ref!r}: {e}") from e
        _resolve_refs(identity, resolved.contents, resolved.resolver, seen)

    for keyword, value in schema.items():
        if keyword in _DATA_KEYWORDS:
            continue
        if keyword in _SCHEMA_MAP_KEYWORDS and isinstance(value, dict):
            for subschema in value.values():
                _resolve_refs(identity, subschema, resolver, seen)
        elif isinstance(value, (dict, list)):
            _resolve_refs(identity, value, resolver, seen)


def spec_compiler() -> SchemaCompiler:
    """Create a compiler asserting standard formats plus ``path`` and ``license``."""
    format_checker = FormatChecker()
    for kind, func in FORMATS.items():
        format_checker.checks(kind.value, raises=FormatViolation)(func)
    return SchemaCompiler(format_checker)


def compile_and_validate(
    compiler: SchemaCompiler, identity: str, instance: Any
) -> Optional[ValidationFailure]:
    """Compile ``identity`` (cached) and validate ``instance`` against it."""
    return compiler.compile(identity).validate(instance)
