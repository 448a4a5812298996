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

"""Validation of PGXN ``META.json`` documents.

Example::

    validator = Validator()
    result = validator.validate(meta)
    if not result:
        print(result.failure)

The meta-spec version is detected from ``meta-spec.version`` and the
document is validated against that version's schemas.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from .compiler import SchemaCompiler, ValidationFailure, compile_and_validate
from .exceptions import UnknownSpecError
from .loader import new
from .schema import schema_id
from .utils.meta_version import get_version

logger = logging.getLogger(__name__)

DISTRIBUTION_SCHEMA = "distribution.schema.json"
RELEASE_SCHEMA = "release.schema.json"
PAYLOAD_SCHEMA = "payload.schema.json"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one document."""
    version: int
    failure: Optional[ValidationFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    def __bool__(self) -> bool:
        return self.ok


class Validator:
    """PGXN metadata validator.

    One validator compiles each schema once and reuses it for every document
    it validates, so keep it around when checking many files.
    """

    def __init__(self, compiler: Optional[SchemaCompiler] = None):
        self.compiler = compiler if compiler is not None else new()

    def validate(self, meta: Any) -> ValidationResult:
        """Validate distribution metadata against its meta-spec version.

        Raises:
            UnknownSpecError: If the meta-spec version cannot be determined
        """
        return self._validate_schema(meta, DISTRIBUTION_SCHEMA)

    def validate_release(self, meta: Any) -> ValidationResult:
        """Validate release metadata: distribution metadata plus release details.

        For v2 the release details are a signed JWS whose decoded payload is
        checked separately with :meth:`validate_payload`.
        """
        return self._validate_schema(meta, RELEASE_SCHEMA)

    def validate_payload(self, payload: Any) -> ValidationResult:
        """Validate a decoded v2 release payload."""
        return self._validate_version_schema(payload, 2, PAYLOAD_SCHEMA)

    def _validate_schema(self, meta: Any, schema: str) -> ValidationResult:
        version = get_version(meta)
        if version is None:
            raise UnknownSpecError()
        return self._validate_version_schema(meta, version, schema)

    def _validate_version_schema(self, meta: Any, version: int, schema: str) -> ValidationResult:
        identity = schema_id(version, schema)
        logger.debug(f"Validating against {identity}")
        failure = compile_and_validate(self.compiler, identity, meta)
        return ValidationResult(version=version, failure=failure)
