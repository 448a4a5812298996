"""Tests for the schema compiler and validation failures."""

import copy
from concurrent.futures import ThreadPoolExecutor

import pytest

from conftest import load_corpus

from pgxn_meta.compiler import (
    CompiledSchema,
    ValidationFailure,
    compile_and_validate,
    spec_compiler,
)
from pgxn_meta.exceptions import CompileError, UnknownSchemaIdError
from pgxn_meta.schema import schema_id

BASE = "https://example.com/schemas"
DRAFT = "https://json-schema.org/draft/2020-12/schema"


@pytest.fixture
def compiler():
    return spec_compiler()


def _schema(name, **body):
    return {"$schema": DRAFT, "$id": f"{BASE}/{name}", **body}


class TestFormatAssertions:
    """Formats are assertions, not annotations."""

    def test_path_format_enforced(self, compiler):
        compiler.add_document(_schema("p.json", type="string", format="path"))

        assert compile_and_validate(compiler, f"{BASE}/p.json", "src/x.c") is None

        failure = compile_and_validate(compiler, f"{BASE}/p.json", "../x.c")
        assert failure.keyword == "format"
        assert failure.format == "path"
        assert failure.cause == "references parent directory"
        assert failure.instance_path == ""

    def test_license_format_enforced(self, compiler):
        compiler.add_document(_schema("l.json", type="string", format="license"))

        assert compile_and_validate(compiler, f"{BASE}/l.json", "MIT OR PostgreSQL") is None

        failure = compile_and_validate(compiler, f"{BASE}/l.json", "Nonsense-License")
        assert failure.format == "license"
        assert failure.cause == "unknown term"

    def test_standard_formats_enforced(self, compiler):
        compiler.add_document(_schema("e.json", type="string", format="email"))

        failure = compile_and_validate(compiler, f"{BASE}/e.json", "not-an-email")
        assert failure is not None
        assert failure.keyword == "format"

    def test_unknown_format_is_ignored(self, compiler):
        compiler.add_document(_schema("u.json", type="string", format="no-such-format"))

        assert compile_and_validate(compiler, f"{BASE}/u.json", "anything") is None


class TestCompile:
    """Test suite for SchemaCompiler.compile."""

    def test_compile_returns_cached_schema(self, compiler):
        compiler.add_document(_schema("a.json", type="integer"))

        first = compiler.compile(f"{BASE}/a.json")
        assert isinstance(first, CompiledSchema)
        assert compiler.compile(f"{BASE}/a.json") is first

    def test_adding_resource_invalidates_cache(self, compiler):
        compiler.add_document(_schema("a.json", type="integer"))
        first = compiler.compile(f"{BASE}/a.json")

        compiler.add_document(_schema("b.json", type="string"))
        assert compiler.compile(f"{BASE}/a.json") is not first

    def test_compile_does_not_replace_registry(self, compiler):
        compiler.add_document(
            _schema("outer.json", **{"$defs": {"inner": {"$id": f"{BASE}/inner.json", "type": "integer"}}})
        )
        registry = compiler._registry

        compiler.compile(f"{BASE}/outer.json")
        inner = compiler.compile(f"{BASE}/inner.json")

        assert compiler._registry is registry
        assert inner.is_valid(3)
        assert not inner.is_valid("three")

    def test_unknown_identity(self, compiler):
        with pytest.raises(CompileError, match="unknown schema"):
            compiler.compile(f"{BASE}/missing.json")

    def test_unresolved_reference(self, compiler):
        compiler.add_document(_schema("r.json", properties={"x": {"$ref": "gone.json"}}))

        with pytest.raises(CompileError, match="unresolved reference 'gone.json'"):
            compiler.compile(f"{BASE}/r.json")

    def test_unresolved_nested_reference(self, compiler):
        compiler.add_document(_schema("outer.json", items={"$ref": "inner.json"}))
        compiler.add_document(_schema("inner.json", anyOf=[{"$ref": "#/$defs/nope"}]))

        with pytest.raises(CompileError) as excinfo:
            compiler.compile(f"{BASE}/outer.json")
        assert excinfo.value.identity == f"{BASE}/outer.json"

    def test_examples_are_not_walked_for_references(self, compiler):
        compiler.add_document(
            _schema("ex.json", type="object", examples=[{"$ref": "not-a-schema.json"}])
        )

        assert compiler.compile(f"{BASE}/ex.json").is_valid({"$ref": "x"})

    def test_cyclic_references_compile(self, compiler):
        compiler.add_document(
            _schema(
                "tree.json",
                type="object",
                properties={"children": {"type": "array", "items": {"$ref": "tree.json"}}},
            )
        )

        compiled = compiler.compile(f"{BASE}/tree.json")
        assert compiled.is_valid({"children": [{"children": []}]})
        assert not compiled.is_valid({"children": [{"children": 1}]})

    def test_malformed_schema(self, compiler):
        compiler.add_document(_schema("bad.json", type=12))

        with pytest.raises(CompileError, match="Cannot compile"):
            compiler.compile(f"{BASE}/bad.json")

    def test_subschema_identity(self, compiler):
        compiler.add_document(_schema("defs.json", **{"$defs": {"small": {"maximum": 3}}}))

        compiled = compiler.compile(f"{BASE}/defs.json#/$defs/small")
        assert compiled.is_valid(2)
        assert not compiled.is_valid(5)

    def test_document_without_id(self, compiler):
        with pytest.raises(UnknownSchemaIdError, match="No \\$id found in schema in x.json"):
            compiler.add_document({"type": "object"}, source="x.json")

    def test_add_resource_with_explicit_identity(self, compiler):
        compiler.add_resource("urn:test:anon", {"type": "boolean"})

        assert compile_and_validate(compiler, "urn:test:anon", True) is None
        assert compile_and_validate(compiler, "urn:test:anon", 1) is not None


class TestValidationFailure:
    """Test suite for failure reporting."""

    @pytest.fixture
    def person(self, compiler):
        compiler.add_document(
            _schema(
                "person.json",
                type="object",
                properties={
                    "name": {"type": "string", "minLength": 2},
                    "tags": {"type": "array", "items": {"type": "string"}},
                },
                required=["name", "age"],
            )
        )
        return compiler.compile(f"{BASE}/person.json")

    def test_valid_instance(self, person):
        assert person.validate({"name": "hi", "age": 3}) is None
        assert list(person.iter_failures({"name": "hi", "age": 3})) == []

    def test_required_points_at_missing_property(self, person):
        failure = person.validate({"name": "hi"})

        assert failure.keyword == "required"
        assert failure.instance_path == "/age"
        assert failure.schema_path == "/required"

    def test_nested_instance_path(self, person):
        failure = person.validate({"name": "hi", "age": 1, "tags": ["a", 2]})

        assert failure.keyword == "type"
        assert failure.instance_path == "/tags/1"

    def test_iter_failures_reports_everything(self, person):
        failures = list(person.iter_failures({"name": "x", "tags": [1]}))

        keywords = sorted(f.keyword for f in failures)
        assert keywords == ["minLength", "required", "type"]

    def test_str_and_dict(self, person):
        failure = person.validate({"name": "hi"})

        assert str(failure).startswith("'/age': ")
        data = failure.to_dict()
        assert data["keyword"] == "required"
        assert data["instance_path"] == "/age"
        assert data["format"] is None

    def test_pointer_escaping(self, compiler):
        compiler.add_document(
            _schema("esc.json", type="object", additionalProperties={"type": "string"})
        )

        failure = compile_and_validate(compiler, f"{BASE}/esc.json", {"a/b~c": 1})
        assert failure.instance_path == "/a~1b~0c"

    def test_format_failure_str_includes_cause(self):
        failure = ValidationFailure(
            keyword="format",
            instance_path="/license",
            schema_path="/properties/license/format",
            message="'x' is not a 'license'",
            format="license",
            cause="unknown term",
        )
        assert str(failure) == "'/license': 'x' is not a 'license': unknown term"


def _v2_instances():
    instances = [load_corpus(2, name) for name in ("pair", "pgtap", "plrust")]

    bad_license = copy.deepcopy(instances[1])
    bad_license["license"] = "MIT OR Nonsense-License"
    bad_path = copy.deepcopy(instances[1])
    bad_path["contents"]["extensions"]["pgtap"]["sql"] = "//server/../pgtap.sql"
    no_license = copy.deepcopy(instances[0])
    del no_license["license"]
    swapped = copy.deepcopy(instances[0])
    swapped["license"] = "MIT WITH Apache-2.0"

    return instances + [bad_license, bad_path, no_license, swapped]


class TestConcurrentValidation:
    """One compiled schema shared by many threads."""

    def test_matches_sequential_results(self, bundled_compiler):
        schema = bundled_compiler.compile(schema_id(2, "distribution"))
        instances = _v2_instances() * 25

        expected = [schema.validate(instance) for instance in instances]
        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(schema.validate, instances))

        assert results == expected
        assert expected[0] is None
        assert {f.cause for f in expected if f is not None} >= {
            "unknown term",
            "references parent directory",
        }

    def test_compile_from_many_threads(self, bundled_compiler):
        identity = schema_id(2, "release")

        with ThreadPoolExecutor(max_workers=8) as executor:
            compiled = list(executor.map(lambda _: bundled_compiler.compile(identity), range(16)))

        for schema in compiled:
            assert schema.identity == identity
            assert schema.validate(load_corpus(2, "pair")) is not None
