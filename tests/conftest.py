"""
Pytest configuration and shared fixtures.
"""

import copy
import json
import logging
from pathlib import Path

import pytest

from pgxn_meta.loader import new, new_compiler
from pgxn_meta.schema import get_schema_dir
from pgxn_meta.validator import Validator

CORPUS_DIR = Path(__file__).resolve().parent / "corpus"


def load_corpus(version: int, name: str) -> dict:
    with open(CORPUS_DIR / f"v{version}" / f"{name}.json", "r", encoding="utf-8") as f:
        return json.load(f)


def write_fragment(directory: Path, name: str, document: dict) -> Path:
    """Write a schema fragment file and return its path."""
    path = directory / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo CLI logging setup so caplog sees package records."""
    yield
    logger = logging.getLogger("pgxn_meta")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture(scope="session")
def v1_compiler():
    """Compiler loaded from the v1 fragment directory."""
    return new_compiler(get_schema_dir(1))


@pytest.fixture(scope="session")
def v2_compiler():
    """Compiler loaded from the v2 fragment directory."""
    return new_compiler(get_schema_dir(2))


@pytest.fixture(scope="session")
def bundled_compiler():
    """Compiler loaded with in-memory bundles of every version."""
    return new()


@pytest.fixture(scope="session")
def validator(bundled_compiler):
    return Validator(bundled_compiler)


@pytest.fixture
def v1_distribution():
    return copy.deepcopy(load_corpus(1, "pgtap"))


@pytest.fixture
def v2_distribution():
    return copy.deepcopy(load_corpus(2, "pgtap"))


@pytest.fixture
def tiny_schema_dir(tmp_path):
    """A minimal fragment directory: a root plus one referenced fragment."""
    base = "https://example.com/schemas"
    write_fragment(tmp_path, "distribution.schema.json", {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "$id": f"{base}/distribution.schema.json",
        "type": "object",
        "properties": {"name": {"$ref": "name.schema.json"}},
        "required": ["name"],
    })
    write_fragment(tmp_path, "name.schema.json", {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "$id": f"{base}/name.schema.json",
        "type": "string",
        "minLength": 2,
    })
    return tmp_path
