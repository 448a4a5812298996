"""PGXN metadata JSON Schema fragments.

One directory per meta-spec version (``v1``, ``v2``) holds sibling
``*.schema.json`` fragments. Every fragment declares its own ``$id`` of the
form ``https://pgxn.org/meta/v{N}/{filename}``; ``distribution.schema.json``
is the root of each version.
"""

from pathlib import Path
from typing import Tuple

SCHEMA_BASE = "https://pgxn.org/meta/v"
FRAGMENT_SUFFIX = ".schema.json"
ROOT_FRAGMENT = "distribution.schema.json"
SCHEMA_VERSIONS: Tuple[int, ...] = (1, 2)


def get_schema_root() -> Path:
    """Return the directory holding the per-version fragment directories."""
    return Path(__file__).resolve().parent


def get_schema_dir(version: int, schema_root: Path = None) -> Path:
    """Return the fragment directory for a meta-spec version."""
    root = Path(schema_root) if schema_root is not None else get_schema_root()
    return root / f"v{version}"


def schema_id(version: int, name: str) -> str:
    """Build the identity of a fragment, e.g. ``schema_id(2, "license")``."""
    if not name.endswith(FRAGMENT_SUFFIX):
        name = f"{name}{FRAGMENT_SUFFIX}"
    return f"{SCHEMA_BASE}{version}/{name}"
