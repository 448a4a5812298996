"""Meta-spec version detection for PGXN metadata documents."""

from typing import Any, Optional

_VERSION_PREFIXES = {"1.": 1, "2.": 2}


def get_version(meta: Any) -> Optional[int]:
    """Return the major meta-spec version declared by ``meta``.

    The version is read from ``meta-spec.version``: ``"1.x.x"`` is version 1
    and ``"2.x.x"`` is version 2. Returns ``None`` when the document declares
    no recognizable version.
    """
    if not isinstance(meta, dict):
        return None

    meta_spec = meta.get("meta-spec")
    if not isinstance(meta_spec, dict):
        return None

    version = meta_spec.get("version")
    if not isinstance(version, str):
        return None

    for prefix, major in _VERSION_PREFIXES.items():
        if version.startswith(prefix):
            return major
    return None
