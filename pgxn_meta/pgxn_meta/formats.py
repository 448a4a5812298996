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

"""Custom string formats enforced by the PGXN metadata schemas.

Two formats exist beyond the JSON Schema standard ones:

* ``path`` - a relative file path that never climbs above its base
  directory. Both ``/`` and ``\\`` separate components, whatever the host
  platform.
* ``license`` - an SPDX license expression, parsed with the
  ``license-expression`` SPDX licensing.

Each validator returns ``True`` for a conforming value and raises
:class:`~pgxn_meta.exceptions.FormatViolation` otherwise, which is the
contract ``jsonschema.FormatChecker`` expects from a checker registered with
``raises=``.
"""

from __future__ import annotations

import enum
import functools
import re
from typing import Any, Callable, Dict, FrozenSet

from license_expression import ExpressionError, Licensing, get_spdx_licensing

from .exceptions import FormatViolation


_PARENT_DIR = ".."

_SEPARATOR_RE = re.compile(r"[\\/]")

# Operators must be upper case; license-expression matches them in any case.
_OPERATORS = frozenset({"AND", "OR", "WITH"})
_TERM_SPLIT_RE = re.compile(r"[\s()]+")

# LicenseRef-<idstring> and DocumentRef-<idstring>:LicenseRef-<idstring>
_LICENSE_REF_RE = re.compile(
    r"^(?:DocumentRef-[A-Za-z0-9.\-]+:)?LicenseRef-[A-Za-z0-9.\-]+$"
)


class FormatKind(str, enum.Enum):
    """Closed set of custom formats registered with every compiler."""

    PATH = "path"
    LICENSE = "license"


def is_path(value: Any) -> bool:
    """Check that ``value`` is a path that does not reference its parent."""
    if not isinstance(value, str):
        raise FormatViolation("not a string")

    # No drive or UNC parsing: "//server/.." still has a ".." component.
    if _PARENT_DIR in _SEPARATOR_RE.split(value):
        raise FormatViolation("references parent directory")

    return True


@functools.lru_cache(maxsize=1)
def _spdx_licensing() -> Licensing:
    return get_spdx_licensing()


@functools.lru_cache(maxsize=2)
def _known_keys(exception: bool) -> FrozenSet[str]:
    keys = set()
    for symbol in _spdx_licensing().known_symbols.values():
        if bool(symbol.is_exception) is not exception:
            continue
        keys.add(symbol.key.lower())
        keys.update(alias.lower() for alias in symbol.aliases)
    return frozenset(keys)


def _is_known_exception_key(key: str) -> bool:
    return key.lower() in _known_keys(exception=True)


def _is_known_license_key(key: str) -> bool:
    if _LICENSE_REF_RE.match(key):
        return True

    known = _known_keys(exception=False)
    lowered = key.lower()
    if lowered in known:
        return True

    # "CDDL-1.0+" means that version or any later one.
    return lowered.endswith("+") and lowered[:-1] in known


def is_license(value: Any) -> bool:
    """Check that ``value`` is a valid SPDX license expression."""
    if not isinstance(value, str):
        raise FormatViolation("not a string")

    if not value.strip():
        raise FormatViolation("empty expression")

    for term in _TERM_SPLIT_RE.split(value):
        if term.upper() in _OPERATORS and term not in _OPERATORS:
            raise FormatViolation(f"operator {term!r} must be upper case")

    licensing = _spdx_licensing()
    try:
        # strict rejects an exception used as a license and a license after WITH
        parsed = licensing.parse(value, validate=False, strict=True)
    except ExpressionError as e:
        raise FormatViolation(str(e)) from e
    except Exception as e:
        # boolean.py raises bare errors on degenerate input such as "()".
        raise FormatViolation(f"invalid expression: {value!r}") from e

    if parsed is None:
        raise FormatViolation("empty expression")

    symbols = licensing.license_symbols(parsed, unique=True, decompose=True)
    if not symbols:
        raise FormatViolation("unknown term")

    for symbol in symbols:
        if symbol.is_exception:
            known = _is_known_exception_key(symbol.key)
        else:
            known = _is_known_license_key(symbol.key)
        if not known:
            raise FormatViolation("unknown term")

    return True


FORMATS: Dict[FormatKind, Callable[[Any], bool]] = {
    FormatKind.PATH: is_path,
    FormatKind.LICENSE: is_license,
}
