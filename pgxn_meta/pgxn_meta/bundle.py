#!/usr/bin/env python3
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

"""Merge the schema fragments of one meta-spec version into a single bundle.

The root fragment becomes the bundle document and every other fragment is
stored, unchanged, under the root's ``$defs`` keyed by its filename. Because
each fragment keeps its own ``$id``, registering the bundle makes every
fragment identity resolvable.
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .exceptions import DuplicateFragmentError, MissingRootError, PgxnMetaError
from .fragments import PathLike, find_fragments, read_fragment
from .schema import ROOT_FRAGMENT, SCHEMA_VERSIONS, get_schema_dir

logger = logging.getLogger(__name__)


def bundle_filename(version: int) -> str:
    """Name of the bundle artifact for a meta-spec version."""
    return f"pgxn-meta-v{version}.schema.json"


def merge_fragments(directory: PathLike) -> Dict[str, Any]:
    """Merge the fragments found in ``directory`` into one document.

    Raises:
        MissingRootError: If the directory has no root fragment
        DuplicateFragmentError: If two fragments share a filename
    """
    fragments: Dict[str, Dict[str, Any]] = {}
    identities: Dict[str, str] = {}
    for path in find_fragments(directory):
        if path.name in fragments:
            raise DuplicateFragmentError(
                f"Duplicate schema fragment {path.name} in {directory}"
            )
        document = read_fragment(path)
        fragments[path.name] = document

        identity = document.get("$id")
        if identity in identities:
            # Keyed by filename; colliding identities are reported, not fixed.
            logger.warning(
                f"Fragments {identities[identity]} and {path.name} share $id {identity}"
            )
        elif identity is not None:
            identities[identity] = path.name

    root = fragments.pop(ROOT_FRAGMENT, None)
    if root is None:
        raise MissingRootError(f"No {ROOT_FRAGMENT} found in {directory}")

    if "$defs" in root:
        logger.warning(f"Replacing $defs of {ROOT_FRAGMENT} in {directory}")
    root["$defs"] = {name: fragments[name] for name in sorted(fragments)}

    logger.debug(f"Merged {len(fragments)} fragments into {ROOT_FRAGMENT} from {directory}")
    return root


def merge_version(version: int, schema_root: Optional[PathLike] = None) -> Dict[str, Any]:
    """Merge the fragments of one meta-spec version."""
    return merge_fragments(get_schema_dir(version, schema_root))


def dump_bundle(bundle: Dict[str, Any]) -> str:
    """Serialize a bundle; identical input always yields identical text."""
    return json.dumps(bundle, indent=2, sort_keys=True, ensure_ascii=False) + "\n"


def write_bundle(
    version: int, out_dir: PathLike, schema_root: Optional[PathLike] = None
) -> Path:
    """Merge one version and write its bundle artifact to ``out_dir``."""
    output_path = Path(out_dir) / bundle_filename(version)
    content = dump_bundle(merge_version(version, schema_root))

    os.makedirs(output_path.parent, exist_ok=True)
    try:
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(content)
        logger.info(f"Saved schema bundle: {output_path}")
    except OSError as e:
        logger.error(f"Failed to save schema bundle: {output_path}: {e}")
        raise
    return output_path


def build_all(
    out_dir: PathLike,
    versions: Iterable[int] = SCHEMA_VERSIONS,
    schema_root: Optional[PathLike] = None,
) -> List[Path]:
    """Write one bundle per version; versions are merged independently."""
    return [write_bundle(v, out_dir, schema_root) for v in versions]


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``pgxn-meta-bundle``."""
    from .config import MetaConfig

    parser = argparse.ArgumentParser(
        description="Merge PGXN meta-spec schema fragments into one bundle per version",
    )
    parser.add_argument("out_dir", help="Directory to write the bundles to")
    parser.add_argument(
        "--schema-dir",
        default=None,
        help="Directory holding v1/, v2/ fragment directories (default: packaged schemas)",
    )
    parser.add_argument(
        "--version",
        dest="versions",
        type=int,
        action="append",
        choices=SCHEMA_VERSIONS,
        help="Meta-spec version to merge; repeatable (default: all)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    config = MetaConfig.from_env()
    if args.verbose:
        config.log_level = "DEBUG"
    config.set_logging()

    schema_root = args.schema_dir or config.schema_dir
    try:
        paths = build_all(args.out_dir, args.versions or SCHEMA_VERSIONS, schema_root)
    except PgxnMetaError as e:
        logger.error(str(e))
        sys.exit(1)

    for path in paths:
        print(path)
    sys.exit(0)


if __name__ == "__main__":
    main()
