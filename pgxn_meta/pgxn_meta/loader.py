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

"""Build schema compilers from fragment directories or prebuilt bundles."""

import logging
from pathlib import Path
from typing import Iterable, Optional

from .bundle import bundle_filename, merge_version
from .compiler import SchemaCompiler, spec_compiler
from .fragments import PathLike, find_fragments, read_fragment
from .schema import SCHEMA_VERSIONS

logger = logging.getLogger(__name__)


def load_directory(compiler: SchemaCompiler, directory: PathLike) -> int:
    """Register every fragment under ``directory`` with ``compiler``.

    Returns:
        Number of fragments registered

    Raises:
        SchemaIOError: If a fragment cannot be read
        SchemaParseError: If a fragment is not a JSON object
        UnknownSchemaIdError: If a fragment has no ``$id``
    """
    count = 0
    for path in find_fragments(directory):
        compiler.add_document(read_fragment(path), source=path)
        count += 1
    logger.debug(f"Loaded {count} schema fragments from {directory}")
    return count


def new_compiler(directory: PathLike) -> SchemaCompiler:
    """Create a format-asserting compiler loaded with the fragments in ``directory``."""
    compiler = spec_compiler()
    load_directory(compiler, directory)
    return compiler


def load_bundle(compiler: SchemaCompiler, path: PathLike) -> str:
    """Register a merged bundle file; every embedded fragment becomes resolvable."""
    return compiler.add_document(read_fragment(path), source=path)


def new(
    bundle_dir: Optional[PathLike] = None,
    versions: Iterable[int] = SCHEMA_VERSIONS,
    schema_root: Optional[PathLike] = None,
) -> SchemaCompiler:
    """Create a compiler holding the schemas of every meta-spec version.

    Bundles are read from ``bundle_dir`` when given; otherwise the fragments
    of each version are merged in memory.
    """
    compiler = spec_compiler()
    for version in versions:
        if bundle_dir is not None:
            load_bundle(compiler, Path(bundle_dir) / bundle_filename(version))
        else:
            compiler.add_document(merge_version(version, schema_root), source=f"v{version}")
    return compiler
