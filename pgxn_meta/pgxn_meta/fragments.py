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

"""Reading JSON Schema fragment files from disk."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Tuple, Union

from .exceptions import SchemaIOError, SchemaParseError
from .schema import FRAGMENT_SUFFIX

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def find_fragments(directory: PathLike, recursive: bool = True) -> List[Path]:
    """Find schema fragment files in a directory.

    Args:
        directory: Directory to search
        recursive: Also search subdirectories

    Returns:
        Sorted list of fragment paths

    Raises:
        SchemaIOError: If the directory does not exist
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise SchemaIOError(directory, FileNotFoundError("not a directory"))

    pattern = f"*{FRAGMENT_SUFFIX}"
    paths = directory.rglob(pattern) if recursive else directory.glob(pattern)
    return sorted(p for p in paths if p.is_file())


def read_fragment(path: PathLike) -> Dict[str, Any]:
    """Load one schema fragment.

    Raises:
        SchemaIOError: If the file cannot be read
        SchemaParseError: If the file is not a JSON object
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)
    except OSError as e:
        raise SchemaIOError(path, e) from e
    except json.JSONDecodeError as e:
        raise SchemaParseError(path, f"{e.msg} (line {e.lineno}, column {e.colno})") from e

    if not isinstance(document, dict):
        raise SchemaParseError(path, f"expected an object, got {type(document).__name__}")

    logger.debug(f"Read schema fragment {path}")
    return document


def fragment_examples(directory: PathLike) -> Iterator[Tuple[str, List[Any]]]:
    """Yield ``(identity, examples)`` for every fragment in a directory.

    Fragments without an ``examples`` array yield an empty list.
    """
    for path in find_fragments(directory):
        document = read_fragment(path)
        examples = document.get("examples")
        yield document.get("$id"), list(examples) if isinstance(examples, list) else []
