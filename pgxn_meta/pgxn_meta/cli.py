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

"""CLI entry point for validating PGXN META.json files."""

import argparse
import json
import logging
import sys
from typing import Any, List, Optional

from . import __version__
from .config import MetaConfig
from .exceptions import PgxnMetaError
from .loader import new
from .validator import Validator

logger = logging.getLogger(__name__)

META_FILE = "META.json"


def _load_json(path: str) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        print(f"Cannot open '{path}': {e}", file=sys.stderr)
        sys.exit(2)
    except json.JSONDecodeError as e:
        print(f"Cannot parse '{path}': {e}", file=sys.stderr)
        sys.exit(2)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the pgxn-meta CLI."""
    parser = argparse.ArgumentParser(
        prog="pgxn-meta",
        description="Validate PGXN distribution metadata",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=META_FILE,
        help=f"Metadata file to validate (default: {META_FILE})",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--release",
        action="store_true",
        help="Validate release metadata instead of distribution metadata",
    )
    parser.add_argument(
        "--format",
        choices=["human", "json"],
        default="human",
        help="Output format (default: human)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    config = MetaConfig.from_env()
    if args.verbose:
        config.log_level = "DEBUG"
    config.set_logging(reserve_stdout=args.format == "json")

    meta = _load_json(args.path)

    try:
        validator = Validator(new(bundle_dir=config.bundle_dir, schema_root=config.schema_dir))
        if args.release:
            result = validator.validate_release(meta)
        else:
            result = validator.validate(meta)
    except PgxnMetaError as e:
        if args.format == "json":
            print(json.dumps({"file": args.path, "ok": False, "error": str(e)}, indent=2))
        else:
            print(f"{args.path} {e}", file=sys.stderr)
        sys.exit(1)

    if args.format == "json":
        output = {
            "file": args.path,
            "ok": result.ok,
            "version": result.version,
            "failure": result.failure.to_dict() if result.failure else None,
        }
        print(json.dumps(output, indent=2))
    elif result.ok:
        print(f"{args.path} is OK")
    else:
        print(f"{args.path} {result.failure}", file=sys.stderr)

    sys.exit(0 if result.ok else 1)


if __name__ == "__main__":
    main()
