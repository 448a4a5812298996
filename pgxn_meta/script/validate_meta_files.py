#!/usr/bin/env python3

import argparse
import json
import sys
from pathlib import Path
from typing import List


SCRIPT_DIR = Path(__file__).resolve().parent
PACKAGE_ROOT = SCRIPT_DIR.parent
if str(PACKAGE_ROOT) not in sys.path:
    sys.path.insert(0, str(PACKAGE_ROOT))

from pgxn_meta.exceptions import PgxnMetaError  # noqa: E402
from pgxn_meta.validator import Validator  # noqa: E402


def find_meta_files(paths: List[Path]) -> List[Path]:
    """Find all META.json files in given paths."""
    meta_files: List[Path] = []

    for path in paths:
        if not path.exists():
            print(f"Warning: Path does not exist: {path}", file=sys.stderr)
            continue

        if path.is_file():
            meta_files.append(path)
        elif path.is_dir():
            meta_files.extend(path.rglob("META.json"))
        else:
            print(f"Warning: Path is neither file nor directory: {path}", file=sys.stderr)

    return sorted(set(meta_files))


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Validate every PGXN META.json file under the given paths",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        default=["."],
        help="Files or directories to validate (default: current directory)",
    )
    parser.add_argument(
        "--release",
        action="store_true",
        help="Validate release metadata instead of distribution metadata",
    )
    args = parser.parse_args()

    meta_files = find_meta_files([Path(p) for p in args.paths])
    if not meta_files:
        print("No META.json files found.", file=sys.stderr)
        sys.exit(1)

    # Schemas compile once and are shared by every file.
    validator = Validator()
    failures = 0
    for path in meta_files:
        try:
            with open(path, "r", encoding="utf-8") as f:
                meta = json.load(f)
            if args.release:
                result = validator.validate_release(meta)
            else:
                result = validator.validate(meta)
        except (OSError, json.JSONDecodeError, PgxnMetaError) as e:
            print(f"{path}: ERROR: {e}")
            failures += 1
            continue

        if result.ok:
            print(f"{path} is OK")
        else:
            print(f"{path}: ERROR: {result.failure}")
            failures += 1

    print(f"{len(meta_files)} files, {failures} failed")
    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()
