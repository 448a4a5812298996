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

"""Custom exceptions for PGXN metadata schema handling."""


class PgxnMetaError(Exception):
    """Base exception for pgxn_meta related errors."""
    pass


class SchemaIOError(PgxnMetaError):
    """Exception raised when a schema fragment cannot be read."""

    def __init__(self, path, cause: OSError):
        super().__init__(f"Cannot read schema file {path}: {cause}")
        self.path = path


class SchemaParseError(PgxnMetaError):
    """Exception raised when a schema fragment is not a JSON object."""

    def __init__(self, path, message: str):
        super().__init__(f"Invalid JSON in schema file {path}: {message}")
        self.path = path


class UnknownSchemaIdError(PgxnMetaError):
    """Exception raised when a schema document has no $id."""

    def __init__(self, source=None):
        where = f" in {source}" if source is not None else ""
        super().__init__(f"No $id found in schema{where}")
        self.source = source


class MissingRootError(PgxnMetaError):
    """Exception raised when a schema directory lacks its root fragment."""
    pass


class DuplicateFragmentError(PgxnMetaError):
    """Exception raised when two fragments would share one bundle key."""
    pass


class CompileError(PgxnMetaError):
    """Exception raised when a schema identity cannot be compiled."""

    def __init__(self, identity: str, message: str):
        super().__init__(f"Cannot compile {identity}: {message}")
        self.identity = identity


class UnknownSpecError(PgxnMetaError):
    """Exception raised when a document's meta-spec version is unknown."""

    def __init__(self):
        super().__init__("cannot determine meta-spec version")


class FormatViolation(PgxnMetaError, ValueError):
    """Exception raised by a format validator for a non-conforming value."""
    pass
