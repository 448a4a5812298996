"""PGXN distribution metadata validation with versioned JSON Schemas."""

__version__ = "0.1.0"

from .compiler import (  # noqa: E402
    CompiledSchema,
    SchemaCompiler,
    ValidationFailure,
    compile_and_validate,
    spec_compiler,
)
from .exceptions import (  # noqa: E402
    CompileError,
    DuplicateFragmentError,
    FormatViolation,
    MissingRootError,
    PgxnMetaError,
    SchemaIOError,
    SchemaParseError,
    UnknownSchemaIdError,
    UnknownSpecError,
)
from .loader import load_directory, new, new_compiler  # noqa: E402
from .validator import ValidationResult, Validator  # noqa: E402

__all__ = [
    "CompileError",
    "CompiledSchema",
    "DuplicateFragmentError",
    "FormatViolation",
    "MissingRootError",
    "PgxnMetaError",
    "SchemaCompiler",
    "SchemaIOError",
    "SchemaParseError",
    "UnknownSchemaIdError",
    "UnknownSpecError",
    "ValidationFailure",
    "ValidationResult",
    "Validator",
    "compile_and_validate",
    "load_directory",
    "new",
    "new_compiler",
    "spec_compiler",
]
