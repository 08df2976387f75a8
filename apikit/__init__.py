"""apikit - compile C API descriptions into FFI declarations."""

from apikit.backends import get_backend, list_backends, parse_file
from apikit.errors import (
    ApiDescriptionError,
    InvalidQualifierError,
    MalformedTypeError,
    StructuralMismatchError,
)
from apikit.ir import (
    # Declarations
    Alias,
    # Container
    Api,
    # Type expressions
    Array,
    Callback,
    Declaration,
    Define,
    # Protocol
    DocumentParser,
    Enum,
    EnumVariant,
    Field,
    Function,
    Name,
    Param,
    Pointer,
    Struct,
    TypeExpr,
    Variadic,
)
from apikit.naming import normalize_api, snake_to_pascal, strip_common_prefix
from apikit.typeparse import parse_type
from apikit.writers import (
    DEFAULT_WRITER,
    WriterBackend,
    get_writer,
    list_writers,
    register_writer,
)

__all__ = [
    # Types
    "Name",
    "Pointer",
    "Array",
    "Variadic",
    "TypeExpr",
    "parse_type",
    # Declarations
    "Define",
    "Field",
    "Struct",
    "Alias",
    "EnumVariant",
    "Enum",
    "Param",
    "Callback",
    "Function",
    "Declaration",
    # Container
    "Api",
    # Errors
    "ApiDescriptionError",
    "MalformedTypeError",
    "StructuralMismatchError",
    "InvalidQualifierError",
    # Naming
    "snake_to_pascal",
    "strip_common_prefix",
    "normalize_api",
    # Parser Protocol and API
    "DocumentParser",
    "get_backend",
    "list_backends",
    "parse_file",
    # Writer Protocol and API
    "DEFAULT_WRITER",
    "WriterBackend",
    "get_writer",
    "list_writers",
    "register_writer",
]
