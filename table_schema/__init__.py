"""
table_schema – declarative validation and normalization of nested data.
"""
import logging

from .codes import ErrorCode, Issue
from .nodes import (
    MISSING,
    DependsOn,
    Enum,
    Scalar,
    SchemaDefinitionError,
    Table,
    Union,
    boolean,
    enum,
    function,
    integer,
    number,
    string,
    table,
    union,
)
from .report import ErrorReport, SchemaError
from .validator import validate, validate_or_raise
from .loader import from_dict, load_schema
from .parser import parse_input

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "validate",
    "validate_or_raise",
    "ErrorCode",
    "ErrorReport",
    "Issue",
    "SchemaError",
    "SchemaDefinitionError",
    "MISSING",
    "Scalar",
    "Table",
    "Union",
    "Enum",
    "DependsOn",
    "string",
    "number",
    "integer",
    "boolean",
    "function",
    "table",
    "union",
    "enum",
    "from_dict",
    "load_schema",
    "parse_input",
]
