from optstruct.core.attrs import OwnerKind, filter_attrs
from optstruct.core.errors import (
    Diagnostic,
    OptStructError,
    ParseError,
    ShapeMismatchError,
    TypeConstructionError,
)
from optstruct.core.fields import generate_fields, merge_fields
from optstruct.core.generate import generate
from optstruct.core.parse import parse_attribute, parse_fields, parse_record, parse_records, parse_type
from optstruct.core.render import render_record
from optstruct.core.types import OPTION, is_option, wrap_option

__all__ = [
    "OPTION",
    "Diagnostic",
    "OptStructError",
    "OwnerKind",
    "ParseError",
    "ShapeMismatchError",
    "TypeConstructionError",
    "filter_attrs",
    "generate",
    "generate_fields",
    "is_option",
    "merge_fields",
    "parse_attribute",
    "parse_fields",
    "parse_record",
    "parse_records",
    "parse_type",
    "render_record",
    "wrap_option",
]
