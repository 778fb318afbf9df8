"""Unit tests for error diagnostics."""

from optstruct.core.errors import Diagnostic, ParseError, ShapeMismatchError, TypeConstructionError
from optstruct.models import Position, Span

SPAN = Span(start=Position(row=2, column=4), end=Position(row=2, column=10))


def test_diagnostic_carries_kind_message_and_span() -> None:
    diagnostic = ShapeMismatchError("expected named fields", span=SPAN).diagnostic()

    assert diagnostic == Diagnostic(kind="shape_mismatch", message="expected named fields", span=SPAN)


def test_type_construction_message_names_the_record() -> None:
    error = TypeConstructionError("User", ValueError("missing type"), span=SPAN)

    assert error.message == "error generating `User` fields: `missing type`"
    assert error.record_name == "User"
    assert error.diagnostic().kind == "type_construction"


def test_format_with_origin_and_span() -> None:
    assert ParseError("bad", span=SPAN).diagnostic().format("lib.rs") == "lib.rs:3:5: bad"


def test_format_without_span() -> None:
    assert ParseError("bad").diagnostic().format("lib.rs") == "lib.rs: bad"


def test_format_without_location() -> None:
    assert ParseError("bad").diagnostic().format() == "bad"
