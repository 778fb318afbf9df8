from pydantic import BaseModel

from optstruct.models import Field, Span


class Diagnostic(BaseModel):
    kind: str
    message: str
    span: Span | None = None

    def format(self, origin: str | None = None) -> str:
        """Render as ``origin:row:col: message``, omitting the parts that are unknown."""
        location = [part for part in (origin, str(self.span) if self.span else None) if part]
        if not location:
            return self.message
        return f"{':'.join(location)}: {self.message}"


class OptStructError(Exception):
    """Base class for errors raised while deriving an optional struct."""

    kind = "error"

    def __init__(self, message: str, span: Span | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.span = span

    def diagnostic(self) -> Diagnostic:
        return Diagnostic(kind=self.kind, message=self.message, span=self.span)


class ShapeMismatchError(OptStructError):
    """Additional fields do not match the original struct's field style."""

    kind = "shape_mismatch"


class TypeConstructionError(OptStructError):
    """A field type could not be wrapped in ``Option``."""

    kind = "type_construction"

    def __init__(
        self,
        record_name: str,
        cause: Exception | str,
        span: Span | None = None,
        field: Field | None = None,
    ) -> None:
        self.record_name = record_name
        self.cause = cause
        self.field = field
        super().__init__(f"error generating `{record_name}` fields: `{cause}`", span=span)


class ParseError(OptStructError):
    """Rust source could not be read into a record description."""

    kind = "parse"
