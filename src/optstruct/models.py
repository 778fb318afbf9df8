import re
from enum import Enum
from typing import Annotated, Literal

import pydantic
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

_IDENTIFIER = re.compile(r"^(r#)?[A-Za-z_][A-Za-z0-9_]*$")
_DOC_VALUE = re.compile(r'^\s*=\s*"((?:[^"\\]|\\.)*)"\s*$', re.DOTALL)


class _Value(BaseModel):
    model_config = ConfigDict(frozen=True)


class Position(_Value):
    row: int
    column: int


class Span(_Value):
    start: Position
    end: Position

    def __str__(self) -> str:
        return f"{self.start.row + 1}:{self.start.column + 1}"


class Attribute(_Value):
    """A single ``#[...]`` attribute; ``///`` doc comments are stored as ``doc`` attributes."""

    path: str
    tokens: str = ""
    span: Span | None = None

    @property
    def is_doc(self) -> bool:
        return self.path == "doc"

    @property
    def doc_text(self) -> str | None:
        """Return the plain doc string, or None when the value is not a simple string literal."""
        if not self.is_doc:
            return None
        match = _DOC_VALUE.match(self.tokens)
        if match is None:
            return None
        inner = match.group(1)
        if any(escaped not in '"\\' for escaped in re.findall(r"\\(.)", inner, re.DOTALL)):
            return None
        return re.sub(r'\\(["\\])', r"\1", inner)

    @classmethod
    def doc(cls, text: str, span: Span | None = None) -> "Attribute":
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return cls(path="doc", tokens=f' = "{escaped}"', span=span)

    def __str__(self) -> str:
        return f"#[{self.path}{self.tokens}]"


# ---------------------------------------------------------------------------
# Type descriptors
# ---------------------------------------------------------------------------


class PathSegment(_Value):
    ident: str
    args: tuple["TypeDescriptor", ...] | None = None

    def __str__(self) -> str:
        if self.args is None:
            return self.ident
        return f"{self.ident}<{', '.join(str(arg) for arg in self.args)}>"


class PathType(_Value):
    kind: Literal["path"] = "path"
    segments: tuple[PathSegment, ...]
    span: Span | None = None

    def __str__(self) -> str:
        return "::".join(str(segment) for segment in self.segments)


class RawType(_Value):
    kind: Literal["raw"] = "raw"
    text: str
    span: Span | None = None

    def __str__(self) -> str:
        return self.text


class InvalidType(_Value):
    kind: Literal["invalid"] = "invalid"
    text: str
    span: Span | None = None

    def __str__(self) -> str:
        return self.text


TypeDescriptor = Annotated[PathType | RawType | InvalidType, pydantic.Field(discriminator="kind")]

PathSegment.model_rebuild()  # necessary for recursive types


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class Field(_Value):
    name: str | None = None
    ty: TypeDescriptor
    visibility: str = ""
    attrs: tuple[Attribute, ...] = ()
    span: Span | None = None


class NoFields(_Value):
    kind: Literal["none"] = "none"
    span: Span | None = None

    @property
    def fields(self) -> tuple[Field, ...]:
        return ()


class NamedFields(_Value):
    kind: Literal["named"] = "named"
    fields: tuple[Field, ...] = ()
    span: Span | None = None


class UnnamedFields(_Value):
    kind: Literal["unnamed"] = "unnamed"
    fields: tuple[Field, ...] = ()
    span: Span | None = None


RecordShape = Annotated[NoFields | NamedFields | UnnamedFields, pydantic.Field(discriminator="kind")]


class Record(_Value):
    name: str
    visibility: str = ""
    generics: str = ""
    where_clause: str = ""
    attrs: tuple[Attribute, ...] = ()
    shape: RecordShape = pydantic.Field(default_factory=NoFields)
    span: Span | None = None


# ---------------------------------------------------------------------------
# Transform configuration
# ---------------------------------------------------------------------------


class AttrsMode(str, Enum):
    KEEP = "keep"
    REPLACE = "replace"
    ADD = "add"


class AttrsRule(_Value):
    mode: AttrsMode
    attrs: tuple[Attribute, ...] = ()


class DocMode(str, Enum):
    SAME = "same"
    CUSTOM = "custom"


class DocRule(_Value):
    mode: DocMode
    text: str | None = None

    @model_validator(mode="after")
    def _custom_needs_text(self) -> "DocRule":
        if self.mode is DocMode.CUSTOM and self.text is None:
            raise ValueError("custom doc rule requires text")
        return self


class AttributeRules(_Value):
    attrs: AttrsRule | None = None
    doc: DocRule | None = None
    field_attrs: AttrsRule | None = None
    field_doc: bool = False


class TransformConfig(_Value):
    name: str
    visibility: str | None = None
    additional_fields: RecordShape | None = None
    rewrap: bool = False
    attribute_rules: AttributeRules = pydantic.Field(default_factory=AttributeRules)

    @field_validator("name")
    @classmethod
    def _check_identifier(cls, value: str) -> str:
        if not _IDENTIFIER.match(value):
            raise ValueError(f"'{value}' is not a valid identifier")
        return value

    def final_visibility(self, original: str) -> str:
        return self.visibility if self.visibility is not None else original
