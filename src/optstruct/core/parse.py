import logging
import re
from collections.abc import Iterator

from tree_sitter import Node
from tree_sitter_language_pack import get_parser

from optstruct.core.errors import ParseError
from optstruct.models import (
    Attribute,
    Field,
    InvalidType,
    NamedFields,
    NoFields,
    PathSegment,
    PathType,
    Position,
    RawType,
    Record,
    RecordShape,
    Span,
    TypeDescriptor,
    UnnamedFields,
)

logger = logging.getLogger(__name__)

_LANGUAGE = "rust"
_FRAGMENT_HEAD = "struct __OptstructFragment\n"
_TYPE_HEAD = "type __OptstructType =\n"

_ATTRIBUTE = re.compile(r"^#\s*\[\s*(.*?)\s*\]$", re.DOTALL)
_ATTRIBUTE_PATH = re.compile(r"^(?:::)?[A-Za-z_][A-Za-z0-9_]*(?:\s*::\s*[A-Za-z_][A-Za-z0-9_]*)*")
_DOC_COMMENT = re.compile(r"^///(?!/)(.*)$", re.DOTALL)

_COMMENTS = {"line_comment", "block_comment"}
_NESTING_ITEMS = {"mod_item"}


def parse_attribute(text: str, span: Span | None = None) -> Attribute:
    """Parse ``#[path tokens]`` or bare ``path tokens`` into an Attribute."""
    text = text.strip()
    match = _ATTRIBUTE.match(text)
    inner = match.group(1) if match else text
    path_match = _ATTRIBUTE_PATH.match(inner)
    if path_match is None:
        raise ParseError(f"invalid attribute `{text}`", span=span)
    path = re.sub(r"\s+", "", path_match.group(0))
    return Attribute(path=path, tokens=inner[path_match.end() :], span=span)


class _Reader:
    """Converts tree-sitter nodes of one source buffer into value models."""

    def __init__(self, source: bytes, row_offset: int = 0) -> None:
        self._source = source
        self._row_offset = row_offset

    def text(self, node: Node) -> str:
        return self._source[node.start_byte : node.end_byte].decode("utf-8")

    def span(self, node: Node) -> Span:
        return Span(
            start=Position(row=node.start_point[0] - self._row_offset, column=node.start_point[1]),
            end=Position(row=node.end_point[0] - self._row_offset, column=node.end_point[1]),
        )

    def attribute(self, node: Node) -> Attribute | None:
        """Return the attribute for an attribute item or doc comment, None for anything else."""
        text = self.text(node)
        if node.type == "attribute_item":
            return parse_attribute(text, span=self.span(node))
        if node.type == "line_comment":
            doc = _DOC_COMMENT.match(text.rstrip("\r\n"))
            if doc is not None:
                return Attribute.doc(doc.group(1), span=self.span(node))
        return None

    # -- types --

    def type_of(self, node: Node | None, fallback: Node) -> TypeDescriptor:
        if node is None or node.is_missing:
            return InvalidType(text="", span=self.span(fallback))
        if node.has_error:
            return InvalidType(text=self.text(node), span=self.span(node))

        if node.type in ("type_identifier", "primitive_type"):
            return PathType(segments=(PathSegment(ident=self.text(node)),), span=self.span(node))
        if node.type == "scoped_type_identifier":
            segments = self._segments(node)
            if segments is not None:
                return PathType(segments=segments, span=self.span(node))
        if node.type == "generic_type":
            base = node.child_by_field_name("type")
            arguments = node.child_by_field_name("type_arguments")
            segments = self._segments(base) if base is not None else None
            if segments is not None and arguments is not None:
                args = tuple(
                    self.type_of(child, child) for child in arguments.named_children if child.type not in _COMMENTS
                )
                last = segments[-1].model_copy(update={"args": args})
                return PathType(segments=(*segments[:-1], last), span=self.span(node))

        return RawType(text=self.text(node), span=self.span(node))

    def _segments(self, node: Node) -> tuple[PathSegment, ...] | None:
        text = self.text(node)
        if not re.fullmatch(r"[\w:\s]*", text):
            return None
        return tuple(PathSegment(ident=part.strip()) for part in text.split("::"))

    # -- fields --

    def named_fields(self, body: Node) -> NamedFields:
        fields: list[Field] = []
        pending: list[Attribute] = []
        for child in body.named_children:
            if child.type == "field_declaration":
                visibility = next((c for c in child.named_children if c.type == "visibility_modifier"), None)
                name = child.child_by_field_name("name")
                fields.append(
                    Field(
                        name=self.text(name) if name is not None else None,
                        ty=self.type_of(child.child_by_field_name("type"), child),
                        visibility=self.text(visibility) if visibility is not None else "",
                        attrs=tuple(pending),
                        span=self.span(child),
                    )
                )
                pending = []
            elif child.type == "ERROR":
                raise ParseError(f"unexpected `{self.text(child)}` in field list", span=self.span(child))
            else:
                attr = self.attribute(child)
                if attr is not None:
                    pending.append(attr)
        return NamedFields(fields=tuple(fields), span=self.span(body))

    def unnamed_fields(self, body: Node) -> UnnamedFields:
        fields: list[Field] = []
        pending: list[Attribute] = []
        visibility = ""
        for child in body.named_children:
            if child.type == "visibility_modifier":
                visibility = self.text(child)
            elif child.type == "ERROR":
                raise ParseError(f"unexpected `{self.text(child)}` in field list", span=self.span(child))
            elif child.type == "attribute_item" or child.type in _COMMENTS:
                attr = self.attribute(child)
                if attr is not None:
                    pending.append(attr)
            else:
                fields.append(
                    Field(
                        ty=self.type_of(child, child),
                        visibility=visibility,
                        attrs=tuple(pending),
                        span=self.span(child),
                    )
                )
                pending = []
                visibility = ""
        return UnnamedFields(fields=tuple(fields), span=self.span(body))

    def shape(self, body: Node | None) -> RecordShape:
        if body is None:
            return NoFields()
        if body.type == "field_declaration_list":
            return self.named_fields(body)
        if body.type == "ordered_field_declaration_list":
            return self.unnamed_fields(body)
        raise ParseError(f"unexpected struct body `{body.type}`", span=self.span(body))

    # -- structs --

    def record(self, node: Node, attrs: list[Attribute]) -> Record:
        name = node.child_by_field_name("name")
        if name is None:
            raise ParseError("struct without a name", span=self.span(node))
        visibility = next((c for c in node.named_children if c.type == "visibility_modifier"), None)
        generics = node.child_by_field_name("type_parameters")
        where_clause = next((c for c in node.named_children if c.type == "where_clause"), None)

        return Record(
            name=self.text(name),
            visibility=self.text(visibility) if visibility is not None else "",
            generics=self.text(generics) if generics is not None else "",
            where_clause=" ".join(self.text(where_clause).split()) if where_clause is not None else "",
            attrs=tuple(attrs),
            shape=self.shape(node.child_by_field_name("body")),
            span=self.span(node),
        )

    def records(self, container: Node) -> Iterator[Record]:
        pending: list[Attribute] = []
        for child in container.named_children:
            if child.type == "struct_item":
                yield self.record(child, pending)
                pending = []
            elif child.type == "attribute_item" or child.type in _COMMENTS:
                attr = self.attribute(child)
                if attr is not None:
                    pending.append(attr)
            else:
                pending = []
                if child.type in _NESTING_ITEMS:
                    body = child.child_by_field_name("body")
                    if body is not None:
                        yield from self.records(body)


def _parse(source: str) -> Node:
    parser = get_parser(_LANGUAGE)
    return parser.parse(source.encode("utf-8")).root_node


def parse_records(source: str) -> list[Record]:
    """Return every struct in ``source``, including structs nested in inline modules."""
    reader = _Reader(source.encode("utf-8"))
    records = list(reader.records(_parse(source)))
    logger.debug("Parsed %d struct(s)", len(records))
    return records


def parse_record(source: str, name: str | None = None) -> Record:
    """Return the struct called ``name``, or the first struct when no name is given."""
    records = parse_records(source)
    for record in records:
        if name is None or record.name == name:
            return record
    if name is None:
        raise ParseError("no struct found in source")
    raise ParseError(f"struct `{name}` not found in source")


def parse_fields(fragment: str) -> RecordShape:
    """Parse a field fragment: ``{ a: u8 }``, ``(u8, String)`` or an empty string."""
    stripped = fragment.strip()
    if not stripped:
        return NoFields()
    if stripped[0] not in "{(":
        raise ParseError(f"expected `{{ ... }}` or `( ... )`, found `{stripped}`")

    source = _FRAGMENT_HEAD + stripped + (";" if stripped[0] == "(" else "")
    reader = _Reader(source.encode("utf-8"), row_offset=1)
    struct = next((c for c in _parse(source).named_children if c.type == "struct_item"), None)
    if struct is None:
        raise ParseError(f"invalid field fragment `{stripped}`")
    return reader.shape(struct.child_by_field_name("body"))


def parse_type(text: str) -> TypeDescriptor:
    source = f"{_TYPE_HEAD}{text.strip()};"
    reader = _Reader(source.encode("utf-8"), row_offset=1)
    item = next((c for c in _parse(source).named_children if c.type == "type_item"), None)
    if item is None:
        raise ParseError(f"invalid type `{text}`")
    return reader.type_of(item.child_by_field_name("type"), item)
