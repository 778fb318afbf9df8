from optstruct.models import Attribute, Field, NamedFields, NoFields, Record

_INDENT = "    "


def render_attribute(attr: Attribute) -> str:
    doc = attr.doc_text
    # `///` keeps the text verbatim, so only texts that read back unchanged use it
    if doc is None or "\n" in doc or "\r" in doc or doc.startswith("/"):
        return str(attr)
    return f"///{doc}"


def _field_line(field: Field) -> str:
    head = f"{field.visibility} " if field.visibility else ""
    if field.name is None:
        return f"{head}{field.ty}"
    return f"{head}{field.name}: {field.ty}"


def render_record(record: Record) -> str:
    """Render ``record`` as Rust source, one field per line."""
    lines = [render_attribute(attr) for attr in record.attrs]

    head = f"{record.visibility} struct" if record.visibility else "struct"
    head = f"{head} {record.name}{record.generics}"
    where = f" {record.where_clause}" if record.where_clause else ""
    shape = record.shape

    if isinstance(shape, NoFields):
        lines.append(f"{head}{where};")
    elif not shape.fields:
        lines.append(f"{head}{where} {{}}" if isinstance(shape, NamedFields) else f"{head}(){where};")
    else:
        named = isinstance(shape, NamedFields)
        lines.append(f"{head}{where} {{" if named else f"{head}(")
        for field in shape.fields:
            lines.extend(f"{_INDENT}{render_attribute(attr)}" for attr in field.attrs)
            lines.append(f"{_INDENT}{_field_line(field)},")
        lines.append("}" if named else f"){where};")

    return "\n".join(lines) + "\n"
