import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.syntax import Syntax

from optstruct.cli.source import fail, read_source
from optstruct.core.errors import OptStructError, ParseError, ShapeMismatchError, TypeConstructionError
from optstruct.core.generate import generate as _generate
from optstruct.core.parse import parse_attribute, parse_fields, parse_record
from optstruct.core.render import render_record
from optstruct.models import AttributeRules, AttrsMode, AttrsRule, DocMode, DocRule, RecordShape, TransformConfig

logger = logging.getLogger(__name__)
console = Console()


def _attrs_rule(keep: bool, add: list[str] | None, replace: list[str] | None, flag: str) -> AttrsRule | None:
    if replace and (keep or add):
        raise typer.BadParameter(f"--{flag}replace-attr cannot be combined with --{flag}add-attr or keep.")
    try:
        if replace:
            return AttrsRule(mode=AttrsMode.REPLACE, attrs=tuple(parse_attribute(text) for text in replace))
        if add:
            return AttrsRule(mode=AttrsMode.ADD, attrs=tuple(parse_attribute(text) for text in add))
    except ParseError as exc:
        raise typer.BadParameter(exc.message) from exc
    if keep:
        return AttrsRule(mode=AttrsMode.KEEP)
    return None


def _from_fragment(error: OptStructError, additional: RecordShape | None) -> bool:
    """Whether ``error`` points into the --fields fragment rather than the source."""
    if isinstance(error, ShapeMismatchError):
        return True
    if isinstance(error, TypeConstructionError) and additional is not None:
        return any(error.field is field for field in additional.fields)
    return False


def _doc_rule(keep: bool, text: str | None) -> DocRule | None:
    if text is not None:
        return DocRule(mode=DocMode.CUSTOM, text=text)
    if keep:
        return DocRule(mode=DocMode.SAME)
    return None


def generate(
    name: Annotated[str, typer.Option("--name", "-n", help="Name of the generated struct.")],
    path: Annotated[str | None, typer.Argument(help="Path to a Rust source file.")] = None,
    code: Annotated[str | None, typer.Option(help="Rust source string to read instead of a file.")] = None,
    struct: Annotated[str | None, typer.Option("--struct", "-s", help="Struct to derive from (default: first).")] = None,
    vis: Annotated[str | None, typer.Option(help="Visibility of the generated struct and its fields.")] = None,
    rewrap: Annotated[bool, typer.Option(help="Wrap fields that are already Option again.")] = False,
    fields: Annotated[str | None, typer.Option(help="Extra fields, e.g. '{ id: u64 }' or '(u64)'.")] = None,
    keep_attrs: Annotated[bool, typer.Option(help="Keep the struct's attributes.")] = False,
    add_attr: Annotated[list[str] | None, typer.Option(help="Keep the struct's attributes and add this one.")] = None,
    replace_attr: Annotated[
        list[str] | None, typer.Option(help="Use this attribute instead of the struct's attributes.")
    ] = None,
    doc: Annotated[bool, typer.Option(help="Keep the struct's documentation.")] = False,
    doc_text: Annotated[str | None, typer.Option(help="Documentation for the generated struct.")] = None,
    keep_field_attrs: Annotated[bool, typer.Option(help="Keep field attributes.")] = False,
    field_add_attr: Annotated[list[str] | None, typer.Option(help="Keep field attributes and add this one.")] = None,
    field_replace_attr: Annotated[
        list[str] | None, typer.Option(help="Use this attribute instead of field attributes.")
    ] = None,
    field_doc: Annotated[bool, typer.Option(help="Keep field documentation.")] = False,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Write the result to this file.")] = None,
) -> None:
    """Generate the optional version of a struct."""
    origin, source = read_source(path, code)
    rules = AttributeRules(
        attrs=_attrs_rule(keep_attrs, add_attr, replace_attr, ""),
        doc=_doc_rule(doc, doc_text),
        field_attrs=_attrs_rule(keep_field_attrs, field_add_attr, field_replace_attr, "field-"),
        field_doc=field_doc,
    )

    try:
        additional = parse_fields(fields) if fields is not None else None
    except OptStructError as exc:
        raise fail("--fields", exc) from exc

    try:
        config = TransformConfig(
            name=name,
            visibility=vis,
            additional_fields=additional,
            rewrap=rewrap,
            attribute_rules=rules,
        )
    except ValidationError as exc:
        raise typer.BadParameter(str(exc.errors()[0]["msg"])) from exc

    try:
        original = parse_record(source, struct)
        logger.debug("Deriving %s from %s in %s", name, original.name, origin)
        rendered = render_record(_generate(original, config))
    except OptStructError as exc:
        raise fail("--fields" if _from_fragment(exc, additional) else origin, exc) from exc

    if output is not None:
        output.write_text(rendered, encoding="utf-8")
        console.print(f"[green]Wrote[/green] {config.name} to {output}")
    elif sys.stdout.isatty():
        console.print(Syntax(rendered, "rust"))
    else:
        typer.echo(rendered, nl=False)
