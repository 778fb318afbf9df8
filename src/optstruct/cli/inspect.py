from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from optstruct.cli.source import fail, read_source
from optstruct.core.errors import OptStructError
from optstruct.core.parse import parse_records
from optstruct.core.types import is_option

console = Console()


def inspect_structs(
    path: Annotated[str | None, typer.Argument(help="Path to a Rust source file.")] = None,
    code: Annotated[str | None, typer.Option(help="Rust source string to read instead of a file.")] = None,
) -> None:
    """List the structs in a source file and which of their fields are optional."""
    origin, source = read_source(path, code)
    try:
        records = parse_records(source)
    except OptStructError as exc:
        raise fail(origin, exc) from exc

    table = Table(show_lines=False)
    for header in ("struct", "visibility", "shape", "fields", "optional"):
        table.add_column(header)
    for record in records:
        fields = record.shape.fields
        optional = [field.name or str(index) for index, field in enumerate(fields) if is_option(field.ty)]
        table.add_row(
            record.name,
            record.visibility or "-",
            record.shape.kind,
            str(len(fields)),
            ", ".join(optional) or "-",
        )
    console.print(table)
    console.print(f"({len(records)} structs)")
