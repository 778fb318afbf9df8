from pathlib import Path

import typer
from rich.console import Console
from rich.text import Text

from optstruct.core.errors import OptStructError

err_console = Console(stderr=True)


def read_source(path: str | None, code: str | None) -> tuple[str, str]:
    """Return ``(origin, source)`` from ``--code`` or a file path."""
    if code is not None:
        return "<code>", code
    if path is None:
        raise typer.BadParameter("Provide a PATH or --code.")
    try:
        return path, Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        raise typer.BadParameter(f"File not found: {path}") from None
    except IsADirectoryError:
        raise typer.BadParameter(f"Not a file: {path}") from None
    except UnicodeDecodeError:
        raise typer.BadParameter(f"Not UTF-8 text: {path}") from None


def fail(origin: str, error: OptStructError) -> typer.Exit:
    err_console.print(Text(error.diagnostic().format(origin), style="red"), soft_wrap=True)
    return typer.Exit(code=1)
