import logging
import os
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from optstruct.cli.generate import generate
from optstruct.cli.inspect import inspect_structs

app = typer.Typer(
    name="optstruct",
    help="optstruct CLI: derive Rust structs whose fields are wrapped in Option.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _configure_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else os.getenv("OPTSTRUCT_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output to stderr.")] = False,
) -> None:
    _configure_logging(verbose)


app.command("generate")(generate)
app.command("inspect")(inspect_structs)


def main() -> None:
    app()
