from __future__ import annotations

import os

import typer

from maui import __version__
from maui.cli.commands.check import check
from maui.core.config import ENV_LOG_LEVEL

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help=".NET MAUI development environment doctor.",
)


# Commands
app.command()(check)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    debug: bool = typer.Option(False, "--debug", "-d", help="Log probes and manifest resolution."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if debug:
        os.environ[ENV_LOG_LEVEL] = "DEBUG"


def main() -> None:
    app()
