"""Command line entry points for kgraph."""

import logging

from rich.logging import RichHandler
from typer import Option, Typer

from .community import detect_command
from .config import config_app
from .paths import path_command


cli = Typer(help="kgraph graph analytics tools")
cli.add_typer(config_app, name="config")
cli.command("communities")(detect_command)
cli.command("path")(path_command)


@cli.callback()
def main(
    verbose: bool = Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Community detection and path finding over JSON graph files."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(rich_tracebacks=True)],
        )


__all__ = ["cli", "config_app", "detect_command", "path_command"]
