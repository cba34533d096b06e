"""Main CLI application and entry point.

This module defines the main Typer application and aggregates all
command groups.
"""

import logging

import typer
from rich.logging import RichHandler

from akiclient.cli.commands import servers as servers_commands
from akiclient.cli.utils.output import console

app = typer.Typer(
    name="akiclient",
    help="Diagnostics for the guessing game API client",
    no_args_is_help=True,
    pretty_exceptions_enable=True,
)

app.add_typer(servers_commands.app, name="servers", help="Server catalog and probing")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
) -> None:
    """Guessing game API client tools.

    Use the subcommands to inspect the server catalog and check which
    servers are currently reachable.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


if __name__ == "__main__":
    app()
