"""Main CLI application entry point.

Defines the Typer application. crabclean has a single command, so it
runs without a subcommand name: ``crabclean [OPTIONS] [BASE_DIR]``.
"""

import typer

from crabclean.cli.commands import clean

app = typer.Typer(
    name="crabclean",
    help="Clean all Cargo projects recursively below a base directory.",
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command()(clean.clean)


if __name__ == "__main__":
    app()
