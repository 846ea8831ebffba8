"""CLI package for crabclean.

This package contains the Typer application and its command.
"""

from crabclean.cli.main import app

__all__ = ["app"]
