"""walkgrep command line interface."""

from walkgrep.cli.typer_app import app

__all__ = ["app"]
