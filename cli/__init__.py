"""
Command-line interface for dhconfig.

Exposes the Typer application from `cli.commands` as the `dhconfig`
console script and as `python -m cli`.
"""

from .commands import app


def main() -> None:
    """Run the dhconfig Typer application."""
    app(prog_name="dhconfig")
