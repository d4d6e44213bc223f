"""Typer CLI handlers for dhconfig.

Inspect what a config directory resolves to without writing any code:
which environment is picked, which sources are layered in which order and
what value a key ends up with.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from dhconfig.config.session import ConfigSession
from dhconfig.config.settings import load_settings
from dhconfig.utils.logging import configure_logging

console = Console()
err_console = Console(stderr=True)

# --------------------------------------------------------------------------- #
# Typer app –entry‑point is exposed in pyproject.toml as "dhconfig"          #
# --------------------------------------------------------------------------- #
app = typer.Typer(help="Inspect layered JSON configuration.")


@app.callback(invoke_without_command=False)
def _root_options(
    ctx: typer.Context,
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
        show_default=True,
        case_sensitive=False,
    ),
):
    """Shared option processed before any sub‑command executes."""
    configure_logging(level=getattr(logging, log_level.upper(), logging.WARNING))


# --------------------------------------------------------------------------- #
# Shared options                                                              #
# --------------------------------------------------------------------------- #
ConfigDirOption = typer.Option(
    ..., "--config-dir", "-d", help="Directory holding <name>.json files."
)
EnvOption = typer.Option(
    None, "--env", "-e", help="Default environment when NODE_ENV is not set."
)
FileOption = typer.Option(
    None, "--file", "-f", help="Extra config name to load first (repeatable)."
)
SetOption = typer.Option(
    None, "--set", "-s", help="KEY=VALUE override, applied like a command-line flag (repeatable)."
)


def build_session(
    config_dir: Path,
    env: Optional[str] = None,
    files: Optional[List[str]] = None,
    assignments: Optional[List[str]] = None,
    delimiter: Optional[str] = None,
) -> ConfigSession:
    """Create a session the way an application would at startup.

    The CLI's own arguments are not fed to the session; ``--set`` values are
    passed as its command line instead.
    """
    argv = [f"--{item}" for item in assignments or []]
    session = ConfigSession(config_dir, argv=argv, settings=load_settings())
    if not session.functional:
        err_console.print(f"[red]Config directory is invalid: {config_dir}[/red]")
        raise typer.Exit(2)

    if delimiter is not None and not session.set_delimiter(delimiter):
        err_console.print(f"[red]Invalid delimiter: {delimiter!r}[/red]")
        raise typer.Exit(2)

    for name in files or []:
        session.load_config(name)
    if env:
        session.load_environment_config(env)
    return session


def _render(value: Any, as_json: bool) -> str:
    if as_json or isinstance(value, (dict, list)):
        return json.dumps(value, indent=2, sort_keys=True)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# --------------------------------------------------------------------------- #
# Commands                                                                    #
# --------------------------------------------------------------------------- #
@app.command("get")
def _get(
    keys: List[str] = typer.Argument(..., help="Key path, e.g. serverSettings.port or serverSettings port."),
    config_dir: Path = ConfigDirOption,
    env: Optional[str] = EnvOption,
    files: Optional[List[str]] = FileOption,
    assignments: Optional[List[str]] = SetOption,
    delimiter: Optional[str] = typer.Option(None, "--delimiter", help="Key delimiter (default '.')."),
    as_json: bool = typer.Option(False, "--json", help="Always print JSON."),
):
    """Print the effective value of a key."""
    session = build_session(config_dir, env, files, assignments, delimiter)
    found = session.lookup(keys)
    if not found.found:
        err_console.print(f"[yellow]Key not found: {' '.join(keys)}[/yellow]")
        raise typer.Exit(1)
    typer.echo(_render(found.value, as_json))


@app.command("env")
def _env(
    config_dir: Path = ConfigDirOption,
    env: str = typer.Option("local", "--env", "-e", help="Default environment when NODE_ENV is not set."),
):
    """Print the environment name the session resolves to."""
    session = build_session(config_dir)
    typer.echo(session.set_environment_name(env))


@app.command("sources")
def _sources(
    config_dir: Path = ConfigDirOption,
    env: Optional[str] = EnvOption,
    files: Optional[List[str]] = FileOption,
    assignments: Optional[List[str]] = SetOption,
):
    """List loaded sources, highest precedence first."""
    session = build_session(config_dir, env, files, assignments)

    table = Table(title=f"Sources for {config_dir}")
    table.add_column("Priority", justify="right", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Kind")
    table.add_column("Path")
    table.add_column("Keys", justify="right")
    for source in session.store.sources():
        table.add_row(
            str(source.priority),
            source.name,
            source.kind.value,
            str(source.path) if source.path else "-",
            str(len(source.tree)),
        )
    console.print(table)

    for diagnostic in session.diagnostics:
        err_console.print(f"[yellow]{diagnostic.error_type}: {diagnostic.message}[/yellow]")
