"""CLI entry point using typer."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from mdsel_claude import __version__
from mdsel_claude.config import (
    CONFIG_FILE,
    THRESHOLD_ENV_VAR,
    AppConfig,
    get_config,
    get_threshold,
    load_config,
    save_config,
)
from mdsel_claude.models import ToolResult
from mdsel_claude.utils.system import check_mdsel_cli

app = typer.Typer(
    name="mdsel-claude",
    help="mdsel selector tools and Read reminders for coding agents.",
    add_completion=False,
)
console = Console()

# Keys settable with `mdsel-claude config <key> <value>`
SETTINGS: dict[str, type] = {
    "cli.binary": str,
    "cli.timeout": int,
    "logging.level": str,
    "logging.file": str,
}


def _setup_logging(config: AppConfig) -> None:
    # stdout carries MCP frames or the hook response, so log to file only
    log_path = Path(config.logging.file).expanduser().resolve()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(str(log_path))
    except OSError:
        handler = logging.NullHandler()
    logging.basicConfig(
        level=getattr(logging, config.logging.level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[handler],
    )


def _emit(result: ToolResult) -> None:
    if result.is_error:
        typer.echo(result.text, err=True, nl=False)
        raise typer.Exit(1)
    typer.echo(result.text, nl=False)


@app.command()
def serve() -> None:
    """Run the MCP server over stdio."""
    config = get_config()
    _setup_logging(config)

    from mdsel_claude.server.app import run_server

    try:
        asyncio.run(run_server(config))
    except KeyboardInterrupt:
        pass


@app.command()
def hook() -> None:
    """Run the PreToolUse Read hook (event JSON on stdin)."""
    try:
        _setup_logging(load_config())
    except (OSError, ValueError):
        # A broken config file must not break the read
        pass

    from mdsel_claude.hooks.read_hook import main

    main()


@app.command()
def index(
    files: list[str] = typer.Argument(..., help="Markdown files to index"),
) -> None:
    """Index Markdown files with mdsel and print the raw output."""
    from mdsel_claude.server.handlers import handle_index

    _emit(asyncio.run(handle_index(files)))


@app.command()
def select(
    selector: str = typer.Argument(..., help="Selector, e.g. heading:h2[0]"),
    files: list[str] = typer.Argument(..., help="Markdown files to search"),
) -> None:
    """Select content with mdsel and print the raw output."""
    from mdsel_claude.server.handlers import handle_select

    _emit(asyncio.run(handle_select(selector, files)))


@app.command()
def config(
    key: str = typer.Argument(None, help="Config key (e.g., cli.timeout)"),
    value: str = typer.Argument(None, help="New value"),
) -> None:
    """View or modify configuration."""
    cfg = load_config()

    if key is None:
        # Show all config
        table = Table(title="Configuration")
        table.add_column("Key", style="cyan")
        table.add_column("Value", style="green")

        for name in SETTINGS:
            section, attr = name.split(".")
            table.add_row(name, str(getattr(getattr(cfg, section), attr)))
        table.add_row(f"env {THRESHOLD_ENV_VAR}", str(get_threshold()))

        console.print(table)
        if not CONFIG_FILE.exists():
            console.print(f"[dim]No config file at {CONFIG_FILE}; showing defaults.[/dim]")
        return

    if value is None:
        console.print("[red]Usage: mdsel-claude config <key> <value>[/red]")
        raise typer.Exit(1)

    if key not in SETTINGS:
        console.print(f"[red]Unknown key: {key} (choose from {', '.join(SETTINGS)})[/red]")
        raise typer.Exit(1)

    section, attr = key.split(".")
    typed_value: int | str = value
    if SETTINGS[key] is int:
        try:
            typed_value = int(value)
        except ValueError:
            console.print(f"[red]{key} must be an integer[/red]")
            raise typer.Exit(1)

    setattr(getattr(cfg, section), attr, typed_value)
    save_config(cfg)
    console.print(f"[green]{key} = {typed_value}[/green]")


@app.command()
def logs(
    lines: int = typer.Option(50, "--lines", "-n", help="Number of lines"),
) -> None:
    """View server and hook logs."""
    log_path = Path(load_config().logging.file).expanduser().resolve()
    if not log_path.exists():
        console.print("[dim]No log file found.[/dim]")
        return

    content = log_path.read_text()
    log_lines = content.strip().split("\n")
    for line in log_lines[-lines:]:
        console.print(line, markup=False)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"mdsel-claude v{__version__}")

    cfg = load_config()
    installed, version_info = check_mdsel_cli(cfg.cli.binary)
    if installed:
        console.print(f"mdsel CLI: {version_info}")
    else:
        console.print("mdsel CLI: [yellow]not installed[/yellow]")

    console.print(f"Word threshold: {get_threshold()}")
    console.print(f"Python: {sys.version.split()[0]}")
    console.print(f"Config: {CONFIG_FILE}")


if __name__ == "__main__":
    app()
