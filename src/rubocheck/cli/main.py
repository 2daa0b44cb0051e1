"""Rubocheck CLI application."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Annotated

import typer
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler

import rubocheck as rubocheck_pkg


class OutputFormat(StrEnum):
    """Output format for CLI commands."""

    human = "human"
    json = "json"
    jsonl = "jsonl"


app = typer.Typer(
    name="rubocheck",
    help="Run RuboCop and capture its findings.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        rprint(f"rubocheck {rubocheck_pkg.__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route log records through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """Rubocheck: RuboCop runner."""
    from dotenv import load_dotenv

    load_dotenv()


@app.command("check")
def check(
    paths: Annotated[
        list[str] | None,
        typer.Argument(help="Files to inspect (all *.rb files if not specified)"),
    ] = None,
    project_root: Annotated[
        str | None,
        typer.Option("--project-root", "-p", help="Project root directory"),
    ] = None,
    sdk_home: Annotated[
        str | None,
        typer.Option("--sdk-home", help="Ruby interpreter path (default: ruby on PATH)"),
    ] = None,
    format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = OutputFormat.human,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", help="Seconds before RuboCop is terminated"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log debug output, including the command line"),
    ] = False,
) -> None:
    """Run RuboCop on the project."""
    from pathlib import Path

    from rubocheck.inspection.cli import check_command

    configure_logging(verbose)

    root = Path(project_root) if project_root else Path.cwd()
    exit_code = check_command(
        project_root=root,
        paths=paths,
        sdk_home=Path(sdk_home) if sdk_home else None,
        format=format.value,
        timeout_seconds=timeout,
    )
    raise typer.Exit(exit_code)
