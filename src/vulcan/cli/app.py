#!/usr/bin/env python3
"""
Vulcan CLI - Typer-based command-line interface.

Shows how search parameter values are parsed, which helps when writing
mappings or debugging a request:

    vulcan date ap2005-01 --zone UTC
    vulcan token http://food|TACOS
    vulcan reference subject Patient/123 --allowed Patient --allowed Group
    vulcan settings
"""

from __future__ import annotations

import logging

import typer
from dateutil import tz
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config.settings import get_settings
from ..errors import InvalidRequest
from ..parameters.date import SearchableDate
from ..parameters.reference import parse_reference
from ..parameters.token import TokenParameter

app = typer.Typer(
    name="vulcan",
    help="Vulcan - FHIR style search parameters compiled to filters",
    add_completion=False,
)

console = Console()


def version_callback(value: bool):
    """Show version and exit."""
    if value:
        from .. import __version__

        console.print(f"Vulcan version: {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
):
    """
    Vulcan CLI - inspect how search parameter values are understood.

    Use 'vulcan COMMAND --help' for command-specific help.
    """
    logging.basicConfig(level=get_settings().log_level)


def _fail(error: Exception) -> None:
    console.print(f"[red]Error: {escape(str(error))}[/red]")
    raise typer.Exit(1)


def _show(title: str, rows: list[tuple[str, object]]) -> None:
    table = Table(title=title, show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    for name, value in rows:
        table.add_row(name, "" if value is None else str(value))
    console.print(table)


@app.command()
def date(
    value: str = typer.Argument(..., help="Date search value, e.g. ap2005-01-21"),
    parameter: str = typer.Option("date", "--parameter", "-p", help="Parameter name"),
    zone: str | None = typer.Option(
        None, "--zone", "-z", help="Zone for partial dates, e.g. UTC (default: local)"
    ),
):
    """
    Parse a date search value and show its bounds.
    """
    zone_info = None
    if zone:
        zone_info = tz.gettz(zone)
        if zone_info is None:
            _fail(ValueError(f"Unknown zone: {zone}"))
    try:
        searchable = SearchableDate.parse(parameter, value, zone_info)
    except InvalidRequest as e:
        _fail(e)
    _show(
        f"{parameter}={value}",
        [
            ("operator", searchable.operator.value),
            ("date", searchable.date),
            ("fidelity", searchable.fidelity.value),
            ("lower bound", searchable.lower_bound.isoformat()),
            ("upper bound", searchable.upper_bound.isoformat()),
        ],
    )


@app.command()
def token(
    value: str = typer.Argument(..., help="Token search value, e.g. http://food|TACOS"),
    parameter: str = typer.Option("code", "--parameter", "-p", help="Parameter name"),
):
    """
    Parse a token search value and show its mode.
    """
    try:
        parsed = TokenParameter.parse(parameter, value)
    except InvalidRequest as e:
        _fail(e)
    _show(
        f"{parameter}={value}",
        [("mode", parsed.mode.value), ("system", parsed.system), ("code", parsed.code)],
    )


@app.command()
def reference(
    parameter: str = typer.Argument(..., help="Parameter name, e.g. subject or subject:Patient"),
    value: str = typer.Argument(..., help="Reference value, e.g. Patient/123"),
    allowed: list[str] = typer.Option(
        [], "--allowed", "-a", help="Allowed resource type (repeatable)"
    ),
    default: str | None = typer.Option(
        None, "--default", "-d", help="Resource type for bare ids"
    ),
):
    """
    Parse a reference search value.
    """
    try:
        parsed = parse_reference(parameter, value, allowed, default)
    except InvalidRequest as e:
        _fail(e)
    _show(
        f"{parameter}={value}",
        [("type", parsed.type), ("public id", parsed.public_id), ("url", parsed.url)],
    )


@app.command()
def settings():
    """
    Show the effective paging settings.
    """
    current = get_settings()
    _show(
        "Vulcan settings",
        [
            ("page parameter", current.page_parameter),
            ("count parameter", current.count_parameter),
            ("sort parameter", current.sort_parameter),
            ("default count", current.default_count),
            ("max count", current.max_count),
            ("count=0 means count only", current.count_zero_means_count_only),
            ("base url", current.base_url or "(request url)"),
        ],
    )


def run_cli() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run_cli()
