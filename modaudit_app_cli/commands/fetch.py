"""Module fetch command for the modaudit CLI."""

from __future__ import annotations

import asyncio
import json
import sys

import click
from rich.table import Table

from ..console import console
from ..console import error_console
from ..lib.settings import get_settings
from ..model import ModuleReference
from ..module_resolution import FetchError
from ..module_resolution import UnresolvedModulesError
from ..module_resolution import fetch as fetch_modules
from ..utils.error_format import escape_markup
from ..utils.error_format import format_error_lines
from ..utils.error_format import format_error_message


def _parse_refs(values: tuple[str, ...]) -> list[ModuleReference]:
    refs = []
    for value in values:
        try:
            refs.append(ModuleReference.parse(value))
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="REFS") from e
    return refs


@click.command()
@click.argument("refs", nargs=-1)
@click.option("--tool", help="Module tool executable (default: go)")
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), help="Seconds before the download is aborted")
@click.option("--json", "as_json", is_flag=True, help="Print one JSON object per module")
def fetch(refs: tuple[str, ...], tool: str | None, timeout: float | None, as_json: bool):
    """Download modules and show where they were resolved.

    REFS are module references such as golang.org/x/text@v0.3.7, or local
    paths such as ./internal/tools.
    """
    module_refs = _parse_refs(refs)

    try:
        settings = get_settings().get_fetch_settings()
    except ValueError as e:
        raise click.UsageError(f"Invalid settings: {e}") from e
    if tool:
        settings.tool = tool
    if timeout is not None:
        settings.timeout = timeout

    try:
        modules = asyncio.run(fetch_modules(module_refs, settings=settings))
    except UnresolvedModulesError as e:
        error_console.print(f"[red]Error:[/red] {len(e.exceptions)} module(s) could not be resolved")
        for line in format_error_lines(e):
            error_console.print(f"  [yellow]•[/yellow] {escape_markup(line)}")
        sys.exit(1)
    except FetchError as e:
        error_console.print(f"[red]Error:[/red] {escape_markup(format_error_message(e, include_type=False))}")
        sys.exit(1)
    except KeyboardInterrupt as e:
        error_console.print(f"\n[yellow]{escape_markup(format_error_message(e, include_type=False))}[/yellow]")
        sys.exit(130)

    if as_json:
        for module in modules:
            click.echo(json.dumps(module.model_dump(by_alias=True, exclude_defaults=True)))
        return

    if not modules:
        console.print("[dim]No modules requested.[/dim]")
        return

    table = Table(title="Resolved Modules", show_header=True, header_style="bold cyan")
    table.add_column("Module", style="green")
    table.add_column("Version", style="yellow")
    table.add_column("Dir")
    table.add_column("Sum", style="dim")
    for module in modules:
        ref = module.reference
        table.add_row(
            escape_markup(ref.path),
            escape_markup(module.version or "-"),
            escape_markup(module.dir or ("(local)" if ref.is_local() else "-")),
            escape_markup(module.sum or "-"),
        )
    console.print(table)
