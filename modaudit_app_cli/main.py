"""modaudit CLI entry point."""

from __future__ import annotations

import click

from .commands import fetch
from .logging_setup import init_json_logging


@click.group(invoke_without_command=True)
@click.version_option(package_name="modaudit-app-cli")
@click.option("--log-file", envvar="MODAUDIT_LOG_PATH", help="JSONL log file path")
@click.option(
    "--log-level",
    envvar="MODAUDIT_LOG_LEVEL",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level",
)
@click.pass_context
def cli(ctx: click.Context, log_file: str | None, log_level: str | None):
    """modaudit - fetch Go module dependencies for license auditing."""
    init_json_logging(log_file, log_level)

    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


cli.add_command(fetch)


def main():
    """Entry point for the modaudit command."""
    cli()


if __name__ == "__main__":
    main()
