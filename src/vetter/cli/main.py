"""vetter CLI entry point."""

import logging
import os

import click


@click.group()
@click.option(
    "--log-level",
    default=lambda: os.environ.get("VETTER_LOG_LEVEL", "WARNING"),
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level (default: $VETTER_LOG_LEVEL or WARNING).",
)
def cli(log_level: str):
    """vetter: declarative validation expressions."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register subcommands
from vetter.cli.check_cmd import check, functions, tokens  # noqa: E402

cli.add_command(check)
cli.add_command(functions)
cli.add_command(tokens)
