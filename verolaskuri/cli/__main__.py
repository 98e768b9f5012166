"""Verolaskuri CLI - Tax estimates and bookkeeping checks for Finnish sole traders."""

import logging
import os

import click

from verolaskuri import __version__

from .tax_commands import tax as tax_group
from .books_commands import books as books_group
from .bank_commands import bank as bank_group


@click.group()
@click.version_option(version=__version__, prog_name="verolaskuri")
def cli():
    """Verolaskuri - Finnish toiminimi tax and bookkeeping tools.

    Commands for income tax and YEL calculations, ennakkovero
    tracking, Form 5 generation and bank reconciliation.

    Statutory tables are loaded from (in order):

    \b
    1. VEROLASKURI_TAX_RULES_PATH environment variable
    2. Tables bundled with the package

    Set LOG_LEVEL=DEBUG to see intermediate values on stderr.
    """
    # Configure logging based on LOG_LEVEL environment variable
    log_level = os.environ.get("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING),
        format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )


# Add subcommand groups
cli.add_command(tax_group)
cli.add_command(books_group)
cli.add_command(bank_group)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
