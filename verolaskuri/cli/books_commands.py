"""Bookkeeping commands: Form 5 and compliance checks."""

from pathlib import Path

import click
from rich.console import Console

from verolaskuri.sdk import CURRENT_FISCAL_YEAR, check_compliance, generate_form5, load_tax_rules

from .inputs import FORMAT_OPTION, INPUT_FILE, input_errors, load_ledger, load_tax_card
from .renderers.report_renderer import echo_json, render_compliance, render_form5


@click.group()
def books():
    """Form 5 and bookkeeping compliance."""
    pass


@books.command("form5")
@click.argument("ledger_file", type=INPUT_FILE)
@click.option("--year", type=int, default=CURRENT_FISCAL_YEAR, show_default=True,
              help="Fiscal year to report.")
@FORMAT_OPTION
def form5(ledger_file: Path, year, output_format):
    """Generate the Form 5 business income summary from LEDGER_FILE.

    Only entries booked to --year are included. Equipment above the
    depreciation threshold is depreciated at 25% of its remaining balance.
    """
    with input_errors():
        entries = [e for e in load_ledger(ledger_file) if e.fiscal_year == year]
        report = generate_form5(entries, load_tax_rules(year), year)

    if output_format == "json":
        echo_json(report)
        return

    console = Console()
    console.print(f"[bold]Form 5 - fiscal year {year}[/bold] ({len(entries)} entries)")
    render_form5(console, report)


@books.command("compliance")
@click.argument("ledger_file", type=INPUT_FILE)
@click.option("--tax-card", "tax_card_file", type=INPUT_FILE, default=None,
              help="Verokortti JSON/YAML for the prepayment register status.")
@click.option("--year", type=int, default=CURRENT_FISCAL_YEAR, show_default=True,
              help="Fiscal year to check.")
@FORMAT_OPTION
def compliance(ledger_file: Path, tax_card_file, year, output_format):
    """Check tosite coverage and depreciation of the entries in LEDGER_FILE.

    Lists entries that need a supporting document but have none,
    equipment purchases that must be depreciated, and whether you are
    in the ennakkoperintarekisteri according to --tax-card.
    """
    with input_errors():
        report = check_compliance(load_ledger(ledger_file), year, load_tax_card(tax_card_file))

    if output_format == "json":
        echo_json(report)
        return

    render_compliance(Console(), report)
