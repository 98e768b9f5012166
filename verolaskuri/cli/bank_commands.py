"""Bank statement reconciliation commands."""

import json
from pathlib import Path

import click
from rich.console import Console

from verolaskuri.sdk import apply_matches, build_reconciliation_report

from .inputs import FORMAT_OPTION, INPUT_FILE, input_errors, load_bank_records, load_ledger
from .renderers.report_renderer import echo_json, render_applied, render_reconciliation


@click.group()
def bank():
    """Bank statement reconciliation."""
    pass


@bank.command("reconcile")
@click.argument("bank_file", type=INPUT_FILE)
@click.argument("ledger_file", type=INPUT_FILE)
@click.option("--apply", "apply_", is_flag=True, help="Apply the suggested matches (requires --output).")
@click.option("--output", "-o", "output_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="File to write the matches and updated records to, as JSON.")
@FORMAT_OPTION
def reconcile(bank_file: Path, ledger_file: Path, apply_, output_path, output_format):
    """Suggest matches between BANK_FILE records and LEDGER_FILE entries.

    Already matched bank records and reconciled entries are skipped.
    Amounts must match exactly and dates be at most 7 days apart.

    With --apply, the matches are applied to copies of both record lists
    and written to --output as one JSON document with "matches",
    "bank_records" and "ledger_entries". The input files are not modified.
    """
    if apply_ and output_path is None:
        raise click.UsageError("--apply requires --output FILE")

    with input_errors():
        bank_records = load_bank_records(bank_file)
        entries = load_ledger(ledger_file)
        report = build_reconciliation_report(bank_records, entries)
        applied = apply_matches(report.suggested_matches, bank_records, entries) if apply_ else None

    if applied is not None:
        with open(output_path, "w") as f:
            json.dump(applied.model_dump(mode="json"), f, indent=2)

    if output_format == "json":
        echo_json(report)
        return

    console = Console()
    render_reconciliation(console, report)
    if applied is not None:
        render_applied(console, applied, str(output_path))
