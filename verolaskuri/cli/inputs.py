"""Shared option types and input loading for CLI commands."""

from contextlib import contextmanager
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import List, Optional

import click

from verolaskuri.sdk import (
    BankRecord,
    InvalidInputError,
    LedgerEntry,
    PrepaymentInstallment,
    TaxCard,
    TaxRulesError,
    records,
)
from verolaskuri.sdk.money import to_cents

FORMAT_OPTION = click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)

INPUT_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)


class EurosType(click.ParamType):
    """Euro amount on the command line, converted to integer cents.

    Accepts "45000", "45000.50" and the Finnish "45000,50".
    """

    name = "euros"

    def convert(self, value, param, ctx):
        if isinstance(value, int):
            return value
        text = str(value).strip().replace(" ", "").replace(",", ".")
        try:
            euros = Decimal(text)
        except InvalidOperation:
            self.fail(f"'{value}' is not a euro amount", param, ctx)
        if not euros.is_finite():
            self.fail(f"'{value}' is not a euro amount", param, ctx)
        return to_cents(euros)


EUROS = EurosType()


@contextmanager
def input_errors():
    """Report invalid input and missing or invalid tax rules as CLI errors."""
    try:
        yield
    except (InvalidInputError, TaxRulesError) as e:
        raise click.ClickException(str(e))


def load_ledger(path: Path) -> List[LedgerEntry]:
    return records.parse_ledger_entries(records.load_rows(path))


def load_bank_records(path: Path) -> List[BankRecord]:
    return records.parse_bank_records(records.load_rows(path))


def load_installments(path: Path) -> List[PrepaymentInstallment]:
    return records.parse_installments(records.load_rows(path))


def load_tax_card(path: Optional[Path]) -> Optional[TaxCard]:
    if path is None:
        return None
    return records.parse_tax_card(records.load_object(path))
