"""Income tax, YEL and ennakkovero commands."""

import datetime
from pathlib import Path

import click
from rich.console import Console

from verolaskuri.sdk import (
    CURRENT_FISCAL_YEAR,
    TaxParams,
    YelParams,
    calculate_tax,
    calculate_yel,
    estimate_prepayment_position,
    estimate_tax,
    load_tax_rules,
)
from verolaskuri.sdk.estimate import DEFAULT_YEL_INCOME_CENTS
from verolaskuri.sdk.taxes import municipal_rate_for

from .inputs import (
    EUROS,
    FORMAT_OPTION,
    INPUT_FILE,
    input_errors,
    load_installments,
    load_ledger,
    load_tax_card,
)
from .renderers.report_renderer import (
    echo_json,
    render_prepayment_position,
    render_tax_estimate,
    render_tax_result,
    render_yel_result,
)

YEAR_OPTION = click.option(
    "--year", type=int, default=CURRENT_FISCAL_YEAR, show_default=True,
    help="Fiscal year whose statutory tables to use.",
)
MUNICIPALITY_OPTION = click.option(
    "--municipality", "-m", default=None,
    help="Municipality for the municipal tax rate (default from the year's tables).",
)


@click.group()
def tax():
    """Income tax, YEL and ennakkovero calculations."""
    pass


@tax.command("calc")
@click.argument("income", type=EUROS)
@MUNICIPALITY_OPTION
@click.option("--church/--no-church", default=False, help="Apply the church tax rate.")
@click.option("--no-deduction", is_flag=True, help="Skip the 5% yrittajavahennys.")
@click.option("--yel", "yel_cents", type=EUROS, default=0, help="Deductible YEL contribution in euros.")
@YEAR_OPTION
@FORMAT_OPTION
def calc(income, municipality, church, no_deduction, yel_cents, year, output_format):
    """Calculate income tax on INCOME euros of earned income.

    Negative INCOME is a loss and yields zero tax (pass it after "--").

    \b
    Examples:
      verolaskuri tax calc 100000
      verolaskuri tax calc 100000 -m Espoo --church --yel 17080
      verolaskuri tax calc -- -5000
    """
    if yel_cents < 0:
        raise click.BadParameter("must not be negative", param_hint="--yel")

    with input_errors():
        rules = load_tax_rules(year)
        params = TaxParams(
            earned_income_cents=income,
            municipal_rate=municipal_rate_for(municipality, rules),
            church_rate=rules.default_church_rate if church else 0,
            apply_entrepreneur_deduction=not no_deduction,
            yel_contribution_cents=yel_cents,
            fiscal_year=year,
        )
        result = calculate_tax(params, rules)

    if output_format == "json":
        echo_json(result)
        return

    render_tax_result(Console(), result)


@tax.command("yel")
@click.argument("yel_income", type=EUROS)
@click.option("--new-entrepreneur", is_flag=True, help="Apply the 22% discount of the first 48 months.")
@YEAR_OPTION
@FORMAT_OPTION
def yel(yel_income, new_entrepreneur, year, output_format):
    """Calculate the YEL contribution for YEL_INCOME euros of confirmed work income.

    Income outside the statutory floor and ceiling is clamped.
    """
    with input_errors():
        result = calculate_yel(
            YelParams(
                yel_income_cents=yel_income,
                is_new_entrepreneur=new_entrepreneur,
                fiscal_year=year,
            ),
            load_tax_rules(year),
        )

    if output_format == "json":
        echo_json(result)
        return

    render_yel_result(Console(), result)


@tax.command("estimate")
@click.argument("ledger_file", type=INPUT_FILE)
@MUNICIPALITY_OPTION
@click.option("--church/--no-church", default=True, help="Apply the church tax rate (default: yes).")
@click.option(
    "--yel-income", type=EUROS, default=DEFAULT_YEL_INCOME_CENTS,
    help="Confirmed YEL work income in euros (default: 70000).",
)
@click.option("--new-entrepreneur", is_flag=True, help="Apply the new entrepreneur YEL discount.")
@YEAR_OPTION
@FORMAT_OPTION
def estimate(ledger_file: Path, municipality, church, yel_income, new_entrepreneur, year, output_format):
    """Estimate the year's income tax from the entries in LEDGER_FILE.

    LEDGER_FILE is a JSON or YAML list of ledger entries. Entries of
    other fiscal years are ignored.
    """
    with input_errors():
        entries = load_ledger(ledger_file)
        result = estimate_tax(
            entries,
            year,
            municipality=municipality,
            church_member=church,
            yel_income_cents=yel_income,
            is_new_entrepreneur=new_entrepreneur,
        )

    if output_format == "json":
        echo_json(result)
        return

    render_tax_estimate(Console(), result)


@tax.command("ennakkovero")
@click.argument("installments_file", type=INPUT_FILE)
@click.argument("ledger_file", type=INPUT_FILE)
@MUNICIPALITY_OPTION
@click.option("--tax-card", "tax_card_file", type=INPUT_FILE, default=None,
              help="Verokortti JSON/YAML to compare with the effective rate.")
@click.option("--month", type=click.IntRange(1, 12), default=None,
              help="Months elapsed for annualizing (default: month of --as-of).")
@click.option("--as-of", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="Date for the next installment lookup (default: today).")
@YEAR_OPTION
@FORMAT_OPTION
def ennakkovero(installments_file: Path, ledger_file: Path, municipality, tax_card_file, month, as_of, year,
                output_format):
    """Compare the ennakkovero schedule with the tax projected from the ledger.

    INSTALLMENTS_FILE lists the prepayment installments and LEDGER_FILE
    the ledger entries. The year-to-date tax is annualized by --month
    and compared with the scheduled total.
    """
    as_of_date = as_of.date() if isinstance(as_of, datetime.datetime) else None

    with input_errors():
        position = estimate_prepayment_position(
            load_installments(installments_file),
            load_ledger(ledger_file),
            year,
            current_month=month,
            municipality=municipality,
            tax_card=load_tax_card(tax_card_file),
            as_of=as_of_date,
        )

    if output_format == "json":
        echo_json(position)
        return

    render_prepayment_position(Console(), position)
