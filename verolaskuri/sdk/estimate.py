"""Year-to-date tax estimates from ledger entries.

Combines the ledger totals with the tax, YEL and ennakkovero calculators
the way the tax overview does: the business result (income minus
expenses) is taxed as earned income with the entrepreneur deduction.
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from .schemas import LedgerEntry, PrepaymentInstallment, TaxCard
from .taxes import (
    EnnakkoveroComparison,
    TaxCardComparison,
    TaxParams,
    TaxResult,
    YelParams,
    YelResult,
    calculate_tax,
    calculate_yel,
    compare_ennakkovero,
    compare_tax_card,
    load_tax_rules,
    municipal_rate_for,
)

YEL_CATEGORY = "yel"

# Typical confirmed YEL income when the user has not entered one
DEFAULT_YEL_INCOME_CENTS = 7000000


class LedgerTotals(BaseModel):
    """Income and expense totals of a fiscal year, in cents."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    income_cents: int
    expenses_cents: int  # Excluding YEL
    yel_paid_cents: int

    @property
    def net_profit_cents(self) -> int:
        """Income minus non-YEL expenses."""
        return self.income_cents - self.expenses_cents


class TaxEstimate(BaseModel):
    """Year-to-date tax estimate."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    fiscal_year: int
    total_income_cents: int
    total_expenses_cents: int
    yel_paid_cents: int
    net_profit_cents: int
    municipality: str
    church_member: bool
    yel: YelResult
    tax: TaxResult


class PrepaymentPosition(BaseModel):
    """Ennakkovero schedule and tax card checked against the ledger."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    fiscal_year: int
    installments: List[PrepaymentInstallment]
    comparison: EnnakkoveroComparison
    tax_card_comparison: Optional[TaxCardComparison] = None


def ledger_totals(entries: List[LedgerEntry], fiscal_year: int) -> LedgerTotals:
    """Sum one fiscal year's income, non-YEL expenses and YEL payments."""
    income = expenses = yel_paid = 0
    for entry in entries:
        if entry.fiscal_year != fiscal_year:
            continue
        if entry.kind == "income":
            income += entry.amount_cents
        elif entry.category == YEL_CATEGORY:
            yel_paid += entry.amount_cents
        else:
            expenses += entry.amount_cents
    return LedgerTotals(income_cents=income, expenses_cents=expenses, yel_paid_cents=yel_paid)


def estimate_tax(
    entries: List[LedgerEntry],
    fiscal_year: int,
    municipality: Optional[str] = None,
    church_member: bool = True,
    yel_income_cents: int = DEFAULT_YEL_INCOME_CENTS,
    is_new_entrepreneur: bool = False,
) -> TaxEstimate:
    """Estimate the year's income tax from the ledger.

    The YEL deduction is what was actually booked under the yel category,
    or the computed annual contribution when nothing has been booked yet.

    Args:
        entries: Ledger entries (other fiscal years are ignored)
        fiscal_year: Year to estimate
        municipality: Municipality for the municipal rate (default from rules)
        church_member: Apply the default church tax rate
        yel_income_cents: Confirmed YEL work income
        is_new_entrepreneur: Apply the new entrepreneur YEL discount
    """
    rules = load_tax_rules(fiscal_year)
    municipality = municipality or rules.default_municipality
    totals = ledger_totals(entries, fiscal_year)

    yel_result = calculate_yel(
        YelParams(
            yel_income_cents=yel_income_cents,
            is_new_entrepreneur=is_new_entrepreneur,
            fiscal_year=fiscal_year,
        ),
        rules,
    )

    tax_result = calculate_tax(
        TaxParams(
            earned_income_cents=totals.net_profit_cents,
            municipal_rate=municipal_rate_for(municipality, rules),
            church_rate=rules.default_church_rate if church_member else 0,
            apply_entrepreneur_deduction=True,
            yel_contribution_cents=totals.yel_paid_cents or yel_result.annual_contribution_cents,
            fiscal_year=fiscal_year,
        ),
        rules,
    )

    return TaxEstimate(
        fiscal_year=fiscal_year,
        total_income_cents=totals.income_cents,
        total_expenses_cents=totals.expenses_cents,
        yel_paid_cents=totals.yel_paid_cents,
        net_profit_cents=totals.net_profit_cents,
        municipality=municipality,
        church_member=church_member,
        yel=yel_result,
        tax=tax_result,
    )


def estimate_prepayment_position(
    installments: List[PrepaymentInstallment],
    entries: List[LedgerEntry],
    fiscal_year: int,
    current_month: Optional[int] = None,
    municipality: Optional[str] = None,
    tax_card: Optional[TaxCard] = None,
    as_of: Optional[date] = None,
) -> PrepaymentPosition:
    """Compare the year's prepayment schedule and tax card with the ledger.

    The year-to-date tax is computed on income minus all expenses
    (YEL included) with the default church rate and no separate YEL
    deduction.

    Args:
        installments: Prepayment installments (other years are ignored)
        entries: Ledger entries (other fiscal years are ignored)
        fiscal_year: Year to compare
        current_month: Month used to annualize (default: month of as_of)
        municipality: Municipality for the municipal rate (default from rules)
        tax_card: Verokortti to compare with the effective rate, if any
        as_of: Date for the next installment lookup (default: today)
    """
    as_of = as_of or date.today()
    current_month = current_month if current_month is not None else as_of.month
    rules = load_tax_rules(fiscal_year)
    totals = ledger_totals(entries, fiscal_year)

    tax_result = calculate_tax(
        TaxParams(
            earned_income_cents=totals.net_profit_cents - totals.yel_paid_cents,
            municipal_rate=municipal_rate_for(municipality, rules),
            church_rate=rules.default_church_rate,
            apply_entrepreneur_deduction=True,
            yel_contribution_cents=0,
            fiscal_year=fiscal_year,
        ),
        rules,
    )

    year_installments = sorted(
        (i for i in installments if i.year == fiscal_year),
        key=lambda i: i.due_date,
    )
    comparison = compare_ennakkovero(year_installments, tax_result.total_tax_cents, current_month, as_of)

    card_comparison = None
    if tax_card is not None:
        card_comparison = compare_tax_card(tax_card, tax_result.effective_rate, totals.income_cents)

    return PrepaymentPosition(
        fiscal_year=fiscal_year,
        installments=year_installments,
        comparison=comparison,
        tax_card_comparison=card_comparison,
    )
