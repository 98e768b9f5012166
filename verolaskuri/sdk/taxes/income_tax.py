"""Progressive income tax for sole-trader earned income.

State tax uses the fiscal year's bracket table: each band's tax is the
published cumulative base at its lower bound plus the band's marginal
rate on the excess. Municipal and church taxes are flat rates on the
same taxable income.

All intermediate math stays in Decimal euros; amounts are rounded to
cents only when the TaxResult is built.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from ..money import round_rate, to_cents, to_euros
from .rules import load_tax_rules
from .schemas import StateTaxBracket, TaxParams, TaxResult, TaxRules

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _bracket_for(taxable_income: Decimal, brackets: List[StateTaxBracket]) -> Optional[StateTaxBracket]:
    """Highest band whose lower bound is strictly below taxable income."""
    for bracket in reversed(brackets):
        if taxable_income > bracket.lower:
            return bracket
    return None


def calculate_state_tax(taxable_income: Decimal, brackets: List[StateTaxBracket]) -> Decimal:
    """Calculate state income tax in euros.

    Args:
        taxable_income: Taxable earned income in euros
        brackets: Bands sorted by lower bound (as provided by TaxRules)

    Returns:
        State tax in euros, unrounded
    """
    bracket = _bracket_for(taxable_income, brackets)
    if bracket is None:
        return ZERO
    return bracket.base + (taxable_income - bracket.lower) * bracket.rate


def state_marginal_rate(taxable_income: Decimal, brackets: List[StateTaxBracket]) -> Decimal:
    """State tax rate applying to the next euro of taxable income."""
    bracket = _bracket_for(taxable_income, brackets)
    if bracket is None:
        return brackets[0].rate
    return bracket.rate


def municipal_rate_for(municipality: Optional[str], rules: TaxRules) -> Decimal:
    """Municipal tax rate; unknown or missing municipalities use the default one's rate."""
    if municipality and municipality in rules.municipal_rates:
        return rules.municipal_rates[municipality]
    if municipality:
        logger.warning(
            f"No municipal rate for '{municipality}', using {rules.default_municipality}"
        )
    return rules.default_municipal_rate


def calculate_tax(params: TaxParams, rules: Optional[TaxRules] = None) -> TaxResult:
    """Calculate progressive income tax with state, municipal and church parts.

    Losses and zero income produce zero tax. The entrepreneur deduction
    (yrittajavahennys) applies only to positive income; the YEL
    contribution is deducted as given.

    Args:
        params: Income, rates and deductions
        rules: Tax rules to use (default: loaded for params.fiscal_year)

    Returns:
        TaxResult with cent amounts and rates rounded to 4 decimals
    """
    rules = rules or load_tax_rules(params.fiscal_year)
    brackets = rules.state_tax_brackets

    gross = to_euros(params.earned_income_cents)
    yel_deduction = to_euros(params.yel_contribution_cents)

    entrepreneur_deduction = ZERO
    if params.apply_entrepreneur_deduction and gross > 0:
        entrepreneur_deduction = gross * rules.entrepreneur_deduction_rate

    total_deductions = entrepreneur_deduction + yel_deduction
    taxable = max(ZERO, gross - total_deductions)

    state_tax = calculate_state_tax(taxable, brackets)
    municipal_tax = taxable * params.municipal_rate
    church_tax = taxable * params.church_rate
    total_tax = state_tax + municipal_tax + church_tax

    effective_rate = total_tax / gross if gross > 0 else ZERO
    marginal_rate = state_marginal_rate(taxable, brackets) + params.municipal_rate + params.church_rate

    logger.debug(
        f"tax {params.fiscal_year}: gross={gross} deductions={total_deductions} "
        f"taxable={taxable} state={state_tax} total={total_tax}"
    )

    return TaxResult(
        gross_income_cents=params.earned_income_cents,
        deductions_cents=to_cents(total_deductions),
        taxable_income_cents=to_cents(taxable),
        entrepreneur_deduction_cents=to_cents(entrepreneur_deduction),
        state_tax_cents=to_cents(state_tax),
        municipal_tax_cents=to_cents(municipal_tax),
        church_tax_cents=to_cents(church_tax),
        total_tax_cents=to_cents(total_tax),
        effective_rate=round_rate(effective_rate),
        marginal_rate=round_rate(marginal_rate),
    )
