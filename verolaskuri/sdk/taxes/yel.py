"""YEL (yrittajan elakevakuutus) contribution calculation.

Confirmed YEL income is clamped to the year's statutory floor and
ceiling. New entrepreneurs get a discount on the base rate for their
first 48 months.
"""

from decimal import Decimal
from typing import Optional

from ..money import round_cents, round_rate
from .rules import load_tax_rules
from .schemas import TaxRules, YelParams, YelResult


def calculate_yel(params: YelParams, rules: Optional[TaxRules] = None) -> YelResult:
    """Calculate annual and monthly YEL contributions.

    Out-of-range income is clamped, not rejected; the clamped value is
    returned as yel_income_cents.
    """
    yel = (rules or load_tax_rules(params.fiscal_year)).yel

    clamped_income = max(yel.min_income_cents, min(yel.max_income_cents, params.yel_income_cents))

    discount_rate = yel.new_entrepreneur_discount if params.is_new_entrepreneur else Decimal("0")
    effective_rate = yel.base_rate * (1 - discount_rate)

    annual_contribution = round_cents(clamped_income * effective_rate)
    monthly_contribution = round_cents(Decimal(annual_contribution) / 12)

    # Rough estimate only; actual accrual depends on age
    pension_accrual = round_cents(clamped_income * yel.pension_accrual_rate)

    return YelResult(
        yel_income_cents=clamped_income,
        base_rate=yel.base_rate,
        discount_rate=discount_rate,
        effective_rate=round_rate(effective_rate),
        annual_contribution_cents=annual_contribution,
        monthly_contribution_cents=monthly_contribution,
        annual_pension_accrual_cents=pension_accrual,
    )
