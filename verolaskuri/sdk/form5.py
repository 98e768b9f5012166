"""Form 5 (Elinkeinotoiminnan veroilmoitus) line items.

Maps ledger entry categories to the line items of a sole-trader
doctor's annual business tax return.

Depreciation:
    Equipment above the threshold (EUR 1,200 in 2026) is depreciated
    with the 25% reducing balance method (menojaannospoisto, EVL 30-34):
    each year's depreciation is 25% of the remaining balance, not of
    the original cost. Equipment at or below the threshold is expensed
    immediately.

YEL premiums are reported on their own line. They are deducted in
personal taxation, so they do not reduce the business result.
"""

import logging
from typing import Dict, List, Optional

from .config import CURRENT_FISCAL_YEAR
from .money import round_cents
from .schemas import DepreciationDetail, Form5Report, LedgerEntry
from .taxes.rules import load_tax_rules
from .taxes.schemas import TaxRules

logger = logging.getLogger(__name__)

OTHER_EXPENSES = "other_expenses"
PENSION_PREMIUMS = "pension_premiums"
DEPRECIABLE = "depreciable"

# Which Form 5 section each expense category maps to. Unmapped
# categories are reported as other expenses.
CATEGORY_TO_FORM5_SECTION: Dict[str, str] = {
    "yel": PENSION_PREMIUMS,
    "potilasvakuutus": OTHER_EXPENSES,
    "laakariliitto": OTHER_EXPENSES,
    "tyohuonevahennys": OTHER_EXPENSES,
    "matkakulut": OTHER_EXPENSES,
    "taydennyskoulutus": OTHER_EXPENSES,
    "ammattikirjallisuus": OTHER_EXPENSES,
    "tyovaatteet": OTHER_EXPENSES,
    "puhelin_netti": OTHER_EXPENSES,
    "tilitoimisto": OTHER_EXPENSES,
    "vakuutukset": OTHER_EXPENSES,
    "toimistotarvikkeet": OTHER_EXPENSES,
    "muut_kulut": OTHER_EXPENSES,
    # Depreciated or expensed depending on amount, see _equipment_depreciation
    "laitteet": DEPRECIABLE,
}


def _equipment_depreciation(entry: LedgerEntry, rules: TaxRules) -> Optional[DepreciationDetail]:
    """Depreciation for an equipment entry, None if it is expensed immediately."""
    policy = rules.depreciation

    if entry.depreciation_years and entry.depreciation_remaining_cents is not None:
        years = entry.depreciation_years
        remaining = entry.depreciation_remaining_cents
    elif entry.amount_cents > policy.threshold_cents:
        # Booked without depreciation fields: start from the full cost
        logger.warning(
            f"Entry {entry.id}: {entry.category} {entry.amount_cents} cents above threshold "
            f"has no depreciation fields, assuming {policy.default_years} years"
        )
        years = policy.default_years
        remaining = entry.amount_cents
    else:
        return None

    return DepreciationDetail(
        category=entry.category,
        original_amount_cents=entry.amount_cents,
        depreciation_years=years,
        remaining_cents=remaining,
        annual_depreciation_cents=round_cents(remaining * policy.rate),
    )


def generate_form5(
    entries: List[LedgerEntry],
    rules: Optional[TaxRules] = None,
    year: int = CURRENT_FISCAL_YEAR,
) -> Form5Report:
    """Aggregate ledger entries into Form 5 line items.

    Args:
        entries: The fiscal year's ledger entries
        rules: Tax rules to use (default: loaded for `year`)
        year: Fiscal year whose depreciation policy applies

    Returns:
        Form5Report with totals, per-category expense breakdown and
        depreciation details
    """
    rules = rules or load_tax_rules(year)

    revenue = 0
    pension_premiums = 0
    other_expenses = 0
    depreciation = 0
    expense_breakdown: Dict[str, int] = {}
    depreciation_details: List[DepreciationDetail] = []

    for entry in entries:
        if entry.kind == "income":
            revenue += entry.amount_cents
            continue

        expense_breakdown[entry.category] = expense_breakdown.get(entry.category, 0) + entry.amount_cents
        section = CATEGORY_TO_FORM5_SECTION.get(entry.category, OTHER_EXPENSES)

        if section == DEPRECIABLE:
            detail = _equipment_depreciation(entry, rules)
            if detail is None:
                other_expenses += entry.amount_cents
            else:
                depreciation += detail.annual_depreciation_cents
                depreciation_details.append(detail)
        elif section == PENSION_PREMIUMS:
            pension_premiums += entry.amount_cents
        else:
            other_expenses += entry.amount_cents

    operating_profit = revenue - (other_expenses + depreciation)

    return Form5Report(
        revenue_cents=revenue,
        depreciation_cents=depreciation,
        other_expenses_cents=other_expenses,
        operating_profit_cents=operating_profit,
        pension_premiums_cents=pension_premiums,
        business_result_cents=operating_profit,
        expense_breakdown=expense_breakdown,
        depreciation_details=depreciation_details,
    )
