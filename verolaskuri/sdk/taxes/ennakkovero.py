"""Ennakkovero (prepayment tax) comparison.

Compares the prepayment schedule assigned by the tax authority with the
annual tax projected from the year-to-date estimate, to detect under- or
overpayment early enough to request a change in OmaVero. Also compares
the verokortti withholding rate with the calculated effective rate.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from ..money import round_cents, round_rate, to_percent, whole_percent
from ..schemas import PrepaymentInstallment, TaxCard
from .schemas import EnnakkoveroComparison, PrepaymentStatus, TaxCardComparison

logger = logging.getLogger(__name__)

# Deviation below this is on track; owing more by at least CRITICAL is critical
ON_TRACK_THRESHOLD = Decimal("0.10")
CRITICAL_THRESHOLD = Decimal("0.30")

# Tax card rate within this many rate points of the effective rate matches
TAX_CARD_TOLERANCE = Decimal("0.02")

MONTHS_PER_YEAR = 12


def _classify(difference: int, deviation_ratio: Decimal) -> PrepaymentStatus:
    # Only owing more has a critical tier; overpaying is never critical
    if deviation_ratio < ON_TRACK_THRESHOLD:
        return "on_track"
    if difference > 0 and deviation_ratio >= CRITICAL_THRESHOLD:
        return "critical"
    if difference > 0:
        return "underpaying"
    return "overpaying"


def _advisory_message(status: PrepaymentStatus, deviation_ratio: Decimal) -> str:
    pct = whole_percent(deviation_ratio)
    if status == "on_track":
        return "Ennakkovero on aikataulussa. Ei tarvetta muutoksille."
    if status == "critical":
        return (
            f"Tulosi ylittavat ennakkoveropaatoksen {pct}%. Paivita ennakkovero OmaVerossa "
            f"valttaaksesi jaannoksen ja korot (8% viivastyskorko)."
        )
    if status == "underpaying":
        return (
            f"Tulosi ovat {pct}% yli ennakkoveropaatoksen. "
            f"Harkitse ennakkoveron korotusta OmaVerossa."
        )
    return (
        f"Tulosi ovat {pct}% alle ennakkoveropaatoksen. "
        f"Voit hakea ennakkoveron alentamista OmaVerosta."
    )


def next_unpaid_installment(
    installments: List[PrepaymentInstallment],
    as_of: date,
) -> Optional[PrepaymentInstallment]:
    """Earliest unpaid installment due on or after `as_of`, None if there is none.

    Installments sharing a due date keep their input order.
    """
    upcoming = [i for i in installments if not i.paid and i.due_date >= as_of]
    if not upcoming:
        return None
    return min(upcoming, key=lambda i: i.due_date)


def compare_ennakkovero(
    installments: List[PrepaymentInstallment],
    estimated_ytd_tax_cents: int,
    current_month: int,
    as_of: Optional[date] = None,
) -> EnnakkoveroComparison:
    """Compare the prepayment schedule with the projected annual tax.

    The year-to-date estimate is annualized linearly: in month 2 with X
    tax so far, the annual projection is X * 12 / 2.

    Args:
        installments: The year's installments, in any order
        estimated_ytd_tax_cents: Tax estimated from income so far
        current_month: Current calendar month, 1-12 (<= 0 uses a factor of 12)
        as_of: Date for the next-installment lookup. Defaults to today.

    Returns:
        EnnakkoveroComparison with totals, status and advisory message
    """
    if as_of is None:
        as_of = date.today()

    total_scheduled = sum(i.amount_cents for i in installments)
    total_paid = sum(i.amount_cents for i in installments if i.paid)
    remaining = total_scheduled - total_paid

    if current_month > 0:
        projected_annual_tax = round_cents(Decimal(estimated_ytd_tax_cents) * MONTHS_PER_YEAR / current_month)
    else:
        projected_annual_tax = estimated_ytd_tax_cents * MONTHS_PER_YEAR

    difference = projected_annual_tax - total_scheduled

    # No schedule means no ratio; this reports on_track even if tax is owed
    if total_scheduled > 0:
        deviation_ratio = Decimal(abs(difference)) / Decimal(total_scheduled)
    else:
        deviation_ratio = Decimal("0")

    status = _classify(difference, deviation_ratio)
    logger.debug(
        f"ennakkovero: scheduled={total_scheduled} projected={projected_annual_tax} "
        f"ratio={deviation_ratio} status={status}"
    )

    return EnnakkoveroComparison(
        total_scheduled_cents=total_scheduled,
        total_paid_cents=total_paid,
        remaining_cents=remaining,
        projected_annual_tax_cents=projected_annual_tax,
        difference_cents=difference,
        deviation_ratio=round_rate(deviation_ratio),
        status=status,
        message=_advisory_message(status, deviation_ratio),
        next_installment=next_unpaid_installment(installments, as_of),
    )


def compare_tax_card(
    card: TaxCard,
    effective_rate: Decimal,
    gross_income_cents: int,
) -> Optional[TaxCardComparison]:
    """Compare the verokortti base withholding rate with the effective tax rate.

    Returns None when there is no income to compare against.
    """
    if gross_income_cents <= 0:
        return None

    withholding_rate = card.base_rate_pct / 100
    card_pct = card.base_rate_pct
    effective_pct = to_percent(effective_rate)
    difference_pp = to_percent(withholding_rate - effective_rate)

    if withholding_rate > effective_rate + TAX_CARD_TOLERANCE:
        status = "higher"
        message = (
            f"Verokorttisi pidatysprosentti ({card_pct}%) on {difference_pp} prosenttiyksikkoa "
            f"todellista veroastettasi ({effective_pct}%) korkeampi."
        )
    elif withholding_rate < effective_rate - TAX_CARD_TOLERANCE:
        status = "lower"
        message = (
            f"Verokorttisi pidatysprosentti ({card_pct}%) on {-difference_pp} prosenttiyksikkoa "
            f"todellista veroastettasi ({effective_pct}%) matalampi. Harkitse korotusta."
        )
    else:
        status = "matches"
        message = (
            f"Verokorttisi pidatysprosentti ({card_pct}%) vastaa hyvin "
            f"todellista veroastettasi ({effective_pct}%)."
        )

    return TaxCardComparison(
        card_rate_pct=card.base_rate_pct,
        calculated_effective_rate_pct=effective_pct,
        difference_pp=difference_pp,
        status=status,
        message=message,
    )
