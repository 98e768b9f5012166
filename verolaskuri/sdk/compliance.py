"""Bookkeeping compliance checks for a fiscal year.

Kirjanpitolaki requires a tosite (supporting document) for nearly every
entry. The report counts entries with and without proof and flags
depreciable purchases above the threshold. It also reports
ennakkoperintarekisteri registration from the tax card.
"""

from collections import Counter
from decimal import Decimal
from typing import List, Optional

from .categories import get_category, requires_proof
from .money import whole_percent
from .schemas import (
    ComplianceReport,
    DepreciationWarning,
    LedgerEntry,
    PrepaymentRegisterStatus,
    ProofStatus,
    TaxCard,
    VOUCHER_KINDS,
)
from .taxes.rules import load_tax_rules

NOT_REGISTERED_WARNING = (
    "Et ole ennakkoperintarekisterissa. Klinikkasi pidattavat lahdeveron "
    "suoraan tilityspalkkioistasi."
)


def proof_status(entries: List[LedgerEntry]) -> ProofStatus:
    """Count tosite coverage of the given entries."""
    with_proof = 0
    not_required = 0
    missing = []

    for entry in entries:
        if entry.voucher_kind != "none":
            with_proof += 1
        elif not requires_proof(entry.category):
            not_required += 1
        else:
            missing.append(entry)

    total = len(entries)
    if total:
        rate = whole_percent(Decimal(with_proof + not_required) / Decimal(total))
    else:
        rate = 100

    counts = Counter(e.voucher_kind for e in entries)
    by_voucher_kind = {kind: counts[kind] for kind in VOUCHER_KINDS if counts[kind]}

    return ProofStatus(
        total_entries=total,
        with_proof=with_proof,
        proof_not_required=not_required,
        missing_proof=len(missing),
        compliance_rate=rate,
        by_voucher_kind=by_voucher_kind,
        missing=missing,
    )


def prepayment_register_status(tax_card: Optional[TaxCard]) -> PrepaymentRegisterStatus:
    """Registration status from the tax card; no card counts as not registered."""
    registered = tax_card is not None and tax_card.in_prepayment_register
    return PrepaymentRegisterStatus(
        registered=registered,
        year=tax_card.year if tax_card else None,
        warning=None if registered else NOT_REGISTERED_WARNING,
    )


def check_compliance(
    entries: List[LedgerEntry],
    fiscal_year: int,
    tax_card: Optional[TaxCard] = None,
) -> ComplianceReport:
    """Build the compliance report for one fiscal year.

    Entries of other fiscal years are ignored.
    """
    threshold = load_tax_rules(fiscal_year).depreciation.threshold_cents
    year_entries = [e for e in entries if e.fiscal_year == fiscal_year]

    warnings = []
    for entry in year_entries:
        category = get_category(entry.category)
        if category and category.is_depreciable and entry.amount_cents > threshold:
            warnings.append(DepreciationWarning(
                id=entry.id,
                category=entry.category,
                amount_cents=entry.amount_cents,
                description=entry.description,
            ))

    return ComplianceReport(
        fiscal_year=fiscal_year,
        proof_status=proof_status(year_entries),
        depreciation_warnings=warnings,
        prepayment_register=prepayment_register_status(tax_card),
    )
