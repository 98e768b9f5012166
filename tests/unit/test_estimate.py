"""Tests for year-to-date tax estimates built from ledger entries."""

from datetime import date
from decimal import Decimal

import pytest

from verolaskuri.sdk.estimate import estimate_prepayment_position, estimate_tax, ledger_totals
from verolaskuri.sdk.schemas import LedgerEntry, PrepaymentInstallment, TaxCard
from verolaskuri.sdk.taxes import TaxParams, calculate_tax, compare_ennakkovero


AS_OF = date(2026, 6, 30)


def make_entry(entry_id: int, kind: str, category: str, amount_cents: int, fiscal_year: int = 2026) -> LedgerEntry:
    """Create a ledger entry for testing."""
    return LedgerEntry(
        id=entry_id,
        kind=kind,
        date=date(fiscal_year, 3, 1),
        fiscal_year=fiscal_year,
        amount_cents=amount_cents,
        category=category,
    )


@pytest.fixture
def ledger():
    return [
        make_entry(1, "income", "clinic_income", 5000000),
        make_entry(2, "expense", "muut_kulut", 500000),
        make_entry(3, "expense", "yel", 300000),
        make_entry(4, "income", "clinic_income", 9999999, fiscal_year=2025),
    ]


class TestLedgerTotals:

    def test_totals(self, ledger):
        totals = ledger_totals(ledger, 2026)

        assert totals.income_cents == 5000000
        assert totals.expenses_cents == 500000
        assert totals.yel_paid_cents == 300000
        assert totals.net_profit_cents == 4500000


class TestEstimateTax:
    """Tests for estimate_tax."""

    def test_uses_booked_yel(self, ledger):
        estimate = estimate_tax(ledger, 2026)

        expected = calculate_tax(TaxParams(
            earned_income_cents=4500000,
            municipal_rate="0.185",
            church_rate="0.01",
            apply_entrepreneur_deduction=True,
            yel_contribution_cents=300000,
            fiscal_year=2026,
        ))
        assert estimate.municipality == "Helsinki"
        assert estimate.net_profit_cents == 4500000
        assert estimate.tax == expected
        assert estimate.yel.annual_contribution_cents == 1708000

    def test_falls_back_to_computed_yel(self):
        entries = [make_entry(1, "income", "clinic_income", 10000000)]
        estimate = estimate_tax(entries, 2026, church_member=False)

        assert estimate.yel_paid_cents == 0
        assert estimate.tax.deductions_cents == 500000 + 1708000
        assert estimate.tax.church_tax_cents == 0

    def test_municipality_and_new_entrepreneur(self, ledger):
        estimate = estimate_tax(ledger, 2026, municipality="Espoo", is_new_entrepreneur=True)

        assert estimate.municipality == "Espoo"
        assert estimate.yel.discount_rate == Decimal("0.22")
        # 39750 EUR taxable x 0.1775, half a cent rounds up
        assert estimate.tax.taxable_income_cents == 3975000
        assert estimate.tax.municipal_tax_cents == 705563

    def test_empty_ledger(self):
        estimate = estimate_tax([], 2026)

        assert estimate.net_profit_cents == 0
        assert estimate.tax.total_tax_cents == 0


class TestEstimatePrepaymentPosition:
    """Tests for estimate_prepayment_position."""

    def test_compares_schedule_with_ledger(self, ledger):
        installments = [
            PrepaymentInstallment(id=2, year=2026, due_date=date(2026, 8, 23), amount_cents=600000),
            PrepaymentInstallment(id=1, year=2026, due_date=date(2026, 2, 23), amount_cents=600000, paid=True),
            PrepaymentInstallment(id=9, year=2025, due_date=date(2025, 2, 23), amount_cents=999999),
        ]
        position = estimate_prepayment_position(installments, ledger, 2026, current_month=6, as_of=AS_OF)

        assert [i.id for i in position.installments] == [1, 2]

        tax = calculate_tax(TaxParams(
            earned_income_cents=4200000,
            municipal_rate="0.185",
            church_rate="0.01",
            apply_entrepreneur_deduction=True,
            fiscal_year=2026,
        ))
        expected = compare_ennakkovero(position.installments, tax.total_tax_cents, 6, AS_OF)
        assert position.comparison == expected
        assert position.comparison.next_installment.id == 2
        assert position.tax_card_comparison is None

    def test_month_defaults_to_as_of(self, ledger):
        default = estimate_prepayment_position([], ledger, 2026, as_of=AS_OF)
        explicit = estimate_prepayment_position([], ledger, 2026, current_month=6, as_of=AS_OF)

        assert default.comparison == explicit.comparison

    def test_tax_card_comparison(self, ledger):
        card = TaxCard(year=2026, card_type="entrepreneur", base_rate_pct="40")
        position = estimate_prepayment_position([], ledger, 2026, current_month=6, tax_card=card, as_of=AS_OF)

        assert position.tax_card_comparison is not None
        assert position.tax_card_comparison.status == "higher"

    def test_tax_card_without_income(self):
        card = TaxCard(year=2026, card_type="entrepreneur", base_rate_pct="40")
        position = estimate_prepayment_position([], [], 2026, current_month=6, tax_card=card, as_of=AS_OF)

        assert position.tax_card_comparison is None
