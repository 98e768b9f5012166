"""Tests for the ennakkovero comparison and the tax card check."""

from datetime import date
from decimal import Decimal

import pytest

from verolaskuri.sdk.schemas import PrepaymentInstallment, TaxCard
from verolaskuri.sdk.taxes import compare_ennakkovero, compare_tax_card, next_unpaid_installment


AS_OF = date(2026, 3, 1)


def make_installment(inst_id: int, due: str, amount_cents: int, paid: bool = False) -> PrepaymentInstallment:
    """Create a 2026 prepayment installment."""
    return PrepaymentInstallment(
        id=inst_id,
        year=2026,
        due_date=date.fromisoformat(due),
        amount_cents=amount_cents,
        paid=paid,
    )


def monthly_schedule(amount_cents: int, paid_through_month: int = 0):
    """Twelve installments due on the 23rd, the first ones paid."""
    return [
        make_installment(m, f"2026-{m:02d}-23", amount_cents, paid=m <= paid_through_month)
        for m in range(1, 13)
    ]


class TestCompareEnnakkovero:
    """Tests for compare_ennakkovero."""

    def test_on_track(self):
        result = compare_ennakkovero(monthly_schedule(100000), 200000, 2, AS_OF)

        assert result.total_scheduled_cents == 1200000
        assert result.projected_annual_tax_cents == 1200000
        assert result.difference_cents == 0
        assert result.status == "on_track"
        assert result.message == "Ennakkovero on aikataulussa. Ei tarvetta muutoksille."

    def test_critical(self):
        installments = [make_installment(1, "2026-06-23", 200000)]
        result = compare_ennakkovero(installments, 500000, 6, AS_OF)

        assert result.projected_annual_tax_cents == 1000000
        assert result.difference_cents == 800000
        assert result.deviation_ratio == Decimal("4.0000")
        assert result.status == "critical"
        assert "400%" in result.message
        assert "OmaVero" in result.message

    def test_underpaying(self):
        result = compare_ennakkovero(monthly_schedule(100000), 600000, 6, AS_OF)

        assert result.projected_annual_tax_cents == 1200000
        assert result.status == "on_track"

        result = compare_ennakkovero(monthly_schedule(100000), 700000, 6, AS_OF)
        assert result.projected_annual_tax_cents == 1400000
        assert result.status == "underpaying"
        assert "17%" in result.message

    def test_overpaying_is_never_critical(self):
        result = compare_ennakkovero(monthly_schedule(100000), 100000, 6, AS_OF)

        assert result.difference_cents == -1000000
        assert result.status == "overpaying"
        assert "alentamista" in result.message

    def test_paid_and_remaining(self):
        result = compare_ennakkovero(monthly_schedule(100000, paid_through_month=2), 200000, 2, AS_OF)

        assert result.total_paid_cents == 200000
        assert result.remaining_cents == 1000000
        assert result.remaining_cents == result.total_scheduled_cents - result.total_paid_cents

    def test_empty_schedule_is_on_track(self):
        result = compare_ennakkovero([], 300000, 3, AS_OF)

        assert result.total_scheduled_cents == 0
        assert result.deviation_ratio == Decimal("0")
        assert result.status == "on_track"
        assert result.next_installment is None

    def test_non_positive_month_uses_factor_of_twelve(self):
        result = compare_ennakkovero([], 1000, 0, AS_OF)
        assert result.projected_annual_tax_cents == 12000

    def test_december_projection_equals_ytd(self):
        result = compare_ennakkovero(monthly_schedule(100000), 1234567, 12, AS_OF)
        assert result.projected_annual_tax_cents == 1234567

    def test_next_installment_is_first_unpaid_after_as_of(self):
        result = compare_ennakkovero(monthly_schedule(100000, paid_through_month=2), 200000, 3, AS_OF)

        assert result.next_installment is not None
        assert result.next_installment.due_date == date(2026, 3, 23)


class TestNextUnpaidInstallment:
    """Tests for next_unpaid_installment."""

    def test_skips_paid_and_past(self):
        installments = [
            make_installment(1, "2026-02-23", 100000),
            make_installment(2, "2026-03-23", 100000, paid=True),
            make_installment(3, "2026-04-23", 100000),
        ]
        assert next_unpaid_installment(installments, AS_OF).id == 3

    def test_due_today_counts(self):
        installments = [make_installment(1, "2026-03-01", 100000)]
        assert next_unpaid_installment(installments, AS_OF).id == 1

    def test_unsorted_input(self):
        installments = [
            make_installment(5, "2026-09-23", 100000),
            make_installment(4, "2026-05-23", 100000),
        ]
        assert next_unpaid_installment(installments, AS_OF).id == 4

    def test_same_due_date_keeps_input_order(self):
        installments = [
            make_installment(9, "2026-05-23", 100000),
            make_installment(2, "2026-05-23", 100000),
        ]
        assert next_unpaid_installment(installments, AS_OF).id == 9

    def test_none_left(self):
        installments = [make_installment(1, "2026-01-23", 100000, paid=True)]
        assert next_unpaid_installment(installments, AS_OF) is None


def make_card(base_rate_pct: str) -> TaxCard:
    return TaxCard(year=2026, card_type="entrepreneur", base_rate_pct=base_rate_pct)


class TestCompareTaxCard:
    """Tests for compare_tax_card."""

    def test_card_higher_than_effective_rate(self):
        result = compare_tax_card(make_card("30"), Decimal("0.2521"), 10000000)

        assert result.status == "higher"
        assert result.card_rate_pct == Decimal("30")
        assert result.calculated_effective_rate_pct == Decimal("25.2")
        assert result.difference_pp == Decimal("4.8")
        assert "korkeampi" in result.message

    def test_card_lower_than_effective_rate(self):
        result = compare_tax_card(make_card("20"), Decimal("0.2521"), 10000000)

        assert result.status == "lower"
        assert result.difference_pp == Decimal("-5.2")
        assert "5.2 prosenttiyksikkoa" in result.message

    @pytest.mark.parametrize("card_pct", ["23.5", "25", "27.2"])
    def test_within_two_points_matches(self, card_pct):
        result = compare_tax_card(make_card(card_pct), Decimal("0.2521"), 10000000)
        assert result.status == "matches"

    @pytest.mark.parametrize("income", [0, -100])
    def test_no_income_no_comparison(self, income):
        assert compare_tax_card(make_card("30"), Decimal("0"), income) is None
