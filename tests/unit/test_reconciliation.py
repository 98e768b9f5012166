"""Tests for bank reconciliation matching."""

from datetime import date

import pytest

from verolaskuri.sdk.reconciliation import (
    apply_matches,
    build_reconciliation_report,
    description_overlap,
    find_matches,
    score_pair,
)
from verolaskuri.sdk.schemas import BankRecord, InvalidInputError, LedgerEntry, MatchCandidate


def make_bank(bank_id: int, day: str, amount_cents: int, **fields) -> BankRecord:
    """Create a bank record; negative amount = outflow."""
    return BankRecord(id=bank_id, date=date.fromisoformat(day), amount_cents=amount_cents, **fields)


def make_entry(entry_id: int, day: str, kind: str, amount_cents: int, **fields) -> LedgerEntry:
    """Create a ledger entry."""
    fields.setdefault("category", "clinic_income" if kind == "income" else "muut_kulut")
    return LedgerEntry(
        id=entry_id,
        kind=kind,
        date=date.fromisoformat(day),
        fiscal_year=2026,
        amount_cents=amount_cents,
        **fields,
    )


class TestScorePair:
    """Tests for score_pair."""

    def test_same_date_expense(self):
        match = score_pair(make_bank(1, "2026-03-10", -45000), make_entry(1, "2026-03-10", "expense", 45000))

        assert match.score == 80
        assert match.reasons == ["Exact amount match", "Same date"]

    def test_income_matches_inflow(self):
        match = score_pair(make_bank(1, "2026-03-10", 45000), make_entry(1, "2026-03-11", "income", 45000))

        assert match.score == 75
        assert match.reasons[1] == "Date within 1 day"

    def test_sign_must_match_kind(self):
        assert score_pair(make_bank(1, "2026-03-10", 45000), make_entry(1, "2026-03-10", "expense", 45000)) is None
        assert score_pair(make_bank(1, "2026-03-10", -45000), make_entry(1, "2026-03-10", "income", 45000)) is None

    def test_amount_must_match_exactly(self):
        assert score_pair(make_bank(1, "2026-03-10", -45001), make_entry(1, "2026-03-10", "expense", 45000)) is None

    @pytest.mark.parametrize("day,score,reason", [
        ("2026-03-12", 65, "Date within 2 days"),
        ("2026-03-13", 65, "Date within 3 days"),
        ("2026-03-14", 55, "Date within 4 days"),
        ("2026-03-17", 55, "Date within 7 days"),
    ])
    def test_date_tiers(self, day, score, reason):
        match = score_pair(make_bank(1, day, -1000), make_entry(1, "2026-03-10", "expense", 1000))

        assert match.score == score
        assert match.reasons[1] == reason

    def test_more_than_a_week_apart(self):
        assert score_pair(make_bank(1, "2026-03-18", -1000), make_entry(1, "2026-03-10", "expense", 1000)) is None

    def test_reference_and_description_bonus(self):
        bank = make_bank(1, "2026-03-10", -45000, reference="RF123", description="Elisa puhelinlasku")
        entry = make_entry(1, "2026-03-10", "expense", 45000, bank_ref="RF123", description="elisa lasku")
        match = score_pair(bank, entry)

        # 50 + 30 + 20 + 2 words x 3
        assert match.score == 106
        assert "Reference match" in match.reasons
        assert match.reasons[-1] == "Description overlap: elisa, puhelinlasku"

    def test_description_bonus_is_capped(self):
        bank = make_bank(1, "2026-03-10", -1000, description="a b c d e")
        entry = make_entry(1, "2026-03-10", "expense", 1000, description="a b c d e")

        assert score_pair(bank, entry).score == 90


class TestDescriptionOverlap:

    def test_substring_either_way(self):
        assert description_overlap("TERVEYSTALO OY tilitys", "Terveystalo maaliskuu") == ["terveystalo"]

    def test_missing_description(self):
        assert description_overlap(None, "x") == []
        assert description_overlap("x", "") == []


class TestFindMatches:
    """Tests for find_matches."""

    def test_one_to_one(self):
        bank = [make_bank(1, "2026-03-10", -1000), make_bank(2, "2026-03-10", -1000)]
        entries = [make_entry(10, "2026-03-10", "expense", 1000)]
        matches = find_matches(bank, entries)

        assert len(matches) == 1
        assert (matches[0].bank_record_id, matches[0].ledger_entry_id) == (1, 10)

    def test_greedy_prefers_highest_score(self):
        bank = [make_bank(1, "2026-03-12", -1000), make_bank(2, "2026-03-10", -1000)]
        entries = [make_entry(10, "2026-03-10", "expense", 1000), make_entry(11, "2026-03-12", "expense", 1000)]
        matches = find_matches(bank, entries)

        pairs = {(m.bank_record_id, m.ledger_entry_id) for m in matches}
        assert pairs == {(1, 11), (2, 10)}
        assert all(m.score == 80 for m in matches)

    def test_result_does_not_depend_on_input_order(self):
        bank = [make_bank(i, "2026-03-10", -1000) for i in (3, 1, 2)]
        entries = [make_entry(i, "2026-03-11", "expense", 1000) for i in (12, 10)]

        forward = find_matches(bank, entries)
        backward = find_matches(list(reversed(bank)), list(reversed(entries)))

        assert forward == backward
        assert [(m.bank_record_id, m.ledger_entry_id) for m in forward] == [(1, 10), (2, 12)]

    def test_already_matched_records_are_skipped(self):
        bank = [make_bank(1, "2026-03-10", -1000, matched_entry_id=99)]
        entries = [make_entry(10, "2026-03-10", "expense", 1000)]
        assert find_matches(bank, entries) == []

        bank = [make_bank(1, "2026-03-10", -1000)]
        entries = [make_entry(10, "2026-03-10", "expense", 1000, reconciled=True)]
        assert find_matches(bank, entries) == []

    def test_sorted_by_score(self):
        bank = [make_bank(1, "2026-03-15", -1000), make_bank(2, "2026-03-10", -2000)]
        entries = [make_entry(10, "2026-03-10", "expense", 1000), make_entry(11, "2026-03-10", "expense", 2000)]
        scores = [m.score for m in find_matches(bank, entries)]

        assert scores == sorted(scores, reverse=True)

    def test_empty_inputs(self):
        assert find_matches([], []) == []

    def test_repeated_runs_are_identical(self):
        bank = [make_bank(i, "2026-03-10", -1000 * (i % 3 + 1)) for i in range(1, 8)]
        entries = [make_entry(i, "2026-03-11", "expense", 1000 * (i % 2 + 1)) for i in range(10, 16)]

        first = [m.model_dump_json() for m in find_matches(bank, entries)]
        second = [m.model_dump_json() for m in find_matches(bank, entries)]

        assert first == second
        assert len({m.bank_record_id for m in find_matches(bank, entries)}) == len(first)
        assert len({m.ledger_entry_id for m in find_matches(bank, entries)}) == len(first)


class TestReconciliationReport:

    def test_counts(self):
        bank = [
            make_bank(1, "2026-03-10", -1000),
            make_bank(2, "2026-03-10", -5555),
            make_bank(3, "2026-03-10", -1, matched_entry_id=50),
        ]
        entries = [
            make_entry(10, "2026-03-10", "expense", 1000),
            make_entry(11, "2026-03-10", "expense", 7777),
            make_entry(50, "2026-03-10", "expense", 1, reconciled=True),
        ]
        report = build_reconciliation_report(bank, entries)

        assert len(report.suggested_matches) == 1
        assert report.unmatched_bank_records == 1
        assert report.unreconciled_entries == 1


class TestApplyMatches:
    """Tests for apply_matches."""

    def test_updates_copies(self):
        bank = [make_bank(1, "2026-03-10", -1000), make_bank(2, "2026-03-10", -2000)]
        entries = [
            make_entry(10, "2026-03-10", "expense", 1000),
            make_entry(11, "2026-03-10", "expense", 2000, voucher_kind="receipt"),
        ]
        matches = find_matches(bank, entries)
        applied = apply_matches(matches, bank, entries)

        assert [b.matched_entry_id for b in applied.bank_records] == [10, 11]
        assert all(e.reconciled for e in applied.ledger_entries)
        assert applied.ledger_entries[0].voucher_kind == "bank_statement"
        # Existing proof kind is kept
        assert applied.ledger_entries[1].voucher_kind == "receipt"
        # Inputs are untouched
        assert bank[0].matched_entry_id is None
        assert not entries[0].reconciled

    def test_unmatched_records_pass_through(self):
        bank = [make_bank(1, "2026-03-10", -1000)]
        entries = [make_entry(10, "2026-03-10", "expense", 9999)]
        applied = apply_matches([], bank, entries)

        assert applied.bank_records == bank
        assert applied.ledger_entries == entries

    def test_unknown_record_rejects_all(self):
        bank = [make_bank(1, "2026-03-10", -1000)]
        entries = [make_entry(10, "2026-03-10", "expense", 1000)]
        matches = [
            MatchCandidate(bank_record_id=1, ledger_entry_id=10, score=80),
            MatchCandidate(bank_record_id=2, ledger_entry_id=11, score=80),
        ]

        with pytest.raises(InvalidInputError) as exc_info:
            apply_matches(matches, bank, entries)

        assert "unknown bank record 2" in exc_info.value.problems
        assert "unknown ledger entry 11" in exc_info.value.problems
