"""Bank reconciliation matching.

Matches unmatched bank records to unreconciled ledger entries:

1. Exact amount, with outflows pairing only with expenses and inflows
   only with income (required)
2. Date proximity, at most 7 days apart (required, scored)
3. Bank reference equal to the entry's bank_ref (bonus)
4. Description keyword overlap (bonus)

Candidates are resolved greedily: highest score first, each bank record
and each entry used at most once. This is not a maximum-weight matching;
every accepted match carries the reasons that explain its score.
"""

import logging
from typing import Dict, List, Optional

from .schemas import (
    AppliedMatches,
    BankRecord,
    InvalidInputError,
    LedgerEntry,
    MatchCandidate,
    ReconciliationReport,
)

logger = logging.getLogger(__name__)

AMOUNT_MATCH_SCORE = 50
MIN_MATCH_SCORE = 50
MAX_DATE_DISTANCE_DAYS = 7
REFERENCE_MATCH_SCORE = 20
DESCRIPTION_WORD_SCORE = 3
MAX_DESCRIPTION_SCORE = 10


def _date_score(days: int) -> Optional[tuple[int, str]]:
    """Score and reason for a date distance, None if too far apart."""
    if days == 0:
        return 30, "Same date"
    if days <= 1:
        return 25, "Date within 1 day"
    if days <= 3:
        return 15, f"Date within {days} days"
    if days <= MAX_DATE_DISTANCE_DAYS:
        return 5, f"Date within {days} days"
    return None


def description_overlap(bank_description: Optional[str], entry_description: Optional[str]) -> List[str]:
    """Bank description words contained in, or containing, an entry word.

    Case-insensitive, whitespace tokenized. Returns the overlapping bank
    words in their original order.
    """
    if not bank_description or not entry_description:
        return []

    bank_words = bank_description.lower().split()
    entry_words = entry_description.lower().split()
    return [w for w in bank_words if any(ew in w or w in ew for ew in entry_words)]


def score_pair(bank: BankRecord, entry: LedgerEntry) -> Optional[MatchCandidate]:
    """Score one bank record against one ledger entry.

    Returns None when the pair fails the amount/sign gate or the dates
    are more than a week apart.
    """
    if abs(bank.amount_cents) != entry.amount_cents:
        return None

    # Negative bank amount = expense, non-negative = income
    expected_kind = "expense" if bank.amount_cents < 0 else "income"
    if entry.kind != expected_kind:
        return None

    score = AMOUNT_MATCH_SCORE
    reasons = ["Exact amount match"]

    date_score = _date_score(abs((bank.date - entry.date).days))
    if date_score is None:
        return None
    score += date_score[0]
    reasons.append(date_score[1])

    if bank.reference and entry.bank_ref and bank.reference == entry.bank_ref:
        score += REFERENCE_MATCH_SCORE
        reasons.append("Reference match")

    overlap = description_overlap(bank.description, entry.description)
    if overlap:
        score += min(MAX_DESCRIPTION_SCORE, len(overlap) * DESCRIPTION_WORD_SCORE)
        reasons.append(f"Description overlap: {', '.join(overlap)}")

    return MatchCandidate(
        bank_record_id=bank.id,
        ledger_entry_id=entry.id,
        score=score,
        reasons=reasons,
    )


def find_matches(bank_records: List[BankRecord], ledger_entries: List[LedgerEntry]) -> List[MatchCandidate]:
    """Find one-to-one matches between bank records and ledger entries.

    Only bank records without matched_entry_id and entries not yet
    reconciled take part. Equal scores are resolved by lowest bank record
    id, then lowest ledger entry id, so the result does not depend on
    input order.

    Returns:
        Accepted matches, highest score first
    """
    unmatched_bank = [b for b in bank_records if b.matched_entry_id is None]
    unreconciled = [e for e in ledger_entries if not e.reconciled]

    candidates = []
    for bank in unmatched_bank:
        for entry in unreconciled:
            candidate = score_pair(bank, entry)
            if candidate is not None and candidate.score >= MIN_MATCH_SCORE:
                candidates.append(candidate)

    candidates.sort(key=lambda c: (-c.score, c.bank_record_id, c.ledger_entry_id))

    used_bank = set()
    used_entries = set()
    matches = []
    for candidate in candidates:
        if candidate.bank_record_id in used_bank or candidate.ledger_entry_id in used_entries:
            continue
        matches.append(candidate)
        used_bank.add(candidate.bank_record_id)
        used_entries.add(candidate.ledger_entry_id)

    logger.debug(
        f"reconcile: {len(unmatched_bank)} bank x {len(unreconciled)} entries, "
        f"{len(candidates)} candidates, {len(matches)} matches"
    )
    return matches


def build_reconciliation_report(
    bank_records: List[BankRecord],
    ledger_entries: List[LedgerEntry],
) -> ReconciliationReport:
    """Suggested matches plus counts of what would remain unmatched."""
    matches = find_matches(bank_records, ledger_entries)
    matched_bank = {m.bank_record_id for m in matches}
    matched_entries = {m.ledger_entry_id for m in matches}

    return ReconciliationReport(
        suggested_matches=matches,
        unmatched_bank_records=sum(
            1 for b in bank_records if b.matched_entry_id is None and b.id not in matched_bank
        ),
        unreconciled_entries=sum(
            1 for e in ledger_entries if not e.reconciled and e.id not in matched_entries
        ),
    )


def apply_matches(
    matches: List[MatchCandidate],
    bank_records: List[BankRecord],
    ledger_entries: List[LedgerEntry],
) -> AppliedMatches:
    """Return copies of the records with the matches applied.

    Each matched bank record gets matched_entry_id, each matched entry is
    marked reconciled and, if it had no proof yet, gets bank_statement as
    its voucher kind. An existing voucher kind is never overwritten.

    All matches are checked before anything is updated, so the caller can
    write the result back as a single unit.

    Raises:
        InvalidInputError: If a match references an unknown record
    """
    bank_by_id: Dict[int, BankRecord] = {b.id: b for b in bank_records}
    entry_by_id: Dict[int, LedgerEntry] = {e.id: e for e in ledger_entries}

    problems = []
    for m in matches:
        if m.bank_record_id not in bank_by_id:
            problems.append(f"unknown bank record {m.bank_record_id}")
        if m.ledger_entry_id not in entry_by_id:
            problems.append(f"unknown ledger entry {m.ledger_entry_id}")
    if problems:
        raise InvalidInputError("Cannot apply matches", problems)

    bank_updates = {m.bank_record_id: m.ledger_entry_id for m in matches}
    matched_entry_ids = set(bank_updates.values())

    updated_bank = [
        b.model_copy(update={"matched_entry_id": bank_updates[b.id]}) if b.id in bank_updates else b
        for b in bank_records
    ]
    updated_entries = []
    for entry in ledger_entries:
        if entry.id in matched_entry_ids:
            update = {"reconciled": True}
            if entry.voucher_kind == "none":
                update["voucher_kind"] = "bank_statement"
            entry = entry.model_copy(update=update)
        updated_entries.append(entry)

    return AppliedMatches(
        matches=matches,
        bank_records=updated_bank,
        ledger_entries=updated_entries,
    )
