"""Pydantic schemas for verolaskuri records and reports.

Records (ledger entries, bank records, prepayment installments, tax
cards) are supplied by the caller's storage layer and passed by value.
They are frozen: the engine only reads them and returns derived reports.

All schemas use extra='forbid' to reject unknown fields, so typos in
input files cause clear errors rather than silent ignoring.
"""

import datetime
from decimal import Decimal
from typing import Annotated, Dict, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from .money import as_decimal

DecimalValue = Annotated[Decimal, BeforeValidator(as_decimal)]

EntryKind = Literal["income", "expense"]

VoucherKind = Literal[
    "receipt",
    "bank_statement",
    "settlement",
    "e_invoice",
    "manual",
    "none",
]

VOUCHER_KINDS = ("receipt", "bank_statement", "settlement", "e_invoice", "manual", "none")


class InvalidInputError(ValueError):
    """Raised when input records violate their expected shape.

    Covers malformed dates or amounts, unknown category ids and categories
    used with the wrong entry kind. Callers translate it into a
    user-facing validation failure.
    """

    def __init__(self, message: str, problems: Optional[List[str]] = None):
        super().__init__(message)
        self.problems = problems or []

    def __str__(self) -> str:
        if not self.problems:
            return super().__str__()
        return super().__str__() + "\n" + "\n".join(f"  - {p}" for p in self.problems)


# =============================================================================
# Records
# =============================================================================


class LedgerEntry(BaseModel):
    """A manually recorded bookkeeping entry (income or expense)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: int
    kind: EntryKind
    date: datetime.date
    fiscal_year: int
    amount_cents: int = Field(..., gt=0, description="Always positive; kind carries the direction")
    category: str = Field(..., description="Key into the category table")
    description: Optional[str] = None
    voucher_kind: VoucherKind = Field(default="none", description="Supporting proof (tosite)")
    depreciation_years: Optional[int] = Field(default=None, ge=0)
    depreciation_remaining_cents: Optional[int] = Field(default=None, ge=0)
    reconciled: bool = False
    bank_ref: Optional[str] = Field(default=None, description="Bank reference number, if known")


class BankRecord(BaseModel):
    """A bank account transaction from a statement or bank feed."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: int
    date: datetime.date
    amount_cents: int = Field(..., description="Negative = outflow, positive = inflow")
    description: Optional[str] = None
    counterpart: Optional[str] = None
    reference: Optional[str] = None
    matched_entry_id: Optional[int] = None


class PrepaymentInstallment(BaseModel):
    """One ennakkovero installment assigned by the tax authority."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: int
    year: int
    due_date: datetime.date
    amount_cents: int = Field(..., gt=0)
    paid: bool = False


class TaxCard(BaseModel):
    """Verokortti data as entered by the user."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int = Field(..., ge=2020, le=2100)
    card_type: Literal["main", "secondary", "entrepreneur"]
    base_rate_pct: DecimalValue = Field(..., ge=0, le=100)
    additional_rate_pct: Optional[DecimalValue] = Field(default=None, ge=0, le=100)
    income_limit_cents: Optional[int] = Field(default=None, ge=0)
    in_prepayment_register: bool = Field(default=True, description="Ennakkoperintarekisteri")
    notes: Optional[str] = Field(default=None, max_length=500)


# =============================================================================
# Form 5
# =============================================================================


class DepreciationDetail(BaseModel):
    """Depreciation computed for one equipment entry."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    category: str
    original_amount_cents: int
    depreciation_years: int
    remaining_cents: int
    annual_depreciation_cents: int


class Form5Report(BaseModel):
    """Elinkeinotoiminnan veroilmoitus (Form 5) line items, in cents."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    revenue_cents: int = Field(..., description="Liikevaihto")
    materials_and_services_cents: int = Field(default=0, description="Materiaalit ja palvelut")
    personnel_costs_cents: int = Field(default=0, description="Henkilostokulut")
    depreciation_cents: int = Field(..., description="Poistot")
    other_expenses_cents: int = Field(..., description="Muut liiketoiminnan kulut")
    operating_profit_cents: int = Field(..., description="Liikevoitto/-tappio")
    pension_premiums_cents: int = Field(..., description="YEL premiums, deducted in personal taxation")
    business_result_cents: int = Field(..., description="Elinkeinotoiminnan tulos")
    expense_breakdown: Dict[str, int] = Field(default_factory=dict)
    depreciation_details: List[DepreciationDetail] = Field(default_factory=list)


# =============================================================================
# Bank reconciliation
# =============================================================================


class MatchCandidate(BaseModel):
    """A scored pairing of a bank record with a ledger entry."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    bank_record_id: int
    ledger_entry_id: int
    score: int
    reasons: List[str] = Field(default_factory=list, description="Audit trail, in scoring order")


class ReconciliationReport(BaseModel):
    """Suggested matches plus what remains unmatched afterwards."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    suggested_matches: List[MatchCandidate]
    unmatched_bank_records: int
    unreconciled_entries: int


class AppliedMatches(BaseModel):
    """Records updated by apply_matches, to be written back together."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    matches: List[MatchCandidate]
    bank_records: List[BankRecord]
    ledger_entries: List[LedgerEntry]


# =============================================================================
# Compliance
# =============================================================================


class DepreciationWarning(BaseModel):
    """Depreciable purchase above the threshold."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: int
    category: str
    amount_cents: int
    description: Optional[str] = None


class ProofStatus(BaseModel):
    """Tosite coverage of a fiscal year's entries."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    total_entries: int
    with_proof: int
    proof_not_required: int
    missing_proof: int
    compliance_rate: int = Field(..., description="Whole percent of entries in order")
    by_voucher_kind: Dict[str, int]
    missing: List[LedgerEntry]


class PrepaymentRegisterStatus(BaseModel):
    """Ennakkoperintarekisteri registration from the latest tax card."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    registered: bool
    year: Optional[int] = None
    warning: Optional[str] = None


class ComplianceReport(BaseModel):
    """Bookkeeping compliance summary for one fiscal year."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    fiscal_year: int
    proof_status: ProofStatus
    depreciation_warnings: List[DepreciationWarning]
    prepayment_register: PrepaymentRegisterStatus
