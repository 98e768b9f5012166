"""Verolaskuri SDK - Tax calculation and bookkeeping reconciliation engine."""

from .config import (
    CURRENT_FISCAL_YEAR,
    get_tax_rules_dir,
)

from .schemas import (
    AppliedMatches,
    BankRecord,
    ComplianceReport,
    Form5Report,
    InvalidInputError,
    LedgerEntry,
    MatchCandidate,
    PrepaymentInstallment,
    ReconciliationReport,
    TaxCard,
)

from .categories import (
    CATEGORIES,
    Category,
    categories_by_kind,
    get_category,
    requires_proof,
)

from .taxes import (
    EnnakkoveroComparison,
    TaxCardComparison,
    TaxParams,
    TaxResult,
    TaxRules,
    InvalidTaxRulesError,
    TaxRulesError,
    TaxRulesNotFoundError,
    YelParams,
    YelResult,
    available_years,
    calculate_tax,
    calculate_yel,
    compare_ennakkovero,
    compare_tax_card,
    load_tax_rules,
)

from .form5 import generate_form5

from .reconciliation import (
    apply_matches,
    build_reconciliation_report,
    find_matches,
)

from .compliance import check_compliance

from .estimate import (
    PrepaymentPosition,
    TaxEstimate,
    estimate_prepayment_position,
    estimate_tax,
)

from . import records

__all__ = [
    # Config
    "CURRENT_FISCAL_YEAR",
    "get_tax_rules_dir",
    # Records and reports
    "AppliedMatches",
    "BankRecord",
    "ComplianceReport",
    "Form5Report",
    "InvalidInputError",
    "LedgerEntry",
    "MatchCandidate",
    "PrepaymentInstallment",
    "ReconciliationReport",
    "TaxCard",
    # Categories
    "CATEGORIES",
    "Category",
    "categories_by_kind",
    "get_category",
    "requires_proof",
    # Taxes
    "EnnakkoveroComparison",
    "TaxCardComparison",
    "TaxParams",
    "TaxResult",
    "TaxRules",
    "InvalidTaxRulesError",
    "TaxRulesError",
    "TaxRulesNotFoundError",
    "YelParams",
    "YelResult",
    "available_years",
    "calculate_tax",
    "calculate_yel",
    "compare_ennakkovero",
    "compare_tax_card",
    "load_tax_rules",
    # Form 5
    "generate_form5",
    # Reconciliation
    "apply_matches",
    "build_reconciliation_report",
    "find_matches",
    # Compliance
    "check_compliance",
    # Estimates
    "PrepaymentPosition",
    "TaxEstimate",
    "estimate_prepayment_position",
    "estimate_tax",
    # Records module
    "records",
]
