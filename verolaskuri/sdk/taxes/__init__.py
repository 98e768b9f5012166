"""taxes - Personal tax calculations for a sole-trader doctor.

Scope:
- Progressive state tax plus flat municipal and church tax
- YEL pension insurance contributions
- Ennakkovero schedule vs projected tax, verokortti vs effective rate

Constraints:
- Pure calculation - no storage access, receives data, returns results
- Year-specific rules loaded from config/tax_rules/{year}.yaml

Usage:
    from verolaskuri.sdk.taxes import calculate_tax, TaxParams

    result = calculate_tax(TaxParams(earned_income_cents=7000000, municipal_rate="0.185"))
"""

from .schemas import (
    EnnakkoveroComparison,
    TaxCardComparison,
    TaxParams,
    TaxResult,
    TaxRules,
    YelParams,
    YelResult,
)

from .rules import (
    InvalidTaxRulesError,
    TaxRulesError,
    TaxRulesNotFoundError,
    available_years,
    load_tax_rules,
)

from .income_tax import (
    calculate_state_tax,
    calculate_tax,
    municipal_rate_for,
    state_marginal_rate,
)

from .yel import calculate_yel

from .ennakkovero import (
    compare_ennakkovero,
    compare_tax_card,
    next_unpaid_installment,
)

__all__ = [
    # Schemas
    "EnnakkoveroComparison",
    "TaxCardComparison",
    "TaxParams",
    "TaxResult",
    "TaxRules",
    "YelParams",
    "YelResult",
    # Rules
    "InvalidTaxRulesError",
    "TaxRulesError",
    "TaxRulesNotFoundError",
    "available_years",
    "load_tax_rules",
    # Income tax
    "calculate_state_tax",
    "calculate_tax",
    "municipal_rate_for",
    "state_marginal_rate",
    # YEL
    "calculate_yel",
    # Ennakkovero
    "compare_ennakkovero",
    "compare_tax_card",
    "next_unpaid_installment",
]
