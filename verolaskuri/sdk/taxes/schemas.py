"""Pydantic schemas for tax rules and tax calculation results.

TaxRules validates the config/tax_rules/*.yaml files and provides typed
access to the statutory tables of one fiscal year. Rates are Decimal so
bracket math never passes through binary floating point.
"""

from decimal import Decimal
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..config import CURRENT_FISCAL_YEAR
from ..schemas import DecimalValue, PrepaymentInstallment


# =============================================================================
# Tax rules (one YAML file per fiscal year)
# =============================================================================


class StateTaxBracket(BaseModel):
    """Single state income tax band."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    lower: DecimalValue = Field(..., ge=0, description="Lower bound in EUR")
    upper: Optional[DecimalValue] = Field(default=None, description="Upper bound in EUR (None for top band)")
    rate: DecimalValue = Field(..., ge=0, le=1, description="Marginal rate as decimal")
    base: DecimalValue = Field(..., ge=0, description="Cumulative tax at the lower bound in EUR")


class YelRules(BaseModel):
    """YEL pension insurance parameters."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    base_rate: DecimalValue = Field(..., ge=0, le=1)
    new_entrepreneur_discount: DecimalValue = Field(..., ge=0, le=1)
    min_income_cents: int = Field(..., ge=0)
    max_income_cents: int = Field(..., gt=0)
    pension_accrual_rate: DecimalValue = Field(..., ge=0, le=1)


class DepreciationRules(BaseModel):
    """Reducing balance depreciation parameters."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    rate: DecimalValue = Field(..., gt=0, le=1, description="Share of remaining balance per year")
    threshold_cents: int = Field(..., ge=0, description="Assets above this must be depreciated")
    default_years: int = Field(..., gt=0, description="Useful life assumed when none is booked")


class TaxRules(BaseModel):
    """Complete statutory tables for a fiscal year."""
    model_config = ConfigDict(extra="ignore", frozen=True)  # Allow unknown fields for forward compat

    fiscal_year: int = Field(..., description="Year these rules were loaded for")
    state_tax_brackets: List[StateTaxBracket] = Field(..., min_length=1)
    entrepreneur_deduction_rate: DecimalValue = Field(..., ge=0, le=1)
    default_municipality: str
    municipal_rates: Dict[str, DecimalValue]
    default_church_rate: DecimalValue = Field(..., ge=0, le=1)
    yel: YelRules
    depreciation: DepreciationRules

    @field_validator("state_tax_brackets")
    @classmethod
    def sort_brackets(cls, v: List[StateTaxBracket]) -> List[StateTaxBracket]:
        """Keep bands ordered by lower bound; the first band must start at 0."""
        ordered = sorted(v, key=lambda b: b.lower)
        if ordered[0].lower != 0:
            raise ValueError("lowest state tax bracket must start at 0")
        return ordered

    @property
    def default_municipal_rate(self) -> Decimal:
        return self.municipal_rates.get(self.default_municipality, Decimal("0"))


# =============================================================================
# Income tax
# =============================================================================


class TaxParams(BaseModel):
    """Inputs to calculate_tax."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    earned_income_cents: int = Field(..., description="Earned income in cents (negative = loss)")
    municipal_rate: DecimalValue = Field(..., ge=0, le=1, description="e.g. 0.185 for Helsinki")
    church_rate: DecimalValue = Field(default=Decimal("0"), ge=0, le=1, description="0 if not a member")
    apply_entrepreneur_deduction: bool = Field(default=True, description="Apply 5% yrittajavahennys")
    yel_contribution_cents: int = Field(default=0, ge=0, description="Deductible YEL contribution")
    fiscal_year: int = CURRENT_FISCAL_YEAR


class TaxResult(BaseModel):
    """Progressive income tax breakdown. Cents except the two rates."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    gross_income_cents: int
    deductions_cents: int
    taxable_income_cents: int
    entrepreneur_deduction_cents: int
    state_tax_cents: int
    municipal_tax_cents: int
    church_tax_cents: int
    total_tax_cents: int
    effective_rate: Decimal = Field(..., description="Total tax / gross income, 4 decimals")
    marginal_rate: Decimal = Field(..., description="Rate on the next euro of income, 4 decimals")


# =============================================================================
# YEL
# =============================================================================


class YelParams(BaseModel):
    """Inputs to calculate_yel."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    yel_income_cents: int = Field(..., description="Confirmed YEL work income in cents")
    is_new_entrepreneur: bool = Field(default=False, description="First 48 months discount")
    fiscal_year: int = CURRENT_FISCAL_YEAR


class YelResult(BaseModel):
    """YEL contribution breakdown."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    yel_income_cents: int = Field(..., description="Income actually used after clamping")
    base_rate: Decimal
    discount_rate: Decimal
    effective_rate: Decimal
    annual_contribution_cents: int
    monthly_contribution_cents: int
    annual_pension_accrual_cents: int = Field(..., description="Informational estimate only")


# =============================================================================
# Ennakkovero and verokortti
# =============================================================================

PrepaymentStatus = Literal["on_track", "underpaying", "overpaying", "critical"]


class EnnakkoveroComparison(BaseModel):
    """Prepayment schedule vs projected annual tax."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    total_scheduled_cents: int
    total_paid_cents: int
    remaining_cents: int
    projected_annual_tax_cents: int
    difference_cents: int = Field(..., description="Positive = will owe back-tax")
    deviation_ratio: Decimal
    status: PrepaymentStatus
    message: str
    next_installment: Optional[PrepaymentInstallment] = None


class TaxCardComparison(BaseModel):
    """Verokortti withholding rate vs calculated effective rate."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    card_rate_pct: Decimal
    calculated_effective_rate_pct: Decimal
    difference_pp: Decimal = Field(..., description="Card rate minus effective rate, percentage points")
    status: Literal["higher", "lower", "matches"]
    message: str
