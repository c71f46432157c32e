# planright/schema.py
# Input and result records for the calculators and the projection engine.
from dataclasses import dataclass, field
from typing import Optional, Dict

from .taxes import marginal_rate
from .tax_tables import NIIT_THRESHOLD, normalize_status


# ===============================
# Shared rate assumptions
# ===============================
@dataclass
class RateAssumptions:
    """
    Flat planning rates injected into the quick calculators.
    Defaults match a middle-income household (22% / 24% brackets, 15% LTCG).
    """
    standard_rate: float = 0.22
    itemized_rate: float = 0.24
    rmd_age_rate: float = 0.24
    ltcg_rate: float = 0.15
    niit_rate: float = 0.038
    niit_income_threshold: float = 200_000
    cash_gift_rate: float = 0.22

    @classmethod
    def for_income(cls, ordinary_income: float, filing_status: str = "single") -> "RateAssumptions":
        """Use the bracket table instead of the flat 22/24 defaults."""
        rate = marginal_rate(ordinary_income, filing_status)
        niit_threshold = NIIT_THRESHOLD[normalize_status(filing_status)]
        return cls(
            standard_rate=rate,
            itemized_rate=rate,
            rmd_age_rate=rate,
            niit_income_threshold=niit_threshold,
            cash_gift_rate=rate,
        )


# ===============================
# Life insurance (DIME)
# ===============================
@dataclass
class LifeInsuranceInputs:
    annual_income: float = 100_000
    income_years: int = 10
    credit_card_debt: float = 0.0
    car_loans: float = 0.0
    student_loans: float = 0.0
    other_debts: float = 0.0
    mortgage_balance: float = 0.0
    num_children: int = 0
    youngest_child_age: int = 0
    college_per_child: float = 150_000
    current_coverage: float = 200_000
    age: float = 35
    health: str = "good"
    smoker: bool = False
    spouse_income: float = 0.0
    spouse_current_coverage: float = 0.0


@dataclass
class DimeBreakdown:
    debt: float
    income: float
    mortgage: float
    education: float
    total: float


@dataclass
class CoverageGap:
    needed: float
    current: float
    gap: float
    is_overinsured: bool


@dataclass
class PremiumEstimate:
    coverage: float
    age_bracket: int
    term_monthly: int
    term_annual: int
    whole_life_monthly: int
    whole_life_annual: int


# ===============================
# Charitable giving
# ===============================
@dataclass
class CharitableInputs:
    age: float = 72
    filing_status: str = "single"
    ira_balance: float = 500_000
    annual_giving: float = 10_000
    stock_value: float = 50_000
    stock_cost_basis: float = 20_000
    ordinary_income: float = 80_000
    state_rate: float = 0.05
    bunching_years: int = 3
    use_qcd: bool = True
    use_daf: bool = False
    use_stock: bool = False


@dataclass
class GivingBucket:
    name: str
    capacity: float
    amount: float
    tax_savings: float


# ===============================
# Contribution order
# ===============================
@dataclass
class ContributionInputs:
    age: int = 35
    income: float = 100_000
    is_married: bool = False
    pre_tax_contrib: float = 0.0
    roth_contrib: float = 0.0
    taxable_contrib: float = 0.0
    employer_match_contrib: float = 0.0
    has_401k: bool = True
    has_roth_401k: bool = True
    has_after_tax_401k: bool = False
    has_in_plan_conversion: bool = False
    has_hdhp: bool = False
    match_percent: float = 100
    match_limit: float = 6


@dataclass
class PriorityItem:
    id: str
    name: str
    priority: int
    current: float
    limit: float
    left_on_table: float
    available: bool = True
    unavailable_reason: Optional[str] = None
    description: str = ""


@dataclass
class Insight:
    kind: str            # "warning" | "opportunity"
    title: str
    description: str
    impact: float
    timeframe_years: int


# ===============================
# Social Security optimizer
# ===============================
@dataclass
class SSOptimizerInputs:
    current_age: int = 60
    gender: str = "male"
    average_career_earnings: float = 80_000
    health: str = "good"
    life_expectancy: Optional[float] = None
    is_married: bool = False
    spouse_age: Optional[int] = None
    spouse_gender: Optional[str] = None
    spouse_average_career_earnings: Optional[float] = None
    portfolio_value: float = 500_000
    annual_spending: float = 50_000
    expected_return: float = 0.05
    filing_status: str = "single"
    other_retirement_income: float = 0.0
    state_income_tax_rate: float = 0.0


# ===============================
# State comparison
# ===============================
@dataclass
class RetirementIncomeProfile:
    retirement_income: float = 60_000
    ss_income: float = 30_000
    pension_income: float = 0.0
    investment_income: float = 20_000
    home_value: float = 400_000
    annual_spending: float = 80_000
    years_in_retirement: int = 20


@dataclass
class TaxBurden:
    state: str
    income_tax: float
    property_tax: float
    sales_tax: float
    total_tax: float


# ===============================
# Estate checklist
# ===============================
@dataclass
class EstateChecklist:
    has_will: bool = False
    has_trust: bool = False
    has_poa: bool = False
    has_healthcare_directive: bool = False
    beneficiaries_reviewed: bool = False
    asset_titling_reviewed: bool = False
    last_review_date: Optional[str] = None


# ===============================
# Projection engine
# ===============================
@dataclass
class Profile:
    filing_status: str
    age: int
    spouse_age: Optional[int]
    retirement_age: int
    state: str
    rmd_start_age: int = 73


@dataclass
class Inputs:
    # {"taxable": .., "pre_tax": .., "roth": ..}
    balances: Dict[str, float]
    # {"primary": {"taxable","pre_tax","roth","match"}, "spouse": {...}}
    contributions: Dict[str, Dict[str, float]]
    withdrawal_rate_pct: float
    # {"include", "primary_income", "primary_age", "spouse_income", "spouse_age"}
    social_security: Dict = field(default_factory=dict)
    # {"include_medicare", "medicare_premium", "include_ltc", "ltc_annual_cost", ...}
    healthcare: Dict = field(default_factory=dict)
    # {"enabled": bool, "target_bracket": 0.24}
    conversions: Dict = field(default_factory=dict)


@dataclass
class Assumptions:
    rules_version: str = "2026.v1"
    return_pct: float = 7.0
    inflation_pct: float = 2.6
    state_rate_pct: float = 0.0
    dividend_yield_pct: float = 2.0
    increase_contributions: bool = False
    contribution_growth_pct: float = 0.0
    return_mode: str = "fixed"          # "fixed" | "historical" | "bootstrap"
    series: str = "nominal"             # "nominal" | "real"
    historical_start_year: Optional[int] = None
    medical_inflation_pct: float = 5.0
    start_year: int = 2026
