# planright/life_insurance.py
# DIME (Debt + Income + Mortgage + Education) coverage needs, gap and premium estimate.
import logging
from typing import Dict, List, Optional

from .formatting import clamp, num, round_half_up
from .schema import LifeInsuranceInputs, DimeBreakdown, CoverageGap, PremiumEstimate

logger = logging.getLogger(__name__)

DEFAULT_INCOME_YEARS = 10
DEFAULT_COLLEGE_COST = 150_000
SMOKER_MULTIPLIER = 2.5
WHOLE_LIFE_MULTIPLIER = 12
PREMIUM_BASE_COVERAGE = 500_000
MINIMAL_DEBT = 10_000

# Monthly cost of $500k of 20-year term by health tier and issue age.
TERM_PREMIUM_TABLE: Dict[str, Dict[int, float]] = {
    "excellent": {25: 18, 30: 20, 35: 22, 40: 28, 45: 40, 50: 60, 55: 95, 60: 150},
    "good":      {25: 22, 30: 25, 35: 28, 40: 38, 45: 55, 50: 85, 55: 130, 60: 210},
    "average":   {25: 28, 30: 32, 35: 38, 40: 52, 45: 78, 50: 120, 55: 185, 60: 300},
    "poor":      {25: 40, 30: 48, 35: 58, 40: 80, 45: 120, 50: 185, 55: 290, 60: 480},
}


def dime_breakdown(inputs: LifeInsuranceInputs) -> DimeBreakdown:
    """
    DIME needs:
    - Debt: credit cards + car + student + other
    - Income: annual income x years to replace
    - Mortgage: remaining balance
    - Education: children x college cost per child
    total is the exact sum of the four parts.
    """
    debt = (clamp(inputs.credit_card_debt) + clamp(inputs.car_loans)
            + clamp(inputs.student_loans) + clamp(inputs.other_debts))
    years = clamp(inputs.income_years, default=DEFAULT_INCOME_YEARS)
    income = clamp(inputs.annual_income) * years
    mortgage = clamp(inputs.mortgage_balance)
    education = clamp(inputs.num_children) * clamp(inputs.college_per_child, default=DEFAULT_COLLEGE_COST)
    return DimeBreakdown(
        debt=debt,
        income=income,
        mortgage=mortgage,
        education=education,
        total=debt + income + mortgage + education,
    )


def coverage_gap(needed: float, current: float) -> CoverageGap:
    needed = num(needed)
    current = num(current)
    gap = needed - current
    return CoverageGap(needed=needed, current=current, gap=gap, is_overinsured=gap < 0)


def nearest_age_bracket(age: float, brackets: List[int]) -> int:
    """
    Linear scan for the closest bracket. Strict '<' keeps the first match on ties,
    so an age halfway between two brackets maps to the lower one.
    """
    best = brackets[0]
    for b in brackets:
        if abs(b - age) < abs(best - age):
            best = b
    return best


def estimate_premium(coverage: float, age: float, health: str = "good", smoker: bool = False) -> PremiumEstimate:
    """
    Scale the $500k table price to the requested coverage.
    - Smokers pay 2.5x
    - Whole life is priced at 12x term
    Unknown health tiers fall back to 'good'.
    """
    coverage = clamp(coverage)
    table = TERM_PREMIUM_TABLE.get((health or "").lower())
    if table is None:
        logger.debug("Unknown health tier %r; using 'good'", health)
        table = TERM_PREMIUM_TABLE["good"]

    bracket = nearest_age_bracket(num(age, 35), list(table.keys()))
    term = table[bracket] * (coverage / PREMIUM_BASE_COVERAGE)
    if smoker:
        term *= SMOKER_MULTIPLIER
    whole = term * WHOLE_LIFE_MULTIPLIER

    return PremiumEstimate(
        coverage=coverage,
        age_bracket=bracket,
        term_monthly=round_half_up(term),
        term_annual=round_half_up(term * 12),
        whole_life_monthly=round_half_up(whole),
        whole_life_annual=round_half_up(whole * 12),
    )


def spouse_dime(inputs: LifeInsuranceInputs) -> Optional[Dict[str, object]]:
    """
    Needs if the spouse died: their income for the same years plus half of
    the mortgage and education (the survivor keeps earning). Debts are
    already counted on the primary policy.
    Returns None when the spouse has no income.
    """
    spouse_income = clamp(inputs.spouse_income)
    if spouse_income <= 0:
        return None
    primary = dime_breakdown(inputs)
    years = clamp(inputs.income_years, default=DEFAULT_INCOME_YEARS)
    income = spouse_income * years
    mortgage = primary.mortgage * 0.5
    education = primary.education * 0.5
    breakdown = DimeBreakdown(
        debt=0.0,
        income=income,
        mortgage=mortgage,
        education=education,
        total=income + mortgage + education,
    )
    return {
        "breakdown": breakdown,
        "gap": coverage_gap(breakdown.total, clamp(inputs.spouse_current_coverage)),
    }


def drop_coverage_reasons(inputs: LifeInsuranceInputs) -> List[str]:
    reasons = []
    if clamp(inputs.mortgage_balance) <= 0:
        reasons.append("Mortgage is paid off")
    if int(clamp(inputs.num_children)) == 0 or clamp(inputs.youngest_child_age) >= 18:
        reasons.append("Children are grown (18+)")
    if clamp(inputs.annual_income) <= 0:
        reasons.append("No earned income to replace")
    if dime_breakdown(inputs).debt < MINIMAL_DEBT:
        reasons.append("Minimal debts to cover")
    return reasons


def analyze_life_insurance(inputs: LifeInsuranceInputs) -> Dict[str, object]:
    """
    One-stop result: breakdown, gap, premium for the uncovered amount,
    optional spouse analysis and reasons coverage may no longer be needed.
    """
    breakdown = dime_breakdown(inputs)
    gap = coverage_gap(breakdown.total, clamp(inputs.current_coverage))
    premium = estimate_premium(max(0.0, gap.gap), inputs.age, inputs.health, inputs.smoker)
    return {
        "breakdown": breakdown,
        "gap": gap,
        "premium": premium,
        "spouse": spouse_dime(inputs),
        "drop_reasons": drop_coverage_reasons(inputs),
    }
