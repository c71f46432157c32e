# planright/ss_optimizer.py
# When to claim: benefits by claiming age, break-evens, mortality-weighted value, spousal plans and taxes.
import logging
from typing import Dict, List, Optional

import pandas as pd

from .formatting import clamp, money, num, round_half_up
from .schema import SSOptimizerInputs
from .social_security import CLAIMING_AGES, MIN_CLAIM_AGE, MAX_CLAIM_AGE, adjust_for_claim_age, calc_pia
from .tax_tables import FRA
from .taxes import calc_ordinary_tax, ss_taxable_amount

logger = logging.getLogger(__name__)

PLAN_TO_AGE = 95
MAX_TABLE_AGE = 100
MORTALITY_PAST_100 = 0.7   # survival factor per year beyond 100
YEARS_UNTIL_RETIREMENT = 5

# Probability of reaching each age given age 62 (SSA 2020 period table).
SURVIVAL_TABLE = {
    62: {"male": 1.00, "female": 1.00},
    65: {"male": 0.95, "female": 0.97},
    70: {"male": 0.86, "female": 0.92},
    75: {"male": 0.74, "female": 0.84},
    80: {"male": 0.59, "female": 0.73},
    85: {"male": 0.42, "female": 0.58},
    90: {"male": 0.24, "female": 0.40},
    95: {"male": 0.10, "female": 0.21},
    100: {"male": 0.03, "female": 0.08},
}

# Remaining years of life at each age.
LIFE_EXPECTANCY_BY_AGE = {
    62: {"male": 20.8, "female": 23.6},
    65: {"male": 18.3, "female": 20.9},
    70: {"male": 14.6, "female": 16.8},
    75: {"male": 11.2, "female": 13.0},
    80: {"male": 8.3, "female": 9.7},
    85: {"male": 5.8, "female": 6.8},
}

HEALTH_ADJUSTMENT = {"excellent": 3, "good": 0, "fair": -3, "poor": -7}


def _gender(g: Optional[str]) -> str:
    g = (g or "").lower()
    return g if g in ("male", "female") else "male"


def _health(h: Optional[str]) -> str:
    h = (h or "").lower()
    return h if h in HEALTH_ADJUSTMENT else "good"


# ===============================
# Claiming ages and break-evens
# ===============================
def claiming_age_options(average_career_earnings: float, fra: float = FRA) -> List[Dict[str, float]]:
    pia = calc_pia(average_career_earnings)
    rows = []
    for age in CLAIMING_AGES:
        monthly = adjust_for_claim_age(pia, age, fra)
        percent = monthly / pia * 100.0 if pia > 0 else 0.0
        rows.append({
            "age": age,
            "monthly_benefit": monthly,
            "annual_benefit": monthly * 12.0,
            "percent_of_fra": percent,
            "reduction_or_increase": percent - 100.0 if pia > 0 else 0.0,
        })
    return rows


def early_claiming_reduction(claim_age: float, fra: float = FRA) -> float:
    """Percent reduction for claiming before FRA (0 at or after FRA)."""
    if claim_age >= fra:
        return 0.0
    months = (fra - claim_age) * 12
    if months <= 36:
        return months * 5.0 / 9.0
    return 36 * 5.0 / 9.0 + (months - 36) * 5.0 / 12.0


def break_even(monthly1: float, age1: float, monthly2: float, age2: float) -> Dict[str, float]:
    """
    Age at which the later claim catches up with the earlier one.
    Pairs are swapped so age1 <= age2. With no annual advantage the break-even never arrives (inf);
    with no benefit at either age there is nothing to compare (None).
    """
    if age1 > age2:
        monthly1, monthly2 = monthly2, monthly1
        age1, age2 = age2, age1

    annual1 = monthly1 * 12.0
    annual2 = monthly2 * 12.0
    if annual1 <= 0 and annual2 <= 0:
        return {
            "claim_age_1": age1,
            "claim_age_2": age2,
            "break_even_age": None,
            "break_even_years": None,
            "cumulative_1": 0.0,
            "cumulative_2": 0.0,
        }

    foregone = annual1 * (age2 - age1)
    advantage = annual2 - annual1
    years = foregone / advantage if advantage > 0 else float("inf")
    age = age2 + years

    return {
        "claim_age_1": age1,
        "claim_age_2": age2,
        "break_even_age": round_half_up(age, 1),
        "break_even_years": round_half_up(years, 1),
        "cumulative_1": annual1 * (age - age1),
        "cumulative_2": annual2 * (age - age2),
    }


def all_break_evens(options: List[Dict[str, float]]) -> List[Dict[str, float]]:
    by_age = {o["age"]: o["monthly_benefit"] for o in options}
    pairs = [(62, 67), (62, 70), (67, 70)]
    return [break_even(by_age[a], a, by_age[b], b) for a, b in pairs]


# ===============================
# Mortality
# ===============================
def survival_probability(current_age: float, target_age: float, gender: str = "male") -> float:
    """
    Chance of living to `target_age`.
    1.0 at or below the current age; linear between table ages; x0.7 per year past 100.
    """
    if target_age <= current_age:
        return 1.0
    g = _gender(gender)
    ages = sorted(SURVIVAL_TABLE)
    if target_age >= ages[-1]:
        return SURVIVAL_TABLE[ages[-1]][g] * MORTALITY_PAST_100 ** (target_age - ages[-1])

    lower, upper = ages[0], ages[-1]
    for lo, hi in zip(ages, ages[1:]):
        if lo <= target_age < hi:
            lower, upper = lo, hi
            break
    p_lo = SURVIVAL_TABLE[lower][g]
    p_hi = SURVIVAL_TABLE[upper][g]
    return p_lo + (p_hi - p_lo) * (target_age - lower) / (upper - lower)


def base_life_expectancy(current_age: float, gender: str = "male") -> float:
    """Remaining years from the nearest table age (ages clamped to 62..85)."""
    key = min(max(current_age, 62), 85)
    nearest = min(LIFE_EXPECTANCY_BY_AGE, key=lambda a: (abs(a - key), a))
    return LIFE_EXPECTANCY_BY_AGE[nearest][_gender(gender)]


def adjusted_life_expectancy(current_age: float, gender: str = "male", health: str = "good",
                             override: Optional[float] = None) -> float:
    if override is not None:
        return num(override)
    return current_age + base_life_expectancy(current_age, gender) + HEALTH_ADJUSTMENT[_health(health)]


def lifetime_benefits(options: List[Dict[str, float]], current_age: float, gender: str = "male",
                      life_expectancy: Optional[float] = None, health: str = "good") -> List[Dict[str, float]]:
    """
    - lifetime: annual x years from claim to life expectancy
    - expected value: sum of annual x survival for every age from claim to 100
    - probability of reaching the break-even against claiming at 62
    """
    le = adjusted_life_expectancy(current_age, gender, health, life_expectancy)
    monthly_62 = next(o["monthly_benefit"] for o in options if o["age"] == MIN_CLAIM_AGE)
    rows = []
    for o in options:
        age = o["age"]
        annual = o["annual_benefit"]
        expected = sum(annual * survival_probability(current_age, a, gender)
                       for a in range(age, MAX_TABLE_AGE + 1))
        be_age = age
        if age > MIN_CLAIM_AGE:
            be_age = break_even(monthly_62, MIN_CLAIM_AGE, o["monthly_benefit"], age)["break_even_age"]
        rows.append({
            "claim_age": age,
            "monthly_benefit": o["monthly_benefit"],
            "lifetime_benefit": annual * max(0.0, le - age),
            "expected_value": expected,
            "prob_reach_break_even": 0.0 if be_age is None else survival_probability(current_age, be_age, gender),
        })
    return rows


# ===============================
# Couples
# ===============================
def survivor_benefit(own_monthly: float, deceased_monthly: float) -> float:
    return max(own_monthly, deceased_monthly)


def _strategy(name, age1, age2, b1, b2, survivor, years_both, description, pros, cons):
    both_alive = (b1 + b2) * 12 * years_both
    return {
        "strategy": name,
        "person1_claim_age": age1,
        "person2_claim_age": age2,
        "person1_monthly": b1,
        "person2_monthly": b2,
        "combined_monthly": b1 + b2,
        "survivor_benefit": survivor,
        "lifetime_both_alive": both_alive,
        "lifetime_with_survivor": both_alive + survivor * 12 * 5,
        "description": description,
        "pros": pros,
        "cons": cons,
    }


def spousal_strategies(earnings1: float, earnings2: float) -> List[Dict[str, object]]:
    """
    Five standard couple plans. Both-alive years are rough planning horizons;
    every plan adds five survivor years.
    """
    pia1 = calc_pia(earnings1)
    pia2 = calc_pia(earnings2)
    high, low = max(pia1, pia2), min(pia1, pia2)
    person1_higher = pia1 >= pia2
    out = []

    for age, years, name, desc, pros, cons in (
        (62, 20, "Both Claim Early (62)",
         "Both spouses claim at 62, accepting permanent reduction.",
         ["Get money immediately", "Useful if both have health concerns"],
         ["Permanently reduced benefits (30% less)", "Lower survivor benefit",
          "Worst long-term value if healthy"]),
        (67, 15, "Both Claim at FRA (67)",
         "Standard claiming at Full Retirement Age for both.",
         ["Full PIA benefit", "Balanced approach"],
         ["Foregone benefits from 62-67", "Not optimized for survivor"]),
        (70, 12, "Both Maximize (70)",
         "Maximum benefits but requires 8 years of portfolio bridge.",
         ["Maximum monthly benefit (24% more than FRA)", "Maximum survivor benefit"],
         ["8 years of foregone benefits", "Heavy portfolio drawdown before SS",
          "Risk if either spouse dies early"]),
    ):
        b1 = adjust_for_claim_age(pia1, age)
        b2 = adjust_for_claim_age(pia2, age)
        out.append(_strategy(name, age, age, b1, b2, survivor_benefit(b1, b2), years, desc, pros, cons))

    high70 = adjust_for_claim_age(high, 70)
    for low_age, years, name, desc, pros, cons in (
        (62, 15, "Higher Earner Delays, Lower Claims Early",
         "Lower earner provides income early; higher earner maximizes for survivor benefit.",
         ["Maximizes survivor benefit (critical for financial security)",
          "Lower earner provides bridge income",
          "Best expected lifetime value for most couples",
          "Protects surviving spouse from poverty"],
         ["Higher earner gets nothing until 70", "Requires some portfolio bridge"]),
        (67, 14, "Higher Earner 70, Lower Earner FRA",
         "Balanced approach: lower earner at FRA, higher earner delays.",
         ["Maximizes survivor benefit", "Lower earner gets full PIA",
          "Less portfolio bridge than both at 70"],
         ["Lower earner foregoes 5 years", "Still needs some bridge funding"]),
    ):
        low_benefit = adjust_for_claim_age(low, low_age)
        if person1_higher:
            ages, benefits = (70, low_age), (high70, low_benefit)
        else:
            ages, benefits = (low_age, 70), (low_benefit, high70)
        out.append(_strategy(name, ages[0], ages[1], benefits[0], benefits[1], high70,
                             years, desc, pros, cons))
    return out


OPTIMAL_SPOUSAL_STRATEGY = "Higher Earner Delays, Lower Claims Early"


# ===============================
# Portfolio and taxes
# ===============================
def portfolio_impact(options: List[Dict[str, float]], retirement_age: float, portfolio: float,
                     annual_spending: float, expected_return: float) -> List[Dict[str, float]]:
    """
    Spend from the portfolio alone until the claim age, then only the gap SS leaves, out to age 95.
    """
    growth = 1.0 + num(expected_return)
    spending = clamp(annual_spending)
    rows = []
    for o in options:
        age = o["age"]
        years_until = max(0, int(age - retirement_age))
        value = clamp(portfolio)
        for _ in range(years_until):
            value = value * growth - spending
        at_claim = max(0.0, value)

        net_spending = max(0.0, spending - o["annual_benefit"])
        value = at_claim
        for _ in range(max(0, PLAN_TO_AGE - age)):
            value = value * growth - net_spending
        drawdown = spending * years_until
        rows.append({
            "claim_age": age,
            "drawdown_before_ss": drawdown,
            "years_of_drawdown": years_until,
            "portfolio_at_claim": at_claim,
            "portfolio_at_95": max(0.0, value),
            "additional_needed": drawdown,
        })
    return rows


def tax_implications(options: List[Dict[str, float]], other_income: float, filing_status: str,
                     state_rate: float) -> List[Dict[str, float]]:
    """Federal tax is the increase in ordinary tax from adding the taxable part of SS."""
    other = clamp(other_income)
    state_rate = clamp(state_rate, 0.0, 1.0)
    base_tax = calc_ordinary_tax(other, filing_status)
    rows = []
    for o in options:
        annual = o["annual_benefit"]
        taxable = ss_taxable_amount(annual, other, filing_status)
        federal = calc_ordinary_tax(other + taxable, filing_status) - base_tax
        total = federal + taxable * state_rate
        rows.append({
            "claim_age": o["age"],
            "annual_benefit": annual,
            "taxable_percent": taxable / annual * 100.0 if annual > 0 else 0.0,
            "taxable_benefit": taxable,
            "federal_tax": federal,
            "state_tax": taxable * state_rate,
            "effective_rate": total / annual * 100.0 if annual > 0 else 0.0,
            "after_tax_benefit": annual - total,
        })
    return rows


# ===============================
# Recommendation
# ===============================
def recommend(inputs: SSOptimizerInputs, break_evens, lifetimes, impacts, optimal_spousal=None) -> Dict[str, object]:
    """
    Start from health, pull back to FRA when the portfolio can't bridge to 70,
    then let the couple plan override for married households.
    """
    health = _health(inputs.health)
    be_62_70 = next((b for b in break_evens if b["claim_age_1"] == 62 and b["claim_age_2"] == 70), None)
    life = {r["claim_age"]: r for r in lifetimes}
    reasoning: List[str] = []

    if health == "poor":
        age, confidence = 62, "high"
        reasoning.append("With poor health status, claiming early maximizes total benefits received.")
        reasoning.append("The reduced monthly benefit is offset by more years of collection.")
    elif health == "excellent":
        age, confidence = 70, "high"
        reasoning.append("With excellent health, you have a high probability of living past break-even age.")
        if be_62_70 and be_62_70["break_even_age"] is not None:
            reasoning.append(f"Break-even age is {be_62_70['break_even_age']:.1f}; delaying to 70 pays off after that.")
        reasoning.append(f"Your probability of reaching break-even: {life[70]['prob_reach_break_even'] * 100:.0f}%")
    elif health == "fair":
        age, confidence = 67, "medium"
        reasoning.append("With fair health, claiming at FRA (67) balances risk and reward.")
    else:
        age, confidence = 68, "medium"
        reasoning.append("With good health, waiting past FRA increases benefits without excessive risk.")

    spending = clamp(inputs.annual_spending)
    at_70 = next(p for p in impacts if p["claim_age"] == MAX_CLAIM_AGE)["portfolio_at_claim"]
    if at_70 < spending * 3:
        if age > FRA:
            age, confidence = FRA, "medium"
            reasoning.append("Portfolio may not support delaying past FRA; adjusting recommendation.")
    elif at_70 > spending * 10 and age < MAX_CLAIM_AGE and health != "poor":
        reasoning.append("Strong portfolio can easily bridge to age 70; consider maximum delay.")

    spouse_age = None
    if inputs.is_married and optimal_spousal:
        if calc_pia(inputs.average_career_earnings) >= calc_pia(inputs.spouse_average_career_earnings or 0):
            age, spouse_age = 70, 62
            reasoning.append("As the higher earner, delaying to 70 maximizes the survivor benefit.")
            reasoning.append("This protects your spouse financially if you pass first.")
            reasoning.append("Recommended: you claim at 70, spouse claims at 62 for bridge income.")
        else:
            age, spouse_age = 62, 70
            reasoning.append("As the lower earner, claiming early provides bridge income.")
            reasoning.append("Your spouse should delay to 70 to maximize survivor benefit.")
        confidence = "high"

    return {
        "claim_age": age,
        "spouse_claim_age": spouse_age,
        "confidence": confidence,
        "reasoning": reasoning,
        "lifetime_value_difference": life[age]["expected_value"] - life[MIN_CLAIM_AGE]["expected_value"],
        "break_even_age": be_62_70["break_even_age"] if be_62_70 and be_62_70["break_even_age"] else 80,
    }


def key_insights(result: Dict[str, object]) -> List[str]:
    by_age = {o["age"]: o for o in result["claiming_ages"]}
    out = []
    diff = by_age[70]["monthly_benefit"] - by_age[62]["monthly_benefit"]
    out.append(f"Claiming at 70 vs 62 means {money(diff)} MORE per month.")

    be = next((b for b in result["break_evens"] if b["claim_age_1"] == 62 and b["claim_age_2"] == 70), None)
    if be and be["break_even_age"] not in (None, float("inf")):
        out.append(f"If you live past age {be['break_even_age']:.0f}, waiting until 70 wins.")

    p70 = next((p for p in result["portfolio_impact"] if p["claim_age"] == 70), None)
    if p70 and p70["drawdown_before_ss"] > 0:
        out.append(f"Delaying to 70 requires {money(p70['drawdown_before_ss'])} from your portfolio before SS starts.")

    best = result.get("optimal_spousal_strategy")
    if best:
        out.append(f"Optimal spousal strategy: {best['strategy']} provides "
                   f"{money(best['survivor_benefit'])}/month survivor benefit.")
    return out


def optimize_social_security(inputs: SSOptimizerInputs) -> Dict[str, object]:
    """
    Full analysis for one person (or couple). The merged per-age view is returned
    as a DataFrame under "table".
    """
    current_age = clamp(inputs.current_age, 0, 120, default=60)
    gender = _gender(inputs.gender)
    options = claiming_age_options(inputs.average_career_earnings)
    break_evens = all_break_evens(options)
    lifetimes = lifetime_benefits(options, current_age, gender, inputs.life_expectancy, inputs.health)
    impacts = portfolio_impact(options, current_age + YEARS_UNTIL_RETIREMENT, inputs.portfolio_value,
                               inputs.annual_spending, inputs.expected_return)
    taxes = tax_implications(options, inputs.other_retirement_income, inputs.filing_status,
                             inputs.state_income_tax_rate)

    strategies = None
    optimal = None
    if (inputs.is_married and inputs.spouse_age and inputs.spouse_gender
            and inputs.spouse_average_career_earnings is not None):
        strategies = spousal_strategies(inputs.average_career_earnings, inputs.spouse_average_career_earnings)
        optimal = next(s for s in strategies if s["strategy"] == OPTIMAL_SPOUSAL_STRATEGY)

    rec = recommend(inputs, break_evens, lifetimes, impacts, optimal)
    logger.debug("SS recommendation: claim at %s (%s confidence)", rec["claim_age"], rec["confidence"])

    df = (pd.DataFrame(options).rename(columns={"age": "claim_age"})
          .merge(pd.DataFrame(lifetimes).drop(columns=["monthly_benefit"]), on="claim_age")
          .merge(pd.DataFrame(impacts), on="claim_age")
          .merge(pd.DataFrame(taxes).drop(columns=["annual_benefit"]), on="claim_age"))

    result = {
        "claiming_ages": options,
        "break_evens": break_evens,
        "lifetime_benefits": lifetimes,
        "spousal_strategies": strategies,
        "optimal_spousal_strategy": optimal,
        "portfolio_impact": impacts,
        "tax_implications": taxes,
        "recommendation": rec,
        "table": df,
    }
    result["insights"] = key_insights(result)
    return result
