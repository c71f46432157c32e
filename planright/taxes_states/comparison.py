# planright/taxes_states/comparison.py
# Side-by-side retirement tax burden for the current state and up to three alternatives.
import logging
from typing import Dict, List, Optional

import pandas as pd

from ..formatting import clamp
from ..schema import RetirementIncomeProfile, TaxBurden
from .data import STATE_TAX_DATA, NO_INCOME_TAX_STATES, NO_RETIREMENT_TAX_STATES
from .registry import get_state_calculator

logger = logging.getLogger(__name__)

MAX_COMPARISONS = 3
SALES_TAXABLE_SHARE = 0.3   # share of spending subject to sales tax
QUICK_REFERENCE_SIZE = 10


def get_state(code: str) -> Optional[dict]:
    return STATE_TAX_DATA.get((code or "").upper())


def state_income_tax(state: dict, total_income: float, ss_income: float = 0.0,
                     pension_income: float = 0.0, investment_income: float = 0.0) -> float:
    """
    Income tax on retirement income.
    - 0 when the state has no income tax or exempts retirement income
    - Social Security and pensions drop out where the state doesn't tax them
    investment_income is part of total_income and taxed with it.
    """
    if state["income_tax_rate"] == 0 or not state["taxes_retirement_income"]:
        return 0.0
    taxable = clamp(total_income)
    if not state["taxes_social_security"]:
        taxable -= clamp(ss_income)
    if not state["taxes_pension"]:
        taxable -= clamp(pension_income)
    if taxable <= 0:
        return 0.0
    return get_state_calculator(state["code"])(taxable)


def property_tax(state: dict, home_value: float) -> float:
    return clamp(home_value) * state["property_tax_rate"] / 100.0


def sales_tax(state: dict, annual_spending: float) -> float:
    return clamp(annual_spending) * SALES_TAXABLE_SHARE * state["sales_tax_rate"] / 100.0


def tax_burden(state: dict, profile: RetirementIncomeProfile) -> TaxBurden:
    total_income = (clamp(profile.retirement_income) + clamp(profile.ss_income)
                    + clamp(profile.pension_income) + clamp(profile.investment_income))
    income = state_income_tax(state, total_income, profile.ss_income,
                              profile.pension_income, profile.investment_income)
    prop = property_tax(state, profile.home_value)
    sales = sales_tax(state, profile.annual_spending)
    return TaxBurden(
        state=state["code"],
        income_tax=income,
        property_tax=prop,
        sales_tax=sales,
        total_tax=income + prop + sales,
    )


def add_comparison(selected: List[str], code: str) -> List[str]:
    """Return the new selection; unknown, duplicate or fourth states are ignored."""
    code = (code or "").upper()
    if code not in STATE_TAX_DATA or code in selected or len(selected) >= MAX_COMPARISONS:
        logger.debug("Comparison state %r not added to %s", code, selected)
        return list(selected)
    return list(selected) + [code]


def compare_states(current: str, comparisons: List[str], profile: RetirementIncomeProfile) -> Dict[str, object]:
    """
    Burden for the current state and each comparison state.
    annual_savings is positive when moving saves money; lifetime = annual x years in retirement.
    """
    home = get_state(current)
    if home is None:
        raise KeyError(f"Unknown state: {current}")

    selected: List[str] = []
    for code in comparisons:
        if code.upper() != home["code"]:
            selected = add_comparison(selected, code)

    base = tax_burden(home, profile)
    years = clamp(profile.years_in_retirement)
    rows = [{
        "state": home["code"],
        "name": home["name"],
        "income_tax": base.income_tax,
        "property_tax": base.property_tax,
        "sales_tax": base.sales_tax,
        "total_tax": base.total_tax,
        "annual_savings": 0.0,
        "lifetime_savings": 0.0,
        "cost_of_living_index": home["cost_of_living_index"],
        "healthcare_ranking": home["healthcare_ranking"],
    }]
    for code in selected:
        st = STATE_TAX_DATA[code]
        b = tax_burden(st, profile)
        annual = base.total_tax - b.total_tax
        rows.append({
            "state": code,
            "name": st["name"],
            "income_tax": b.income_tax,
            "property_tax": b.property_tax,
            "sales_tax": b.sales_tax,
            "total_tax": b.total_tax,
            "annual_savings": annual,
            "lifetime_savings": annual * years,
            "cost_of_living_index": st["cost_of_living_index"],
            "healthcare_ranking": st["healthcare_ranking"],
        })

    df = pd.DataFrame(rows)
    best = df.loc[df["total_tax"].idxmin(), "state"]
    return {"current": base, "comparisons": selected, "table": df, "lowest_tax_state": best}


def retirement_friendly_states() -> List[dict]:
    """States with no income tax or no tax on retirement income, by name."""
    friendly = [s for s in STATE_TAX_DATA.values()
                if s["income_tax_rate"] == 0 or not s["taxes_retirement_income"]]
    return sorted(friendly, key=lambda s: s["name"])


def quick_reference_states() -> List[str]:
    """First ten tax-friendly codes that are in the comparison table."""
    seen: List[str] = []
    for code in NO_INCOME_TAX_STATES + NO_RETIREMENT_TAX_STATES:
        if code not in seen:
            seen.append(code)
    return [c for c in seen[:QUICK_REFERENCE_SIZE] if c in STATE_TAX_DATA]
