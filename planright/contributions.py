# planright/contributions.py
# Where the next savings dollar should go: match, HSA, Roth IRA, 401(k), mega backdoor, taxable.
import logging
from typing import Dict, List

from .formatting import clamp, money, compact_money, round_half_up
from .schema import ContributionInputs, PriorityItem, Insight
from .tax_tables import LIMITS, ROTH_IRA_INCOME_LIMIT

logger = logging.getLogger(__name__)

EXPECTED_RETURN = 0.07
TAXABLE_TAX_DRAG = 0.01
HSA_TRIPLE_TAX_BONUS = 0.3
DEFAULT_MONTHLY_BUDGET = 2_000


def max_401k(age: int) -> float:
    if 60 <= age <= 63:
        return LIMITS["401k"] + LIMITS["401k_catchup_60_63"]
    if age >= 50:
        return LIMITS["401k"] + LIMITS["401k_catchup_50"]
    return LIMITS["401k"]


def max_ira(age: int) -> float:
    return LIMITS["ira"] + (LIMITS["ira_catchup_50"] if age >= 50 else 0)


def max_hsa(is_family: bool, age: int) -> float:
    base = LIMITS["hsa_family"] if is_family else LIMITS["hsa_self"]
    return base + (LIMITS["hsa_catchup_55"] if age >= 55 else 0)


def employer_match(salary: float, contribution: float, match_pct: float, match_limit_pct: float) -> float:
    """Match = min(contribution, salary x limit%) x match%."""
    matchable = min(clamp(contribution), clamp(salary) * clamp(match_limit_pct) / 100.0)
    return matchable * clamp(match_pct) / 100.0


def future_value(annual: float, years: float, rate: float = EXPECTED_RETURN) -> float:
    """Annuity-due future value of a level annual contribution."""
    if rate == 0:
        return annual * years
    return annual * (((1 + rate) ** years - 1) / rate) * (1 + rate)


def years_to_retirement(age: int) -> int:
    return max(65 - int(age), 10)


def default_monthly_budget(inputs: ContributionInputs) -> int:
    total = (clamp(inputs.pre_tax_contrib) + clamp(inputs.roth_contrib)
             + clamp(inputs.taxable_contrib) + clamp(inputs.employer_match_contrib))
    return round_half_up(total / 12) or DEFAULT_MONTHLY_BUDGET


def _derived(inputs: ContributionInputs) -> Dict[str, float]:
    age = int(clamp(inputs.age, 0, 120, default=35))
    income = clamp(inputs.income)
    m401k = max_401k(age)
    max_match = employer_match(income, income, inputs.match_percent, inputs.match_limit)
    current_match = employer_match(income, inputs.pre_tax_contrib, inputs.match_percent, inputs.match_limit)
    # employee dollars needed to earn the full match, never more than the deferral limit
    match_needed = min(income * clamp(inputs.match_limit) / 100.0, m401k)
    return {
        "age": age,
        "income": income,
        "max_401k": m401k,
        "max_ira": max_ira(age),
        "max_hsa": max_hsa(inputs.is_married, age),
        "max_match": max_match,
        "current_match": current_match,
        "match_left_on_table": max(0.0, max_match - current_match),
        "match_needed": match_needed,
        "years": years_to_retirement(age),
        "mega_backdoor_limit": max(0.0, LIMITS["401k_total_additions"] - m401k - max_match),
    }


def priority_stack(inputs: ContributionInputs) -> List[PriorityItem]:
    """
    The standard order: free money first, then triple tax-free, tax-free,
    tax-deferred and finally taxable.
    """
    d = _derived(inputs)
    pre_tax = clamp(inputs.pre_tax_contrib)
    stack = []

    # 1. 401k up to the employer match
    if inputs.has_401k and d["max_match"] > 0:
        toward = min(pre_tax, d["match_needed"])
        stack.append(PriorityItem(
            id="401k-match", name="401(k) up to Employer Match", priority=1,
            current=toward, limit=d["match_needed"],
            left_on_table=max(0.0, d["match_needed"] - toward),
            description=f"Get the full {inputs.match_percent:g}% match on {inputs.match_limit:g}% of salary",
        ))

    # 2. HSA
    if inputs.has_hdhp:
        stack.append(PriorityItem(
            id="hsa", name="Health Savings Account (HSA)", priority=2,
            current=0.0, limit=d["max_hsa"], left_on_table=d["max_hsa"],
            description="Deductible, grows tax-free, tax-free for healthcare",
        ))
    else:
        stack.append(PriorityItem(
            id="hsa", name="Health Savings Account (HSA)", priority=2,
            current=0.0, limit=d["max_hsa"], left_on_table=0.0,
            available=False, unavailable_reason="Requires HDHP enrollment",
        ))

    # 3. Roth IRA (backdoor above the income limit)
    roth_ira = min(clamp(inputs.roth_contrib), d["max_ira"])
    limit_key = "married" if inputs.is_married else "single"
    backdoor = d["income"] > ROTH_IRA_INCOME_LIMIT[limit_key]
    stack.append(PriorityItem(
        id="roth-ira", name="Backdoor Roth IRA" if backdoor else "Roth IRA", priority=3,
        current=roth_ira, limit=d["max_ira"], left_on_table=max(0.0, d["max_ira"] - roth_ira),
        description=("Contribute to a Traditional IRA, then convert to Roth" if backdoor
                     else "Tax-free growth and withdrawals in retirement"),
    ))

    # 4. Rest of the 401k deferral limit
    if inputs.has_401k:
        beyond = max(0.0, pre_tax - d["match_needed"])
        room = max(0.0, d["max_401k"] - d["match_needed"])
        stack.append(PriorityItem(
            id="401k-max", name="Max Out 401(k)", priority=4,
            current=beyond, limit=room, left_on_table=max(0.0, room - beyond),
            description=("Choose Traditional or Roth 401(k) based on tax situation" if inputs.has_roth_401k
                         else "Traditional 401(k) only - reduces taxable income now"),
        ))

    # 5. Mega backdoor Roth
    if inputs.has_after_tax_401k and inputs.has_in_plan_conversion:
        stack.append(PriorityItem(
            id="mega-backdoor", name="Mega Backdoor Roth", priority=5,
            current=0.0, limit=d["mega_backdoor_limit"], left_on_table=d["mega_backdoor_limit"],
            description="After-tax 401(k) contributions converted to Roth",
        ))
    elif inputs.has_401k:
        stack.append(PriorityItem(
            id="mega-backdoor", name="Mega Backdoor Roth", priority=5,
            current=0.0, limit=0.0, left_on_table=0.0, available=False,
            unavailable_reason=("Requires in-plan Roth conversion" if inputs.has_after_tax_401k
                                else "Requires after-tax 401(k) option"),
        ))

    # 6. Taxable brokerage
    stack.append(PriorityItem(
        id="taxable", name="Taxable Brokerage", priority=6,
        current=clamp(inputs.taxable_contrib), limit=float("inf"), left_on_table=0.0,
        description="Flexible access, no special tax benefits",
    ))
    return stack


def optimization_insights(inputs: ContributionInputs) -> List[Insight]:
    d = _derived(inputs)
    years = d["years"]
    pre_tax = clamp(inputs.pre_tax_contrib)
    roth = clamp(inputs.roth_contrib)
    taxable = clamp(inputs.taxable_contrib)
    out: List[Insight] = []

    if d["match_left_on_table"] > 0:
        fv = future_value(d["match_left_on_table"], years)
        out.append(Insight(
            "warning", "You're Leaving Free Money on the Table",
            f"You're missing {money(d['match_left_on_table'])}/year in employer match. "
            f"That's {compact_money(fv)} by retirement.",
            fv, years,
        ))

    if taxable > 0:
        have = pre_tax + roth
        room = d["max_401k"] + d["max_ira"] + (d["max_hsa"] if inputs.has_hdhp else 0.0)
        if have < room:
            amount = min(taxable, room - have)
            cost = (future_value(amount, years, EXPECTED_RETURN)
                    - future_value(amount, years, EXPECTED_RETURN - TAXABLE_TAX_DRAG))
            out.append(Insight(
                "warning", "Taxable Before Tax-Advantaged",
                f"You're putting {money(amount)}/year in taxable while tax-advantaged room is open. "
                f"That costs about {compact_money(cost)} over {years} years.",
                cost, years,
            ))

    if inputs.has_hdhp:
        bonus = future_value(d["max_hsa"], years) * HSA_TRIPLE_TAX_BONUS
        out.append(Insight(
            "opportunity", "HSA: The Ultimate Tax Shelter",
            f"Maxing the HSA could be worth {compact_money(bonus)} extra over {years} years.",
            bonus, years,
        ))

    roth_ira = min(roth, d["max_ira"])
    if roth_ira < d["max_ira"]:
        missed = d["max_ira"] - roth_ira
        out.append(Insight(
            "opportunity", "Roth IRA Space Available",
            f"You can contribute {money(missed)} more to a Roth IRA this year.",
            future_value(missed, years), years,
        ))

    if inputs.has_after_tax_401k and inputs.has_in_plan_conversion and d["mega_backdoor_limit"] > 0:
        out.append(Insight(
            "opportunity", "Mega Backdoor Roth Available",
            f"Your plan allows {money(d['mega_backdoor_limit'])} of additional Roth contributions.",
            future_value(d["mega_backdoor_limit"], years), years,
        ))
    return out


def optimal_allocation(inputs: ContributionInputs, monthly_budget: float) -> Dict[str, float]:
    """
    Greedy fill of an annual budget (monthly x 12) in priority order.
    Each bucket stops at its capacity; taxable takes whatever is left.
    """
    d = _derived(inputs)
    remaining = clamp(monthly_budget) * 12
    alloc = {
        "traditional_401k": 0.0,
        "roth_401k": 0.0,
        "after_tax_401k": 0.0,
        "roth_ira": 0.0,
        "hsa": 0.0,
        "taxable": 0.0,
    }

    if inputs.has_401k:
        to_match = min(remaining, d["match_needed"])
        alloc["traditional_401k"] = to_match
        remaining -= to_match

    if inputs.has_hdhp and remaining > 0:
        to_hsa = min(remaining, d["max_hsa"])
        alloc["hsa"] = to_hsa
        remaining -= to_hsa

    if remaining > 0:
        to_roth = min(remaining, d["max_ira"])
        alloc["roth_ira"] = to_roth
        remaining -= to_roth

    if inputs.has_401k and remaining > 0:
        to_401k = min(remaining, max(0.0, d["max_401k"] - alloc["traditional_401k"]))
        if inputs.has_roth_401k:
            alloc["roth_401k"] = to_401k
        else:
            alloc["traditional_401k"] += to_401k
        remaining -= to_401k

    if inputs.has_after_tax_401k and inputs.has_in_plan_conversion and remaining > 0:
        to_after_tax = min(remaining, d["mega_backdoor_limit"])
        alloc["after_tax_401k"] = to_after_tax
        remaining -= to_after_tax

    if remaining > 0:
        alloc["taxable"] = remaining

    alloc["total"] = sum(alloc.values())
    return alloc


def impact_comparison(inputs: ContributionInputs, allocation: Dict[str, float]) -> Dict[str, object]:
    """Future value of the current split versus the optimal one."""
    d = _derived(inputs)
    years = d["years"]
    current = {
        "pre_tax": future_value(clamp(inputs.pre_tax_contrib), years),
        "roth": future_value(clamp(inputs.roth_contrib), years),
        "taxable": future_value(clamp(inputs.taxable_contrib), years, EXPECTED_RETURN - TAXABLE_TAX_DRAG),
    }
    current["total"] = sum(current.values())

    match_dollars = employer_match(d["income"], allocation["traditional_401k"],
                                   inputs.match_percent, inputs.match_limit)
    optimal = {
        "pre_tax": future_value(allocation["traditional_401k"], years),
        "roth": future_value(allocation["roth_401k"] + allocation["roth_ira"] + allocation["after_tax_401k"], years),
        "hsa": future_value(allocation["hsa"], years, EXPECTED_RETURN * 1.1),
        "taxable": future_value(allocation["taxable"], years, EXPECTED_RETURN - TAXABLE_TAX_DRAG),
        "match": future_value(match_dollars, years),
    }
    optimal["total"] = sum(optimal.values())

    improvement = optimal["total"] - current["total"]
    return {
        "current": current,
        "optimal": optimal,
        "improvement": improvement,
        "improvement_pct": (improvement / current["total"] * 100.0) if current["total"] > 0 else 0.0,
    }


def action_items(inputs: ContributionInputs, allocation: Dict[str, float]) -> List[Dict[str, str]]:
    d = _derived(inputs)
    items = []
    total_401k = allocation["traditional_401k"] + allocation["roth_401k"]
    if total_401k > 0 and d["income"] > 0:
        items.append({
            "account": "401(k)",
            "action": "Set contribution percentage",
            "specific": f"Contribute {round_half_up(total_401k / d['income'] * 100)}% of salary "
                        f"({money(total_401k / 12)}/month)",
            "priority": "high" if d["match_left_on_table"] > 0 else "medium",
        })
    if allocation["hsa"] > 0:
        items.append({
            "account": "HSA",
            "action": "Set up payroll HSA deduction",
            "specific": f"Contribute {money(allocation['hsa'] / 12)}/month and invest the balance",
            "priority": "high",
        })
    if allocation["roth_ira"] > 0:
        items.append({
            "account": "Roth IRA",
            "action": "Automate monthly contributions",
            "specific": f"Contribute {money(allocation['roth_ira'] / 12)}/month",
            "priority": "medium",
        })
    if allocation["after_tax_401k"] > 0:
        items.append({
            "account": "After-tax 401(k)",
            "action": "Enable in-plan Roth conversion",
            "specific": f"Contribute {money(allocation['after_tax_401k'] / 12)}/month after-tax and convert",
            "priority": "low",
        })
    if allocation["taxable"] > 0:
        items.append({
            "account": "Taxable",
            "action": "Invest the remainder",
            "specific": f"Send {money(allocation['taxable'] / 12)}/month to a low-cost index fund",
            "priority": "low",
        })
    return items


def analyze_contributions(inputs: ContributionInputs, monthly_budget: float = None) -> Dict[str, object]:
    budget = default_monthly_budget(inputs) if monthly_budget is None else monthly_budget
    allocation = optimal_allocation(inputs, budget)
    logger.debug("Contribution allocation for budget %s/month: %s", budget, allocation)
    return {
        "monthly_budget": budget,
        "stack": priority_stack(inputs),
        "insights": optimization_insights(inputs),
        "allocation": allocation,
        "impact": impact_comparison(inputs, allocation),
        "actions": action_items(inputs, allocation),
    }
