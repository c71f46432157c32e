# planright/charitable.py
# Qualified charitable distributions, donor-advised-fund bunching and appreciated stock gifts.
import math
from typing import Dict, List, Optional

from .formatting import clamp, num
from .rmd import calc_rmd
from .schema import CharitableInputs, GivingBucket, RateAssumptions
from .tax_tables import normalize_status

QCD_LIMIT = 105_000
QCD_ELIGIBLE_AGE = 70.5
RMD_AGE = 73
# 2024 standard deduction (itemize-vs-standard comparison)
CHARITABLE_STD_DEDUCTION = {"single": 14_600, "married": 29_200}


def qcd_analysis(age: float, ira_balance: float, annual_giving: float, state_rate: float = 0.0,
                 rates: Optional[RateAssumptions] = None) -> Dict[str, float]:
    """
    QCDs count toward the RMD and never hit AGI.
    - eligible at 70.5
    - max QCD is the annual limit, or the larger of RMD and giving once RMDs start
    - the marginal rate steps up once RMDs begin
    """
    rates = rates or RateAssumptions()
    age = clamp(age)
    giving = clamp(annual_giving)
    state_rate = clamp(state_rate, 0.0, 1.0)

    eligible = age >= QCD_ELIGIBLE_AGE
    rmd = calc_rmd(clamp(ira_balance), math.ceil(age))
    max_qcd = min(QCD_LIMIT, max(rmd, giving) if rmd > 0 else giving)
    marginal = rates.rmd_age_rate if age >= RMD_AGE else rates.standard_rate
    effective = marginal + state_rate if eligible else 0.0
    savings = min(giving, max_qcd) * effective if eligible else 0.0

    return {
        "eligible": eligible,
        "rmd": rmd,
        "max_qcd": max_qcd,
        "marginal_rate": marginal,
        "tax_savings": savings,
        "effective_savings_rate": effective,
    }


def daf_analysis(annual_giving: float, bunching_years: int, filing_status: str = "single",
                 rates: Optional[RateAssumptions] = None) -> Dict[str, float]:
    """
    Bunch several years of gifts into one DAF contribution, itemize that year
    and take the standard deduction in the others.
    """
    rates = rates or RateAssumptions()
    giving = clamp(annual_giving)
    years = max(1, int(clamp(bunching_years, default=1)))
    std = CHARITABLE_STD_DEDUCTION[normalize_status(filing_status)]

    bunched = giving * years
    itemized_value = bunched * rates.itemized_rate
    standard_value = std * rates.standard_rate * years
    return {
        "bunched_amount": bunched,
        "itemized_value": itemized_value,
        "standard_value": standard_value,
        "net_benefit": max(0.0, itemized_value - standard_value),
        "break_even_amount": float(std),
    }


def stock_donation_analysis(stock_value: float, cost_basis: float, ordinary_income: float,
                            state_rate: float = 0.0, rates: Optional[RateAssumptions] = None) -> Dict[str, float]:
    """
    Giving appreciated shares skips the gain and still earns the full deduction.
    benefit_vs_cash is the capital-gains tax a cash gift (after selling) would have cost.
    """
    rates = rates or RateAssumptions()
    value = clamp(stock_value)
    gain = max(0.0, value - clamp(cost_basis))
    niit = rates.niit_rate if num(ordinary_income) > rates.niit_income_threshold else 0.0
    tax_on_gains = gain * (rates.ltcg_rate + niit + clamp(state_rate, 0.0, 1.0))
    deduction_value = value * rates.itemized_rate
    return {
        "unrealized_gain": gain,
        "gain_ratio": gain / value if value > 0 else 0.0,
        "niit_rate": niit,
        "tax_on_gains_avoided": tax_on_gains,
        "deduction_value": deduction_value,
        "total_benefit": tax_on_gains + deduction_value,
        "benefit_vs_cash": tax_on_gains,
    }


def recommend_strategy(inputs: CharitableInputs, rates: Optional[RateAssumptions] = None) -> Dict[str, object]:
    """
    Greedy split of one year's giving, most tax-efficient bucket first:
      1. QCD (capped by the RMD and the QCD ceiling)
      2. appreciated stock (capped by the position)
      3. DAF (absorbs what is left; the contribution covers all bunching years)
      4. cash
    Annual bucket amounts always sum to the giving amount.
    """
    rates = rates or RateAssumptions()
    giving = clamp(inputs.annual_giving)
    years = max(1, int(clamp(inputs.bunching_years, default=1)))
    remaining = giving
    buckets: List[GivingBucket] = []

    qcd = qcd_analysis(inputs.age, inputs.ira_balance, giving, inputs.state_rate, rates)
    if inputs.use_qcd and qcd["eligible"] and qcd["rmd"] > 0:
        cap = min(qcd["max_qcd"], qcd["rmd"])
        amount = min(remaining, cap)
        buckets.append(GivingBucket("QCD", cap, amount, amount * qcd["effective_savings_rate"]))
        remaining -= amount

    if inputs.use_stock:
        stock = stock_donation_analysis(inputs.stock_value, inputs.stock_cost_basis,
                                        inputs.ordinary_income, inputs.state_rate, rates)
        cap = clamp(inputs.stock_value)
        amount = min(remaining, cap)
        savings = amount * stock["gain_ratio"] * rates.ltcg_rate + amount * rates.itemized_rate
        buckets.append(GivingBucket("Stock", cap, amount, savings))
        remaining -= amount

    daf_contribution = 0.0
    if inputs.use_daf:
        amount = remaining
        daf = daf_analysis(amount, years, inputs.filing_status, rates)
        buckets.append(GivingBucket("DAF", remaining, amount, daf["net_benefit"] if amount > 0 else 0.0))
        daf_contribution = amount * years
        remaining -= amount

    buckets.append(GivingBucket("Cash", remaining, remaining, remaining * rates.cash_gift_rate))

    by_name = {b.name: b.amount for b in buckets}
    return {
        "buckets": buckets,
        "qcd_amount": by_name.get("QCD", 0.0),
        "stock_amount": by_name.get("Stock", 0.0),
        "daf_contribution": daf_contribution,
        "cash_amount": by_name["Cash"],
        "total_given": sum(b.amount for b in buckets),
        "total_tax_savings": sum(b.tax_savings for b in buckets),
        "years_of_bunching": years if inputs.use_daf else 1,
    }
