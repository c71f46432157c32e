# planright/projection.py
# Year-by-year accumulation and drawdown engine, plus a seeded Monte Carlo wrapper.
from __future__ import annotations

import dataclasses
import logging
import math
from typing import Any, Callable, Dict, List, Optional

import numpy as np
import pandas as pd

from .errors import InputValidationError
from .rmd import maybe_rmd
from .returns import build_return_generator
from .schema import Profile, Inputs, Assumptions
from .social_security import calc_pia, compute_ss_for_year, effective_benefit, ss_annual_at_claim
from .tax_tables import LIFE_EXP, ORDINARY_BRACKETS, STD_DEDUCTION, normalize_status
from .taxes import (
    calc_estate_tax, calc_ltcg_tax, calc_niit, calc_ordinary_tax, irmaa_surcharge, ss_taxable_amount,
)
from .taxes_states.registry import get_state_calculator

logger = logging.getLogger(__name__)

MEDICARE_AGE = 65

HEALTHCARE_DEFAULTS = {
    "include_medicare": False,
    "medicare_premium": 400.0,      # monthly, per person
    "include_ltc": False,
    "ltc_annual_cost": 80_000.0,
    "ltc_probability": 50.0,        # percent
    "ltc_duration": 2.5,            # years
    "ltc_onset_age": 82,
}

CORE_COLS = [
    "Year", "Your Age", "Spouse Age", "Phase",
    "Taxable", "Pre-Tax", "Roth", "Total", "Total (Real)",
    "Withdrawal", "Social Security", "RMD", "Healthcare",
    "Roth Conversion", "Taxes",
]


# -------- Withdrawal taxes --------
def withdrawal_taxes(gross: float, status: str, bal_t: float, bal_p: float, bal_r: float,
                     basis: float, state_fn: Optional[Callable[[float], float]] = None,
                     rmd: float = 0.0, base_ordinary: float = 0.0) -> Dict[str, Any]:
    """
    Split a gross withdrawal across taxable / pre-tax / Roth and tax it.
    - pro-rata by balance, with the pre-tax draw raised to at least the RMD
    - shortfalls cascade taxable -> pre-tax -> Roth
    - the taxable draw realizes gains at the account's gain ratio
    - ordinary tax is the increase over base_ordinary; LTCG stacks on top, then NIIT
    - state tax applies state_fn to the pre-tax draw plus realized gains
    """
    total = bal_t + bal_p + bal_r
    zero = {"tax": 0.0, "ordinary": 0.0, "capgain": 0.0, "niit": 0.0, "state": 0.0,
            "draw": {"t": 0.0, "p": 0.0, "r": 0.0}, "new_basis": basis}
    if total <= 0 or gross <= 0:
        return zero

    draw_t = gross * bal_t / total
    draw_p = gross * bal_p / total
    draw_r = gross * bal_r / total

    floor_p = min(rmd, bal_p, gross)
    if draw_p < floor_p:
        extra = floor_p - draw_p
        draw_p = floor_p
        others = bal_t + bal_r
        if others > 0:
            draw_t -= extra * bal_t / others
            draw_r -= extra * bal_r / others

    used_t = min(draw_t, bal_t)
    short_t = draw_t - used_t
    used_p = min(draw_p + short_t, bal_p)
    short_p = draw_p + short_t - used_p
    used_r = min(draw_r + short_p, bal_r)

    gain_ratio = max(0.0, bal_t - basis) / bal_t if bal_t > 0 else 0.0
    gains = used_t * gain_ratio
    basis_part = used_t - gains

    ordinary_base = max(0.0, base_ordinary)
    fed_ord = calc_ordinary_tax(ordinary_base + used_p, status) - calc_ordinary_tax(ordinary_base, status)
    fed_cap = calc_ltcg_tax(gains, status, ordinary_base + used_p)
    niit = calc_niit(gains, status, ordinary_base + used_p + gains)
    state = float(state_fn(used_p + gains)) if state_fn else 0.0

    return {
        "tax": fed_ord + fed_cap + niit + state,
        "ordinary": fed_ord,
        "capgain": fed_cap,
        "niit": niit,
        "state": state,
        "draw": {"t": used_t, "p": used_p, "r": used_r},
        "new_basis": max(0.0, basis - basis_part),
    }


# -------- Validation --------
def _finite(x) -> bool:
    try:
        return math.isfinite(float(x))
    except (TypeError, ValueError):
        return False


def validate(profile: Profile, inputs: Inputs, assumptions: Assumptions) -> None:
    if not _finite(profile.age) or not 0 <= profile.age <= 120:
        raise InputValidationError("age", profile.age, "Age must be between 0 and 120.")
    if not _finite(profile.retirement_age) or not 0 <= profile.retirement_age <= 120:
        raise InputValidationError("retirement_age", profile.retirement_age,
                                   "Retirement age must be between 0 and 120.")
    if not _finite(assumptions.return_pct):
        raise InputValidationError("return_pct", assumptions.return_pct, "Return rate must be a valid number.")
    if not _finite(assumptions.inflation_pct) or assumptions.inflation_pct < 0:
        raise InputValidationError("inflation_pct", assumptions.inflation_pct,
                                   "Inflation rate must be a non-negative number.")
    if not _finite(inputs.withdrawal_rate_pct) or not 0 <= inputs.withdrawal_rate_pct <= 100:
        raise InputValidationError("withdrawal_rate_pct", inputs.withdrawal_rate_pct,
                                   "Withdrawal rate must be between 0 and 100.")
    for key in ("taxable", "pre_tax", "roth"):
        bal = inputs.balances.get(key, 0.0)
        if not _finite(bal) or bal < 0:
            raise InputValidationError(f"balances.{key}", bal, "Balance must be a non-negative number.")
    married = normalize_status(profile.filing_status) == "married"
    if married and (profile.spouse_age is None or not _finite(profile.spouse_age) or profile.spouse_age < 18):
        raise InputValidationError("spouse_age", profile.spouse_age,
                                   "Spouse age is required for married couples and must be 18 or older.")
    younger = min(profile.age, profile.spouse_age) if married else profile.age
    if profile.retirement_age <= younger:
        raise InputValidationError("retirement_age", profile.retirement_age,
                                   "Retirement age must be greater than current age.")


def _conversion_bracket_top(status: str, target_rate: float) -> float:
    """Top of the bracket with the target rate, or of the nearest rate when there's no exact match."""
    brackets = ORDINARY_BRACKETS[status]
    for top, rate in brackets:
        if rate == target_rate:
            return top
    return min(brackets, key=lambda b: abs(b[1] - target_rate))[0]


# -------- Engine --------
def run(profile: Profile, inputs: Inputs, assumptions: Assumptions,
        seed: int = 12345, round_whole: bool = True) -> Dict[str, Any]:
    """
    Single path from today to the end of the plan (age 95 of the older spouse).

    Accumulation: growth, taxed dividend drag on taxable, mid-year contributions.
    Drawdown: inflation-indexed withdrawal, RMDs, Social Security, Medicare/IRMAA,
    expected-value long-term care, optional Roth conversions before RMD age.

    Returns {"table": DataFrame, "summary": dict}.
    """
    validate(profile, inputs, assumptions)

    status = normalize_status(profile.filing_status)
    married = status == "married"
    age1 = int(profile.age)
    age2 = int(profile.spouse_age) if married else None
    younger = min(age1, age2) if married else age1
    older = max(age1, age2) if married else age1
    ret_age = int(profile.retirement_age)

    yrs_to_ret = ret_age - younger
    yrs_to_sim = max(0, LIFE_EXP - (older + yrs_to_ret))
    infl = assumptions.inflation_pct / 100.0
    med_infl = assumptions.medical_inflation_pct / 100.0
    div_yield = assumptions.dividend_yield_pct / 100.0
    start_year = int(assumptions.start_year)

    mode = assumptions.return_mode
    acc_gen = build_return_generator(mode, yrs_to_ret + 1, assumptions.return_pct, assumptions.inflation_pct,
                                     assumptions.series, seed, assumptions.historical_start_year)
    draw_start = (assumptions.historical_start_year + yrs_to_ret
                  if assumptions.historical_start_year is not None else None)
    draw_gen = build_return_generator(mode, yrs_to_sim, assumptions.return_pct, assumptions.inflation_pct,
                                      assumptions.series, seed + 1, draw_start)

    state_fn = get_state_calculator(profile.state, state_rate=assumptions.state_rate_pct)

    b_tax = float(inputs.balances.get("taxable", 0.0))
    b_pre = float(inputs.balances.get("pre_tax", 0.0))
    b_roth = float(inputs.balances.get("roth", 0.0))
    basis = b_tax

    contrib = {
        who: {k: float(inputs.contributions.get(who, {}).get(k, 0.0))
              for k in ("taxable", "pre_tax", "roth", "match")}
        for who in ("primary", "spouse")
    }

    rows: List[Dict[str, Any]] = []

    def add_row(year_idx, phase, wd=0.0, ss=0.0, rmd=0.0, health=0.0, conv=0.0, taxes=0.0):
        total = b_tax + b_pre + b_roth
        rows.append({
            "Year": start_year + year_idx,
            "Your Age": age1 + year_idx,
            "Spouse Age": age2 + year_idx if married else None,
            "Phase": phase,
            "Taxable": b_tax,
            "Pre-Tax": b_pre,
            "Roth": b_roth,
            "Total": total,
            "Total (Real)": total / (1.0 + infl) ** year_idx,
            "Withdrawal": wd,
            "Social Security": ss,
            "RMD": rmd,
            "Healthcare": health,
            "Roth Conversion": conv,
            "Taxes": taxes,
        })

    # -------- Accumulation --------
    for y in range(yrs_to_ret + 1):
        g = next(acc_gen)
        if y > 0:
            b_tax *= g
            b_pre *= g
            b_roth *= g
            if b_tax > 0 and div_yield > 0:
                b_tax -= calc_ltcg_tax(b_tax * div_yield, status, 0.0)
            if assumptions.increase_contributions:
                f = 1.0 + assumptions.contribution_growth_pct / 100.0
                for who in contrib:
                    for k in contrib[who]:
                        contrib[who][k] *= f

        def mid_year(amount):
            return amount * (1.0 + (g - 1.0) * 0.5)

        savers = [("primary", age1 + y)]
        if married:
            savers.append(("spouse", age2 + y))
        for who, age in savers:
            if age < ret_age:
                c = contrib[who]
                b_tax += mid_year(c["taxable"])
                b_pre += mid_year(c["pre_tax"] + c["match"])
                b_roth += mid_year(c["roth"])
                basis += c["taxable"]

        add_row(y, "Accumulation")

    # -------- Year-1 retirement income --------
    total_at_ret = b_tax + b_pre + b_roth
    wd_gross = total_at_ret * inputs.withdrawal_rate_pct / 100.0
    y1 = withdrawal_taxes(wd_gross, status, b_tax, b_pre, b_roth, basis, state_fn)
    y1_after_tax_real = (wd_gross - y1["tax"]) / (1.0 + infl) ** yrs_to_ret

    # -------- Social Security setup --------
    ss_cfg = inputs.social_security or {}
    include_ss = bool(ss_cfg.get("include", False))
    pia1 = calc_pia(ss_cfg.get("primary_income", 0.0))
    pia2 = calc_pia(ss_cfg.get("spouse_income", 0.0)) if married else 0.0
    claim1 = int(ss_cfg.get("primary_age", 67))
    claim2 = int(ss_cfg.get("spouse_age", 67))
    cola = float(ss_cfg.get("cola", 0.0))
    first_year1 = start_year + (claim1 - age1)
    first_year2 = start_year + (claim2 - age2) if married else None

    hc = dict(HEALTHCARE_DEFAULTS)
    hc.update(inputs.healthcare or {})
    conv_cfg = inputs.conversions or {}
    conversions_on = bool(conv_cfg.get("enabled", False))
    target_top = _conversion_bracket_top(status, float(conv_cfg.get("target_bracket", 0.24)))

    survival_years = 0
    ruined = False
    total_conversions = 0.0
    conversion_taxes = 0.0

    # -------- Drawdown --------
    for y in range(1, yrs_to_sim + 1):
        g = next(draw_gen)
        b_tax *= g
        b_pre *= g
        b_roth *= g
        if b_tax > 0 and div_yield > 0:
            b_tax -= calc_ltcg_tax(b_tax * div_yield, status, 0.0)

        idx = yrs_to_ret + y
        year = start_year + idx
        age_now = age1 + idx
        age_sp = age2 + idx if married else 0
        rmd = maybe_rmd(age_now, b_pre, profile.rmd_start_age)

        ss = 0.0
        if include_ss:
            elig1 = age_now >= claim1
            elig2 = married and age_sp >= claim2
            if elig1 and elig2:
                base1 = effective_benefit(pia1, pia2, claim1) * 12.0
                base2 = effective_benefit(pia2, pia1, claim2) * 12.0
            else:
                base1 = ss_annual_at_claim(pia1, claim1) if elig1 else 0.0
                base2 = ss_annual_at_claim(pia2, claim2) if elig2 else 0.0
            ss = compute_ss_for_year(year, first_year1, int(ss_cfg.get("primary_month", 1)), base1, cola)
            if married:
                ss += compute_ss_for_year(year, first_year2, int(ss_cfg.get("spouse_month", 1)), base2, cola)

        health = 0.0
        med_factor = (1.0 + med_infl) ** y
        if hc["include_medicare"] and age_now >= MEDICARE_AGE:
            medicare = float(hc["medicare_premium"]) * 12.0 * med_factor
            medicare += irmaa_surcharge(wd_gross + ss + rmd, married) * 12.0 * med_factor
            if married and age_sp >= MEDICARE_AGE:
                medicare *= 2
            health += medicare
        if hc["include_ltc"] and age_now >= hc["ltc_onset_age"]:
            if age_now - hc["ltc_onset_age"] < hc["ltc_duration"]:
                health += float(hc["ltc_annual_cost"]) * float(hc["ltc_probability"]) / 100.0 * med_factor

        converted = 0.0
        if conversions_on and age_now < profile.rmd_start_age and b_pre > 0 and b_tax > 0:
            headroom = max(0.0, target_top + STD_DEDUCTION[status] - ss)
            if headroom > 0:
                max_conv = min(headroom, b_pre)
                conv_tax = calc_ordinary_tax(ss + max_conv, status) - calc_ordinary_tax(ss, status)
                affordable = min(max_conv, b_tax / conv_tax * max_conv) if conv_tax > 0 else max_conv
                if affordable > 0:
                    converted = min(affordable, b_pre)
                    tax = calc_ordinary_tax(ss + converted, status) - calc_ordinary_tax(ss, status)
                    b_pre -= converted
                    b_roth += converted
                    b_tax -= tax
                    total_conversions += converted
                    conversion_taxes += tax

        need = max(0.0, wd_gross + health - ss)
        actual = need
        rmd_excess = 0.0
        if rmd > need:
            actual = rmd
            rmd_excess = rmd - need

        base_ordinary = ss_taxable_amount(ss, actual, status)
        taxes = withdrawal_taxes(actual, status, b_tax, b_pre, b_roth, basis, state_fn, rmd, base_ordinary)
        b_tax -= taxes["draw"]["t"]
        b_pre -= taxes["draw"]["p"]
        b_roth -= taxes["draw"]["r"]
        basis = taxes["new_basis"]
        paid = taxes["tax"]

        if rmd_excess > 0:
            excess_tax = calc_ordinary_tax(rmd_excess, status)
            b_tax += rmd_excess - excess_tax
            basis += rmd_excess - excess_tax
            paid += excess_tax

        b_tax = max(0.0, b_tax)
        b_pre = max(0.0, b_pre)
        b_roth = max(0.0, b_roth)

        if b_tax + b_pre + b_roth <= 0:
            if not ruined:
                survival_years = y - 1
                ruined = True
                logger.debug("Portfolio depleted in drawdown year %s (age %s)", y, age_now)
        else:
            survival_years = y

        add_row(idx, "Drawdown", actual, ss, rmd, health, converted, paid)
        wd_gross *= 1.0 + infl

    eol_nominal = max(0.0, b_tax + b_pre + b_roth)
    total_years = yrs_to_ret + yrs_to_sim
    summary = {
        "eol_nominal": eol_nominal,
        "eol_real": eol_nominal / (1.0 + infl) ** total_years,
        "y1_after_tax_real": y1_after_tax_real,
        "ruined": ruined,
        "survival_years": survival_years,
        "years_to_retirement": yrs_to_ret,
        "years_in_retirement": yrs_to_sim,
        "total_roth_conversions": total_conversions,
        "conversion_taxes_paid": conversion_taxes,
        "estate_tax": calc_estate_tax(eol_nominal, status, start_year + total_years),
    }
    logger.info("Projection (%s returns): EOL real %.0f, ruined=%s", mode, summary["eol_real"], ruined)

    df = pd.DataFrame(rows, columns=CORE_COLS)
    if round_whole:
        num_cols = df.select_dtypes(include=["float64", "float32"]).columns
        num_cols = [c for c in num_cols if c != "Spouse Age"]
        df[num_cols] = df[num_cols].round(0)

    return {"table": df, "summary": summary}


def monte_carlo(profile: Profile, inputs: Inputs, assumptions: Assumptions,
                runs: int = 500, seed: int = 12345) -> Dict[str, Any]:
    """
    Repeat run() on bootstrap returns. Run i uses seed + 2*i
    (drawdown takes seed + 1), so no two runs share a stream.
    """
    runs = max(1, int(runs))
    boot = dataclasses.replace(assumptions, return_mode="bootstrap")
    logger.info("Monte Carlo: %s runs, seed %s", runs, seed)

    eol = np.empty(runs)
    ruined = np.zeros(runs, dtype=bool)
    paths = []
    years = ages = None
    for i in range(runs):
        res = run(profile, inputs, boot, seed=seed + 2 * i, round_whole=False)
        eol[i] = res["summary"]["eol_real"]
        ruined[i] = res["summary"]["ruined"]
        paths.append(res["table"]["Total (Real)"].to_numpy())
        if years is None:
            years = res["table"]["Year"].to_numpy()
            ages = res["table"]["Your Age"].to_numpy()

    p10, p50, p90 = np.percentile(eol, [10, 50, 90])
    band = np.percentile(np.vstack(paths), [10, 50, 90], axis=0)
    bands = pd.DataFrame({"Year": years, "Your Age": ages, "P10": band[0], "P50": band[1], "P90": band[2]})

    success = float((~ruined).mean() * 100.0)
    logger.info("Monte Carlo done: success %.1f%%, median EOL real %.0f", success, p50)
    return {
        "success_rate": success,
        "eol_p10": float(p10),
        "eol_p50": float(p50),
        "eol_p90": float(p90),
        "bands": bands,
        "runs": runs,
    }
