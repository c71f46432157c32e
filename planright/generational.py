# planright/generational.py
# How long an estate can pay a fixed real amount to every adult descendant, generation after generation.
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from .formatting import num

logger = logging.getLogger(__name__)

CHUNK_YEARS = 10
EARLY_STOP_YEAR = 1000
PERPETUAL_CAP = 10_000
PERPETUAL_GROWTH = 0.03
SAFETY_MARGIN = 0.95


@dataclass
class Cohort:
    size: float
    age: int
    can_reproduce: bool
    cumulative_births: float = 0.0


def real_return(nominal_pct: float, inflation_pct: float) -> float:
    return (1 + nominal_pct / 100.0) / (1 + inflation_pct / 100.0) - 1


def living_count(cohorts: List[Cohort]) -> float:
    return sum(c.size for c in cohorts)


def check_perpetual_viability(real_rate: float, tfr: float, generation_length: float,
                              per_ben: float, fund: float, start_bens: float) -> bool:
    """
    Perpetual when the payout rate stays under 95% of (real return - population growth),
    with population growth = (TFR - 2) / generation length.
    """
    growth = (tfr - 2.0) / generation_length
    threshold = real_rate - growth
    if fund <= 0:
        return False
    rate = per_ben * start_bens / fund
    ok = rate < threshold * SAFETY_MARGIN
    logger.debug("Perpetual check: payout %.4f vs threshold %.4f -> %s", rate, threshold * SAFETY_MARGIN, ok)
    return ok


def simulate_years_chunk(cohorts: List[Cohort], fund: float, real_rate: float, per_ben: float,
                         death_age: int, min_dist_age: int, tfr: float, window_start: int,
                         window_end: int, births_per_year: float, num_years: int) -> Dict[str, object]:
    """
    Advance the family and the fund up to num_years.
    Each year: deaths, growth, payout to adults, aging, then births.
    Cohort objects are updated in place; a run ends early when nobody is alive
    or the fund can't cover the payout.
    """
    years = 0
    for _ in range(num_years):
        cohorts = [c for c in cohorts if c.age < death_age]
        if living_count(cohorts) == 0:
            return {"cohorts": cohorts, "fund": fund, "years": years, "depleted": True}

        fund *= 1 + real_rate
        eligible = sum(c.size for c in cohorts if c.age >= min_dist_age)
        fund -= per_ben * eligible
        if fund < 0:
            return {"cohorts": cohorts, "fund": 0.0, "years": years, "depleted": True}

        years += 1
        for c in cohorts:
            c.age += 1

        # all of this year's newborns share one cohort
        newborns = 0.0
        for c in cohorts:
            if c.can_reproduce and window_start <= c.age <= window_end and c.cumulative_births < tfr:
                rate = min(births_per_year, tfr - c.cumulative_births)
                newborns += c.size * rate
                c.cumulative_births += rate
        if newborns > 0:
            cohorts.append(Cohort(size=newborns, age=0, can_reproduce=True))

    return {"cohorts": cohorts, "fund": fund, "years": years, "depleted": False}


def simulate_per_beneficiary_payout(eol_nominal: float, years_from_now: float, nominal_pct: float,
                                    inflation_pct: float, per_ben: float, start_bens: float, tfr: float,
                                    generation_length: float = 30, death_age: int = 90, min_dist_age: int = 21,
                                    cap_years: int = PERPETUAL_CAP, initial_ages: Optional[List[int]] = None,
                                    window_start: int = 25, window_end: int = 35) -> Dict[str, float]:
    """
    Deflate the estate to today's dollars and pay per_ben (real) to every adult each year.

    Returns years (inf when it lasts forever), fund_left_real and last_living_count.
    """
    fund = num(eol_nominal) / (1 + inflation_pct / 100.0) ** years_from_now
    r = real_return(nominal_pct, inflation_pct)
    window_years = window_end - window_start
    births_per_year = tfr / window_years if window_years > 0 else 0.0

    ages = [0] if initial_ages is None else initial_ages
    if ages:
        cohorts = [Cohort(size=1, age=a, can_reproduce=a <= window_end) for a in ages]
    elif start_bens > 0:
        cohorts = [Cohort(size=start_bens, age=0, can_reproduce=True)]
    else:
        cohorts = []

    if check_perpetual_viability(r, tfr, generation_length, per_ben, fund, start_bens) and cap_years >= PERPETUAL_CAP:
        logger.info("Legacy fund is perpetual (payout below sustainable rate); skipping simulation")
        return {"years": float("inf"), "fund_left_real": fund, "last_living_count": start_bens}

    years = 0
    fund_100 = 0.0
    fund_1000 = 0.0
    for t in range(0, cap_years, CHUNK_YEARS):
        res = simulate_years_chunk(cohorts, fund, r, per_ben, death_age, min_dist_age, tfr,
                                   window_start, window_end, births_per_year, min(CHUNK_YEARS, cap_years - t))
        cohorts = res["cohorts"]
        fund = res["fund"]
        years += res["years"]
        if res["depleted"]:
            return {"years": years, "fund_left_real": 0.0, "last_living_count": living_count(cohorts)}

        if t == 100 and fund_100 == 0:
            fund_100 = fund
        if t == EARLY_STOP_YEAR and fund_1000 == 0:
            fund_1000 = fund
        if t > EARLY_STOP_YEAR and cap_years >= PERPETUAL_CAP and fund_100 > 0 and fund > fund_1000 > 0:
            growth = (fund / fund_1000) ** (1.0 / (t - EARLY_STOP_YEAR)) - 1
            if growth > PERPETUAL_GROWTH:
                logger.info("Legacy fund growing %.1f%%/yr in real terms at year %s; treating as perpetual",
                            growth * 100, t)
                return {"years": float("inf"), "fund_left_real": fund, "last_living_count": living_count(cohorts)}

    return {"years": years, "fund_left_real": fund, "last_living_count": living_count(cohorts)}
