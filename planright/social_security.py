# planright/social_security.py
# Helpers for Social Security PIA, claiming-age adjustments, spousal benefits, proration and COLA
from .formatting import clamp, num
from .tax_tables import FRA, SS_BEND_POINTS, SS_EARNINGS_TEST

MIN_CLAIM_AGE = 62
MAX_CLAIM_AGE = 70
CLAIMING_AGES = list(range(MIN_CLAIM_AGE, MAX_CLAIM_AGE + 1))

EARLY_RATE_FIRST_36 = 5.0 / 9.0 / 100.0     # per month
EARLY_RATE_BEYOND_36 = 5.0 / 12.0 / 100.0   # per month
DELAY_RATE = 2.0 / 3.0 / 100.0              # per month, 8% a year
SPOUSAL_RATE_FIRST_36 = 25.0 / 36.0 / 100.0


def calc_pia(annual_income: float) -> float:
    """
    Monthly Primary Insurance Amount from average indexed annual earnings.
    AIME = annual / 12, then 90% / 32% / 15% across the two bend points.
    """
    income = num(annual_income)
    if income <= 0:
        return 0.0
    aime = income / 12.0
    b1, b2 = SS_BEND_POINTS
    if aime <= b1:
        return aime * 0.90
    if aime <= b2:
        return b1 * 0.90 + (aime - b1) * 0.32
    return b1 * 0.90 + (b2 - b1) * 0.32 + (aime - b2) * 0.15


def claim_age_factor(claim_age: float, fra: float = FRA) -> float:
    """
    Multiplier applied to PIA for claiming at `claim_age`.
    - early: 5/9% per month for 36 months, then 5/12%
    - late: +2/3% per month
    """
    months = (num(claim_age, fra) - fra) * 12.0
    if months < 0:
        early = -months
        if early <= 36:
            return 1.0 - early * EARLY_RATE_FIRST_36
        return 1.0 - 36 * EARLY_RATE_FIRST_36 - (early - 36) * EARLY_RATE_BEYOND_36
    return 1.0 + months * DELAY_RATE


def adjust_for_claim_age(monthly_pia: float, claim_age: float, fra: float = FRA) -> float:
    return num(monthly_pia) * claim_age_factor(claim_age, fra)


def ss_annual_at_claim(fra_monthly: float, claim_age: int) -> float:
    """
    Annual benefit when claiming at `claim_age`, given the monthly benefit at FRA.
    Returns 0 below age 62; ages past 70 earn no further credit.
    """
    if fra_monthly <= 0 or claim_age < MIN_CLAIM_AGE:
        return 0.0
    age = min(claim_age, MAX_CLAIM_AGE)
    return adjust_for_claim_age(fra_monthly, age) * 12.0


def spousal_benefit(spouse_pia: float, claim_age: float, fra: float = FRA) -> float:
    """
    Up to 50% of the spouse's PIA.
    Early reduction is 25/36% per month for 36 months, then 5/12%; there is no delay credit.
    """
    base = 0.5 * max(0.0, num(spouse_pia))
    months_early = max(0.0, (fra - num(claim_age, fra)) * 12.0)
    if months_early <= 0:
        return base
    if months_early <= 36:
        factor = 1.0 - months_early * SPOUSAL_RATE_FIRST_36
    else:
        factor = 1.0 - 36 * SPOUSAL_RATE_FIRST_36 - (months_early - 36) * EARLY_RATE_BEYOND_36
    return base * factor


def effective_benefit(own_pia: float, spouse_pia: float, claim_age: float, fra: float = FRA) -> float:
    """Monthly benefit actually paid: the larger of the own and spousal benefit."""
    own = adjust_for_claim_age(own_pia, claim_age, fra)
    return max(own, spousal_benefit(spouse_pia, claim_age, fra))


def apply_earnings_test(annual_benefit: float, earned_income: float, age: float, fra: float = FRA) -> float:
    """
    Withhold benefits from workers under FRA.
    - years before the FRA year: $1 per $2 over the annual exempt amount
    - the calendar year reaching FRA: $1 per $3 over the higher exempt amount
    """
    benefit = num(annual_benefit)
    age = num(age, fra)
    if age >= fra:
        return benefit
    if benefit <= 0:
        return 0.0
    earned = clamp(earned_income)
    if earned <= 0:
        return benefit

    fra_year = int(age) == int(fra) - 1 and age + 1 >= fra
    if fra_year:
        exempt, rate = SS_EARNINGS_TEST["fra_year_exempt"], SS_EARNINGS_TEST["fra_year_rate"]
    else:
        exempt, rate = SS_EARNINGS_TEST["annual_exempt"], SS_EARNINGS_TEST["rate"]
    reduction = max(0.0, earned - exempt) * rate
    return max(0.0, benefit - reduction)


def compute_ss_for_year(year: int, first_year: int, start_month: int,
                        base_annual: float, cola: float) -> float:
    """
    Returns the SS benefit paid in year `year`.

    Rules:
    - If year < first_year: 0
    - If year == first_year: prorated by months = 13 - start_month
      (claim in September -> 4 months paid)
    - If year > first_year: full annual, grown by COLA
    """
    if base_annual <= 0 or year < first_year:
        return 0.0

    full_year_amount = base_annual * ((1.0 + cola) ** (year - first_year))
    if year == first_year:
        months = max(0, min(12, 13 - int(start_month)))
        return full_year_amount * (months / 12.0)
    return full_year_amount
