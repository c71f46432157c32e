from planright.life_insurance import (
    analyze_life_insurance, coverage_gap, dime_breakdown, estimate_premium, nearest_age_bracket, spouse_dime,
)
from planright.schema import LifeInsuranceInputs


def _family():
    return LifeInsuranceInputs(
        annual_income=100_000, income_years=10, credit_card_debt=20_000,
        mortgage_balance=300_000, num_children=1, current_coverage=200_000,
    )


def test_dime_total_and_gap():
    b = dime_breakdown(_family())
    assert (b.debt, b.income, b.mortgage, b.education) == (20_000, 1_000_000, 300_000, 150_000)
    assert b.total == 1_470_000

    gap = coverage_gap(b.total, 200_000)
    assert gap.gap == 1_270_000
    assert gap.is_overinsured is False


def test_overinsured():
    gap = coverage_gap(100, 200)
    assert gap.gap == -100
    assert gap.is_overinsured is True


def test_negative_inputs_are_clamped():
    b = dime_breakdown(LifeInsuranceInputs(annual_income=-5, credit_card_debt=-100))
    assert b.income == 0
    assert b.debt == 0


def test_age_bracket_ties_go_low():
    assert nearest_age_bracket(27.5, [25, 30, 35]) == 25
    assert nearest_age_bracket(29, [25, 30, 35]) == 30


def test_premium_estimate():
    p = estimate_premium(500_000, 35, "good")
    assert p.age_bracket == 35
    assert p.term_monthly == 28
    assert p.term_annual == 336
    assert p.whole_life_monthly == 336

    assert estimate_premium(500_000, 35, "good", smoker=True).term_monthly == 70
    assert estimate_premium(1_000_000, 40, "excellent").term_monthly == 56
    assert estimate_premium(500_000, 35, "unknown").term_monthly == 28


def test_spouse_dime():
    assert spouse_dime(_family()) is None

    inputs = _family()
    inputs.spouse_income = 50_000
    res = spouse_dime(inputs)
    assert res["breakdown"].debt == 0
    assert res["breakdown"].total == 500_000 + 150_000 + 75_000
    assert res["gap"].gap == 725_000


def test_drop_reasons_for_empty_nest():
    res = analyze_life_insurance(LifeInsuranceInputs())
    assert res["drop_reasons"] == [
        "Mortgage is paid off",
        "Children are grown (18+)",
        "Minimal debts to cover",
    ]
    assert res["spouse"] is None


def test_premium_halves_round_up():
    # $250k at 30 in good health is exactly $12.50 a month
    p = estimate_premium(250_000, 30, "good")
    assert p.term_monthly == 13
    assert p.term_annual == 150
    assert p.whole_life_monthly == 150
    assert p.whole_life_annual == 1_800
