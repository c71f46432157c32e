import math

import pytest

from planright.schema import SSOptimizerInputs
from planright.ss_optimizer import (
    OPTIMAL_SPOUSAL_STRATEGY, adjusted_life_expectancy, base_life_expectancy, break_even,
    claiming_age_options, early_claiming_reduction, lifetime_benefits, optimize_social_security, spousal_strategies,
    survival_probability,
)


def test_claiming_options():
    opts = claiming_age_options(80_000)
    assert [o["age"] for o in opts] == list(range(62, 71))
    by_age = {o["age"]: o for o in opts}
    assert by_age[67]["percent_of_fra"] == pytest.approx(100)
    assert by_age[62]["reduction_or_increase"] == pytest.approx(-30)
    assert by_age[70]["annual_benefit"] == pytest.approx(by_age[70]["monthly_benefit"] * 12)


def test_early_reduction():
    assert early_claiming_reduction(62) == pytest.approx(30)
    assert early_claiming_reduction(67) == 0.0


def test_break_even():
    be = break_even(700, 62, 1_240, 70)
    assert be["break_even_age"] == pytest.approx(80.4)
    assert break_even(1_240, 70, 700, 62)["break_even_age"] == be["break_even_age"]
    assert math.isinf(break_even(1_000, 62, 1_000, 70)["break_even_years"])


def test_break_even_without_benefits():
    be = break_even(0, 62, 0, 70)
    assert be["break_even_age"] is None
    assert be["break_even_years"] is None
    assert (be["cumulative_1"], be["cumulative_2"]) == (0.0, 0.0)

    rows = lifetime_benefits(claiming_age_options(0), 60)
    assert all(r["prob_reach_break_even"] == 0.0 for r in rows if r["claim_age"] > 62)


def test_survival_probability():
    assert survival_probability(60, 50) == 1.0
    assert survival_probability(62, 65, "male") == pytest.approx(0.95)
    assert survival_probability(62, 67.5, "male") == pytest.approx(0.905)
    assert survival_probability(62, 80, "female") == pytest.approx(0.73)
    assert survival_probability(62, 102, "male") == pytest.approx(0.03 * 0.49)


def test_life_expectancy():
    assert base_life_expectancy(60) == 20.8
    # halfway between 65 and 70 uses the lower age
    assert base_life_expectancy(67.5) == 18.3
    assert adjusted_life_expectancy(62, "male", "excellent") == pytest.approx(85.8)
    assert adjusted_life_expectancy(62, override=90) == 90


def test_spousal_strategies():
    plans = spousal_strategies(80_000, 40_000)
    assert len(plans) == 5
    best = next(p for p in plans if p["strategy"] == OPTIMAL_SPOUSAL_STRATEGY)
    assert (best["person1_claim_age"], best["person2_claim_age"]) == (70, 62)
    assert best["survivor_benefit"] == pytest.approx(best["person1_monthly"])

    flipped = next(p for p in spousal_strategies(40_000, 80_000) if p["strategy"] == OPTIMAL_SPOUSAL_STRATEGY)
    assert flipped["person2_claim_age"] == 70


@pytest.mark.parametrize("health,age,confidence", [
    ("poor", 62, "high"),
    ("excellent", 70, "high"),
    ("fair", 67, "medium"),
    ("good", 68, "medium"),
])
def test_recommendation_by_health(health, age, confidence):
    rec = optimize_social_security(SSOptimizerInputs(health=health))["recommendation"]
    assert rec["claim_age"] == age
    assert rec["confidence"] == confidence


def test_thin_portfolio_pulls_back_to_fra():
    rec = optimize_social_security(SSOptimizerInputs(health="excellent", portfolio_value=100_000))["recommendation"]
    assert rec["claim_age"] == 67


def test_married_higher_earner_delays():
    res = optimize_social_security(SSOptimizerInputs(
        is_married=True, spouse_age=58, spouse_gender="female", spouse_average_career_earnings=40_000,
    ))
    rec = res["recommendation"]
    assert (rec["claim_age"], rec["spouse_claim_age"], rec["confidence"]) == (70, 62, "high")
    assert len(res["table"]) == 9
    assert any(line.startswith("Optimal spousal strategy") for line in res["insights"])
