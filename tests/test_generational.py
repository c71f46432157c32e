import math

import pytest

from planright.generational import (
    Cohort, check_perpetual_viability, real_return, simulate_per_beneficiary_payout, simulate_years_chunk,
)


def chunk(cohorts, fund, years, tfr=0.0, births_per_year=0.0, real_rate=0.0, per_ben=10):
    return simulate_years_chunk(cohorts, fund, real_rate, per_ben, death_age=90, min_dist_age=21, tfr=tfr,
                                window_start=25, window_end=35, births_per_year=births_per_year,
                                num_years=years)


def test_real_return():
    assert real_return(7, 2) == pytest.approx(1.07 / 1.02 - 1)
    assert real_return(3, 3) == pytest.approx(0.0)


def test_perpetual_viability():
    assert check_perpetual_viability(0.04, 2.0, 30, 10_000, 1_000_000, 2) is True
    assert check_perpetual_viability(0.04, 2.0, 30, 30_000, 1_000_000, 2) is False
    assert check_perpetual_viability(0.04, 2.0, 30, 10_000, 0, 2) is False


def test_chunk_pays_adults_until_empty():
    res = chunk([Cohort(size=1, age=30, can_reproduce=False)], 100, 10)
    assert res["years"] == 10
    assert res["fund"] == pytest.approx(0)
    assert res["depleted"] is False


def test_chunk_depletes_when_fund_short():
    res = chunk([Cohort(size=1, age=30, can_reproduce=False)], 25, 10)
    assert res["depleted"] is True
    assert res["years"] == 2
    assert res["fund"] == 0.0


def test_chunk_stops_when_everyone_has_died():
    res = chunk([Cohort(size=1, age=89, can_reproduce=False)], 1_000, 5)
    assert res["depleted"] is True
    assert res["years"] == 1


def test_children_are_not_paid():
    res = chunk([Cohort(size=3, age=5, can_reproduce=False)], 100, 5)
    assert res["fund"] == 100
    assert res["depleted"] is False


def test_births_inside_window():
    parent = Cohort(size=1, age=24, can_reproduce=True)
    res = chunk([parent], 1_000, 1, tfr=2.0, births_per_year=0.2)
    assert len(res["cohorts"]) == 2
    baby = res["cohorts"][-1]
    assert (baby.age, baby.size) == (0, pytest.approx(0.2))
    assert parent.cumulative_births == pytest.approx(0.2)


def test_perpetual_shortcut():
    res = simulate_per_beneficiary_payout(10_000_000, 0, 7, 2, 10_000, 2, 2.0)
    assert math.isinf(res["years"])
    assert res["fund_left_real"] == pytest.approx(10_000_000)


def test_estate_is_deflated_to_today():
    res = simulate_per_beneficiary_payout(1_000_000 * 1.02 ** 10, 10, 7, 2, 1_000, 2, 2.0)
    assert res["fund_left_real"] == pytest.approx(1_000_000)


def test_finite_payout_runs_out():
    res = simulate_per_beneficiary_payout(100_000, 0, 0, 0, 10_000, 1, 0.0, initial_ages=[30])
    assert res["years"] == 10
    assert res["fund_left_real"] == 0.0
    assert res["last_living_count"] == 1


def test_cap_years_limits_simulation():
    res = simulate_per_beneficiary_payout(10_000_000, 0, 7, 2, 10_000, 1, 0.0, cap_years=20, initial_ages=[30])
    assert res["years"] == 20
    assert res["fund_left_real"] > 0
