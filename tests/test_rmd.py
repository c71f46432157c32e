import pytest

from planright.rmd import UNIFORM_DIVISORS, calc_rmd, maybe_rmd, rmd_start_age_from_dob, year_to_age


def test_start_age_by_birth_year():
    assert rmd_start_age_from_dob("1949-03-01") == 72
    assert rmd_start_age_from_dob("1955-06-01") == 73
    assert rmd_start_age_from_dob("1962-01-01") == 75


def test_calc_rmd():
    assert calc_rmd(265_000, 73) == pytest.approx(10_000)
    assert calc_rmd(100_000, 72) == 0.0
    assert calc_rmd(-5, 80) == 0.0
    # past the table uses the age-120 divisor
    assert calc_rmd(100_000, 130) == pytest.approx(100_000 / UNIFORM_DIVISORS[120])


def test_maybe_rmd_respects_start_age():
    assert maybe_rmd(74, 255_000, 75) == 0.0
    assert maybe_rmd(75, 246_000, 75) == pytest.approx(10_000)


def test_year_to_age():
    assert year_to_age(1960, 2026, 2030) == 70
