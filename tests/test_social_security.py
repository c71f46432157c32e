import pytest

from planright.social_security import (
    apply_earnings_test, calc_pia, claim_age_factor, compute_ss_for_year, effective_benefit,
    spousal_benefit, ss_annual_at_claim,
)


def test_pia_bend_points():
    assert calc_pia(0) == 0.0
    assert calc_pia(12_000) == pytest.approx(900)
    assert calc_pia(80_000) == pytest.approx(2_879.21, abs=0.01)


def test_claim_age_factors():
    assert claim_age_factor(62) == pytest.approx(0.70)
    assert claim_age_factor(64) == pytest.approx(0.80)
    assert claim_age_factor(67) == pytest.approx(1.0)
    assert claim_age_factor(70) == pytest.approx(1.24)


def test_annual_at_claim():
    assert ss_annual_at_claim(2_000, 61) == 0.0
    assert ss_annual_at_claim(2_000, 67) == pytest.approx(24_000)
    # no credit past 70
    assert ss_annual_at_claim(2_000, 72) == pytest.approx(2_000 * 1.24 * 12)


def test_spousal_benefit():
    assert spousal_benefit(2_000, 67) == pytest.approx(1_000)
    assert spousal_benefit(2_000, 64) == pytest.approx(750)
    assert spousal_benefit(2_000, 70) == pytest.approx(1_000)
    assert effective_benefit(500, 2_000, 67) == pytest.approx(1_000)


def test_earnings_test():
    assert apply_earnings_test(20_000, 43_400, 63) == pytest.approx(10_000)
    assert apply_earnings_test(20_000, 65_160, 66) == pytest.approx(19_000)
    assert apply_earnings_test(20_000, 100_000, 67) == 20_000
    assert apply_earnings_test(20_000, 0, 63) == 20_000
    assert apply_earnings_test(5_000, 200_000, 63) == 0.0


def test_proration_and_cola():
    assert compute_ss_for_year(2029, 2030, 9, 12_000, 0.02) == 0.0
    assert compute_ss_for_year(2030, 2030, 9, 12_000, 0.02) == pytest.approx(4_000)
    assert compute_ss_for_year(2031, 2030, 9, 12_000, 0.02) == pytest.approx(12_240)
