import pytest

from planright.tax_tables import normalize_status
from planright.taxes import (
    calc_estate_tax, calc_ltcg_tax, calc_niit, calc_ordinary_tax, estate_exemption,
    irmaa_surcharge, marginal_rate, ss_taxable_amount,
)


def test_normalize_status():
    assert normalize_status("MFJ") == "married"
    assert normalize_status("joint") == "married"
    assert normalize_status("HOH") == "single"
    assert normalize_status(None) == "single"


def test_ordinary_tax_subtracts_standard_deduction():
    assert calc_ordinary_tax(16_100, "single") == 0.0
    assert calc_ordinary_tax(16_100 + 12_400, "single") == pytest.approx(1_240)
    # 12,400 at 10% + 38,000 at 12%
    assert calc_ordinary_tax(16_100 + 50_400, "single") == pytest.approx(5_800)
    assert calc_ordinary_tax(-10, "single") == 0.0


def test_marginal_rate():
    assert marginal_rate(0, "single") == 0.10
    assert marginal_rate(16_100 + 50_401, "single") == 0.22
    assert marginal_rate(10_000_000, "married") == 0.37


def test_ltcg_stacks_on_ordinary_income():
    assert calc_ltcg_tax(10_000, "single", 0) == 0.0
    assert calc_ltcg_tax(10_000, "single", 49_450) == pytest.approx(1_500)
    # 4,450 still in the 0% band, 5,550 at 15%
    assert calc_ltcg_tax(10_000, "single", 45_000) == pytest.approx(832.5)


def test_niit_on_lesser_of_income_and_excess():
    assert calc_niit(50_000, "single", 220_000) == pytest.approx(760)
    assert calc_niit(50_000, "single", 150_000) == 0.0


def test_irmaa_tiers():
    assert irmaa_surcharge(100_000, married=False) == 0.0
    assert irmaa_surcharge(150_000, married=False) == 202.90
    assert irmaa_surcharge(150_000, married=True) == 0.0


def test_social_security_taxation_tiers():
    assert ss_taxable_amount(20_000, 10_000, "single") == 0.0
    assert ss_taxable_amount(20_000, 20_000, "single") == pytest.approx(2_500)
    assert ss_taxable_amount(30_000, 20_000, "single") == pytest.approx(5_350)
    assert ss_taxable_amount(40_000, 500_000, "single") == pytest.approx(34_000)


def test_estate_tax():
    assert calc_estate_tax(20_000_000, "single", 2026) == pytest.approx(2_000_000)
    assert calc_estate_tax(20_000_000, "married", 2026) == 0.0
    assert estate_exemption("single", 2027) == pytest.approx(15_000_000 * 1.026)


def test_rate_assumptions_from_brackets():
    from planright.schema import RateAssumptions

    rates = RateAssumptions.for_income(100_000, "single")
    assert rates.standard_rate == 0.22
    assert rates.cash_gift_rate == 0.22
    assert RateAssumptions.for_income(300_000, "MFJ").niit_income_threshold == 250_000
