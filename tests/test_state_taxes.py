import pytest

from planright.schema import RetirementIncomeProfile
from planright.taxes_states.base import bracket_tax
from planright.taxes_states.comparison import (
    MAX_COMPARISONS, add_comparison, compare_states, get_state, property_tax, quick_reference_states,
    retirement_friendly_states, sales_tax, state_income_tax,
)
from planright.taxes_states.data import CA_BRACKETS, STATE_TAX_DATA
from planright.taxes_states.registry import get_state_calculator


def test_table_size():
    assert len(STATE_TAX_DATA) == 25
    assert STATE_TAX_DATA["WA"]["has_estate_tax"] is True
    assert STATE_TAX_DATA["FL"]["has_estate_tax"] is False


def test_california_brackets():
    assert bracket_tax(10_412, CA_BRACKETS) == pytest.approx(104.12)
    assert bracket_tax(24_684, CA_BRACKETS) == pytest.approx(104.12 + 14_272 * 0.02)
    assert bracket_tax(0, CA_BRACKETS) == 0.0


def test_retirement_income_exempt_states():
    assert state_income_tax(get_state("PA"), 100_000) == 0.0
    assert state_income_tax(get_state("FL"), 100_000) == 0.0


def test_social_security_exclusion():
    # CA exempts SS: 70k of the 100k is taxed through the brackets
    assert state_income_tax(get_state("CA"), 100_000, ss_income=30_000) == pytest.approx(3_162.85)
    # CT taxes SS at its flat rate
    assert state_income_tax(get_state("CT"), 100_000, ss_income=30_000) == pytest.approx(6_990)
    assert state_income_tax(get_state("AZ"), 100_000, ss_income=30_000) == pytest.approx(1_750)


def test_property_and_sales():
    assert property_tax(get_state("TX"), 400_000) == pytest.approx(7_200)
    assert sales_tax(get_state("TN"), 80_000) == pytest.approx(1_680)


def test_registry_fallbacks():
    assert get_state_calculator("ZZ", state_rate=5.0)(100_000) == pytest.approx(5_000)
    assert get_state_calculator("AZ", local_rate=1.0)(100_000) == pytest.approx(3_500)
    assert get_state_calculator("pa")(100_000) == 0.0


def test_add_comparison_limits():
    full = ["FL", "TX", "NV"]
    assert len(full) == MAX_COMPARISONS
    assert add_comparison(full, "AZ") == full
    assert add_comparison(["FL"], "fl") == ["FL"]
    assert add_comparison(["FL"], "ZZ") == ["FL"]
    assert add_comparison(["FL"], "az") == ["FL", "AZ"]


def test_compare_states():
    res = compare_states("CA", ["FL", "PA", "TX", "NV"], RetirementIncomeProfile())
    assert res["comparisons"] == ["FL", "PA", "TX"]
    df = res["table"]
    assert list(df["state"]) == ["CA", "FL", "PA", "TX"]
    assert res["lowest_tax_state"] == "FL"

    fl = df[df["state"] == "FL"].iloc[0]
    assert fl["total_tax"] == pytest.approx(5_000)
    assert fl["annual_savings"] > 0
    assert fl["lifetime_savings"] == pytest.approx(fl["annual_savings"] * 20)


def test_compare_unknown_state():
    with pytest.raises(KeyError):
        compare_states("ZZ", ["FL"], RetirementIncomeProfile())


def test_reference_lists():
    friendly = [s["code"] for s in retirement_friendly_states()]
    assert "PA" in friendly and "FL" in friendly
    assert "CA" not in friendly
    names = [s["name"] for s in retirement_friendly_states()]
    assert names == sorted(names)

    quick = quick_reference_states()
    assert len(quick) == 10
    assert quick[0] == "AK" and quick[-1] == "PA"
