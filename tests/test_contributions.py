import pytest

from planright.contributions import (
    analyze_contributions, default_monthly_budget, employer_match, future_value, max_401k, max_hsa,
    max_ira, optimal_allocation, optimization_insights, priority_stack, years_to_retirement,
)
from planright.schema import ContributionInputs


def test_limits_by_age():
    assert max_401k(30) == 24_000
    assert max_401k(55) == 32_000
    assert max_401k(61) == 35_250
    assert max_401k(64) == 32_000
    assert max_ira(49) == 7_500
    assert max_ira(50) == 8_600
    assert max_hsa(False, 40) == 4_400
    assert max_hsa(True, 55) == 9_750


def test_employer_match():
    assert employer_match(100_000, 10_000, 100, 6) == pytest.approx(6_000)
    assert employer_match(100_000, 3_000, 100, 6) == pytest.approx(3_000)
    assert employer_match(100_000, 10_000, 50, 6) == pytest.approx(3_000)


def test_future_value_and_horizon():
    assert future_value(1_000, 1, 0.07) == pytest.approx(1_070)
    assert future_value(1_000, 5, 0) == 5_000
    assert years_to_retirement(30) == 35
    assert years_to_retirement(60) == 10


def test_default_budget():
    assert default_monthly_budget(ContributionInputs()) == 2_000
    assert default_monthly_budget(ContributionInputs(pre_tax_contrib=12_000, roth_contrib=6_000)) == 1_500


def test_allocation_fills_in_order():
    alloc = optimal_allocation(ContributionInputs(), 2_000)
    assert alloc["traditional_401k"] == pytest.approx(6_000)
    assert alloc["roth_ira"] == pytest.approx(7_500)
    assert alloc["roth_401k"] == pytest.approx(10_500)
    assert alloc["taxable"] == 0.0
    assert alloc["total"] == pytest.approx(24_000)


def test_allocation_caps_and_overflow_to_taxable():
    alloc = optimal_allocation(ContributionInputs(), 5_000)
    assert alloc["traditional_401k"] + alloc["roth_401k"] == pytest.approx(24_000)
    assert alloc["roth_ira"] == pytest.approx(7_500)
    assert alloc["taxable"] == pytest.approx(60_000 - 24_000 - 7_500)
    assert alloc["total"] == pytest.approx(60_000)


def test_allocation_with_family_hsa():
    alloc = optimal_allocation(ContributionInputs(is_married=True, has_hdhp=True), 5_000)
    assert alloc["hsa"] == pytest.approx(8_750)


def test_priority_stack_order():
    stack = priority_stack(ContributionInputs())
    assert [p.id for p in stack] == ["401k-match", "hsa", "roth-ira", "401k-max", "mega-backdoor", "taxable"]
    hsa = next(p for p in stack if p.id == "hsa")
    assert hsa.available is False


def test_backdoor_roth_above_income_limit():
    stack = priority_stack(ContributionInputs(income=200_000))
    assert next(p for p in stack if p.id == "roth-ira").name == "Backdoor Roth IRA"


def test_missed_match_is_first_insight():
    insights = optimization_insights(ContributionInputs())
    assert insights[0].kind == "warning"
    assert "Free Money" in insights[0].title


def test_analyze_contributions_keys():
    res = analyze_contributions(ContributionInputs(pre_tax_contrib=6_000))
    assert set(res) == {"monthly_budget", "stack", "insights", "allocation", "impact", "actions"}
    assert res["monthly_budget"] == 500
    assert res["impact"]["optimal"]["total"] > 0


# Defaults: $100k salary with a 100% match on 6%, so 6,000 to the match, 7,500 Roth IRA,
# 18,000 more 401(k) and 72,000 - 24,000 - 6,000 = 42,000 of mega backdoor room.
MEGA = dict(has_after_tax_401k=True, has_in_plan_conversion=True)
SWEEP_ANNUAL = [0, 3_000, 6_000, 13_500, 20_000, 31_500, 50_000, 73_500, 100_000]


def _fill_order(alloc):
    return [
        ("match", alloc["traditional_401k"]),
        ("roth_ira", alloc["roth_ira"]),
        ("401k", alloc["roth_401k"]),
        ("after_tax", alloc["after_tax_401k"]),
        ("taxable", alloc["taxable"]),
    ]


@pytest.mark.parametrize("mega", [False, True])
@pytest.mark.parametrize("annual", SWEEP_ANNUAL)
def test_allocation_invariants(annual, mega):
    inputs = ContributionInputs(**(MEGA if mega else {}))
    alloc = optimal_allocation(inputs, annual / 12)
    caps = {"match": 6_000, "roth_ira": 7_500, "401k": 18_000, "after_tax": 42_000 if mega else 0.0,
            "taxable": float("inf")}

    buckets = [v for k, v in alloc.items() if k != "total"]
    assert sum(buckets) == pytest.approx(annual)
    assert alloc["total"] == pytest.approx(annual)
    assert all(v >= 0 for v in buckets)
    assert alloc["traditional_401k"] + alloc["roth_401k"] <= max_401k(35)

    order = _fill_order(alloc)
    for name, amount in order:
        assert amount <= caps[name] + 1e-6
    for (name, amount), (_, later) in zip(order, order[1:]):
        if later > 1e-6:
            assert amount == pytest.approx(caps[name])


def test_mega_backdoor_room():
    alloc = optimal_allocation(ContributionInputs(**MEGA), 100_000 / 12)
    assert alloc["after_tax_401k"] == pytest.approx(42_000)
    assert alloc["taxable"] == pytest.approx(100_000 - 73_500)
    mega = next(p for p in priority_stack(ContributionInputs(**MEGA)) if p.id == "mega-backdoor")
    assert mega.limit == pytest.approx(42_000)


def test_zero_budget_allocates_nothing():
    alloc = optimal_allocation(ContributionInputs(has_hdhp=True, **MEGA), 0)
    assert alloc["total"] == 0.0
    assert all(v == 0.0 for v in alloc.values())
