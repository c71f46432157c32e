import pytest

from planright.errors import InputValidationError
from planright.projection import CORE_COLS, monte_carlo, run, withdrawal_taxes
from planright.schema import Assumptions, Inputs, Profile


def flat_assumptions(**kw):
    base = dict(return_pct=0.0, inflation_pct=0.0, dividend_yield_pct=0.0)
    base.update(kw)
    return Assumptions(**base)


def single(age=60, retirement_age=65, state="FL"):
    return Profile(filing_status="single", age=age, spouse_age=None, retirement_age=retirement_age, state=state)


def inputs(taxable=0.0, pre_tax=0.0, roth=0.0, rate=4.0, **kw):
    return Inputs(
        balances={"taxable": taxable, "pre_tax": pre_tax, "roth": roth},
        contributions={},
        withdrawal_rate_pct=rate,
        **kw,
    )


# -------- withdrawal_taxes --------
def test_roth_withdrawals_are_tax_free():
    res = withdrawal_taxes(10_000, "single", 0, 0, 100_000, 0)
    assert res["tax"] == 0.0
    assert res["draw"]["r"] == pytest.approx(10_000)


def test_taxable_at_full_basis_has_no_gain():
    res = withdrawal_taxes(10_000, "single", 100_000, 0, 0, 100_000)
    assert res["capgain"] == 0.0
    assert res["new_basis"] == pytest.approx(90_000)


def test_rmd_floor_on_pre_tax_draw():
    res = withdrawal_taxes(10_000, "single", 50_000, 50_000, 0, 50_000, rmd=8_000)
    assert res["draw"]["p"] == pytest.approx(8_000)
    assert res["draw"]["t"] == pytest.approx(2_000)


def test_empty_portfolio_draws_nothing():
    res = withdrawal_taxes(10_000, "single", 0, 0, 0, 0)
    assert res["tax"] == 0.0
    assert res["draw"] == {"t": 0.0, "p": 0.0, "r": 0.0}


# -------- validation --------
@pytest.mark.parametrize("profile,inp,field", [
    (single(age=130), inputs(roth=1), "age"),
    (single(age=60, retirement_age=60), inputs(roth=1), "retirement_age"),
    (single(), inputs(roth=-1), "balances.roth"),
    (single(), inputs(roth=1, rate=150), "withdrawal_rate_pct"),
    (Profile("MFJ", 60, None, 65, "FL"), inputs(roth=1), "spouse_age"),
])
def test_validation_errors(profile, inp, field):
    with pytest.raises(InputValidationError) as exc:
        run(profile, inp, flat_assumptions())
    assert exc.value.field == field


def test_negative_inflation_rejected():
    with pytest.raises(InputValidationError):
        run(single(), inputs(roth=1), flat_assumptions(inflation_pct=-1))


# -------- engine --------
def test_roth_only_portfolio_runs_out():
    res = run(single(), inputs(roth=100_000), flat_assumptions())
    df, s = res["table"], res["summary"]
    assert list(df.columns) == CORE_COLS
    assert len(df) == 6 + 30
    assert s["years_to_retirement"] == 5
    assert s["years_in_retirement"] == 30
    assert s["y1_after_tax_real"] == pytest.approx(4_000)
    assert s["ruined"] is True
    assert s["survival_years"] == 24
    assert s["eol_nominal"] == 0.0
    assert (df["Taxes"] == 0).all()


def test_rmds_start_and_excess_moves_to_taxable():
    res = run(single(age=72, retirement_age=73), inputs(pre_tax=1_000_000, rate=0.0), flat_assumptions(),
              round_whole=False)
    first = res["table"].iloc[2]
    rmd = 1_000_000 / 25.5
    assert first["Your Age"] == 74
    assert first["RMD"] == pytest.approx(rmd)
    assert first["Pre-Tax"] == pytest.approx(1_000_000 - rmd)
    assert first["Taxable"] > 0
    assert first["Taxes"] > 0


def test_married_couple_collects_social_security():
    profile = Profile("MFJ", 60, 58, 65, "MD")
    inp = inputs(pre_tax=800_000, taxable=200_000, social_security={
        "include": True, "primary_income": 80_000, "primary_age": 67,
        "spouse_income": 40_000, "spouse_age": 67,
    })
    df = run(profile, inp, Assumptions())["table"]
    assert df["Spouse Age"].notna().all()
    assert df.loc[df["Your Age"] == 66, "Social Security"].iloc[0] == 0
    assert df.loc[df["Your Age"] == 68, "Social Security"].iloc[0] > 0


def test_roth_conversions_before_rmd_age():
    res = run(single(age=60, retirement_age=61), inputs(pre_tax=500_000, taxable=200_000, rate=3.0,
                                                        conversions={"enabled": True, "target_bracket": 0.22}),
              flat_assumptions())
    s = res["summary"]
    assert s["total_roth_conversions"] > 0
    assert s["conversion_taxes_paid"] > 0
    assert (res["table"].loc[res["table"]["Your Age"] >= 73, "Roth Conversion"] == 0).all()


def test_monte_carlo_is_deterministic():
    profile = single(age=55, retirement_age=60)
    inp = inputs(taxable=100_000, pre_tax=300_000, roth=50_000)
    a = monte_carlo(profile, inp, Assumptions(), runs=5, seed=42)
    b = monte_carlo(profile, inp, Assumptions(), runs=5, seed=42)
    assert a["eol_p50"] == b["eol_p50"]
    assert a["success_rate"] == b["success_rate"]
    assert 0 <= a["success_rate"] <= 100
    assert a["eol_p10"] <= a["eol_p50"] <= a["eol_p90"]
    assert len(a["bands"]) == 6 + 35
    assert a["runs"] == 5
