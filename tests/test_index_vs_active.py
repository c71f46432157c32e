import pytest

from planright.index_vs_active import SPIVA_DATA, growth_comparison, spiva_table, total_cost_drag


def test_total_cost_drag():
    assert total_cost_drag() == pytest.approx(1.8)


def test_growth_comparison_defaults():
    res = growth_comparison()
    df = res["table"]
    assert len(df) == 31
    assert df["index"].iloc[0] == 100_000
    assert res["final_index"] == pytest.approx(100_000 * 1.0697 ** 30)
    assert res["final_active"] == pytest.approx(100_000 * 1.06 ** 30)
    assert res["difference"] > 0
    assert res["percent_difference"] == pytest.approx(res["difference"] / res["final_active"] * 100, abs=0.05)


def test_equal_fees_no_difference():
    res = growth_comparison(50_000, 10, 0.5, 0.5, 6)
    assert res["difference"] == 0
    assert res["percent_difference"] == 0.0
    assert len(res["table"]) == 11


def test_spiva_table():
    df = spiva_table()
    assert len(df) == len(SPIVA_DATA)
    assert (df["er_gap"] > 0).all()
