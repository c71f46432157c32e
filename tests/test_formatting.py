import math

import pytest

from planright.formatting import clamp, compact_money, money, num, pct, round_half_up


def test_num_falls_back_on_bad_input():
    assert num(None) == 0.0
    assert num("abc", 5) == 5.0
    assert num(float("nan")) == 0.0
    assert num(float("inf"), 1) == 1.0
    assert num("3.5") == 3.5


def test_clamp_bounds():
    assert clamp(-5) == 0.0
    assert clamp(150, 0, 100) == 100
    assert clamp("oops", 0, 10, default=4) == 4
    assert not math.isinf(clamp(10))


def test_money_and_compact():
    assert money(1234.4) == "$1,234"
    assert money(-500) == "-$500"
    assert compact_money(1_250_000) == "$1.25M"
    assert compact_money(150_000) == "$150K"
    assert compact_money(950) == "$950"
    assert compact_money(-2_000) == "-$2K"


def test_pct():
    assert pct(0.22) == "22.0%"
    assert pct(0.5, 0) == "50%"


def test_round_half_up():
    assert round_half_up(12.5) == 13
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2
    assert round_half_up(80.25, 1) == pytest.approx(80.3)
    assert math.isinf(round_half_up(float("inf"), 1))
