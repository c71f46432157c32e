import pytest

from planright.errors import InputValidationError
from planright.returns import SP500_END_YEAR, SP500_RAW, SP500_SERIES, SP500_START_YEAR, build_return_generator


def test_history_covers_every_year():
    assert len(SP500_RAW) == SP500_END_YEAR - SP500_START_YEAR + 1


def test_series_is_capped_then_halved():
    assert len(SP500_SERIES) == 2 * len(SP500_RAW)
    assert SP500_SERIES.max() <= 15.0
    assert SP500_SERIES.min() >= -15.0
    assert SP500_SERIES[len(SP500_RAW)] == pytest.approx(7.5)


def test_fixed():
    assert list(build_return_generator("fixed", 3, 5.0)) == pytest.approx([1.05, 1.05, 1.05])


def test_historical_from_1928():
    first, second = list(build_return_generator("historical", 2))
    assert first == pytest.approx(1.15)
    assert second == pytest.approx(0.917)


def test_historical_wraps():
    out = list(build_return_generator("historical", 5, start_year=1928, data=[10, 20]))
    assert out == pytest.approx([1.1, 1.2, 1.1, 1.2, 1.1])


def test_real_series_deflates():
    out = list(build_return_generator("historical", 1, inflation_pct=10, series="real", data=[10]))
    assert out == pytest.approx([1.0])


def test_bootstrap_is_seeded():
    a = list(build_return_generator("bootstrap", 30, seed=7))
    b = list(build_return_generator("bootstrap", 30, seed=7))
    c = list(build_return_generator("bootstrap", 30, seed=8))
    assert a == b
    assert a != c
    assert all(0.85 <= f <= 1.15 for f in a)


def test_bad_mode_and_empty_data():
    with pytest.raises(InputValidationError):
        list(build_return_generator("lottery", 3))
    with pytest.raises(InputValidationError):
        list(build_return_generator("historical", 3, data=[]))
