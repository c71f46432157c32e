# planright/returns.py
# Annual growth factors for the projection: fixed rate, historical S&P playback or bootstrap sampling.
from typing import Iterator, Optional

import numpy as np

from .errors import InputValidationError

SP500_START_YEAR = 1928
SP500_END_YEAR = 2024
MAX_RETURN = 15.0
MIN_RETURN = -15.0

# S&P 500 total return by year, percent, 1928-2024.
SP500_RAW = [
    # 1928-1940
    43.81, -8.30, -25.12, -43.84, -8.64, 49.98, -1.19, 46.74, 31.94, 35.34, -35.34, 29.28, -1.10,
    # 1941-1960
    -12.77, 19.17, 25.06, 19.03, 35.82, -8.43, 5.20, 5.70, 18.30, 30.81, 23.68, 14.37, -1.21, 52.56, 31.24, 18.15,
    -0.73, 23.68, 52.40, 31.74,
    # 1961-1980
    26.63, -8.81, 22.61, 16.42, 12.40, -10.06, 23.80, 10.81, -8.24, -14.31, 3.56, 14.22, 18.76, -14.31, -25.90,
    37.00, 23.83, -7.18, 6.56, 18.44,
    # 1981-2000
    -4.70, 20.42, 22.34, 6.15, 31.24, 18.49, 5.81, 16.54, 31.48, -3.06, 30.23, 7.49, 9.97, 1.33, 37.20, 22.68,
    33.10, 28.34, 20.89, -9.03,
    # 2001-2020
    -11.85, -21.97, 28.36, 10.74, 4.83, 15.61, 5.48, -36.55, 25.94, 14.82, 2.10, 15.89, 32.15, 13.52, 1.36,
    11.77, 21.61, -4.23, 31.21, 18.02,
    # 2021-2024
    28.47, -18.04, 26.06, 25.02,
]

SP500_CAPPED = np.clip(np.array(SP500_RAW, dtype=float), MIN_RETURN, MAX_RETURN)
# capped years followed by their half values (milder scenarios)
SP500_SERIES = np.concatenate([SP500_CAPPED, SP500_CAPPED / 2.0])

RETURN_MODES = ("fixed", "historical", "bootstrap")


def build_return_generator(mode: str, years: int, nominal_pct: float = 7.0, inflation_pct: float = 2.6,
                           series: str = "nominal", seed: int = 12345,
                           start_year: Optional[int] = None, data=None) -> Iterator[float]:
    """
    Yield `years` growth factors (1.07 for +7%).
    - fixed: 1 + nominal_pct/100 every year
    - historical: data in order from start_year (default 1928), wrapping at the end
    - bootstrap: uniform draws with numpy's default_rng(seed)
    A "real" series divides the sampled factors by (1 + inflation).
    """
    mode = (mode or "fixed").lower()
    if mode not in RETURN_MODES:
        raise InputValidationError("return_mode", mode, f"Expected one of {', '.join(RETURN_MODES)}.")
    years = max(0, int(years))

    if mode == "fixed":
        factor = 1.0 + nominal_pct / 100.0
        for _ in range(years):
            yield factor
        return

    walk = SP500_SERIES if data is None else np.asarray(data, dtype=float)
    if walk.size == 0:
        raise InputValidationError("data", "[]", "Return series is empty.")
    infl_factor = 1.0 + inflation_pct / 100.0
    real = (series or "nominal").lower() == "real"

    if mode == "historical":
        start = (start_year if start_year is not None else SP500_START_YEAR) - SP500_START_YEAR
        idx = [(start + i) % walk.size for i in range(years)]
    else:
        rng = np.random.default_rng(seed)
        idx = rng.integers(0, walk.size, size=years)

    for ix in idx:
        factor = 1.0 + walk[ix] / 100.0
        yield float(factor / infl_factor if real else factor)
