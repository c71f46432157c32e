# planright/formatting.py
# Shared number coercion and currency formatting used by every calculator.
import logging
import math

logger = logging.getLogger(__name__)


def num(value, default: float = 0.0) -> float:
    """
    Coerce a user-supplied value to a finite float.
    None, NaN, inf and unparsable strings fall back to `default`.
    """
    try:
        x = float(value)
    except (TypeError, ValueError):
        logger.debug("Non-numeric input %r replaced by %s", value, default)
        return float(default)
    if not math.isfinite(x):
        logger.debug("Non-finite input %r replaced by %s", value, default)
        return float(default)
    return x


def clamp(value, lo: float = 0.0, hi: float = float("inf"), default: float = 0.0) -> float:
    """Coerce with num() and clamp into [lo, hi]."""
    x = num(value, default)
    if x < lo or x > hi:
        logger.debug("Input %s clamped into [%s, %s]", x, lo, hi)
    return min(hi, max(lo, x))


def money(x) -> str:
    x = num(x)
    if x < 0:
        return f"-${abs(x):,.0f}"
    return f"${x:,.0f}"


def compact_money(x) -> str:
    """
    $1.25M / $150K / $950 style used in chart labels and insights.
    """
    x = num(x)
    sign = "-" if x < 0 else ""
    ax = abs(x)
    if ax >= 1_000_000:
        return f"{sign}${ax / 1_000_000:.2f}M"
    if ax >= 1_000:
        return f"{sign}${ax / 1_000:.0f}K"
    return f"{sign}${ax:.0f}"


def pct(x, digits: int = 1) -> str:
    """Format a fraction (0.22) as a percentage string ('22.0%')."""
    return f"{num(x) * 100:.{digits}f}%"


def round_half_up(x, digits: int = 0):
    """
    Halves round up (12.5 -> 13, -2.5 -> -2), where round() goes to the even neighbour.
    Non-finite values pass through unchanged.
    """
    x = float(x)
    if not math.isfinite(x):
        return x
    scale = 10 ** digits
    r = math.floor(x * scale + 0.5) / scale
    return int(r) if digits == 0 else r
