# planright/taxes.py
# Federal tax helpers: ordinary brackets, LTCG stacking, NIIT, IRMAA, SS taxation, estate tax.
from typing import List, Tuple

from .formatting import num
from .tax_tables import (
    ORDINARY_BRACKETS, STD_DEDUCTION, LTCG_BRACKETS, NIIT_RATE, NIIT_THRESHOLD,
    IRMAA_TIERS, SS_TAX_TIERS, ESTATE_EXEMPTION, ESTATE_TAX_RATE,
    ESTATE_INDEX_RATE, ESTATE_INDEX_FROM, TAX_YEAR, normalize_status,
)


def pick_brackets(fs: str) -> List[Tuple[float, float]]:
    return ORDINARY_BRACKETS[normalize_status(fs)]


def piecewise_tax(taxable: float, brackets: List[Tuple[float, float]]) -> float:
    """
    Walk (top, rate) bands from zero and sum the tax on `taxable`.
    """
    if taxable <= 0:
        return 0.0
    tax = 0.0
    prev_top, rem = 0.0, taxable
    for top, rate in brackets:
        span = max(0.0, min(rem, top - prev_top))
        tax += span * rate
        rem -= span
        prev_top = top
        if rem <= 0:
            break
    return max(0.0, tax)


def calc_ordinary_tax(income: float, filing_status: str) -> float:
    """
    Federal tax on gross ordinary income.
    The standard deduction is subtracted here, so callers pass gross income.
    """
    income = max(0.0, num(income))
    if income <= 0:
        return 0.0
    status = normalize_status(filing_status)
    adj = max(0.0, income - STD_DEDUCTION[status])
    return piecewise_tax(adj, ORDINARY_BRACKETS[status])


def marginal_rate(income: float, filing_status: str) -> float:
    """Rate of the band the last dollar of (income - standard deduction) falls in."""
    status = normalize_status(filing_status)
    adj = max(0.0, num(income) - STD_DEDUCTION[status])
    brackets = ORDINARY_BRACKETS[status]
    if adj <= 0:
        return brackets[0][1]
    for top, rate in brackets:
        if adj <= top:
            return rate
    return brackets[-1][1]


def calc_ltcg_tax(gain: float, filing_status: str, ordinary_income: float = 0.0) -> float:
    """
    Long-term gains stack on top of ordinary income:
    each band's remaining room is (top - income so far).
    """
    gain = max(0.0, num(gain))
    if gain <= 0:
        return 0.0
    brackets = LTCG_BRACKETS[normalize_status(filing_status)]
    cumulative = max(0.0, num(ordinary_income))
    remaining = gain
    tax = 0.0
    for top, rate in brackets:
        room = max(0.0, top - cumulative)
        here = min(remaining, room)
        if here > 0:
            tax += here * rate
            remaining -= here
            cumulative += here
        if remaining <= 0:
            break
    if remaining > 0:
        tax += remaining * brackets[-1][1]
    return tax


def calc_niit(investment_income: float, filing_status: str, magi: float) -> float:
    inv = max(0.0, num(investment_income))
    if inv <= 0:
        return 0.0
    excess = max(0.0, num(magi) - NIIT_THRESHOLD[normalize_status(filing_status)])
    return min(inv, excess) * NIIT_RATE


def irmaa_surcharge(magi: float, married: bool) -> float:
    """Monthly Part B/D surcharge per person for the given MAGI."""
    tiers = IRMAA_TIERS["married" if married else "single"]
    magi = num(magi)
    for threshold, surcharge in tiers:
        if magi <= threshold:
            return surcharge
    return tiers[-1][1]


def ss_taxable_amount(ss_total: float, other_income: float, filing_status: str) -> float:
    """
    Taxable dollars of Social Security.
    Combined income = other income + half of benefits; tiers are not inflation indexed.
    """
    ss_total = num(ss_total)
    if ss_total <= 0:
        return 0.0
    base, adj = SS_TAX_TIERS[normalize_status(filing_status)]
    combined = num(other_income) + 0.5 * ss_total
    if combined <= base:
        return 0.0
    if combined <= adj:
        return min(0.5 * ss_total, 0.5 * (combined - base))
    part1 = 0.5 * (adj - base)
    part2 = 0.85 * (combined - adj)
    return min(0.85 * ss_total, part1 + part2)


def estate_exemption(filing_status: str, year: int = TAX_YEAR) -> float:
    base = ESTATE_EXEMPTION[normalize_status(filing_status)]
    if year >= ESTATE_INDEX_FROM:
        return base * (1.0 + ESTATE_INDEX_RATE) ** (year - (ESTATE_INDEX_FROM - 1))
    return float(base)


def calc_estate_tax(estate: float, filing_status: str = "single", year: int = TAX_YEAR) -> float:
    estate = max(0.0, num(estate))
    exemption = estate_exemption(filing_status, year)
    if estate <= exemption:
        return 0.0
    return (estate - exemption) * ESTATE_TAX_RATE
