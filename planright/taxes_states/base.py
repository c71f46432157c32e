# planright/taxes_states/base.py
# Generic helpers for state + local tax calculations


def state_taxable_income(agi: float, state_deduction: float = 0.0) -> float:
    """
    Compute taxable income for a state, after state-level deductions.
    """
    return max(0.0, agi - state_deduction)


def flat_state_local_tax(taxable: float, state_rate: float, local_rate: float = 0.0) -> float:
    """
    Apply a flat state + local rate to taxable income.
    Rates are percentages (4.75 for 4.75%).
    """
    eff = (state_rate + local_rate) / 100.0
    return max(0.0, taxable) * eff


def bracket_tax(taxable: float, brackets) -> float:
    """
    Progressive state tax over (limit, rate_pct) bands.
    Stops at the first band with no income left in it.
    """
    tax = 0.0
    remaining = max(0.0, taxable)
    prev_limit = 0.0
    for limit, rate in brackets:
        here = min(remaining, limit - prev_limit)
        if here <= 0:
            break
        tax += here * rate / 100.0
        remaining -= here
        prev_limit = limit
    return tax
