# planright/taxes_states/registry.py
# Registry that returns a state tax function.
from typing import Optional

from . import generic
from .data import STATE_TAX_DATA

REGISTRY = {code: generic.make_table_calculator(rec) for code, rec in STATE_TAX_DATA.items()}


def get_state_calculator(state_code: str, state_rate: Optional[float] = None, local_rate: Optional[float] = None):
    """
    Return a state tax function fn(taxable_income) -> tax.
    - States in the comparison table use their own rates and brackets (plus any local rate).
    - Otherwise return a flat-rate function using the provided state/local percentages.
    """
    sc = (state_code or "").upper()
    if sc in REGISTRY:
        if local_rate:
            return generic.make_table_calculator(STATE_TAX_DATA[sc], local_rate)
        return REGISTRY[sc]

    return generic.make_generic_flat(state_rate or 0.0, local_rate or 0.0, deduction=0.0)
