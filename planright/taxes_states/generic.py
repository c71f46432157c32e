# planright/taxes_states/generic.py
# Factories for state tax functions: a flat state+local fallback and one driven by the state table.
from .base import bracket_tax, flat_state_local_tax, state_taxable_income


def make_generic_flat(state_rate_pct: float = 0.0, local_rate_pct: float = 0.0, deduction: float = 0.0):
    """
    Factory that returns a function computing flat state+local tax on (income - deduction).
    state_rate_pct/local_rate_pct are in PERCENT (5.0 for 5%).
    """
    state_rate = float(state_rate_pct)
    local_rate = float(local_rate_pct)
    ded = float(deduction)

    def _fn(income: float) -> float:
        return flat_state_local_tax(state_taxable_income(float(income), ded), state_rate, local_rate)

    return _fn


def make_table_calculator(record: dict, local_rate_pct: float = 0.0):
    """
    Tax function for one state record.
    The argument is state-taxable income: callers drop the income the state exempts.
    States that exempt retirement income, or have no income tax, always return 0.
    """
    rate = float(record["income_tax_rate"])
    brackets = record.get("income_tax_brackets")
    local = float(local_rate_pct)

    def _fn(income: float) -> float:
        if rate == 0 or not record["taxes_retirement_income"]:
            return 0.0
        taxable = max(0.0, float(income))
        if brackets:
            return bracket_tax(taxable, brackets) + flat_state_local_tax(taxable, 0.0, local)
        return flat_state_local_tax(taxable, rate, local)

    return _fn
