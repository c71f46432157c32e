# planright/errors.py
# Exception types raised by the projection engine. Calculators clamp instead of raising.


class PlanRightError(Exception):
    """Base class for errors raised by planright."""


class InputValidationError(PlanRightError, ValueError):
    """
    Raised when a projection input is out of range (ages, rates, balances).
    Carries the offending field name so the app can point at it.
    """

    def __init__(self, field: str, value, message: str):
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field}: {value}. {message}")
