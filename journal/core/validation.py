import math
from numbers import Integral, Real
from typing import Any


class InvalidInputError(ValueError):
    """Raised when a calculator receives a malformed numeric input."""

    def __init__(self, field: str, value: Any, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"{field} {reason} (got {value!r})")


def _require_number(field: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInputError(field, value, "must be a number")
    number = float(value)
    if not math.isfinite(number):
        raise InvalidInputError(field, value, "must be finite")
    return number


def require_positive(field: str, value: Any) -> float:
    number = _require_number(field, value)
    if number <= 0:
        raise InvalidInputError(field, value, "must be greater than zero")
    return number


def require_non_negative(field: str, value: Any) -> float:
    number = _require_number(field, value)
    if number < 0:
        raise InvalidInputError(field, value, "must not be negative")
    return number


def require_finite(field: str, value: Any) -> float:
    return _require_number(field, value)


def require_quantity(field: str, value: Any) -> int:
    """Quantities are whole shares; 10.0 is accepted, 10.5 is not."""
    if isinstance(value, bool):
        raise InvalidInputError(field, value, "must be a whole number")
    if isinstance(value, Integral):
        quantity = int(value)
    else:
        number = _require_number(field, value)
        if not number.is_integer():
            raise InvalidInputError(field, value, "must be a whole number")
        quantity = int(number)
    if quantity <= 0:
        raise InvalidInputError(field, value, "must be greater than zero")
    return quantity
