"""Validation of monetary values expressed in currency minor units."""

from __future__ import annotations

from typing import Any

from parcelhub.modules.common.exceptions import InvalidAmount


def require_amount(value: Any, *, allow_zero: bool = False, field: str = "amount") -> int:
    """Return ``value`` as cents or raise ``InvalidAmount``.

    Booleans and floats are rejected outright; only whole minor units are accepted.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmount(f"{field} must be an integer number of minor units, got {value!r}")
    if value < 0 or (value == 0 and not allow_zero):
        bound = ">= 0" if allow_zero else "> 0"
        raise InvalidAmount(f"{field} must be {bound}, got {value}")
    return value
