"""Shared abstractions used across domain modules."""

from .exceptions import (
    ConcurrentModification,
    CustomsUnpaid,
    DomainError,
    Forbidden,
    IllegalTransition,
    InsufficientFunds,
    InvalidAmount,
    NotFound,
    PaymentFailed,
)
from .repository import AsyncRepository

__all__ = [
    "AsyncRepository",
    "ConcurrentModification",
    "CustomsUnpaid",
    "DomainError",
    "Forbidden",
    "IllegalTransition",
    "InsufficientFunds",
    "InvalidAmount",
    "NotFound",
    "PaymentFailed",
]
