"""Closed status enumerations and transition descriptions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class OrderStatus(str, Enum):
    PENDING_APPROVAL = "PENDING_APPROVAL"
    AWAITING_PAYMENT = "AWAITING_PAYMENT"
    ORDERING = "ORDERING"
    ORDER_COMPLETED = "ORDER_COMPLETED"
    CANCELLED = "CANCELLED"


class PackageStatus(str, Enum):
    AWAITING_PAYMENT = "AWAITING_PAYMENT"
    PREPARING = "PREPARING"
    DELIVERING_TO_SHOP = "DELIVERING_TO_SHOP"
    IN_SHOP = "IN_SHOP"
    RECEIVED = "RECEIVED"
    CANCELLED = "CANCELLED"
    RETURNED = "RETURNED"


class TransactionDirection(str, Enum):
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"


class LedgerReason(str, Enum):
    TOP_UP = "TOP_UP"
    ORDER_PAYMENT = "ORDER_PAYMENT"
    ORDER_REFUND = "ORDER_REFUND"
    CUSTOMS_PAYMENT = "CUSTOMS_PAYMENT"
    CUSTOMS_REFUND = "CUSTOMS_REFUND"


@dataclass(frozen=True, slots=True)
class LedgerEffect:
    """Balance delta a transition requires, applied by the coordinator."""

    direction: TransactionDirection
    amount_cents: int
    reason: LedgerReason
    description: str

    @property
    def signed_amount(self) -> int:
        if self.direction is TransactionDirection.DEBIT:
            return -self.amount_cents
        return self.amount_cents


@dataclass(frozen=True, slots=True)
class OrderTransition:
    source: OrderStatus
    target: OrderStatus
    changes: dict[str, Any] = field(default_factory=dict)
    ledger: Optional[LedgerEffect] = None


@dataclass(frozen=True, slots=True)
class PackageTransition:
    source: PackageStatus
    target: PackageStatus
    changes: dict[str, Any] = field(default_factory=dict)
    ledger: Optional[LedgerEffect] = None

    @property
    def changes_status(self) -> bool:
        return self.source is not self.target
