"""Order and package status machines."""

from . import order_machine, package_machine
from .amounts import require_amount
from .models import (
    LedgerEffect,
    LedgerReason,
    OrderStatus,
    OrderTransition,
    PackageStatus,
    PackageTransition,
    TransactionDirection,
)

__all__ = [
    "LedgerEffect",
    "LedgerReason",
    "OrderStatus",
    "OrderTransition",
    "PackageStatus",
    "PackageTransition",
    "TransactionDirection",
    "order_machine",
    "package_machine",
    "require_amount",
]
