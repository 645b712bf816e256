"""Order status machine.

``PENDING_APPROVAL -> AWAITING_PAYMENT -> ORDERING -> ORDER_COMPLETED``, with
``CANCELLED`` reachable from every non-terminal status. Each function validates a
snapshot against the requested change and returns an ``OrderTransition``; nothing
here touches storage.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from parcelhub.modules.common.exceptions import IllegalTransition, InvalidAmount

from .amounts import require_amount
from .models import LedgerEffect, LedgerReason, OrderStatus, OrderTransition, TransactionDirection

if TYPE_CHECKING:
    from parcelhub.modules.orders.models import Order

ORDER_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING_APPROVAL: frozenset({OrderStatus.AWAITING_PAYMENT, OrderStatus.CANCELLED}),
    OrderStatus.AWAITING_PAYMENT: frozenset({OrderStatus.ORDERING, OrderStatus.CANCELLED}),
    OrderStatus.ORDERING: frozenset({OrderStatus.ORDER_COMPLETED, OrderStatus.CANCELLED}),
    OrderStatus.ORDER_COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

TERMINAL_ORDER_STATUSES = frozenset(
    status for status, targets in ORDER_TRANSITIONS.items() if not targets
)

# price may still change until the customer pays
PRICEABLE_ORDER_STATUSES = frozenset({OrderStatus.PENDING_APPROVAL, OrderStatus.AWAITING_PAYMENT})


def can_transition(source: OrderStatus, target: OrderStatus) -> bool:
    return target in ORDER_TRANSITIONS[source]


def _require(source: OrderStatus, target: OrderStatus) -> None:
    if not can_transition(source, target):
        raise IllegalTransition(source.value, target.value)


def set_price(order: "Order", total_amount_cents: int) -> OrderTransition:
    if order.status not in PRICEABLE_ORDER_STATUSES:
        raise IllegalTransition(
            order.status.value,
            order.status.value,
            f"order {order.order_number} can no longer be priced in status {order.status.value}",
        )
    total = require_amount(total_amount_cents, field="total_amount")
    return OrderTransition(
        source=order.status,
        target=order.status,
        changes={"total_amount_cents": total},
    )


def approve(order: "Order", total_amount_cents: Optional[int] = None) -> OrderTransition:
    _require(order.status, OrderStatus.AWAITING_PAYMENT)
    if total_amount_cents is None:
        total_amount_cents = order.total_amount_cents
    if total_amount_cents is None:
        raise InvalidAmount(f"order {order.order_number} needs a price before approval")
    total = require_amount(total_amount_cents, field="total_amount")
    return OrderTransition(
        source=order.status,
        target=OrderStatus.AWAITING_PAYMENT,
        changes={"total_amount_cents": total},
    )


def pay(order: "Order") -> OrderTransition:
    _require(order.status, OrderStatus.ORDERING)
    total = require_amount(order.total_amount_cents, field="total_amount")
    return OrderTransition(
        source=order.status,
        target=OrderStatus.ORDERING,
        changes={"paid_amount_cents": total},
        ledger=LedgerEffect(
            direction=TransactionDirection.DEBIT,
            amount_cents=total,
            reason=LedgerReason.ORDER_PAYMENT,
            description=f"Payment for order {order.order_number}",
        ),
    )


def complete(order: "Order") -> OrderTransition:
    _require(order.status, OrderStatus.ORDER_COMPLETED)
    return OrderTransition(source=order.status, target=OrderStatus.ORDER_COMPLETED)


def cancel(order: "Order") -> OrderTransition:
    _require(order.status, OrderStatus.CANCELLED)
    ledger = None
    if order.paid_amount_cents:
        ledger = LedgerEffect(
            direction=TransactionDirection.CREDIT,
            amount_cents=order.paid_amount_cents,
            reason=LedgerReason.ORDER_REFUND,
            description=f"Refund for cancelled order {order.order_number}",
        )
    return OrderTransition(source=order.status, target=OrderStatus.CANCELLED, ledger=ledger)
