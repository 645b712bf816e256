"""Package status machine.

Packages move strictly forward through ``PACKAGE_FLOW``; ``CANCELLED`` and
``RETURNED`` are reachable from any non-terminal status. Statuses after
``DELIVERING_TO_SHOP`` require the customs fee to be fully paid.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from parcelhub.modules.common.exceptions import CustomsUnpaid, IllegalTransition, InvalidAmount

from .amounts import require_amount
from .models import (
    LedgerEffect,
    LedgerReason,
    PackageStatus,
    PackageTransition,
    TransactionDirection,
)

if TYPE_CHECKING:
    from parcelhub.modules.packages.models import Package

PACKAGE_FLOW: tuple[PackageStatus, ...] = (
    PackageStatus.AWAITING_PAYMENT,
    PackageStatus.PREPARING,
    PackageStatus.DELIVERING_TO_SHOP,
    PackageStatus.IN_SHOP,
    PackageStatus.RECEIVED,
)
EXIT_STATUSES = frozenset({PackageStatus.CANCELLED, PackageStatus.RETURNED})
TERMINAL_PACKAGE_STATUSES = frozenset({PackageStatus.RECEIVED}) | EXIT_STATUSES
CUSTOMS_GATE = PackageStatus.DELIVERING_TO_SHOP
CUSTOMS_CLEARED_STATUSES = frozenset(PACKAGE_FLOW[PACKAGE_FLOW.index(CUSTOMS_GATE) + 1:])


def next_status(status: PackageStatus) -> PackageStatus | None:
    if status not in PACKAGE_FLOW or status is PACKAGE_FLOW[-1]:
        return None
    return PACKAGE_FLOW[PACKAGE_FLOW.index(status) + 1]


def allowed_targets(status: PackageStatus) -> frozenset[PackageStatus]:
    if status in TERMINAL_PACKAGE_STATUSES:
        return frozenset()
    following = next_status(status)
    forward = {following} if following is not None else set()
    return frozenset(forward) | EXIT_STATUSES


def outstanding_customs(package: "Package") -> int:
    fee = package.customs_fee_cents or 0
    return max(fee - package.customs_paid_cents, 0)


def _require_open(package: "Package", target: PackageStatus) -> None:
    if package.status in TERMINAL_PACKAGE_STATUSES:
        raise IllegalTransition(
            package.status.value,
            target.value,
            f"package {package.tracking_number} is closed ({package.status.value})",
        )


def set_customs_fee(package: "Package", fee_cents: int) -> PackageTransition:
    _require_open(package, package.status)
    fee = require_amount(fee_cents, allow_zero=True, field="customs_fee")
    if fee < package.customs_paid_cents:
        raise InvalidAmount(
            f"customs fee {fee} is below the {package.customs_paid_cents} already paid"
        )
    return PackageTransition(
        source=package.status,
        target=package.status,
        changes={"customs_fee_cents": fee},
    )


def pay_customs(package: "Package", amount_cents: int) -> PackageTransition:
    _require_open(package, package.status)
    amount = require_amount(amount_cents, field="customs_payment")
    outstanding = outstanding_customs(package)
    if amount > outstanding:
        raise InvalidAmount(f"customs payment {amount} exceeds the outstanding {outstanding}")
    return PackageTransition(
        source=package.status,
        target=package.status,
        changes={"customs_paid_cents": package.customs_paid_cents + amount},
        ledger=LedgerEffect(
            direction=TransactionDirection.DEBIT,
            amount_cents=amount,
            reason=LedgerReason.CUSTOMS_PAYMENT,
            description=f"Customs for package {package.tracking_number}",
        ),
    )


def advance(package: "Package", target: PackageStatus) -> PackageTransition:
    if target not in allowed_targets(package.status):
        raise IllegalTransition(package.status.value, target.value)
    if target in CUSTOMS_CLEARED_STATUSES and outstanding_customs(package) > 0:
        raise CustomsUnpaid(package.customs_fee_cents or 0, package.customs_paid_cents)

    ledger = None
    if target is PackageStatus.CANCELLED and package.customs_paid_cents > 0:
        ledger = LedgerEffect(
            direction=TransactionDirection.CREDIT,
            amount_cents=package.customs_paid_cents,
            reason=LedgerReason.CUSTOMS_REFUND,
            description=f"Customs refund for cancelled package {package.tracking_number}",
        )
    return PackageTransition(source=package.status, target=target, ledger=ledger)


def reassign_shop(package: "Package") -> PackageTransition:
    _require_open(package, package.status)
    return PackageTransition(source=package.status, target=package.status)


def edit_details(
    package: "Package",
    *,
    tracking_number: str | None = None,
    description: str | None = None,
) -> PackageTransition:
    _require_open(package, package.status)
    changes: dict[str, str] = {}
    if tracking_number is not None and tracking_number != package.tracking_number:
        changes["tracking_number"] = tracking_number
    if description is not None and description != package.description:
        changes["description"] = description
    return PackageTransition(source=package.status, target=package.status, changes=changes)
