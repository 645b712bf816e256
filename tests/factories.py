"""Plain domain snapshots for tests that never touch the database."""
from datetime import datetime, timezone
from typing import Optional

from parcelhub.modules.accounts import Account, Role
from parcelhub.modules.lifecycle.models import OrderStatus, PackageStatus
from parcelhub.modules.orders import Order
from parcelhub.modules.packages import Package


def build_account(role: Role = Role.REGULAR, account_id: str = "acc-1", is_active: bool = True) -> Account:
    return Account(
        id=account_id,
        username=f"user-{account_id}",
        role=role,
        is_active=is_active,
        password_hash="x",
    )


def build_order(
    status: OrderStatus = OrderStatus.PENDING_APPROVAL,
    total: Optional[int] = None,
    paid: Optional[int] = None,
) -> Order:
    return Order(
        id="order-1",
        order_number="ORD-20261019-ABC123",
        owner_account_id="acc-1",
        purchase_site="example-store",
        purchase_link="https://example.com/item/1",
        phone_number="0910000000",
        notes=None,
        additional_info=None,
        total_amount_cents=total,
        paid_amount_cents=paid,
        status=status,
        version=1,
        created_at=datetime.now(timezone.utc),
        updated_at=None,
    )


def build_package(
    status: PackageStatus = PackageStatus.AWAITING_PAYMENT,
    fee: Optional[int] = None,
    paid: int = 0,
    shop_account_id: Optional[str] = "shop-1",
) -> Package:
    return Package(
        id="pkg-1",
        tracking_number="PKG-0000000001",
        owner_account_id="acc-1",
        shop_account_id=shop_account_id,
        order_id=None,
        description=None,
        customs_fee_cents=fee,
        customs_paid_cents=paid,
        status=status,
        version=1,
        created_at=datetime.now(timezone.utc),
        updated_at=None,
    )
