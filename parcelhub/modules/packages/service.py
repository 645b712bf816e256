"""Domain service for shipments."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from parcelhub.db.models import Package as PackageModel, PackageEvent as PackageEventModel
from parcelhub.infrastructure.database.repositories.account_repository import SqlAccountRepository
from parcelhub.infrastructure.database.repositories.order_repository import SqlOrderRepository
from parcelhub.infrastructure.database.repositories.package_repository import SqlPackageRepository
from parcelhub.modules.access.policy import AccessPolicy, Operation, default_policy
from parcelhub.modules.accounts.exceptions import AccountNotFoundError
from parcelhub.modules.accounts.models import Account
from parcelhub.modules.accounts.repository import AccountRepository
from parcelhub.modules.common.exceptions import NotFound
from parcelhub.modules.lifecycle import package_machine
from parcelhub.modules.lifecycle.amounts import require_amount
from parcelhub.modules.lifecycle.models import OrderStatus, PackageStatus, PackageTransition
from parcelhub.modules.orders.repository import OrderRepository

from .exceptions import OrderNotShippableError, TrackingNumberTakenError
from .models import Package, PackageCreateInput, PackageEvent, PackageTracking
from .repository import PackageRepository

logger = logging.getLogger(__name__)

SHIPPABLE_ORDER_STATUSES = frozenset({OrderStatus.ORDERING.value, OrderStatus.ORDER_COMPLETED.value})


def generate_tracking_number() -> str:
    return f"PKG-{secrets.token_hex(5).upper()}"


@dataclass(slots=True)
class PackageService:
    repository: PackageRepository
    accounts: AccountRepository
    orders: OrderRepository
    policy: AccessPolicy = field(default=default_policy)

    @classmethod
    def with_session(cls, session: AsyncSession, policy: AccessPolicy = default_policy) -> "PackageService":
        return cls(
            SqlPackageRepository(session),
            SqlAccountRepository(session),
            SqlOrderRepository(session),
            policy,
        )

    async def create_package(self, payload: PackageCreateInput, actor: Account) -> Package:
        self.policy.authorize(actor, Operation.CREATE_PACKAGE, resource_owner_id=payload.owner_account_id)

        if await self.accounts.get_by_id(payload.owner_account_id) is None:
            raise AccountNotFoundError(payload.owner_account_id)
        if payload.shop_account_id is not None:
            await self._require_shop(payload.shop_account_id)
        if payload.order_id is not None:
            await self._require_shippable_order(payload.order_id, payload.owner_account_id)

        customs_fee = None
        if payload.customs_fee_cents is not None:
            customs_fee = require_amount(payload.customs_fee_cents, allow_zero=True, field="customs_fee")

        tracking_number = payload.tracking_number or generate_tracking_number()
        if await self.repository.get_by_tracking_number(tracking_number) is not None:
            raise TrackingNumberTakenError(f"tracking number already in use: {tracking_number}")

        model = await self.repository.create(
            tracking_number=tracking_number,
            owner_account_id=payload.owner_account_id,
            shop_account_id=payload.shop_account_id,
            order_id=payload.order_id,
            description=payload.description,
            customs_fee_cents=customs_fee,
            status=PackageStatus.AWAITING_PAYMENT.value,
        )
        await self.repository.add_event(
            package_id=model.id,
            status=model.status,
            note="Package registered",
            actor_account_id=actor.id,
        )
        logger.info("Package %s created for account %s", model.tracking_number, model.owner_account_id)
        return self._to_domain(model)

    async def load(self, package_id: str) -> Package:
        model = await self.repository.get_package(package_id)
        if model is None:
            raise NotFound("package", package_id)
        return self._to_domain(model)

    async def get_package(self, package_id: str, actor: Account) -> Package:
        package = await self.load(package_id)
        self.authorize(actor, Operation.READ_PACKAGE, package)
        return package

    async def track(self, tracking_number: str, actor: Account) -> PackageTracking:
        model = await self.repository.get_by_tracking_number(tracking_number)
        if model is None:
            raise NotFound("package", tracking_number)
        package = self._to_domain(model)
        self.authorize(actor, Operation.READ_PACKAGE, package)
        events = await self.repository.list_events(package.id)
        return PackageTracking(package=package, events=[self._to_event(row) for row in events])

    async def list_own_packages(
        self, actor: Account, status: Optional[PackageStatus] = None, limit: int = 50, offset: int = 0
    ) -> list[Package]:
        return await self._list(owner_account_id=actor.id, status=status, limit=limit, offset=offset)

    async def list_shop_packages(
        self, actor: Account, status: Optional[PackageStatus] = None, limit: int = 50, offset: int = 0
    ) -> list[Package]:
        return await self._list(shop_account_id=actor.id, status=status, limit=limit, offset=offset)

    async def list_all_packages(
        self, actor: Account, status: Optional[PackageStatus] = None, limit: int = 50, offset: int = 0
    ) -> list[Package]:
        self.policy.authorize(actor, Operation.LIST_ALL)
        return await self._list(status=status, limit=limit, offset=offset)

    async def set_customs_fee(self, package_id: str, fee_cents: int, actor: Account) -> Package:
        package = await self.load(package_id)
        self.authorize(actor, Operation.SET_CUSTOMS_FEE, package)
        return await self.apply(package, package_machine.set_customs_fee(package, fee_cents), actor)

    async def update_details(
        self,
        package_id: str,
        actor: Account,
        *,
        tracking_number: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Package:
        """Correct the tracking number or description of an open package."""
        package = await self.load(package_id)
        self.authorize(actor, Operation.EDIT_PACKAGE, package)
        transition = package_machine.edit_details(
            package, tracking_number=tracking_number, description=description
        )
        if not transition.changes:
            return package
        new_tracking = transition.changes.get("tracking_number")
        if new_tracking is not None and await self.repository.get_by_tracking_number(new_tracking) is not None:
            raise TrackingNumberTakenError(f"tracking number already in use: {new_tracking}")
        updated = await self.apply(package, transition, actor)
        logger.info("Package %s details edited: %s", updated.tracking_number, sorted(transition.changes))
        return updated

    async def reassign_shop(
        self, package_id: str, shop_account_id: Optional[str], actor: Account
    ) -> Package:
        package = await self.load(package_id)
        self.authorize(actor, Operation.REASSIGN_SHOP, package)
        package_machine.reassign_shop(package)
        if shop_account_id is not None:
            await self._require_shop(shop_account_id)
        model = await self.repository.update_versioned(
            package.id, package.version, shop_account_id=shop_account_id
        )
        logger.info(
            "Package %s reassigned from shop %s to %s",
            package.tracking_number,
            package.shop_account_id,
            shop_account_id,
        )
        return self._to_domain(model)

    async def apply(
        self,
        package: Package,
        transition: PackageTransition,
        actor: Account,
        note: Optional[str] = None,
    ) -> Package:
        """Persist a validated transition and record a tracking event on status change."""
        model = await self.repository.update_versioned(
            package.id,
            package.version,
            status=transition.target.value,
            **transition.changes,
        )
        if transition.changes_status:
            await self.repository.add_event(
                package_id=package.id,
                status=transition.target.value,
                note=note,
                actor_account_id=actor.id,
            )
            logger.info(
                "Package %s moved %s -> %s",
                package.tracking_number,
                transition.source.value,
                transition.target.value,
            )
        return self._to_domain(model)

    def authorize(
        self,
        actor: Account,
        operation: Operation,
        package: Package,
        target_status: Optional[PackageStatus] = None,
    ) -> None:
        self.policy.authorize(
            actor,
            operation,
            resource_owner_id=package.owner_account_id,
            shop_account_id=package.shop_account_id,
            target_status=target_status,
        )

    async def _list(
        self,
        *,
        owner_account_id: Optional[str] = None,
        shop_account_id: Optional[str] = None,
        status: Optional[PackageStatus] = None,
        limit: int,
        offset: int,
    ) -> list[Package]:
        rows = await self.repository.list_packages(
            owner_account_id=owner_account_id,
            shop_account_id=shop_account_id,
            status=status.value if status else None,
            limit=limit,
            offset=offset,
        )
        return [self._to_domain(row) for row in rows]

    async def _require_shop(self, shop_account_id: str) -> Account:
        shop = await self.accounts.get_by_id(shop_account_id)
        if shop is None or not shop.is_shop():
            raise NotFound("shop", shop_account_id)
        return shop

    async def _require_shippable_order(self, order_id: str, owner_account_id: str) -> None:
        order = await self.orders.get_order(order_id)
        if order is None:
            raise NotFound("order", order_id)
        if order.owner_account_id != owner_account_id:
            raise OrderNotShippableError(f"order {order.order_number} belongs to another account")
        if order.status not in SHIPPABLE_ORDER_STATUSES:
            raise OrderNotShippableError(f"order {order.order_number} is {order.status}, not paid")
        if await self.repository.get_by_order(order_id) is not None:
            raise OrderNotShippableError(f"order {order.order_number} already has a package")

    @staticmethod
    def _to_domain(model: PackageModel) -> Package:
        return Package(
            id=model.id,
            tracking_number=model.tracking_number,
            owner_account_id=model.owner_account_id,
            shop_account_id=model.shop_account_id,
            order_id=model.order_id,
            description=model.description,
            customs_fee_cents=model.customs_fee_cents,
            customs_paid_cents=model.customs_paid_cents or 0,
            status=PackageStatus(model.status),
            version=model.version,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def _to_event(model: PackageEventModel) -> PackageEvent:
        return PackageEvent(
            id=model.id,
            package_id=model.package_id,
            status=PackageStatus(model.status),
            note=model.note,
            actor_account_id=model.actor_account_id,
            created_at=model.created_at,
        )
