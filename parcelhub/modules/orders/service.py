"""Domain service for purchase orders.

Status-only transitions (pricing, approval, completion) are applied here inside the
caller's session. Transitions with a ledger effect are driven by the transaction
coordinator, which reuses ``load`` and ``apply``.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from parcelhub.db.models import Order as OrderModel
from parcelhub.infrastructure.database.repositories.order_repository import SqlOrderRepository
from parcelhub.modules.access.policy import AccessPolicy, Operation, default_policy
from parcelhub.modules.accounts.models import Account
from parcelhub.modules.common.exceptions import NotFound
from parcelhub.modules.lifecycle import order_machine
from parcelhub.modules.lifecycle.models import OrderStatus, OrderTransition

from .models import Order, OrderCreateInput
from .repository import OrderRepository

logger = logging.getLogger(__name__)


def generate_order_number(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"ORD-{now:%Y%m%d}-{secrets.token_hex(3).upper()}"


@dataclass(slots=True)
class OrderService:
    repository: OrderRepository
    policy: AccessPolicy = field(default=default_policy)

    @classmethod
    def with_session(cls, session: AsyncSession, policy: AccessPolicy = default_policy) -> "OrderService":
        return cls(SqlOrderRepository(session), policy)

    async def create_order(self, payload: OrderCreateInput, actor: Account) -> Order:
        self.policy.authorize(actor, Operation.CREATE_ORDER, resource_owner_id=payload.owner_account_id)
        model = await self.repository.create(
            order_number=generate_order_number(),
            owner_account_id=payload.owner_account_id,
            purchase_site=payload.purchase_site,
            purchase_link=payload.purchase_link,
            phone_number=payload.phone_number,
            notes=payload.notes,
            additional_info=payload.additional_info,
            status=OrderStatus.PENDING_APPROVAL.value,
        )
        logger.info("Order %s created for account %s", model.order_number, model.owner_account_id)
        return self._to_domain(model)

    async def load(self, order_id: str) -> Order:
        model = await self.repository.get_order(order_id)
        if model is None:
            raise NotFound("order", order_id)
        return self._to_domain(model)

    async def get_order(self, order_id: str, actor: Account) -> Order:
        order = await self.load(order_id)
        self.policy.authorize(actor, Operation.READ_ORDER, resource_owner_id=order.owner_account_id)
        return order

    async def list_own_orders(
        self, actor: Account, status: Optional[OrderStatus] = None, limit: int = 50, offset: int = 0
    ) -> list[Order]:
        rows = await self.repository.list_orders(
            owner_account_id=actor.id,
            status=status.value if status else None,
            limit=limit,
            offset=offset,
        )
        return [self._to_domain(row) for row in rows]

    async def list_all_orders(
        self, actor: Account, status: Optional[OrderStatus] = None, limit: int = 50, offset: int = 0
    ) -> list[Order]:
        self.policy.authorize(actor, Operation.LIST_ALL)
        rows = await self.repository.list_orders(
            owner_account_id=None,
            status=status.value if status else None,
            limit=limit,
            offset=offset,
        )
        return [self._to_domain(row) for row in rows]

    async def set_price(self, order_id: str, total_amount_cents: int, actor: Account) -> Order:
        order = await self.load(order_id)
        self.policy.authorize(actor, Operation.PRICE_ORDER, resource_owner_id=order.owner_account_id)
        return await self.apply(order, order_machine.set_price(order, total_amount_cents))

    async def approve(
        self, order_id: str, actor: Account, total_amount_cents: Optional[int] = None
    ) -> Order:
        order = await self.load(order_id)
        self.policy.authorize(actor, Operation.APPROVE_ORDER, resource_owner_id=order.owner_account_id)
        return await self.apply(order, order_machine.approve(order, total_amount_cents))

    async def complete(self, order_id: str, actor: Account) -> Order:
        order = await self.load(order_id)
        self.policy.authorize(actor, Operation.COMPLETE_ORDER, resource_owner_id=order.owner_account_id)
        return await self.apply(order, order_machine.complete(order))

    async def apply(self, order: Order, transition: OrderTransition) -> Order:
        """Persist a validated transition against the version the snapshot was read at."""
        model = await self.repository.update_versioned(
            order.id,
            order.version,
            status=transition.target.value,
            **transition.changes,
        )
        if transition.source is not transition.target:
            logger.info(
                "Order %s moved %s -> %s",
                order.order_number,
                transition.source.value,
                transition.target.value,
            )
        return self._to_domain(model)

    @staticmethod
    def _to_domain(model: OrderModel) -> Order:
        return Order(
            id=model.id,
            order_number=model.order_number,
            owner_account_id=model.owner_account_id,
            purchase_site=model.purchase_site,
            purchase_link=model.purchase_link,
            phone_number=model.phone_number,
            notes=model.notes,
            additional_info=model.additional_info,
            total_amount_cents=model.total_amount_cents,
            paid_amount_cents=model.paid_amount_cents,
            status=OrderStatus(model.status),
            version=model.version,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
