"""SQLAlchemy implementation for purchase orders."""

from __future__ import annotations

from typing import Any

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from parcelhub.db.models import Order
from parcelhub.modules.common.repository import AsyncRepository


class SqlOrderRepository(AsyncRepository[Order]):
    model = Order

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def create(
        self,
        *,
        order_number: str,
        owner_account_id: str,
        purchase_site: str,
        purchase_link: str,
        phone_number: str,
        notes: str | None,
        additional_info: str | None,
        status: str,
    ) -> Order:
        order = Order(
            order_number=order_number,
            owner_account_id=owner_account_id,
            purchase_site=purchase_site,
            purchase_link=purchase_link,
            phone_number=phone_number,
            notes=notes,
            additional_info=additional_info,
            status=status,
            version=1,
        )
        return await self.add(order)

    async def get_order(self, order_id: str) -> Order | None:
        stmt = select(Order).where(Order.id == order_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def update_versioned(self, order_id: str, expected_version: int, **values: Any) -> Order:
        return await self.compare_and_set(order_id, expected_version, **values)

    async def list_orders(
        self,
        *,
        owner_account_id: str | None,
        status: str | None,
        limit: int,
        offset: int,
    ) -> list[Order]:
        stmt = select(Order)
        if owner_account_id is not None:
            stmt = stmt.where(Order.owner_account_id == owner_account_id)
        if status is not None:
            stmt = stmt.where(Order.status == status)
        stmt = stmt.order_by(desc(Order.created_at)).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
