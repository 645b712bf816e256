"""SQLAlchemy implementation for shipments and their tracking events."""

from __future__ import annotations

from typing import Any

from sqlalchemy import asc, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from parcelhub.db.models import Package, PackageEvent
from parcelhub.modules.common.repository import AsyncRepository


class SqlPackageRepository(AsyncRepository[Package]):
    model = Package

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def create(
        self,
        *,
        tracking_number: str,
        owner_account_id: str,
        shop_account_id: str | None,
        order_id: str | None,
        description: str | None,
        customs_fee_cents: int | None,
        status: str,
    ) -> Package:
        package = Package(
            tracking_number=tracking_number,
            owner_account_id=owner_account_id,
            shop_account_id=shop_account_id,
            order_id=order_id,
            description=description,
            customs_fee_cents=customs_fee_cents,
            customs_paid_cents=0,
            status=status,
            version=1,
        )
        return await self.add(package)

    async def get_package(self, package_id: str) -> Package | None:
        stmt = select(Package).where(Package.id == package_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_tracking_number(self, tracking_number: str) -> Package | None:
        stmt = select(Package).where(Package.tracking_number == tracking_number)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_order(self, order_id: str) -> Package | None:
        stmt = select(Package).where(Package.order_id == order_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def update_versioned(self, package_id: str, expected_version: int, **values: Any) -> Package:
        return await self.compare_and_set(package_id, expected_version, **values)

    async def add_event(
        self,
        *,
        package_id: str,
        status: str,
        note: str | None,
        actor_account_id: str | None,
    ) -> PackageEvent:
        event = PackageEvent(
            package_id=package_id,
            status=status,
            note=note,
            actor_account_id=actor_account_id,
        )
        self.session.add(event)
        await self.session.flush()
        return event

    async def list_events(self, package_id: str) -> list[PackageEvent]:
        stmt = (
            select(PackageEvent)
            .where(PackageEvent.package_id == package_id)
            .order_by(asc(PackageEvent.created_at))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_packages(
        self,
        *,
        owner_account_id: str | None,
        shop_account_id: str | None,
        status: str | None,
        limit: int,
        offset: int,
    ) -> list[Package]:
        stmt = select(Package)
        if owner_account_id is not None:
            stmt = stmt.where(Package.owner_account_id == owner_account_id)
        if shop_account_id is not None:
            stmt = stmt.where(Package.shop_account_id == shop_account_id)
        if status is not None:
            stmt = stmt.where(Package.status == status)
        stmt = stmt.order_by(desc(Package.created_at)).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
