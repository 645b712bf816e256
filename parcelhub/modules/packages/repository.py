"""Repository interface for shipments."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from parcelhub.db.models import Package as PackageModel, PackageEvent as PackageEventModel


class PackageRepository(Protocol):
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
    ) -> PackageModel:
        ...

    async def get_package(self, package_id: str) -> PackageModel | None:
        ...

    async def get_by_tracking_number(self, tracking_number: str) -> PackageModel | None:
        ...

    async def get_by_order(self, order_id: str) -> PackageModel | None:
        ...

    async def update_versioned(self, package_id: str, expected_version: int, **values: Any) -> PackageModel:
        ...

    async def add_event(
        self,
        *,
        package_id: str,
        status: str,
        note: str | None,
        actor_account_id: str | None,
    ) -> PackageEventModel:
        ...

    async def list_events(self, package_id: str) -> Sequence[PackageEventModel]:
        ...

    async def list_packages(
        self,
        *,
        owner_account_id: str | None,
        shop_account_id: str | None,
        status: str | None,
        limit: int,
        offset: int,
    ) -> Sequence[PackageModel]:
        ...
