"""Repository interface for purchase orders."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from parcelhub.db.models import Order as OrderModel


class OrderRepository(Protocol):
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
    ) -> OrderModel:
        ...

    async def get_order(self, order_id: str) -> OrderModel | None:
        ...

    async def update_versioned(self, order_id: str, expected_version: int, **values: Any) -> OrderModel:
        ...

    async def list_orders(
        self,
        *,
        owner_account_id: str | None,
        status: str | None,
        limit: int,
        offset: int,
    ) -> Sequence[OrderModel]:
        ...
