"""Repository protocol for wallet operations."""

from __future__ import annotations

from typing import Protocol, Sequence

from parcelhub.db.models import Wallet as WalletModel, WalletTransaction as WalletTransactionModel


class WalletRepository(Protocol):
    async def get_wallet(self, account_id: str) -> WalletModel | None:
        ...

    async def get_wallet_by_id(self, wallet_id: str) -> WalletModel | None:
        ...

    async def get_or_create_wallet(self, account_id: str) -> tuple[WalletModel, bool]:
        ...

    async def apply_delta(self, wallet_id: str, expected_version: int, delta_cents: int) -> WalletModel:
        ...

    async def add_transaction(
        self,
        *,
        wallet_id: str,
        amount_cents: int,
        direction: str,
        reason: str,
        description: str | None,
        order_id: str | None,
        package_id: str | None,
    ) -> WalletTransactionModel:
        ...

    async def list_transactions(
        self, wallet_id: str, limit: int | None, offset: int
    ) -> Sequence[WalletTransactionModel]:
        ...

    async def sum_transactions(self, wallet_id: str) -> int:
        ...
