"""Wallet ledger service.

The ``balance_cents`` column is a materialized cache of the transaction sum. Every
balance change goes through ``append_transaction`` so the delta and its ledger row
are written in the same session transaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from parcelhub.db.models import Wallet as WalletModel, WalletTransaction as WalletTransactionModel
from parcelhub.infrastructure.database.repositories.account_repository import SqlAccountRepository
from parcelhub.infrastructure.database.repositories.wallet_repository import SqlWalletRepository
from parcelhub.modules.accounts.exceptions import AccountNotFoundError
from parcelhub.modules.accounts.repository import AccountRepository
from parcelhub.modules.common.exceptions import InsufficientFunds, NotFound
from parcelhub.modules.lifecycle.amounts import require_amount
from parcelhub.modules.lifecycle.models import LedgerEffect, LedgerReason, TransactionDirection

from .models import WalletSnapshot, WalletStatement, WalletTransactionRecord
from .repository import WalletRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class WalletService:
    repository: WalletRepository
    accounts: AccountRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "WalletService":
        return cls(SqlWalletRepository(session), SqlAccountRepository(session))

    async def ensure_wallet(self, account_id: str) -> WalletSnapshot:
        """Return the account's wallet, creating an empty one on first access.

        This read has a side effect on first invocation only.
        """
        wallet = await self.repository.get_wallet(account_id)
        if wallet is None:
            if await self.accounts.get_by_id(account_id) is None:
                raise AccountNotFoundError(account_id)
            wallet, created = await self.repository.get_or_create_wallet(account_id)
            if created:
                logger.info("Opened wallet %s for account %s", wallet.id, account_id)
        return self._to_snapshot(wallet)

    async def get_balance(self, account_id: str) -> int:
        snapshot = await self.ensure_wallet(account_id)
        return snapshot.balance_cents

    async def get_statement(
        self, account_id: str, limit: Optional[int] = None, offset: int = 0
    ) -> WalletStatement:
        snapshot = await self.ensure_wallet(account_id)
        transactions = await self.list_transactions(snapshot.id, limit, offset)
        return WalletStatement(wallet=snapshot, transactions=transactions)

    async def can_cover(self, account_id: str, amount_cents: int) -> bool:
        amount = require_amount(amount_cents)
        return await self.get_balance(account_id) >= amount

    async def append_transaction(
        self,
        wallet_id: str,
        amount_cents: int,
        direction: TransactionDirection,
        reason: LedgerReason,
        *,
        description: Optional[str] = None,
        order_id: Optional[str] = None,
        package_id: Optional[str] = None,
    ) -> WalletTransactionRecord:
        amount = require_amount(amount_cents)
        wallet = await self.repository.get_wallet_by_id(wallet_id)
        if wallet is None:
            raise NotFound("wallet", wallet_id)

        delta = amount if direction is TransactionDirection.CREDIT else -amount
        if wallet.balance_cents + delta < 0:
            raise InsufficientFunds(wallet.balance_cents, amount)

        wallet = await self.repository.apply_delta(wallet.id, wallet.version, delta)
        tx = await self.repository.add_transaction(
            wallet_id=wallet.id,
            amount_cents=amount,
            direction=direction.value,
            reason=reason.value,
            description=description,
            order_id=order_id,
            package_id=package_id,
        )
        logger.info(
            "Ledger %s %s on wallet %s (%s), balance now %s",
            direction.value,
            amount,
            wallet.id,
            reason.value,
            wallet.balance_cents,
        )
        return self._to_transaction(tx)

    async def apply_effect(
        self,
        account_id: str,
        effect: LedgerEffect,
        *,
        order_id: Optional[str] = None,
        package_id: Optional[str] = None,
    ) -> WalletTransactionRecord:
        wallet = await self.ensure_wallet(account_id)
        return await self.append_transaction(
            wallet.id,
            effect.amount_cents,
            effect.direction,
            effect.reason,
            description=effect.description,
            order_id=order_id,
            package_id=package_id,
        )

    async def list_transactions(
        self, wallet_id: str, limit: Optional[int] = None, offset: int = 0
    ) -> list[WalletTransactionRecord]:
        rows = await self.repository.list_transactions(wallet_id, limit, offset)
        return [self._to_transaction(row) for row in rows]

    async def recompute_balance(self, wallet_id: str) -> int:
        return await self.repository.sum_transactions(wallet_id)

    @staticmethod
    def _to_snapshot(model: WalletModel) -> WalletSnapshot:
        return WalletSnapshot(
            id=model.id,
            account_id=model.account_id,
            balance_cents=model.balance_cents,
            version=model.version,
            updated_at=model.updated_at,
        )

    @staticmethod
    def _to_transaction(model: WalletTransactionModel) -> WalletTransactionRecord:
        return WalletTransactionRecord(
            id=model.id,
            wallet_id=model.wallet_id,
            amount_cents=model.amount_cents,
            direction=TransactionDirection(model.direction),
            reason=LedgerReason(model.reason),
            description=model.description,
            order_id=model.order_id,
            package_id=model.package_id,
            created_at=model.created_at,
        )
