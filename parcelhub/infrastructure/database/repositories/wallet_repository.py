"""SQLAlchemy implementation for the wallet ledger"""

from __future__ import annotations

from sqlalchemy import case, desc, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from parcelhub.db.models import Wallet, WalletTransaction
from parcelhub.modules.common.repository import AsyncRepository


class SqlWalletRepository(AsyncRepository[Wallet]):
    model = Wallet

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_wallet(self, account_id: str) -> Wallet | None:
        stmt = select(Wallet).where(Wallet.account_id == account_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_wallet_by_id(self, wallet_id: str) -> Wallet | None:
        stmt = select(Wallet).where(Wallet.id == wallet_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_or_create_wallet(self, account_id: str) -> tuple[Wallet, bool]:
        """Insert an empty wallet unless another session already opened one.

        The insert runs in a savepoint so losing the unique race on ``account_id``
        leaves the surrounding transaction usable.
        """
        wallet = Wallet(account_id=account_id, balance_cents=0, version=1)
        try:
            async with self.session.begin_nested():
                self.session.add(wallet)
                await self.session.flush()
        except IntegrityError:
            existing = await self.get_wallet(account_id)
            if existing is None:
                raise
            return existing, False
        await self.session.refresh(wallet)
        return wallet, True

    async def apply_delta(self, wallet_id: str, expected_version: int, delta_cents: int) -> Wallet:
        return await self.compare_and_set(
            wallet_id,
            expected_version,
            balance_cents=Wallet.balance_cents + delta_cents,
        )

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
    ) -> WalletTransaction:
        tx = WalletTransaction(
            wallet_id=wallet_id,
            amount_cents=amount_cents,
            direction=direction,
            reason=reason,
            description=description,
            order_id=order_id,
            package_id=package_id,
        )
        self.session.add(tx)
        await self.session.flush()
        return tx

    async def list_transactions(
        self, wallet_id: str, limit: int | None, offset: int
    ) -> list[WalletTransaction]:
        stmt = (
            select(WalletTransaction)
            .where(WalletTransaction.wallet_id == wallet_id)
            .order_by(desc(WalletTransaction.created_at), desc(WalletTransaction.id))
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def sum_transactions(self, wallet_id: str) -> int:
        signed = case(
            (WalletTransaction.direction == "DEBIT", -WalletTransaction.amount_cents),
            else_=WalletTransaction.amount_cents,
        )
        stmt = select(func.coalesce(func.sum(signed), 0)).where(WalletTransaction.wallet_id == wallet_id)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())
