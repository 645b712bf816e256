"""Transaction coordinator.

The only place allowed to change a wallet and an order/package in one logical
operation. Each attempt runs in a fresh session: the state machine validates the
transition, the ledger applies its balance effect, the status is written with a
version check, and the session commits both or rolls back both. Attempts that lose
a version check are retried a bounded number of times.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from tenacity import RetryCallState, retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from parcelhub.core.config import CoordinatorSettings, get_settings
from parcelhub.modules.access.policy import AccessPolicy, Operation, default_policy
from parcelhub.modules.accounts.models import Account
from parcelhub.modules.common.exceptions import ConcurrentModification, IllegalTransition, PaymentFailed
from parcelhub.modules.lifecycle import order_machine, package_machine
from parcelhub.modules.lifecycle.amounts import require_amount
from parcelhub.modules.lifecycle.models import (
    LedgerEffect,
    LedgerReason,
    OrderStatus,
    PackageStatus,
    TransactionDirection,
)
from parcelhub.modules.orders.models import Order
from parcelhub.modules.orders.service import OrderService
from parcelhub.modules.packages.models import Package
from parcelhub.modules.packages.service import PackageService
from parcelhub.modules.wallets.models import WalletSnapshot
from parcelhub.modules.wallets.service import WalletService

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True)
class Unit:
    """Services bound to the session of one coordinator attempt."""

    session: AsyncSession
    wallets: WalletService
    orders: OrderService
    packages: PackageService


class TransactionCoordinator:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        settings: Optional[CoordinatorSettings] = None,
        policy: AccessPolicy = default_policy,
    ) -> None:
        self._session_factory = session_factory
        self._settings = settings or get_settings().coordinator
        self._policy = policy

    async def pay_order(self, order_id: str, actor: Account) -> Order:
        async def operation(unit: Unit) -> Order:
            order = await unit.orders.load(order_id)
            self._policy.authorize(actor, Operation.PAY_ORDER, resource_owner_id=order.owner_account_id)
            transition = order_machine.pay(order)
            # status first: a stale read loses the order version check before touching the wallet
            paid = await unit.orders.apply(order, transition)
            await unit.wallets.apply_effect(order.owner_account_id, transition.ledger, order_id=order.id)
            return paid

        return await self._run(f"pay order {order_id}", operation)

    async def cancel_order(self, order_id: str, actor: Account) -> Order:
        return await self._run(
            f"cancel order {order_id}",
            lambda unit: self._cancel_order(unit, order_id, actor, require_payment=False),
        )

    async def refund(self, order_id: str, actor: Account) -> Order:
        """Cancel a paid order and credit the paid amount back to its owner."""
        return await self._run(
            f"refund order {order_id}",
            lambda unit: self._cancel_order(unit, order_id, actor, require_payment=True),
        )

    async def pay_customs(self, package_id: str, amount_cents: int, actor: Account) -> Package:
        async def operation(unit: Unit) -> Package:
            package = await unit.packages.load(package_id)
            unit.packages.authorize(actor, Operation.PAY_CUSTOMS, package)
            transition = package_machine.pay_customs(package, amount_cents)
            await unit.wallets.apply_effect(package.owner_account_id, transition.ledger, package_id=package.id)
            return await unit.packages.apply(package, transition, actor)

        return await self._run(f"pay customs on package {package_id}", operation)

    async def advance_package(
        self,
        package_id: str,
        next_status: PackageStatus,
        actor: Account,
        note: Optional[str] = None,
    ) -> Package:
        async def operation(unit: Unit) -> Package:
            package = await unit.packages.load(package_id)
            unit.packages.authorize(actor, Operation.ADVANCE_PACKAGE, package, target_status=next_status)
            transition = package_machine.advance(package, next_status)
            if transition.ledger is not None:
                await unit.wallets.apply_effect(
                    package.owner_account_id, transition.ledger, package_id=package.id
                )
            return await unit.packages.apply(package, transition, actor, note)

        return await self._run(f"advance package {package_id} to {next_status.value}", operation)

    async def credit_wallet(
        self,
        account_id: str,
        amount_cents: int,
        actor: Account,
        description: Optional[str] = None,
    ) -> WalletSnapshot:
        self._policy.authorize(actor, Operation.CREDIT_WALLET, resource_owner_id=account_id)
        effect = LedgerEffect(
            direction=TransactionDirection.CREDIT,
            amount_cents=require_amount(amount_cents),
            reason=LedgerReason.TOP_UP,
            description=description or "Wallet top-up",
        )

        async def operation(unit: Unit) -> WalletSnapshot:
            await unit.wallets.apply_effect(account_id, effect)
            return await unit.wallets.ensure_wallet(account_id)

        return await self._run(f"credit wallet of {account_id}", operation)

    async def _cancel_order(
        self, unit: Unit, order_id: str, actor: Account, *, require_payment: bool
    ) -> Order:
        order = await unit.orders.load(order_id)
        self._policy.authorize(actor, Operation.CANCEL_ORDER, resource_owner_id=order.owner_account_id)
        if require_payment and not order.is_paid:
            raise IllegalTransition(
                order.status.value,
                OrderStatus.CANCELLED.value,
                f"order {order.order_number} has no payment to refund",
            )
        transition = order_machine.cancel(order)
        if transition.ledger is not None:
            await unit.wallets.apply_effect(order.owner_account_id, transition.ledger, order_id=order.id)
        return await unit.orders.apply(order, transition)

    async def _run(self, label: str, operation: Callable[[Unit], Awaitable[T]]) -> T:
        @retry(
            stop=stop_after_attempt(self._settings.max_attempts),
            wait=wait_exponential(
                multiplier=self._settings.backoff_min,
                min=self._settings.backoff_min,
                max=self._settings.backoff_max,
            ),
            retry=retry_if_exception_type(ConcurrentModification),
            before_sleep=self._log_retry(label),
            reraise=True,
        )
        async def _attempt() -> T:
            return await self._run_once(label, operation)

        try:
            return await _attempt()
        except ConcurrentModification:
            logger.error("%s gave up after %s attempts", label, self._settings.max_attempts)
            raise

    async def _run_once(self, label: str, operation: Callable[[Unit], Awaitable[T]]) -> T:
        async with self._session_factory() as session:
            unit = Unit(
                session=session,
                wallets=WalletService.with_session(session),
                orders=OrderService.with_session(session, self._policy),
                packages=PackageService.with_session(session, self._policy),
            )
            try:
                result = await operation(unit)
                await session.commit()
            except PaymentFailed as exc:
                await session.rollback()
                logger.warning("%s rolled back: %s", label, exc)
                raise
            except Exception:
                await session.rollback()
                raise
            return result

    @staticmethod
    def _log_retry(label: str) -> Callable[[RetryCallState], None]:
        def _before_sleep(state: RetryCallState) -> None:
            logger.warning(
                "%s lost a concurrent update (attempt %s), retrying",
                label,
                state.attempt_number,
            )

        return _before_sleep
