"""
Pytest fixtures: a throwaway SQLite file per test, seeded accounts and helpers.
"""
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from parcelhub.core.config import CoordinatorSettings
from parcelhub.infrastructure.database.session import build_session_factory, init_db
from parcelhub.modules.accounts import Account, AccountCreateInput, AccountService, Role
from parcelhub.modules.coordinator import TransactionCoordinator
from parcelhub.modules.lifecycle.models import OrderStatus
from parcelhub.modules.orders import Order, OrderCreateInput, OrderService
from parcelhub.modules.packages import Package, PackageCreateInput, PackageService


@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    # a real file so concurrent units get their own connections and locks
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'parcelhub-test.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def coordinator(session_factory) -> TransactionCoordinator:
    return TransactionCoordinator(
        session_factory,
        CoordinatorSettings(max_attempts=5, backoff_min=0.01, backoff_max=0.05),
    )


async def create_account(session_factory, username: str, role: Role = Role.REGULAR) -> Account:
    async with session_factory() as session:
        account = await AccountService.with_session(session).create_account(
            AccountCreateInput(username=username, password="secret123", role=role)
        )
        await session.commit()
    return account


@pytest_asyncio.fixture
async def customer(session_factory) -> Account:
    return await create_account(session_factory, "customer")


@pytest_asyncio.fixture
async def other_customer(session_factory) -> Account:
    return await create_account(session_factory, "neighbour")


@pytest_asyncio.fixture
async def shop(session_factory) -> Account:
    return await create_account(session_factory, "downtown-shop", Role.SHOP)


@pytest_asyncio.fixture
async def admin(session_factory) -> Account:
    return await create_account(session_factory, "admin", Role.ADMIN)


@pytest.fixture
def fund(coordinator, admin):
    """Credit ``amount`` cents to an account's wallet through the coordinator."""

    async def _fund(account: Account, amount_cents: int) -> None:
        await coordinator.credit_wallet(account.id, amount_cents, admin, "test top-up")

    return _fund


@pytest.fixture
def priced_order(session_factory, admin):
    """Create an order for ``owner`` and approve it at ``total`` cents."""

    async def _priced_order(owner: Account, total_cents: int) -> Order:
        async with session_factory() as session:
            service = OrderService.with_session(session)
            order = await service.create_order(
                OrderCreateInput(
                    owner_account_id=owner.id,
                    purchase_site="example-store",
                    purchase_link="https://example.com/item/1",
                    phone_number="0910000000",
                ),
                owner,
            )
            order = await service.approve(order.id, admin, total_cents)
            await session.commit()
        assert order.status is OrderStatus.AWAITING_PAYMENT
        return order

    return _priced_order


@pytest.fixture
def registered_package(session_factory, admin):
    """Register a package for ``owner`` in AWAITING_PAYMENT."""

    async def _registered_package(
        owner: Account,
        *,
        shop: Optional[Account] = None,
        customs_fee_cents: Optional[int] = None,
    ) -> Package:
        async with session_factory() as session:
            service = PackageService.with_session(session)
            package = await service.create_package(
                PackageCreateInput(
                    owner_account_id=owner.id,
                    shop_account_id=shop.id if shop else None,
                    description="shoes",
                    customs_fee_cents=customs_fee_cents,
                ),
                admin,
            )
            await session.commit()
        return package

    return _registered_package

