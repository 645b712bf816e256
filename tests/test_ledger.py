import asyncio
import random

import pytest

from parcelhub.modules.common.exceptions import InsufficientFunds, InvalidAmount, NotFound
from parcelhub.modules.lifecycle.models import LedgerReason, TransactionDirection
from parcelhub.modules.wallets import WalletService


async def test_wallet_is_opened_lazily(session, customer):
    service = WalletService.with_session(session)

    snapshot = await service.ensure_wallet(customer.id)
    again = await service.ensure_wallet(customer.id)

    assert snapshot.balance_cents == 0
    assert again.id == snapshot.id


async def test_unknown_account_has_no_wallet(session):
    with pytest.raises(NotFound):
        await WalletService.with_session(session).ensure_wallet("missing")


async def test_debit_beyond_balance_leaves_wallet_untouched(session, customer):
    service = WalletService.with_session(session)
    wallet = await service.ensure_wallet(customer.id)
    await service.append_transaction(wallet.id, 100, TransactionDirection.CREDIT, LedgerReason.TOP_UP)

    with pytest.raises(InsufficientFunds) as excinfo:
        await service.append_transaction(wallet.id, 150, TransactionDirection.DEBIT, LedgerReason.ORDER_PAYMENT)

    assert excinfo.value.balance_cents == 100
    assert await service.get_balance(customer.id) == 100
    assert len(await service.list_transactions(wallet.id)) == 1


@pytest.mark.parametrize("amount", [0, -1, 2.5])
async def test_non_positive_amounts_rejected(session, customer, amount):
    service = WalletService.with_session(session)
    wallet = await service.ensure_wallet(customer.id)
    with pytest.raises(InvalidAmount):
        await service.append_transaction(wallet.id, amount, TransactionDirection.CREDIT, LedgerReason.TOP_UP)


async def test_balance_matches_history_for_random_sequences(session, customer):
    service = WalletService.with_session(session)
    wallet = await service.ensure_wallet(customer.id)
    rng = random.Random(20261019)
    expected = 0

    for _ in range(60):
        amount = rng.randint(1, 500)
        direction = rng.choice([TransactionDirection.CREDIT, TransactionDirection.DEBIT])
        if direction is TransactionDirection.DEBIT and amount > expected:
            with pytest.raises(InsufficientFunds):
                await service.append_transaction(wallet.id, amount, direction, LedgerReason.ORDER_PAYMENT)
        else:
            await service.append_transaction(wallet.id, amount, direction, LedgerReason.TOP_UP)
            expected += amount if direction is TransactionDirection.CREDIT else -amount

        balance = await service.get_balance(customer.id)
        assert balance == expected
        assert balance >= 0
        assert await service.recompute_balance(wallet.id) == balance


async def test_statement_lists_newest_first(session, customer):
    service = WalletService.with_session(session)
    wallet = await service.ensure_wallet(customer.id)
    await service.append_transaction(wallet.id, 100, TransactionDirection.CREDIT, LedgerReason.TOP_UP)
    await service.append_transaction(wallet.id, 40, TransactionDirection.DEBIT, LedgerReason.ORDER_PAYMENT)

    statement = await service.get_statement(customer.id)

    assert statement.wallet.balance_cents == 60
    assert [tx.signed_amount for tx in statement.transactions] == [-40, 100]
    assert await service.can_cover(customer.id, 60)
    assert not await service.can_cover(customer.id, 61)


async def test_concurrent_first_reads_share_one_wallet(session_factory, customer):
    async def read_balance() -> tuple[int, str]:
        async with session_factory() as session:
            service = WalletService.with_session(session)
            balance = await service.get_balance(customer.id)
            wallet = await service.ensure_wallet(customer.id)
            await session.commit()
        return balance, wallet.id

    results = await asyncio.gather(read_balance(), read_balance(), read_balance())

    assert [balance for balance, _ in results] == [0, 0, 0]
    assert len({wallet_id for _, wallet_id in results}) == 1
