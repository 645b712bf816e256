import asyncio

import pytest

from parcelhub.modules.common.exceptions import (
    ConcurrentModification,
    CustomsUnpaid,
    Forbidden,
    IllegalTransition,
    InsufficientFunds,
)
from parcelhub.modules.lifecycle.models import LedgerReason, OrderStatus, PackageStatus, TransactionDirection
from parcelhub.modules.orders import OrderService
from parcelhub.modules.packages import PackageService
from parcelhub.modules.wallets import WalletService


async def _statement(session_factory, account_id):
    async with session_factory() as session:
        statement = await WalletService.with_session(session).get_statement(account_id)
        await session.commit()
    return statement


async def _order(session_factory, order_id):
    async with session_factory() as session:
        return await OrderService.with_session(session).load(order_id)


async def test_insufficient_funds_changes_nothing(coordinator, session_factory, customer, fund, priced_order):
    await fund(customer, 100)
    order = await priced_order(customer, 150)

    with pytest.raises(InsufficientFunds):
        await coordinator.pay_order(order.id, customer)

    statement = await _statement(session_factory, customer.id)
    assert statement.wallet.balance_cents == 100
    assert len(statement.transactions) == 1
    assert (await _order(session_factory, order.id)).status is OrderStatus.AWAITING_PAYMENT


async def test_payment_debits_wallet_and_advances_order(
    coordinator, session_factory, customer, fund, priced_order
):
    await fund(customer, 200)
    order = await priced_order(customer, 150)

    paid = await coordinator.pay_order(order.id, customer)

    assert paid.status is OrderStatus.ORDERING
    assert paid.paid_amount_cents == 150
    statement = await _statement(session_factory, customer.id)
    assert statement.wallet.balance_cents == 50
    debits = [tx for tx in statement.transactions if tx.direction is TransactionDirection.DEBIT]
    assert len(debits) == 1
    assert debits[0].amount_cents == 150
    assert debits[0].order_id == order.id


async def test_staff_cannot_pay_for_customer(coordinator, customer, admin, fund, priced_order):
    await fund(customer, 200)
    order = await priced_order(customer, 150)

    with pytest.raises(Forbidden):
        await coordinator.pay_order(order.id, admin)


async def test_concurrent_payments_debit_once(coordinator, session_factory, customer, fund, priced_order):
    await fund(customer, 150)
    order = await priced_order(customer, 150)

    results = await asyncio.gather(
        *(coordinator.pay_order(order.id, customer) for _ in range(4)),
        return_exceptions=True,
    )

    successes = [result for result in results if not isinstance(result, Exception)]
    failures = [result for result in results if isinstance(result, Exception)]
    assert len(successes) == 1
    assert len(failures) == 3
    for failure in failures:
        assert isinstance(failure, (IllegalTransition, ConcurrentModification)), repr(failure)

    statement = await _statement(session_factory, customer.id)
    assert statement.wallet.balance_cents == 0
    assert [tx.reason for tx in statement.transactions].count(LedgerReason.ORDER_PAYMENT) == 1


async def test_refund_restores_balance(coordinator, session_factory, customer, admin, fund, priced_order):
    await fund(customer, 500)
    order = await priced_order(customer, 150)
    await coordinator.pay_order(order.id, customer)

    refunded = await coordinator.refund(order.id, admin)

    assert refunded.status is OrderStatus.CANCELLED
    statement = await _statement(session_factory, customer.id)
    assert statement.wallet.balance_cents == 500
    credit = statement.transactions[0]
    assert credit.reason is LedgerReason.ORDER_REFUND
    assert credit.amount_cents == 150


async def test_refund_requires_payment(coordinator, customer, admin, priced_order):
    order = await priced_order(customer, 150)

    with pytest.raises(IllegalTransition):
        await coordinator.refund(order.id, admin)


async def test_cancel_unpaid_order_touches_no_wallet(coordinator, session_factory, customer, priced_order):
    order = await priced_order(customer, 150)

    cancelled = await coordinator.cancel_order(order.id, customer)

    assert cancelled.status is OrderStatus.CANCELLED
    statement = await _statement(session_factory, customer.id)
    assert statement.transactions == []
    with pytest.raises(IllegalTransition):
        await coordinator.cancel_order(order.id, customer)


async def test_customer_cannot_cancel_foreign_order(coordinator, other_customer, customer, priced_order):
    order = await priced_order(customer, 150)

    with pytest.raises(Forbidden):
        await coordinator.cancel_order(order.id, other_customer)


async def _advance_to(coordinator, package, actor, *statuses):
    for status in statuses:
        package = await coordinator.advance_package(package.id, status, actor)
    return package


async def test_customs_gate(coordinator, session_factory, customer, admin, fund, registered_package):
    await fund(customer, 100)
    package = await registered_package(customer, customs_fee_cents=30)
    package = await _advance_to(
        coordinator, package, admin, PackageStatus.PREPARING, PackageStatus.DELIVERING_TO_SHOP
    )

    with pytest.raises(CustomsUnpaid):
        await coordinator.advance_package(package.id, PackageStatus.IN_SHOP, admin)

    paid = await coordinator.pay_customs(package.id, 30, customer)
    assert paid.customs_paid_cents == 30

    in_shop = await coordinator.advance_package(package.id, PackageStatus.IN_SHOP, admin)
    assert in_shop.status is PackageStatus.IN_SHOP
    statement = await _statement(session_factory, customer.id)
    assert statement.wallet.balance_cents == 70


async def test_shop_confirms_pickup(coordinator, session_factory, customer, admin, shop, registered_package):
    package = await registered_package(customer, shop=shop)
    package = await _advance_to(
        coordinator,
        package,
        admin,
        PackageStatus.PREPARING,
        PackageStatus.DELIVERING_TO_SHOP,
        PackageStatus.IN_SHOP,
    )

    received = await coordinator.advance_package(package.id, PackageStatus.RECEIVED, shop, "picked up")

    assert received.status is PackageStatus.RECEIVED
    async with session_factory() as session:
        tracking = await PackageService.with_session(session).track(received.tracking_number, customer)
    assert [event.status for event in tracking.events] == [
        PackageStatus.AWAITING_PAYMENT,
        PackageStatus.PREPARING,
        PackageStatus.DELIVERING_TO_SHOP,
        PackageStatus.IN_SHOP,
        PackageStatus.RECEIVED,
    ]
    assert tracking.events[-1].note == "picked up"


async def test_shop_cannot_move_package_elsewhere(coordinator, customer, shop, registered_package):
    package = await registered_package(customer, shop=shop)

    with pytest.raises(Forbidden):
        await coordinator.advance_package(package.id, PackageStatus.PREPARING, shop)


async def test_cancelled_package_refunds_customs(
    coordinator, session_factory, customer, fund, registered_package
):
    await fund(customer, 100)
    package = await registered_package(customer, customs_fee_cents=40)
    await coordinator.pay_customs(package.id, 25, customer)

    cancelled = await coordinator.advance_package(package.id, PackageStatus.CANCELLED, customer)

    assert cancelled.status is PackageStatus.CANCELLED
    statement = await _statement(session_factory, customer.id)
    assert statement.wallet.balance_cents == 100
    assert statement.transactions[0].reason is LedgerReason.CUSTOMS_REFUND


async def test_credit_wallet_is_staff_only(coordinator, customer):
    with pytest.raises(Forbidden):
        await coordinator.credit_wallet(customer.id, 100, customer)
