"""Purchase order endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from parcelhub.interfaces.http.deps import get_coordinator, get_current_account, get_db_session
from parcelhub.modules.accounts import Account, AccountService
from parcelhub.modules.coordinator import TransactionCoordinator
from parcelhub.modules.lifecycle.models import OrderStatus
from parcelhub.modules.orders import Order, OrderCreateInput, OrderService
from parcelhub.schemas import (
    OrderApproveRequest,
    OrderCreate,
    OrderListResponse,
    OrderPriceUpdate,
    OrderResponse,
)

router = APIRouter()


def _list_response(orders: list[Order]) -> OrderListResponse:
    return OrderListResponse(
        total=len(orders),
        orders=[OrderResponse.model_validate(order) for order in orders],
    )


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED, summary="Open a purchase order")
async def create_order(
    payload: OrderCreate,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> OrderResponse:
    owner_id = payload.owner_account_id or account.id
    service = OrderService.with_session(db)
    if owner_id != account.id and account.is_staff():
        await AccountService.with_session(db).require(owner_id)
    order = await service.create_order(
        OrderCreateInput(
            owner_account_id=owner_id,
            purchase_site=payload.purchase_site,
            purchase_link=payload.purchase_link,
            phone_number=payload.phone_number,
            notes=payload.notes,
            additional_info=payload.additional_info,
        ),
        account,
    )
    await db.commit()
    return OrderResponse.model_validate(order)


@router.get("/mine", response_model=OrderListResponse, summary="Orders owned by the caller")
async def list_my_orders(
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> OrderListResponse:
    orders = await OrderService.with_session(db).list_own_orders(account, status_filter, limit, offset)
    return _list_response(orders)


@router.get("", response_model=OrderListResponse, summary="All orders (staff)")
async def list_orders(
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> OrderListResponse:
    orders = await OrderService.with_session(db).list_all_orders(account, status_filter, limit, offset)
    return _list_response(orders)


@router.get("/{order_id}", response_model=OrderResponse, summary="Order details")
async def get_order(
    order_id: str,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> OrderResponse:
    order = await OrderService.with_session(db).get_order(order_id, account)
    return OrderResponse.model_validate(order)


@router.put("/{order_id}/price", response_model=OrderResponse, summary="Set the order total")
async def set_order_price(
    order_id: str,
    payload: OrderPriceUpdate,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> OrderResponse:
    order = await OrderService.with_session(db).set_price(order_id, payload.total_amount_cents, account)
    await db.commit()
    return OrderResponse.model_validate(order)


@router.post("/{order_id}/approve", response_model=OrderResponse, summary="Approve a priced order")
async def approve_order(
    order_id: str,
    payload: Optional[OrderApproveRequest] = None,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> OrderResponse:
    total = payload.total_amount_cents if payload else None
    order = await OrderService.with_session(db).approve(order_id, account, total)
    await db.commit()
    return OrderResponse.model_validate(order)


@router.post("/{order_id}/pay", response_model=OrderResponse, summary="Pay the order from the wallet")
async def pay_order(
    order_id: str,
    account: Account = Depends(get_current_account),
    coordinator: TransactionCoordinator = Depends(get_coordinator),
) -> OrderResponse:
    order = await coordinator.pay_order(order_id, account)
    return OrderResponse.model_validate(order)


@router.post("/{order_id}/complete", response_model=OrderResponse, summary="Mark the purchase as done")
async def complete_order(
    order_id: str,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> OrderResponse:
    order = await OrderService.with_session(db).complete(order_id, account)
    await db.commit()
    return OrderResponse.model_validate(order)


@router.post("/{order_id}/cancel", response_model=OrderResponse, summary="Cancel, refunding any payment")
async def cancel_order(
    order_id: str,
    account: Account = Depends(get_current_account),
    coordinator: TransactionCoordinator = Depends(get_coordinator),
) -> OrderResponse:
    order = await coordinator.cancel_order(order_id, account)
    return OrderResponse.model_validate(order)


@router.post("/{order_id}/refund", response_model=OrderResponse, summary="Refund a paid order")
async def refund_order(
    order_id: str,
    account: Account = Depends(get_current_account),
    coordinator: TransactionCoordinator = Depends(get_coordinator),
) -> OrderResponse:
    order = await coordinator.refund(order_id, account)
    return OrderResponse.model_validate(order)
