"""Wallet endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from parcelhub.core.config import get_settings
from parcelhub.interfaces.http.deps import get_coordinator, get_current_account, get_db_session
from parcelhub.modules.access import Operation, default_policy
from parcelhub.modules.accounts import Account
from parcelhub.modules.coordinator import TransactionCoordinator
from parcelhub.modules.lifecycle.amounts import require_amount
from parcelhub.modules.wallets import WalletService, WalletStatement
from parcelhub.schemas import (
    BalanceCheckRequest,
    BalanceCheckResponse,
    WalletBalanceResponse,
    WalletCreditRequest,
    WalletResponse,
    WalletTransactionResponse,
)

router = APIRouter()
settings = get_settings()


def _wallet_response(statement: WalletStatement) -> WalletResponse:
    return WalletResponse(
        account_id=statement.wallet.account_id,
        balance_cents=statement.wallet.balance_cents,
        currency=settings.currency,
        transactions=[WalletTransactionResponse.model_validate(tx) for tx in statement.transactions],
    )


async def _statement(
    db: AsyncSession, account_id: str, limit: Optional[int], offset: int
) -> WalletStatement:
    statement = await WalletService.with_session(db).get_statement(account_id, limit, offset)
    # first access opens the wallet
    await db.commit()
    return statement


@router.get("", response_model=WalletResponse, summary="Own balance and history")
async def get_own_wallet(
    limit: Optional[int] = Query(None, ge=1, le=500),
    offset: int = Query(0, ge=0),
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> WalletResponse:
    default_policy.authorize(account, Operation.READ_WALLET, resource_owner_id=account.id)
    return _wallet_response(await _statement(db, account.id, limit, offset))


@router.post("/check-balance", response_model=BalanceCheckResponse, summary="Can the wallet cover an amount")
async def check_balance(
    payload: BalanceCheckRequest,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> BalanceCheckResponse:
    default_policy.authorize(account, Operation.READ_WALLET, resource_owner_id=account.id)
    amount = require_amount(payload.amount_cents)
    balance = await WalletService.with_session(db).get_balance(account.id)
    await db.commit()
    return BalanceCheckResponse(
        sufficient=balance >= amount,
        balance_cents=balance,
        amount_cents=amount,
        currency=settings.currency,
    )


@router.get("/{account_id}", response_model=WalletResponse, summary="Balance and history of an account")
async def get_wallet(
    account_id: str,
    limit: Optional[int] = Query(None, ge=1, le=500),
    offset: int = Query(0, ge=0),
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> WalletResponse:
    default_policy.authorize(account, Operation.READ_WALLET, resource_owner_id=account_id)
    return _wallet_response(await _statement(db, account_id, limit, offset))


@router.post("/{account_id}/credits", response_model=WalletBalanceResponse, summary="Top up a wallet (staff)")
async def credit_wallet(
    account_id: str,
    payload: WalletCreditRequest,
    account: Account = Depends(get_current_account),
    coordinator: TransactionCoordinator = Depends(get_coordinator),
) -> WalletBalanceResponse:
    snapshot = await coordinator.credit_wallet(account_id, payload.amount_cents, account, payload.description)
    return WalletBalanceResponse(
        account_id=snapshot.account_id,
        balance_cents=snapshot.balance_cents,
        currency=settings.currency,
    )
