"""Account related dependency providers."""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from parcelhub.core.security import InvalidTokenError, decode_access_token
from parcelhub.modules.accounts import Account, AccountService

from .database import get_db_session

bearer_scheme = HTTPBearer()


def get_account_service(db: AsyncSession = Depends(get_db_session)) -> AccountService:
    return AccountService.with_session(db)


async def get_current_account(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    account_service: AccountService = Depends(get_account_service),
) -> Account:
    try:
        claims = decode_access_token(credentials.credentials)
    except InvalidTokenError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc

    account = await account_service.get_by_id(claims["sub"])
    if account is None or not account.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="account missing or disabled")
    return account


async def get_current_staff(account: Account = Depends(get_current_account)) -> Account:
    if not account.is_staff():
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="staff privileges required")
    return account


__all__ = [
    "bearer_scheme",
    "get_account_service",
    "get_current_account",
    "get_current_staff",
]
