"""Authentication endpoints used by customers, shops and staff."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from parcelhub.core.security import create_access_token
from parcelhub.interfaces.http.deps import (
    get_account_service,
    get_current_account,
    get_current_staff,
    get_db_session,
)
from parcelhub.modules.accounts import Account, AccountCreateInput, AccountService, Role
from parcelhub.schemas import (
    AccountCreate,
    AccountListResponse,
    AccountResponse,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
)

router = APIRouter()


def _token_response(account: Account) -> TokenResponse:
    access_token = create_access_token(account.id, account.username, account.role.value)
    return TokenResponse(
        access_token=access_token,
        account_id=account.id,
        username=account.username,
        role=account.role.value,
    )


@router.post("/register", response_model=TokenResponse, summary="Register a customer account")
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
    account_service: AccountService = Depends(get_account_service),
) -> TokenResponse:
    account = await account_service.create_account(
        AccountCreateInput(
            username=payload.username,
            password=payload.password,
            role=Role.REGULAR,
            email=payload.email,
            phone_number=payload.phone_number,
        )
    )
    await db.commit()
    return _token_response(account)


@router.post("/login", response_model=TokenResponse, summary="Exchange credentials for a bearer token")
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
    account_service: AccountService = Depends(get_account_service),
) -> TokenResponse:
    account = await account_service.authenticate(payload.username, payload.password)
    if not account:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="invalid username or password")

    await account_service.set_last_login(account.id)
    await db.commit()
    return _token_response(account)


@router.get("/me", response_model=AccountResponse, summary="Current account")
async def me(account: Account = Depends(get_current_account)) -> AccountResponse:
    return AccountResponse.model_validate(account)


@router.get("/shops", response_model=AccountListResponse, summary="Pickup shops")
async def list_shops(
    _: Account = Depends(get_current_account),
    account_service: AccountService = Depends(get_account_service),
) -> AccountListResponse:
    shops = await account_service.list_shops()
    return AccountListResponse(
        total=len(shops),
        accounts=[AccountResponse.model_validate(shop) for shop in shops],
    )


@router.get("/customers", response_model=AccountListResponse, summary="Customer accounts (staff)")
async def list_customers(
    _: Account = Depends(get_current_staff),
    account_service: AccountService = Depends(get_account_service),
) -> AccountListResponse:
    customers = await account_service.list_customers()
    return AccountListResponse(
        total=len(customers),
        accounts=[AccountResponse.model_validate(customer) for customer in customers],
    )


@router.post(
    "/accounts",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a shop, staff or customer account",
)
async def create_account(
    payload: AccountCreate,
    staff: Account = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db_session),
    account_service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    if payload.role is Role.OWNER and staff.role is not Role.OWNER:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="only an owner may create owners")

    account = await account_service.create_account(
        AccountCreateInput(
            username=payload.username,
            password=payload.password,
            role=payload.role,
            email=payload.email,
            phone_number=payload.phone_number,
        )
    )
    await db.commit()
    return AccountResponse.model_validate(account)
