"""Pydantic schemas used across the HTTP layer."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from parcelhub.modules.accounts.models import Role
from parcelhub.modules.lifecycle.models import PackageStatus


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)
    email: Optional[str] = None
    phone_number: Optional[str] = None


class AccountCreate(RegisterRequest):
    role: Role = Role.REGULAR


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    account_id: str
    username: str
    role: str


class AccountResponse(BaseModel):
    id: str
    username: str
    role: str
    is_active: bool
    email: Optional[str] = None
    phone_number: Optional[str] = None
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AccountListResponse(BaseModel):
    total: int
    accounts: list[AccountResponse]


class OrderCreate(BaseModel):
    purchase_site: str = Field(..., min_length=1, max_length=255)
    purchase_link: str = Field(..., min_length=1)
    phone_number: str = Field(..., min_length=3, max_length=32)
    notes: Optional[str] = None
    additional_info: Optional[str] = None
    # staff may open an order on behalf of a customer
    owner_account_id: Optional[str] = None


class OrderPriceUpdate(BaseModel):
    total_amount_cents: int


class OrderApproveRequest(BaseModel):
    total_amount_cents: Optional[int] = None


class OrderResponse(BaseModel):
    id: str
    order_number: str
    owner_account_id: str
    purchase_site: str
    purchase_link: str
    phone_number: str
    notes: Optional[str] = None
    additional_info: Optional[str] = None
    total_amount_cents: Optional[int] = None
    paid_amount_cents: Optional[int] = None
    status: str
    version: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class OrderListResponse(BaseModel):
    total: int
    orders: list[OrderResponse]


class PackageCreate(BaseModel):
    owner_account_id: str
    shop_account_id: Optional[str] = None
    description: Optional[str] = None
    tracking_number: Optional[str] = Field(None, min_length=3, max_length=64)
    order_id: Optional[str] = None
    customs_fee_cents: Optional[int] = None


class CustomsFeeUpdate(BaseModel):
    customs_fee_cents: int


class CustomsPaymentRequest(BaseModel):
    amount_cents: int


class PackageStatusUpdate(BaseModel):
    status: PackageStatus
    note: Optional[str] = Field(None, max_length=500)


class PackageDetailsUpdate(BaseModel):
    tracking_number: Optional[str] = Field(None, min_length=3, max_length=64)
    description: Optional[str] = None


class ShopAssignment(BaseModel):
    shop_account_id: Optional[str] = None


class PackageResponse(BaseModel):
    id: str
    tracking_number: str
    owner_account_id: str
    shop_account_id: Optional[str] = None
    order_id: Optional[str] = None
    description: Optional[str] = None
    customs_fee_cents: Optional[int] = None
    customs_paid_cents: int
    customs_outstanding_cents: int
    status: str
    version: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PackageListResponse(BaseModel):
    total: int
    packages: list[PackageResponse]


class PackageEventResponse(BaseModel):
    id: str
    status: str
    note: Optional[str] = None
    actor_account_id: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PackageTrackingResponse(BaseModel):
    package: PackageResponse
    events: list[PackageEventResponse] = Field(default_factory=list)


class WalletTransactionResponse(BaseModel):
    id: str
    amount_cents: int
    signed_amount: int
    direction: str
    reason: str
    description: Optional[str] = None
    order_id: Optional[str] = None
    package_id: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WalletResponse(BaseModel):
    account_id: str
    balance_cents: int
    currency: str
    transactions: list[WalletTransactionResponse] = Field(default_factory=list)


class BalanceCheckRequest(BaseModel):
    amount_cents: int


class BalanceCheckResponse(BaseModel):
    sufficient: bool
    balance_cents: int
    amount_cents: int
    currency: str


class WalletCreditRequest(BaseModel):
    amount_cents: int
    description: Optional[str] = Field(None, max_length=255)


class WalletBalanceResponse(BaseModel):
    account_id: str
    balance_cents: int
    currency: str


class ErrorResponse(BaseModel):
    detail: str
    code: str
