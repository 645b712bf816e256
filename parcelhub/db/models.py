"""SQLAlchemy ORM models."""
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from parcelhub.infrastructure.database.base import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Account(Base):
    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="REGULAR")
    is_active = Column(Boolean, default=True)
    email = Column(String(100), unique=True)
    phone_number = Column(String(30))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    last_login_at = Column(DateTime(timezone=True))

    wallet = relationship("Wallet", back_populates="account", uselist=False)


class Wallet(Base):
    __tablename__ = "wallets"
    __table_args__ = (
        CheckConstraint("balance_cents >= 0", name="ck_wallets_balance_non_negative"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    account_id = Column(String(36), ForeignKey("accounts.id"), unique=True, nullable=False, index=True)
    balance_cents = Column(Integer, nullable=False, default=0)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    account = relationship("Account", back_populates="wallet")
    transactions = relationship("WalletTransaction", back_populates="wallet")


class WalletTransaction(Base):
    __tablename__ = "wallet_transactions"
    __table_args__ = (
        CheckConstraint("amount_cents > 0", name="ck_wallet_transactions_amount_positive"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    wallet_id = Column(String(36), ForeignKey("wallets.id"), nullable=False, index=True)
    amount_cents = Column(Integer, nullable=False)
    direction = Column(String(10), nullable=False)  # CREDIT, DEBIT
    reason = Column(String(30), nullable=False)
    description = Column(String(255))
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=True, index=True)
    package_id = Column(String(36), ForeignKey("packages.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    wallet = relationship("Wallet", back_populates="transactions")


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    order_number = Column(String(32), unique=True, nullable=False, index=True)
    owner_account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    purchase_site = Column(String(255), nullable=False)
    purchase_link = Column(Text, nullable=False)
    phone_number = Column(String(30), nullable=False)
    notes = Column(Text)
    additional_info = Column(Text)
    total_amount_cents = Column(Integer, nullable=True)
    paid_amount_cents = Column(Integer, nullable=True)
    status = Column(String(30), nullable=False, default="PENDING_APPROVAL", index=True)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    owner = relationship("Account")
    package = relationship("Package", back_populates="order", uselist=False)


class Package(Base):
    __tablename__ = "packages"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    tracking_number = Column(String(64), unique=True, nullable=False, index=True)
    owner_account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    shop_account_id = Column(String(36), ForeignKey("accounts.id"), nullable=True, index=True)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=True, unique=True)
    description = Column(Text)
    customs_fee_cents = Column(Integer, nullable=True)
    customs_paid_cents = Column(Integer, nullable=False, default=0)
    status = Column(String(30), nullable=False, default="AWAITING_PAYMENT", index=True)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    owner = relationship("Account", foreign_keys=[owner_account_id])
    shop = relationship("Account", foreign_keys=[shop_account_id])
    order = relationship("Order", back_populates="package")
    events = relationship("PackageEvent", back_populates="package", order_by="PackageEvent.created_at")


class PackageEvent(Base):
    __tablename__ = "package_events"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    package_id = Column(String(36), ForeignKey("packages.id"), nullable=False, index=True)
    status = Column(String(30), nullable=False)
    note = Column(String(255))
    actor_account_id = Column(String(36), ForeignKey("accounts.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    package = relationship("Package", back_populates="events")
