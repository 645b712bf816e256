"""Domain models for wallet operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from parcelhub.modules.lifecycle.models import LedgerReason, TransactionDirection


@dataclass(slots=True)
class WalletSnapshot:
    id: str
    account_id: str
    balance_cents: int
    version: int
    updated_at: Optional[datetime]


@dataclass(slots=True)
class WalletTransactionRecord:
    id: str
    wallet_id: str
    amount_cents: int
    direction: TransactionDirection
    reason: LedgerReason
    description: Optional[str]
    order_id: Optional[str]
    package_id: Optional[str]
    created_at: datetime

    @property
    def signed_amount(self) -> int:
        if self.direction is TransactionDirection.DEBIT:
            return -self.amount_cents
        return self.amount_cents


@dataclass(slots=True)
class WalletStatement:
    """Balance plus full history, newest transaction first."""

    wallet: WalletSnapshot
    transactions: list[WalletTransactionRecord] = field(default_factory=list)
