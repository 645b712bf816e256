"""Wallet ledger exports"""

from .models import WalletSnapshot, WalletStatement, WalletTransactionRecord
from .service import WalletService

__all__ = [
    "WalletSnapshot",
    "WalletStatement",
    "WalletTransactionRecord",
    "WalletService",
]
