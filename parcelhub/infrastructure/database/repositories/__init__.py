"""SQLAlchemy-backed repository implementations."""

from .account_repository import SqlAccountRepository
from .order_repository import SqlOrderRepository
from .package_repository import SqlPackageRepository
from .wallet_repository import SqlWalletRepository

__all__ = [
    "SqlAccountRepository",
    "SqlOrderRepository",
    "SqlPackageRepository",
    "SqlWalletRepository",
]
