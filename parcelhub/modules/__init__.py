"""Domain modules and shared exports."""

from . import access, accounts, common, coordinator, lifecycle, orders, packages, wallets

__all__ = [
    "access",
    "accounts",
    "common",
    "coordinator",
    "lifecycle",
    "orders",
    "packages",
    "wallets",
]
