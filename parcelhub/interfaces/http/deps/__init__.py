"""Reusable FastAPI dependencies."""

from .account import (
    get_account_service,
    get_current_account,
    get_current_staff,
)
from .coordinator import get_coordinator
from .database import get_db_session

__all__ = [
    "get_db_session",
    "get_account_service",
    "get_current_account",
    "get_current_staff",
    "get_coordinator",
]
