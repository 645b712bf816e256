"""Account module exports."""

from .exceptions import AccountAlreadyExistsError, AccountError, AccountNotFoundError
from .models import STAFF_ROLES, Account, AccountCreateInput, Role
from .service import AccountService

__all__ = [
    "Account",
    "AccountAlreadyExistsError",
    "AccountCreateInput",
    "AccountError",
    "AccountNotFoundError",
    "AccountService",
    "Role",
    "STAFF_ROLES",
]
