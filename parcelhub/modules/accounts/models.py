"""Domain models for accounts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class Role(str, Enum):
    REGULAR = "REGULAR"
    SHOP = "SHOP"
    ADMIN = "ADMIN"
    OWNER = "OWNER"


STAFF_ROLES = frozenset({Role.ADMIN, Role.OWNER})


@dataclass(slots=True)
class Account:
    id: str
    username: str
    role: Role
    is_active: bool
    password_hash: str = field(repr=False)
    email: Optional[str] = None
    phone_number: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    def is_shop(self) -> bool:
        return self.role is Role.SHOP


@dataclass(slots=True)
class AccountCreateInput:
    username: str
    password: str
    role: Role = Role.REGULAR
    email: Optional[str] = None
    phone_number: Optional[str] = None
    is_active: bool = True
