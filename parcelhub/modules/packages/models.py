"""Domain representations for shipments."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from parcelhub.modules.lifecycle.models import PackageStatus


@dataclass(slots=True)
class Package:
    id: str
    tracking_number: str
    owner_account_id: str
    shop_account_id: Optional[str]
    order_id: Optional[str]
    description: Optional[str]
    customs_fee_cents: Optional[int]
    customs_paid_cents: int
    status: PackageStatus
    version: int
    created_at: datetime
    updated_at: Optional[datetime]

    @property
    def customs_outstanding_cents(self) -> int:
        return max((self.customs_fee_cents or 0) - self.customs_paid_cents, 0)


@dataclass(slots=True)
class PackageEvent:
    id: str
    package_id: str
    status: PackageStatus
    note: Optional[str]
    actor_account_id: Optional[str]
    created_at: datetime


@dataclass(slots=True)
class PackageTracking:
    package: Package
    events: list[PackageEvent] = field(default_factory=list)


@dataclass(slots=True)
class PackageCreateInput:
    owner_account_id: str
    shop_account_id: Optional[str] = None
    description: Optional[str] = None
    tracking_number: Optional[str] = None
    order_id: Optional[str] = None
    customs_fee_cents: Optional[int] = None
