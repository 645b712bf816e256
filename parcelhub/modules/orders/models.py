"""Domain representations for purchase orders."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from parcelhub.modules.lifecycle.models import OrderStatus


@dataclass(slots=True)
class Order:
    id: str
    order_number: str
    owner_account_id: str
    purchase_site: str
    purchase_link: str
    phone_number: str
    notes: Optional[str]
    additional_info: Optional[str]
    total_amount_cents: Optional[int]
    paid_amount_cents: Optional[int]
    status: OrderStatus
    version: int
    created_at: datetime
    updated_at: Optional[datetime]

    @property
    def is_paid(self) -> bool:
        return bool(self.paid_amount_cents)


@dataclass(slots=True)
class OrderCreateInput:
    owner_account_id: str
    purchase_site: str
    purchase_link: str
    phone_number: str
    notes: Optional[str] = None
    additional_info: Optional[str] = None
