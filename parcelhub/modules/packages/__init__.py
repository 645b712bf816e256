"""Exports for shipment domain"""

from .exceptions import OrderNotShippableError, TrackingNumberTakenError
from .models import Package, PackageCreateInput, PackageEvent, PackageTracking
from .service import PackageService

__all__ = [
    "OrderNotShippableError",
    "Package",
    "PackageCreateInput",
    "PackageEvent",
    "PackageService",
    "PackageTracking",
    "TrackingNumberTakenError",
]
