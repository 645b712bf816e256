"""Transaction coordinator exports."""

from .service import TransactionCoordinator, Unit

__all__ = ["TransactionCoordinator", "Unit"]
