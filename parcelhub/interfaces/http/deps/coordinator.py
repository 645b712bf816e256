"""Transaction coordinator provider."""

from parcelhub.core.config import get_settings
from parcelhub.infrastructure.database.session import get_session_factory
from parcelhub.modules.coordinator import TransactionCoordinator


def get_coordinator() -> TransactionCoordinator:
    return TransactionCoordinator(get_session_factory(), get_settings().coordinator)


__all__ = ["get_coordinator"]
