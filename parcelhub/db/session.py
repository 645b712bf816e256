"""Short import path for database session helpers used by scripts.

Delegates to the infrastructure layer under ``parcelhub.infrastructure.database``.
"""

from __future__ import annotations

from parcelhub.infrastructure.database import Base, get_session as get_db, init_db  # noqa: F401
from parcelhub.infrastructure.database.session import get_engine, get_session_factory  # noqa: F401

__all__ = [
    "Base",
    "get_db",
    "init_db",
    "get_engine",
    "get_session_factory",
]
