"""Repository abstractions shared by the SQL implementations."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .exceptions import ConcurrentModification

ModelT = TypeVar("ModelT")


class AsyncRepository(Generic[ModelT]):
    """Base repository exposing the SQLAlchemy session."""

    model: type[ModelT]

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @property
    def session(self) -> AsyncSession:
        return self._session

    async def add(self, instance: ModelT) -> ModelT:
        self.session.add(instance)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise ConcurrentModification(
                f"{type(instance).__name__} conflicts with a concurrent insert"
            ) from exc
        await self.session.refresh(instance)
        return instance

    async def compare_and_set(self, ident: str, expected_version: int, **values: Any) -> ModelT:
        """Update one row only if its version still matches, bumping the version.

        Raises ``ConcurrentModification`` when another unit wrote the row first.
        """
        model = self.model
        stmt = (
            update(model)
            .where(model.id == ident, model.version == expected_version)
            .values(version=model.version + 1, **values)
            .returning(model)
            .execution_options(synchronize_session=False, populate_existing=True)
        )
        result = await self.session.execute(stmt)
        row = result.scalars().first()
        if row is None:
            raise ConcurrentModification(
                f"{model.__name__} {ident} changed since version {expected_version}"
            )
        return row
