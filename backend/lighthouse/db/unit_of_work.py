"""Unit of work for grouping several CRUD writes into one transaction."""

from types import TracebackType
from typing import Optional, Type

from sqlalchemy.ext.asyncio import AsyncSession


class UnitOfWork:
    """Commit on clean exit, roll back on error.

    CRUD methods that receive a ``uow`` only flush; the commit happens once
    when the ``async with`` block finishes.

    Example:
    -------
        async with UnitOfWork(db) as uow:
            await crud.monthly_usage.increment(db, id=..., increments=..., uow=uow)
            ...

    """

    def __init__(self, session: AsyncSession) -> None:
        """Bind the unit of work to a session."""
        self.session = session
        self.committed = False

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        if exc_type is not None:
            await self.rollback()
            return
        await self.commit()

    async def commit(self) -> None:
        await self.session.commit()
        self.committed = True

    async def rollback(self) -> None:
        await self.session.rollback()
