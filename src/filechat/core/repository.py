"""
FileChat Core - Base Repository.

Abstract base class for all repositories following the repository pattern.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from sqlalchemy import Table, delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection

from filechat.core.database import Database
from filechat.exceptions import NotFoundException, StoreAccessException

logger = logging.getLogger(__name__)


class BaseRepository(ABC):
    """
    Abstract base repository for database operations.

    Rows are returned as plain dicts. All module repositories should
    inherit from this class.
    """

    def __init__(self, database: Database):
        self._db = database

    @property
    @abstractmethod
    def table(self) -> Table:
        """Return the table for this repository."""
        ...

    @property
    def table_name(self) -> str:
        return self.table.name

    @asynccontextmanager
    async def _connect(self, operation: str) -> AsyncIterator[AsyncConnection]:
        """Open a transaction, translating driver errors into StoreAccessException."""
        try:
            async with self._db.engine.begin() as conn:
                yield conn
        except SQLAlchemyError as e:
            logger.error(f"{self.table_name} {operation} failed: {e}")
            raise StoreAccessException(operation, str(e)) from e

    async def get_by_id(self, id: int) -> dict[str, Any] | None:
        """
        Get a single record by ID.

        Returns:
            The record if found, None otherwise
        """
        async with self._connect("read") as conn:
            result = await conn.execute(select(self.table).where(self.table.c.id == id))
            row = result.mappings().first()
        return dict(row) if row else None

    async def get_by_id_or_raise(self, id: int) -> dict[str, Any]:
        """
        Get a single record by ID, raise if not found.

        Raises:
            NotFoundException: If record not found
        """
        result = await self.get_by_id(id)
        if not result:
            raise NotFoundException(self.table_name, id)
        return result

    async def list(
        self,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        desc: bool = True,
    ) -> list[dict[str, Any]]:
        """List records matching equality filters."""
        query = select(self.table)
        for key, value in (filters or {}).items():
            query = query.where(self.table.c[key] == value)
        if order_by:
            column = self.table.c[order_by]
            # id breaks ties between rows written in the same second
            if desc:
                query = query.order_by(column.desc(), self.table.c.id.desc())
            else:
                query = query.order_by(column.asc(), self.table.c.id.asc())

        async with self._connect("read") as conn:
            result = await conn.execute(query)
            rows = result.mappings().all()
        return [dict(r) for r in rows]

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Create a new record and return it as stored."""
        async with self._connect("insert") as conn:
            result = await conn.execute(insert(self.table).values(**data))
            new_id = result.inserted_primary_key[0]
            stored = await conn.execute(select(self.table).where(self.table.c.id == new_id))
            row = stored.mappings().one()
        return dict(row)

    async def update(self, id: int, data: dict[str, Any]) -> dict[str, Any]:
        """
        Update an existing record.

        Raises:
            NotFoundException: If no row has this id
        """
        async with self._connect("update") as conn:
            result = await conn.execute(
                update(self.table).where(self.table.c.id == id).values(**data)
            )
            if result.rowcount == 0:
                raise NotFoundException(self.table_name, id)
            stored = await conn.execute(select(self.table).where(self.table.c.id == id))
            row = stored.mappings().one()
        return dict(row)

    async def delete(self, id: int) -> bool:
        """Delete a record by ID. Returns True if a row was removed."""
        async with self._connect("delete") as conn:
            result = await conn.execute(delete(self.table).where(self.table.c.id == id))
        return result.rowcount > 0
