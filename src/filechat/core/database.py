"""
FileChat Core - Database.

SQLite database accessed through SQLAlchemy Core on an async engine
(aiosqlite). Tables mirror the users / files / conversations layout;
conversation history is a single JSON blob per row.
"""

import logging

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    event,
    func,
    insert,
    select,
)
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from filechat.config import StorageSettings

logger = logging.getLogger(__name__)

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", String, unique=True, nullable=False),
    Column("created_at", DateTime, server_default=func.current_timestamp()),
    Column("updated_at", DateTime, server_default=func.current_timestamp()),
)

files = Table(
    "files",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("filename", String, nullable=False),
    Column("file_path", String, nullable=False),
    Column("file_type", String, nullable=False),  # log, csv, xlsx, txt
    Column("file_size", Integer, nullable=False),
    Column("upload_date", DateTime, server_default=func.current_timestamp()),
)

conversations = Table(
    "conversations",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("file_id", Integer, ForeignKey("files.id", ondelete="SET NULL"), nullable=True),
    Column("title", String, nullable=False),
    Column("history_json", Text, nullable=False),
    Column("created_at", DateTime, server_default=func.current_timestamp()),
    Column("updated_at", DateTime, server_default=func.current_timestamp()),
)


def _enable_sqlite_pragmas(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


class Database:
    """
    Owns the async SQLAlchemy engine for the local store.

    Created once in the application lifespan and handed to repositories.
    """

    def __init__(self, url: str, default_username: str = "default_user", default_user_id: int = 1):
        self.url = url
        self.default_username = default_username
        self.default_user_id = default_user_id
        self.engine: AsyncEngine = create_async_engine(url, echo=False)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_pragmas)

    @classmethod
    def from_settings(cls, storage: StorageSettings, **kwargs) -> "Database":
        storage.data_dir.mkdir(parents=True, exist_ok=True)
        return cls(storage.database_url, **kwargs)

    async def init_schema(self) -> None:
        """Create tables if missing and seed the default user."""
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
            result = await conn.execute(
                select(users.c.id).where(users.c.id == self.default_user_id)
            )
            if result.first() is None:
                await conn.execute(
                    insert(users).values(id=self.default_user_id, username=self.default_username)
                )
                logger.info(f"Seeded default user {self.default_user_id} ({self.default_username})")

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(select(1))
            return True
        except Exception as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()
