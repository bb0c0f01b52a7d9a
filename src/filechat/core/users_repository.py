"""
FileChat Core - Users repository.

Single-user mode: the default user is seeded by Database.init_schema and
every request acts as that user. Kept as a repository so ownership checks
read the same way once real accounts exist.
"""

from sqlalchemy import Table

from filechat.core.database import users
from filechat.core.repository import BaseRepository


class UsersRepository(BaseRepository):
    """Repository for users."""

    @property
    def table(self) -> Table:
        return users
