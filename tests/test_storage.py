"""
Tests for the SQLite store, repositories and blob storage.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine

from filechat.core.file_storage import get_file_extension
from filechat.core.users_repository import UsersRepository
from filechat.exceptions import (
    FileTooLargeException,
    NotFoundException,
    UnsupportedFileTypeException,
)
from filechat.modules.conversations.repository import ConversationsRepository
from filechat.modules.files.repository import FilesRepository


class TestDatabase:
    @pytest.mark.asyncio
    async def test_default_user_seeded_once(self, database):
        await database.init_schema()
        assert await database.ping() is True
        assert len(await UsersRepository(database).list()) == 1

    @pytest.mark.asyncio
    async def test_default_user_exists(self, database):
        user = await UsersRepository(database).get_by_id(1)
        assert user["username"] == "default_user"

    @pytest.mark.asyncio
    async def test_url_from_settings(self, database, tmp_path):
        assert database.url == f"sqlite+aiosqlite:///{tmp_path / 'data' / 'test.db'}"
        assert (tmp_path / "data" / "test.db").exists()

    @pytest.mark.asyncio
    async def test_engine_is_async(self, database):
        assert isinstance(database.engine, AsyncEngine)
        assert database.engine.url.drivername == "sqlite+aiosqlite"


class TestFilesRepository:
    @pytest.mark.asyncio
    async def test_save_and_list(self, database):
        repo = FilesRepository(database)
        first = await repo.save_file_record(1, "a.csv", "/tmp/a.csv", "csv", 10)
        second = await repo.save_file_record(1, "b.log", "/tmp/b.log", "log", 20)

        rows = await repo.list_by_user(1)
        assert [r["id"] for r in rows] == [second["id"], first["id"]]
        assert rows[0]["upload_date"] is not None

    @pytest.mark.asyncio
    async def test_missing_record(self, database):
        repo = FilesRepository(database)
        assert await repo.get_by_id(999) is None
        with pytest.raises(NotFoundException):
            await repo.get_by_id_or_raise(999)

    @pytest.mark.asyncio
    async def test_update_missing_raises(self, database):
        with pytest.raises(NotFoundException):
            await FilesRepository(database).update(999, {"filename": "x"})

    @pytest.mark.asyncio
    async def test_delete(self, database):
        repo = FilesRepository(database)
        row = await repo.save_file_record(1, "a.txt", "/tmp/a.txt", "txt", 1)
        assert await repo.delete(row["id"]) is True
        assert await repo.delete(row["id"]) is False


class TestConversationsRepository:
    @pytest.mark.asyncio
    async def test_history_blob_rewritten(self, database):
        repo = ConversationsRepository(database)
        row = await repo.create_conversation(1, "Chat")
        assert row["history_json"] == "[]"

        updated = await repo.update_history(row["id"], [{"role": "user", "content": "hi"}])
        assert updated["history_json"] == '[{"role": "user", "content": "hi"}]'

    @pytest.mark.asyncio
    async def test_detach_file(self, database):
        files = FilesRepository(database)
        repo = ConversationsRepository(database)
        file_row = await files.save_file_record(1, "a.csv", "/tmp/a.csv", "csv", 3)
        conv = await repo.create_conversation(1, "About a.csv", file_row["id"])

        assert await repo.detach_file(file_row["id"]) == 1
        assert (await repo.get_by_id(conv["id"]))["file_id"] is None


class TestFileStorage:
    @pytest.mark.parametrize(
        "filename,expected",
        [("a.CSV", "csv"), ("archive.tar.log", "log"), ("noext", ""), (".hidden", "")],
    )
    def test_extension(self, filename, expected):
        assert get_file_extension(filename) == expected

    def test_validate(self, storage):
        assert storage.validate("report.csv", 10) == "csv"

    def test_rejects_extension(self, storage):
        with pytest.raises(UnsupportedFileTypeException):
            storage.validate("virus.exe", 10)

    def test_rejects_size(self, storage):
        with pytest.raises(FileTooLargeException):
            storage.validate("big.log", 2048)

    def test_save_and_delete(self, storage):
        path = storage.save(1, "my report.txt", b"hello")

        assert path.parent == storage.base_dir / "1"
        assert path.name.endswith("_my_report.txt")
        assert path.read_bytes() == b"hello"
        assert storage.delete(path) is True
        assert storage.delete(path) is False

    def test_rejected_file_never_written(self, storage):
        with pytest.raises(UnsupportedFileTypeException):
            storage.save(1, "virus.exe", b"MZ")
        assert not storage.base_dir.exists()
