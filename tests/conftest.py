"""
Shared fixtures: an app on a temporary data dir with a scripted generator.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from filechat.config import FeatureFlags, Settings, StorageSettings
from filechat.core.database import Database
from filechat.core.file_storage import FileStorage
from filechat.main import create_app
from filechat.observability.metrics import MetricsStore


class ScriptedGenerator:
    """TextGenerator double: replays canned replies and records every call."""

    def __init__(self, replies=None, default="Here is what I found."):
        self.replies = list(replies or [])
        self.default = default
        self.calls = []

    async def generate(
        self,
        system_instruction: str,
        user_instruction: str,
        temperature: float = 0.7,
        max_output_tokens: int = 2000,
    ) -> str:
        self.calls.append(
            {
                "system_instruction": system_instruction,
                "user_instruction": user_instruction,
                "temperature": temperature,
                "max_output_tokens": max_output_tokens,
            }
        )
        reply = self.replies.pop(0) if self.replies else self.default
        if isinstance(reply, Exception):
            raise reply
        return reply


class FailingGenerator:
    """TextGenerator double that always raises."""

    def __init__(self, error: Exception | None = None):
        self.error = error or RuntimeError("quota exceeded")
        self.calls = 0

    async def generate(self, *args, **kwargs) -> str:
        self.calls += 1
        raise self.error


def make_settings(tmp_path, **features) -> Settings:
    return Settings(
        features=FeatureFlags(**features),
        storage=StorageSettings(
            data_dir=tmp_path / "data",
            upload_dir=tmp_path / "user_files",
            max_file_size_bytes=1024,
        ),
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def generator() -> ScriptedGenerator:
    return ScriptedGenerator()


@pytest.fixture
def app(settings, generator):
    return create_app(settings, generator=generator)


@pytest.fixture
def client(app):
    """Test client with the lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def database(tmp_path):
    db = Database.from_settings(StorageSettings(data_dir=tmp_path / "data", database_name="test.db"))
    await db.init_schema()
    yield db
    await db.dispose()


@pytest.fixture
def storage(tmp_path) -> FileStorage:
    return FileStorage(tmp_path / "user_files", ["log", "csv", "xlsx", "txt"], 1024)


@pytest.fixture
def metrics() -> MetricsStore:
    return MetricsStore()
