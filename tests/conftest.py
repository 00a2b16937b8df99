"""
Pytest fixtures for the Synapse backend tests.

Settings are read at import time, so the API key is put in the environment
before any app module is imported. No test talks to the real Gemini API.
"""

import os

os.environ.setdefault("GOOGLE_API_KEY", "test-key")

from typing import List
from unittest.mock import AsyncMock

import pytest

from app.core.config import settings
from app.db import database
from app.services.llm_client import ChatBackend


@pytest.fixture
def models() -> List[str]:
    return ["model-a", "model-b", "model-c"]


@pytest.fixture
def mock_backend() -> AsyncMock:
    backend = AsyncMock(spec=ChatBackend)
    backend.generate.return_value = "hello there"
    return backend


@pytest.fixture
async def db_path(tmp_path, monkeypatch):
    path = str(tmp_path / "synapse_test.db")
    monkeypatch.setattr(settings, "DATABASE_PATH", path)
    await database.init_db()
    return path
