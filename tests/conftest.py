"""Shared pytest fixtures: in-memory MongoDB, app client, signed-in users and a fake OpenAI client."""

from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import mongomock
import pytest

# Ensure the application package is importable during tests.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from careerhub import database  # noqa: E402
from careerhub.main import create_app  # noqa: E402
from careerhub.services import auth_service, openai_service  # noqa: E402
from careerhub.utils.auth import generate_token, now_seconds  # noqa: E402


@pytest.fixture(autouse=True)
def mongo_db(monkeypatch: pytest.MonkeyPatch):
    """Provide an isolated in-memory MongoDB database for each test."""
    test_db_name = "test_careerhub"
    client = mongomock.MongoClient()
    db = client[test_db_name]

    monkeypatch.setattr(database, "get_mongo_client", lambda: client)
    monkeypatch.setattr(database, "get_database", lambda: db)

    yield db

    client.drop_database(test_db_name)


@pytest.fixture
def app():
    return create_app(
        {
            "TESTING": True,
            "CREATE_INDEXES": False,
            "SESSION_CLEANUP_INTERVAL_SECONDS": 0,
            "OPENAI_API_KEY": "test-key",
            "BRAVE_API_KEY": "test-brave-key",
            "COVER_LETTER_TOKEN_LIMIT": 7500,
        }
    )


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sign_in():
    """Create a user with a live session and return its Authorization headers."""

    def _sign_in(email: str) -> Dict[str, str]:
        user = auth_service.get_or_create_user(email)
        token = auth_service.save_session(generate_token("sess"), user["_id"], now_seconds() + 3600)
        return {"Authorization": f"Bearer {token}"}

    return _sign_in


class FakeStream:
    """Iterable of streaming events that records whether it was closed."""

    def __init__(self, chunks: List[Optional[str]], error: Optional[Exception] = None):
        self._chunks = chunks
        self._error = error
        self.closed = False

    def __iter__(self):
        for text in self._chunks:
            yield SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=text))])
        if self._error is not None:
            raise self._error

    def close(self):
        self.closed = True


class FakeOpenAI:
    """Stands in for the OpenAI client, recording every completion call."""

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.reply = "Generated text"
        self.chunks: List[Optional[str]] = ["Hel", "lo"]
        self.stream_error: Optional[Exception] = None
        self.error: Optional[Exception] = None
        self.streams: List[FakeStream] = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if kwargs.get("stream"):
            stream = FakeStream(self.chunks, self.stream_error)
            self.streams.append(stream)
            return stream
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.reply))])


@pytest.fixture
def fake_openai(monkeypatch: pytest.MonkeyPatch) -> FakeOpenAI:
    fake = FakeOpenAI()
    monkeypatch.setattr(openai_service, "get_openai_client", lambda: fake)
    return fake
