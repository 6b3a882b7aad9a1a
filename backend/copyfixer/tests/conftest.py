import os
from collections.abc import Generator
from unittest.mock import AsyncMock, MagicMock, patch

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LLM_API_KEY", "test-llm-key")
os.environ.setdefault("ADMIN_SECRET", "test-admin-secret")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-signing-admin-tokens")
os.environ.setdefault("APP_BASE_URL", "https://copyfixer.test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from copyfixer import models  # noqa: F401
from copyfixer.api.deps import get_cleanup_storage, get_db, get_storage
from copyfixer.main import app
from copyfixer.models import ProductType
from copyfixer.storage import ReferenceFileStorage

TEST_ADMIN_SECRET = "test-admin-secret"


class InMemoryStorage(ReferenceFileStorage):
    """ReferenceFileStorage backed by a dict instead of S3."""

    def __init__(self) -> None:
        self.bucket = "reference-files"
        self.public_base_url = "https://storage.test/reference-files"
        self.objects: dict[str, tuple[bytes, str | None]] = {}
        self.deleted: list[str] = []

    def upload_bytes(self, *, key: str, data: bytes, content_type: str | None) -> str:
        self.objects[key] = (data, content_type)
        return self.public_url(key)

    def delete_object(self, *, key: str) -> None:
        self.objects.pop(key, None)
        self.deleted.append(key)


def make_completion(content: str | None) -> MagicMock:
    mock_message = MagicMock()
    mock_message.content = content

    mock_choice = MagicMock()
    mock_choice.message = mock_message

    mock_response = MagicMock()
    mock_response.choices = [mock_choice]
    return mock_response


@pytest.fixture()
def mock_completions() -> Generator[MagicMock, None, None]:
    """Patches AsyncOpenAI; set ``mock_completions.create`` return values per test."""
    mock_completions = MagicMock()
    mock_completions.create = AsyncMock(
        return_value=make_completion("Something went wrong on our end.\nPlease try again in a moment.")
    )

    mock_chat = MagicMock()
    mock_chat.completions = mock_completions

    mock_client_instance = AsyncMock()
    mock_client_instance.chat = mock_chat

    with patch("copyfixer.agent.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        yield mock_completions


@pytest.fixture()
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(test_engine)
    yield test_engine
    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture()
def db_session(engine) -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


@pytest.fixture()
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture()
def client(db_session, storage) -> Generator[TestClient, None, None]:
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_cleanup_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def admin_headers(client) -> dict[str, str]:
    response = client.post("/api/login/admin", json={"secret": TEST_ADMIN_SECRET})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture()
def product_type(db_session) -> ProductType:
    db_obj = ProductType(
        name="SaaS",
        instructions="Use a calm, professional tone. Avoid blaming the user.",
    )
    db_session.add(db_obj)
    db_session.commit()
    db_session.refresh(db_obj)
    return db_obj
