import pytest
from fastapi.testclient import TestClient

from src.auth import get_token_verifier
from src.dispatcher import NotificationDispatcher
from src.main import app
from src.routers.rest import get_dispatcher
from src.schemas import CallerContext, UserRecord
from tests.helpers.fake_providers import FakeUserDirectory, RecordingMessagingProvider


class StaticTokenVerifier:
    """Accepts "<uid>" tokens as-is."""

    async def verify(self, id_token: str) -> CallerContext:
        return CallerContext(uid=id_token)


@pytest.fixture
def directory():
    return FakeUserDirectory(
        {
            "admin-1": UserRecord(role="admin"),
            "user-1": UserRecord(role="user"),
            "no-role": UserRecord(),
        }
    )


@pytest.fixture
def provider():
    return RecordingMessagingProvider()


@pytest.fixture
def dispatcher(directory, provider):
    return NotificationDispatcher(directory, provider)


@pytest.fixture
def client(dispatcher):
    """Sync TestClient wired to fake collaborators."""
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    app.dependency_overrides[get_token_verifier] = StaticTokenVerifier
    yield TestClient(app)
    app.dependency_overrides.clear()
