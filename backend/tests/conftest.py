"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
Route tests run against an app built with the in-memory repository, so
they exercise the real storage service without a database.
"""

import pytest
from datetime import datetime, timezone, timedelta
from typing import Any, Callable, Optional

from fastapi.testclient import TestClient
from jose import jwt

from shared.config import Settings
from api.app import create_app
from api.dependencies import ServiceContainer
from modules.storage.memory import InMemoryStorageRepository


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"


def create_test_token(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    expired: bool = False,
    email_verified: bool = True,
    user_metadata: Optional[dict[str, Any]] = None,
    secret: str = TEST_JWT_SECRET,
) -> str:
    """
    Create a test JWT token for authentication.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        expired: If True, creates an expired token
        email_verified: Whether the email should be marked as verified
        user_metadata: Provider profile claims
        secret: Signing secret

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "email": email,
        "email_confirmed_at": now.isoformat() if email_verified else None,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
    }
    if user_metadata is not None:
        payload["user_metadata"] = user_metadata
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Factory for signed test tokens."""
    return create_test_token


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        supabase_jwt_secret=TEST_JWT_SECRET,
        storage_backend="memory",
        stripe_secret_key="",
        stripe_webhook_secret="",
    )


@pytest.fixture
def memory_repository() -> InMemoryStorageRepository:
    """In-memory repository with both test users already signed in."""
    repo = InMemoryStorageRepository()
    repo.upsert_user({"id": "test-user-123", "email": "test@example.com"})
    repo.upsert_user({"id": "other-user-456", "email": "other@example.com"})
    return repo


@pytest.fixture
def container(test_settings: Settings, memory_repository: InMemoryStorageRepository) -> ServiceContainer:
    return ServiceContainer(test_settings, repository=memory_repository)


@pytest.fixture
def app(test_settings: Settings, container: ServiceContainer):
    return create_app(settings=test_settings, container=container)


@pytest.fixture
def client(app):
    """TestClient with the app's lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return "test-user-123"


@pytest.fixture
def test_user_email() -> str:
    """Provide a consistent test user email."""
    return "test@example.com"


@pytest.fixture
def auth_token(test_user_id: str, test_user_email: str) -> str:
    """Create a valid auth token for testing."""
    return create_test_token(user_id=test_user_id, email=test_user_email)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers with a valid token."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def other_auth_headers() -> dict[str, str]:
    """Authorization headers for a second user."""
    token = create_test_token(user_id="other-user-456", email="other@example.com")
    return {"Authorization": f"Bearer {token}"}
