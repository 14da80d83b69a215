"""Shared test fixtures.

Provides a ``test_client`` for FastAPI, an ``admin_client`` holding a
logged-in session, and a mock Supabase client for the link store.
"""

import os
from collections.abc import Generator
from unittest.mock import MagicMock, patch

# Settings are read at import time; these must be in place before ``app``
# is imported anywhere.
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-key")
os.environ.setdefault("ADMIN_PASSWORD", "s3cret-pass")
os.environ.setdefault("SESSION_SECRET", "test-session-secret")
os.environ.setdefault("SITE_URL", "http://links.example.com")
os.environ.setdefault("CLOUDINARY_CLOUD_NAME", "demo-cloud")
os.environ.setdefault("CLOUDINARY_UPLOAD_PRESET", "demo-preset")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

ADMIN_PASSWORD = os.environ["ADMIN_PASSWORD"]


@pytest.fixture()
def mock_supabase() -> Generator[MagicMock, None, None]:
    """Patch ``get_supabase`` in the link store to return a mock client."""
    mock_client = MagicMock()
    with patch("app.services.links.get_supabase", return_value=mock_client):
        yield mock_client


@pytest.fixture()
def test_client() -> Generator[TestClient, None, None]:
    """Provide a FastAPI TestClient."""
    from app.main import app

    with TestClient(app) as client:
        yield client


@pytest.fixture()
def admin_client(test_client: TestClient) -> TestClient:
    """A TestClient whose cookie jar holds an admin session."""
    response = test_client.post(
        "/admin/login",
        data={"password": ADMIN_PASSWORD},
        follow_redirects=False,
    )
    assert response.status_code == 303
    return test_client
