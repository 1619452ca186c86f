"""Fixtures for API tests: a real app wired to the fake credential store."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import get_user_client_factory


@pytest.fixture
def app(installed_store, user_db):
    """Create a fresh app for each test."""
    app = create_app()
    app.dependency_overrides[get_user_client_factory] = lambda: MagicMock(return_value=user_db)
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app, follow_redirects=False)


@pytest.fixture
def signed_in_client(client) -> TestClient:
    response = client.post(
        "/login",
        json={"email": "test@example.com", "password": "secret123"},
    )
    assert response.status_code == 200
    return client
