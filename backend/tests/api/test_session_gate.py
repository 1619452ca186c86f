"""
End-to-end tests for the session gate middleware.

Requests go through the real app; only the credential store and the
database client are replaced.
"""

from unittest.mock import AsyncMock

import pytest

from api.dependencies import get_expense_service
from modules.auth.codec import ACCESS_COOKIE, REFRESH_COOKIE
from modules.expenses.models import ExpenseSummary


@pytest.fixture
def expense_service(app):
    service = AsyncMock()
    service.get_summary.return_value = ExpenseSummary()
    app.dependency_overrides[get_expense_service] = lambda: service
    return service


def _set_cookie_names(response) -> list[str]:
    return [h.split("=", 1)[0] for h in response.headers.get_list("set-cookie")]


class TestUnauthenticated:
    def test_protected_page_redirects_to_login(self, client):
        response = client.get("/")
        assert response.status_code == 307
        assert response.headers["location"] == "/login"
        assert "set-cookie" not in response.headers

    def test_protected_subpath_redirects(self, client):
        response = client.get("/expenses/abc")
        assert response.status_code == 307
        assert response.headers["location"] == "/login"

    def test_login_page_is_served(self, client):
        response = client.get("/login")
        assert response.status_code == 200
        assert response.json() == {"page": "login", "error": None}

    def test_public_api_is_served(self, client, installed_store):
        assert client.get("/api/health").status_code == 200
        assert installed_store.calls == []

    def test_protected_post_redirects_to_login_as_get(self, client):
        response = client.post("/expenses", json={"amount": "5"})
        assert response.status_code == 303
        assert response.headers["location"] == "/login"


class TestSignedIn:
    def test_sign_in_sets_http_only_cookies(self, client):
        response = client.post(
            "/login",
            json={"email": "test@example.com", "password": "secret123"},
        )
        assert response.status_code == 200
        assert response.json()["user"]["id"] == "test-user-123"
        cookies = response.headers.get_list("set-cookie")
        assert {ACCESS_COOKIE, REFRESH_COOKIE} <= set(_set_cookie_names(response))
        assert all("HttpOnly" in c for c in cookies)

    def test_wrong_password(self, client):
        response = client.post(
            "/login",
            json={"email": "test@example.com", "password": "nope"},
        )
        assert response.status_code == 401
        assert response.json()["error"] == "INVALID_CREDENTIALS"
        assert "set-cookie" not in response.headers

    def test_home_is_served(self, signed_in_client, expense_service):
        response = signed_in_client.get("/")
        assert response.status_code == 200
        assert response.json()["display_name"] == "Test User"

    def test_valid_session_writes_no_cookies(self, signed_in_client, expense_service):
        response = signed_in_client.get("/")
        assert "set-cookie" not in response.headers

    def test_login_page_redirects_home(self, signed_in_client):
        response = signed_in_client.get("/login")
        assert response.status_code == 307
        assert response.headers["location"] == "/"

    def test_login_post_redirects_home_as_get(self, signed_in_client, installed_store):
        response = signed_in_client.post(
            "/login",
            json={"email": "test@example.com", "password": "secret123"},
        )
        assert response.status_code == 303
        assert response.headers["location"] == "/"
        assert installed_store.calls.count("sign_in") == 1


class TestRotation:
    def test_expired_session_is_rotated_on_next_request(self, client, installed_store, expense_service):
        installed_store.ttl = -5
        client.post("/login", json={"email": "test@example.com", "password": "secret123"})
        old_access = client.cookies.get(ACCESS_COOKIE)
        installed_store.ttl = 3600

        response = client.get("/")

        assert response.status_code == 200
        assert installed_store.calls.count("rotate") == 1
        assert {ACCESS_COOKIE, REFRESH_COOKIE} <= set(_set_cookie_names(response))
        assert client.cookies.get(ACCESS_COOKIE) != old_access

        # The rotated pair is good on the following request
        assert client.get("/").status_code == 200
        assert installed_store.calls.count("rotate") == 1

    def test_revoked_session_redirects_and_clears(self, signed_in_client, installed_store):
        installed_store.revoke_all()

        response = signed_in_client.get("/settings")

        assert response.status_code == 307
        assert response.headers["location"] == "/login"
        cleared = [c for c in response.headers.get_list("set-cookie") if c.startswith(ACCESS_COOKIE)]
        assert cleared and "Max-Age=0" in cleared[0]

    def test_provider_outage_fails_closed(self, signed_in_client, installed_store):
        installed_store.unavailable = True

        response = signed_in_client.get("/")

        assert response.status_code == 307
        assert ACCESS_COOKIE in _set_cookie_names(response)

    def test_forged_cookies_are_cleared(self, client):
        client.cookies.set(ACCESS_COOKIE, "forged")
        client.cookies.set(REFRESH_COOKIE, "forged")

        response = client.get("/")

        assert response.status_code == 307
        assert {ACCESS_COOKIE, REFRESH_COOKIE} <= set(_set_cookie_names(response))


class TestSignOut:
    def test_sign_out_clears_and_redirects(self, signed_in_client, installed_store):
        response = signed_in_client.post("/auth/signout")

        assert response.status_code == 303
        assert response.headers["location"] == "/login"
        assert "sign_out" in installed_store.calls
        assert ACCESS_COOKIE in _set_cookie_names(response)

        assert signed_in_client.get("/").status_code == 307
