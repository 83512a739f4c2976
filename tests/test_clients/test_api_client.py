"""Tests for ApiClient: envelope unwrapping, error mapping and token refresh."""

from __future__ import annotations

import json

import httpx
import pytest

from resumint.clients.api_client import MAX_REFRESH_ATTEMPTS, ApiClient
from resumint.errors import (
    AuthError,
    NetworkError,
    NotFoundError,
    ValidationError,
)

BASE_URL = "http://api.test/api"


def _client(handler, **kwargs) -> ApiClient:
    return ApiClient(BASE_URL, transport=httpx.MockTransport(handler), **kwargs)


def _ok(data: dict | None = None, status: int = 200) -> httpx.Response:
    return httpx.Response(status, json={"success": True, "data": data})


def _fail(status: int, message: str) -> httpx.Response:
    return httpx.Response(status, json={"success": False, "message": message})


class TestUnwrap:
    async def test_returns_data_object(self):
        async with _client(lambda request: _ok({"resume": {"_id": "r1"}})) as api:
            data = await api.request("GET", "/resumes/r1")
        assert data == {"resume": {"_id": "r1"}}

    async def test_null_data_becomes_empty_dict(self):
        async with _client(lambda request: _ok(None)) as api:
            assert await api.request("DELETE", "/resumes/r1") == {}

    async def test_success_false_raises_validation(self):
        def handler(request):
            return httpx.Response(200, json={"success": False, "message": "Title is required"})

        async with _client(handler) as api:
            with pytest.raises(ValidationError, match="Title is required"):
                await api.request("POST", "/resumes", json={})

    async def test_non_json_body(self):
        async with _client(lambda request: httpx.Response(200, text="ok")) as api:
            assert await api.request("GET", "/health") == {}

    async def test_sends_bearer_token(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("Authorization")
            seen["path"] = request.url.path
            return _ok({})

        async with _client(handler, access_token="abc") as api:
            await api.request("GET", "/resumes")
        assert seen == {"auth": "Bearer abc", "path": "/api/resumes"}


class TestErrorMapping:
    @pytest.mark.parametrize(
        "status, error",
        [
            (404, NotFoundError),
            (403, AuthError),
            (400, ValidationError),
            (422, ValidationError),
        ],
    )
    async def test_status_maps_to_error(self, status, error):
        async with _client(lambda request: _fail(status, "nope")) as api:
            with pytest.raises(error) as exc_info:
                await api.request("POST", "/resumes", json={})
        assert exc_info.value.status_code == status
        assert exc_info.value.message == "nope"

    async def test_server_error_is_network_error(self):
        async with _client(lambda request: _fail(500, "boom"), max_retries=1) as api:
            with pytest.raises(NetworkError):
                await api.request("GET", "/resumes")

    async def test_transport_error_is_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler, max_retries=1) as api:
            with pytest.raises(NetworkError, match="Could not reach"):
                await api.request("GET", "/resumes")

    async def test_redirect_loop_is_network_error(self):
        def handler(request):
            raise httpx.TooManyRedirects("Exceeded maximum allowed redirects", request=request)

        async with _client(handler, max_retries=1) as api:
            with pytest.raises(NetworkError, match="Could not reach"):
                await api.request("GET", "/resumes")


class TestRetries:
    async def test_post_is_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request.method)
            return _fail(503, "unavailable")

        async with _client(handler, max_retries=3) as api:
            with pytest.raises(NetworkError):
                await api.request("POST", "/resumes", json={})
        assert calls == ["POST"]

    async def test_get_is_retried_on_network_error(self):
        calls = []

        def handler(request):
            calls.append(request.method)
            if len(calls) == 1:
                return _fail(503, "unavailable")
            return _ok({"resumes": []})

        async with _client(handler, max_retries=2) as api:
            data = await api.request("GET", "/resumes")
        assert data == {"resumes": []}
        assert len(calls) == 2

    async def test_not_found_is_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request.method)
            return _fail(404, "Resume not found")

        async with _client(handler, max_retries=3) as api:
            with pytest.raises(NotFoundError):
                await api.request("GET", "/resumes/missing")
        assert len(calls) == 1


class TestTokenRefresh:
    async def test_expired_token_is_refreshed_and_request_resent(self):
        seen = []

        def handler(request):
            seen.append((request.url.path, request.headers.get("Authorization")))
            if request.url.path.endswith("/auth/refresh-token"):
                return _ok({"accessToken": "fresh"})
            if request.headers.get("Authorization") == "Bearer stale":
                return _fail(401, "Token expired")
            return _ok({"resumes": []})

        async with _client(handler, access_token="stale") as api:
            data = await api.request("GET", "/resumes")
            assert api.access_token == "fresh"

        assert data == {"resumes": []}
        assert seen == [
            ("/api/resumes", "Bearer stale"),
            ("/api/auth/refresh-token", None),
            ("/api/resumes", "Bearer fresh"),
        ]

    async def test_failed_refresh_expires_session(self):
        expired = []

        def handler(request):
            if request.url.path.endswith("/auth/refresh-token"):
                return _fail(401, "Invalid refresh token")
            return _fail(401, "Token expired")

        async with _client(
            handler, access_token="stale", on_session_expired=lambda: expired.append(True)
        ) as api:
            with pytest.raises(AuthError, match="Session expired"):
                await api.request("PUT", "/resumes/r1", json={})
            assert api.access_token is None
        assert expired == [True]

    async def test_401_without_token_message_is_plain_auth_error(self):
        calls = []

        def handler(request):
            calls.append(request.url.path)
            return _fail(401, "Not authorized")

        async with _client(handler, access_token="abc") as api:
            with pytest.raises(AuthError, match="Not authorized"):
                await api.request("GET", "/resumes")
        assert calls == ["/api/resumes"]

    async def test_refresh_cooldown(self):
        async with _client(lambda request: _ok({"accessToken": "t"}), clock=lambda: 100.0) as api:
            await api.refresh_token()
            with pytest.raises(AuthError, match="cooldown"):
                await api.refresh_token()

    async def test_refresh_attempts_are_capped(self):
        now = iter(range(0, 1000, 10))
        expired = []

        async with _client(
            lambda request: _fail(401, "Invalid refresh token"),
            clock=lambda: float(next(now)),
            on_session_expired=lambda: expired.append(True),
        ) as api:
            for _ in range(MAX_REFRESH_ATTEMPTS):
                with pytest.raises(AuthError, match="Invalid refresh token"):
                    await api.refresh_token()
            with pytest.raises(AuthError, match="Max refresh attempts"):
                await api.refresh_token()
        assert expired == [True]


class TestAuthProvider:
    async def test_login_stores_token_and_returns_user(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            seen["auth"] = request.headers.get("Authorization")
            return _ok({
                "accessToken": "tok",
                "user": {"_id": "u1", "email": "jo@example.com", "firstName": "Jo"},
            })

        async with _client(handler, access_token="old") as api:
            user = await api.login("jo@example.com", "secret", remember_me=True)
            assert api.access_token == "tok"

        assert user.id == "u1"
        assert user.email == "jo@example.com"
        assert seen["auth"] is None
        assert seen["body"] == {
            "email": "jo@example.com", "password": "secret", "rememberMe": True,
        }

    async def test_login_bad_credentials(self):
        async with _client(lambda request: _fail(401, "Invalid credentials")) as api:
            with pytest.raises(AuthError):
                await api.login("jo@example.com", "wrong")
            assert api.access_token is None

    async def test_logout_clears_token_even_on_failure(self):
        def handler(request):
            raise httpx.ConnectError("down", request=request)

        async with _client(handler, access_token="tok") as api:
            await api.logout()
            assert api.access_token is None

    async def test_me(self):
        payload = {"user": {"_id": "u1", "email": "jo@example.com", "role": "user"}}
        async with _client(lambda request: _ok(payload), access_token="tok") as api:
            user = await api.me()
        assert user.id == "u1"
