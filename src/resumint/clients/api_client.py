"""Async client for the Resumint REST API with bearer auth and token refresh."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from resumint.errors import (
    AuthError,
    NetworkError,
    ResumintError,
    ValidationError,
    error_for_status,
)
from resumint.models.api import ApiEnvelope
from resumint.models.user import User

logger = logging.getLogger(__name__)

IDEMPOTENT_METHODS = frozenset({"GET", "PUT", "DELETE"})
REFRESH_ENDPOINT = "/auth/refresh-token"
MAX_REFRESH_ATTEMPTS = 3
REFRESH_COOLDOWN_SECONDS = 5.0


class TokenExpiredError(AuthError):
    """The access token was rejected; a refresh may recover the session."""


class ApiClient:
    """Talks to the Resumint API and converts every failure into a ResumintError.

    The refresh token lives in an HTTP-only cookie, so the same
    ``httpx.AsyncClient`` (and its cookie jar) is used for every call.
    """

    def __init__(
        self,
        base_url: str,
        *,
        access_token: str | None = None,
        timeout: float = 30.0,
        max_retries: int = 3,
        on_session_expired: Callable[[], None] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.http = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)
        self.access_token = access_token
        self.max_retries = max(1, max_retries)
        self.on_session_expired = on_session_expired
        self._clock = clock
        self._refreshing = False
        self._refresh_attempts = 0
        self._last_refresh: float | None = None

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict | None = None,
    ) -> dict[str, Any]:
        """Send a request and return the ``data`` object of the response envelope.

        Idempotent methods are retried on NetworkError with exponential backoff.
        """
        method = method.upper()
        attempts = self.max_retries if method in IDEMPOTENT_METHODS else 1
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(attempts),
            wait=wait_exponential(min=1, max=10),
            retry=retry_if_exception_type(NetworkError),
            reraise=True,
        ):
            with attempt:
                return await self._request_with_refresh(method, path, json=json, params=params)
        raise AssertionError("unreachable")

    async def _request_with_refresh(
        self, method: str, path: str, *, json: Any, params: dict | None
    ) -> dict[str, Any]:
        try:
            return await self._send(method, path, json=json, params=params)
        except TokenExpiredError:
            if self._refreshing or path == REFRESH_ENDPOINT:
                raise
            logger.info("Access token expired, attempting refresh")
            try:
                await self.refresh_token()
            except ResumintError as exc:
                logger.warning("Token refresh failed: %s", exc)
                self._expire_session()
                raise AuthError(
                    "Session expired. Please log in again.", status_code=401
                ) from exc
            return await self._send(method, path, json=json, params=params)

    async def _send(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict | None = None,
        authenticated: bool = True,
    ) -> dict[str, Any]:
        headers: dict[str, str] = {}
        if authenticated and self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        logger.debug("API call: %s %s", method, path)
        try:
            response = await self.http.request(
                method, path, json=json, params=params, headers=headers
            )
        except httpx.HTTPError as exc:
            logger.warning("API call %s %s failed: %s", method, path, exc)
            raise NetworkError(f"Could not reach the Resumint API: {exc}") from exc
        return self._unwrap(response)

    @staticmethod
    def _unwrap(response: httpx.Response) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}
        message = payload.get("message") or response.reason_phrase or "An error occurred"

        if not response.is_success:
            if response.status_code == 401 and "token" in message.lower():
                raise TokenExpiredError(message, status_code=401)
            raise error_for_status(response.status_code, message)

        envelope = ApiEnvelope(
            success=payload.get("success", True),
            data=payload.get("data") or {},
            message=payload.get("message"),
        )
        if not envelope.success:
            raise ValidationError(message, status_code=response.status_code)
        return envelope.data

    # --- Auth provider ---

    async def login(self, email: str, password: str, remember_me: bool = False) -> User:
        data = await self._send(
            "POST",
            "/auth/login",
            json={"email": email, "password": password, "rememberMe": remember_me},
            authenticated=False,
        )
        self.access_token = data["accessToken"]
        self._refresh_attempts = 0
        logger.info("Logged in as %s", email)
        return User.model_validate(data["user"])

    async def logout(self) -> None:
        """End the session. Local credentials are cleared even if the call fails."""
        try:
            await self._send("POST", "/auth/logout")
        except ResumintError as exc:
            logger.warning("Logout request failed: %s", exc)
        finally:
            self.access_token = None

    async def me(self) -> User:
        data = await self.request("GET", "/auth/me")
        return User.model_validate(data["user"])

    async def refresh_token(self) -> str:
        """Exchange the refresh cookie for a new access token.

        Refreshes are rate limited: a cooldown between attempts and a cap on
        consecutive failures, after which the session is expired.
        """
        now = self._clock()
        if self._last_refresh is not None and now - self._last_refresh < REFRESH_COOLDOWN_SECONDS:
            raise AuthError("Token refresh in cooldown period")
        if self._refresh_attempts >= MAX_REFRESH_ATTEMPTS:
            self._expire_session()
            raise AuthError("Max refresh attempts exceeded")

        self._refresh_attempts += 1
        self._last_refresh = now
        self._refreshing = True
        try:
            data = await self._send("POST", REFRESH_ENDPOINT, authenticated=False)
        finally:
            self._refreshing = False

        self.access_token = data["accessToken"]
        self._refresh_attempts = 0
        return self.access_token

    def _expire_session(self) -> None:
        self.access_token = None
        if self.on_session_expired is not None:
            self.on_session_expired()
