"""Error taxonomy shared by every remote call.

Transport and SDK exceptions are converted into one of these kinds at the
call site, so UI-facing code only ever sees a ``ResumintError``.
"""

from __future__ import annotations


class ResumintError(Exception):
    """Base class for all client-visible failures."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthError(ResumintError):
    """Missing or expired credentials. Handled by the global sign-out flow."""


class NotFoundError(ResumintError):
    """The requested id has no remote document."""


class ValidationError(ResumintError):
    """Required data missing or malformed. Blocks navigation, shown inline."""


class NetworkError(ResumintError):
    """Transient transport or server failure. Retryable; local state is kept."""


class RemoteServiceError(ResumintError):
    """AI or media service unavailable. Surfaced as a dismissible notice."""


def error_for_status(status_code: int, message: str) -> ResumintError:
    """Map an HTTP status from the Persistence API onto the taxonomy."""
    if status_code in (401, 403):
        return AuthError(message, status_code=status_code)
    if status_code == 404:
        return NotFoundError(message, status_code=status_code)
    if status_code in (400, 409, 422):
        return ValidationError(message, status_code=status_code)
    return NetworkError(message, status_code=status_code)
