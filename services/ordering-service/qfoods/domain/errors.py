"""Error taxonomy raised by services and repositories.

Every error carries the HTTP status the API layer answers with, so routes can
translate outcomes without inspecting messages.
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for failures surfaced to API callers."""

    status_code: int = 500


class ValidationError(ServiceError):
    """Input was missing or malformed."""

    status_code = 400


class DuplicateKey(ServiceError):
    """A uniqueness constraint would be violated."""

    status_code = 400

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class MalformedCredentials(ServiceError):
    """The Authorization header is absent or not a usable Basic credential."""

    status_code = 401


class InvalidCredentials(ServiceError):
    """Unknown username or wrong password."""

    status_code = 401


class NotFound(ServiceError):
    status_code = 404


class TooManyAttempts(ServiceError):
    """Login is temporarily refused after repeated failures."""

    status_code = 429


class StoreUnavailable(ServiceError):
    """The backing store could not be reached or timed out."""

    status_code = 500
