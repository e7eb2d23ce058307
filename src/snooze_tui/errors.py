from __future__ import annotations

from typing import Optional


class ApiError(Exception):
    """Base class for failures talking to the stories API."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"{self.message} (HTTP {self.status})"


class NetworkError(ApiError):
    """The request never got a response."""


class ServerError(ApiError):
    """Unexpected status code or a response body we can't use."""


class AuthError(ApiError):
    """Bad credentials, or a token the server refused."""


class ValidationError(ApiError):
    """Input fields rejected by the server (or blank before sending)."""


class NotFoundError(ApiError):
    """Unknown story id or username."""


class ParseError(ValueError):
    """A story url that isn't a well-formed absolute URL."""
