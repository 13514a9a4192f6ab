"""
API error taxonomy.

Route handlers raise these; the exception handlers registered in
``khael_apartments.main`` render them as ``{"error": ..., "message": ...}``
with the matching HTTP status code.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import status


class ApiError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, error: str, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.error = error
        self.message = message
        self.details = details

    def to_content(self) -> dict[str, Any]:
        content: dict[str, Any] = {"error": self.error, "message": self.message}
        if self.details is not None:
            content["details"] = self.details
        return content


class ValidationError(ApiError):
    """Missing or invalid input."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(ApiError):
    """Missing, malformed, expired or otherwise rejected credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(ApiError):
    """Unknown apartment, image or video id."""

    status_code = status.HTTP_404_NOT_FOUND


class ServerError(ApiError):
    """Store or media-host failure."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
