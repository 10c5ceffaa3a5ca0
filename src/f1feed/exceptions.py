"""Exceptions raised by the OpenF1 feed client."""

from __future__ import annotations


class OpenF1Error(Exception):
    """Base exception for all feed client errors."""


class OpenF1ConnectionError(OpenF1Error):
    """Raised when the API host cannot be reached."""


class OpenF1TimeoutError(OpenF1Error):
    """Raised when a request to the API times out."""


class OpenF1APIError(OpenF1Error):
    """Raised when the API answers with a 4xx/5xx status."""

    def __init__(self, status_code: int, message: str, endpoint: str | None = None) -> None:
        self.status_code = status_code
        self.message = message
        self.endpoint = endpoint
        where = f" on {endpoint}" if endpoint else ""
        super().__init__(f"HTTP {status_code}{where}: {message}")


class OpenF1RateLimitError(OpenF1APIError):
    """Raised on HTTP 429; OpenF1 throttles anonymous clients to a few requests per second."""


class OpenF1ValidationError(OpenF1Error):
    """Raised when a response payload does not match the expected record model."""
