"""f1feed: typed Python client for the OpenF1 live timing API."""

from f1feed._filters import LATEST, Filter
from f1feed.client import AsyncOpenF1Client, OpenF1Client, SessionSnapshot
from f1feed.exceptions import (
    OpenF1APIError,
    OpenF1ConnectionError,
    OpenF1Error,
    OpenF1RateLimitError,
    OpenF1TimeoutError,
    OpenF1ValidationError,
)

__all__ = [
    "LATEST",
    "AsyncOpenF1Client",
    "Filter",
    "OpenF1APIError",
    "OpenF1Client",
    "OpenF1ConnectionError",
    "OpenF1Error",
    "OpenF1RateLimitError",
    "OpenF1TimeoutError",
    "OpenF1ValidationError",
    "SessionSnapshot",
]

__version__ = "0.1.0"
