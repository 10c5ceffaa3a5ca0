"""Data layer errors."""

from __future__ import annotations


class F1DataError(Exception):
    """Data fetch error. The UI catches only this."""


class SessionFetchError(F1DataError):
    """A fetch scoped to one session failed."""

    def __init__(self, session_key: int | str, message: str) -> None:
        self.session_key = session_key
        super().__init__(f"Session {session_key}: {message}")
