"""Session and meeting models."""

from __future__ import annotations

from datetime import datetime

from f1feed.models._base import Record


class Session(Record):
    """A timed activity: practice, qualifying, sprint or race."""

    circuit_key: int | None = None
    circuit_short_name: str | None = None
    country_code: str | None = None
    country_key: int | None = None
    country_name: str | None = None
    date_end: datetime | None = None
    date_start: datetime | None = None
    gmt_offset: str | None = None
    location: str | None = None
    session_name: str | None = None
    session_type: str | None = None
    year: int | None = None

    @property
    def is_race(self) -> bool:
        """Grand Prix race sessions; sprints are excluded."""
        name = (self.session_name or "").lower()
        return "race" in name and "sprint" not in name

    @property
    def is_qualifying(self) -> bool:
        name = (self.session_name or "").lower()
        return "qualifying" in name or "shootout" in name


class Meeting(Record):
    """A Grand Prix weekend or test event."""

    circuit_key: int | None = None
    circuit_short_name: str | None = None
    country_code: str | None = None
    country_key: int | None = None
    country_name: str | None = None
    date_start: datetime | None = None
    gmt_offset: str | None = None
    location: str | None = None
    meeting_name: str | None = None
    meeting_official_name: str | None = None
    year: int | None = None
