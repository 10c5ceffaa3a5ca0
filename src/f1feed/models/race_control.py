"""Race control and team radio models."""

from __future__ import annotations

from datetime import datetime

from f1feed.models._base import Record


class RaceControl(Record):
    """A race control message (flags, safety car, incidents, DRS)."""

    category: str | None = None
    date: datetime | None = None
    driver_number: int | None = None
    flag: str | None = None
    lap_number: int | None = None
    message: str | None = None
    scope: str | None = None
    sector: int | None = None

    @property
    def is_flag(self) -> bool:
        return bool(self.flag) or self.category == "Flag"


class TeamRadio(Record):
    """A driver/team radio clip."""

    date: datetime | None = None
    driver_number: int | None = None
    recording_url: str | None = None
