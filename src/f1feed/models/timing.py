"""Running order and lap timing models."""

from __future__ import annotations

from datetime import datetime, timedelta

from f1feed.models._base import Record


class Position(Record):
    """A running-order sample; emitted whenever a driver's position changes."""

    date: datetime | None = None
    driver_number: int | None = None
    position: int | None = None


class Lap(Record):
    """One lap with sector times and speed traps."""

    date_start: datetime | None = None
    driver_number: int | None = None
    duration_sector_1: float | None = None
    duration_sector_2: float | None = None
    duration_sector_3: float | None = None
    i1_speed: float | None = None
    i2_speed: float | None = None
    is_pit_out_lap: bool | None = None
    lap_duration: float | None = None
    lap_number: int | None = None
    segments_sector_1: list[int | None] | None = None
    segments_sector_2: list[int | None] | None = None
    segments_sector_3: list[int | None] | None = None
    st_speed: float | None = None

    @property
    def date_end(self) -> datetime | None:
        """Wall-clock completion time, or None while the lap is still running."""
        if self.date_start is None or self.lap_duration is None:
            return None
        return self.date_start + timedelta(seconds=self.lap_duration)

    @property
    def total_sector_time(self) -> float | None:
        """Sum of the three sectors, or None if any is missing."""
        sectors = (self.duration_sector_1, self.duration_sector_2, self.duration_sector_3)
        if any(s is None for s in sectors):
            return None
        return sum(sectors)  # type: ignore[arg-type]
