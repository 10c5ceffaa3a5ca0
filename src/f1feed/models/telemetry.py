"""Car telemetry, track location and weather models."""

from __future__ import annotations

from datetime import datetime

from f1feed.models._base import Record

DRS_OPEN_THRESHOLD = 10


class CarData(Record):
    """Car channel sample (~3.7 Hz): speed, throttle, brake, RPM, gear, DRS."""

    brake: int | None = None
    date: datetime | None = None
    driver_number: int | None = None
    drs: int | None = None
    n_gear: int | None = None
    rpm: int | None = None
    speed: int | None = None
    throttle: int | None = None

    @property
    def drs_open(self) -> bool:
        # 10, 12 and 14 all mean the flap is open
        return (self.drs or 0) >= DRS_OPEN_THRESHOLD


class Location(Record):
    """Car position on track in circuit coordinates."""

    date: datetime | None = None
    driver_number: int | None = None
    x: float | None = None
    y: float | None = None
    z: float | None = None


class Weather(Record):
    """Track weather, updated about once a minute."""

    air_temperature: float | None = None
    date: datetime | None = None
    humidity: float | None = None
    pressure: float | None = None
    rainfall: int | None = None
    track_temperature: float | None = None
    wind_direction: int | None = None
    wind_speed: float | None = None
