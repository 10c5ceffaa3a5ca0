"""Data layer: repository factory and re-exports."""

from __future__ import annotations

from .base import F1DataRepository
from .errors import F1DataError, SessionFetchError
from .types import (
    CarTelemetry,
    DriverInfo,
    LapData,
    LocationSample,
    MeetingData,
    PositionSample,
    RaceControlMessage,
    SessionData,
    SessionSnapshot,
    WeatherData,
)


def get_repository() -> F1DataRepository:
    """Return the OpenF1-backed repository."""
    from .openf1_repo import OpenF1Repository

    return OpenF1Repository()


__all__ = [
    "CarTelemetry",
    "DriverInfo",
    "F1DataError",
    "F1DataRepository",
    "LapData",
    "LocationSample",
    "MeetingData",
    "PositionSample",
    "RaceControlMessage",
    "SessionData",
    "SessionFetchError",
    "SessionSnapshot",
    "WeatherData",
    "get_repository",
]
