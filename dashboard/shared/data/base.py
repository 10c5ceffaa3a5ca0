"""Abstract base repository for F1 data access."""

from __future__ import annotations

from abc import ABC, abstractmethod

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


class F1DataRepository(ABC):
    """Read-only access to session records.

    Implementations return empty lists when nothing matches and raise
    ``F1DataError`` when the source cannot be reached.
    """

    @abstractmethod
    def get_sessions(
        self, year: int | None = None, meeting_key: int | None = None,
    ) -> list[SessionData]: ...

    @abstractmethod
    def get_latest_session(self) -> SessionData | None: ...

    @abstractmethod
    def get_meetings(self, year: int) -> list[MeetingData]: ...

    @abstractmethod
    def get_drivers(self, session_key: int | str) -> list[DriverInfo]: ...

    @abstractmethod
    def get_positions(
        self, session_key: int | str, driver_number: int | None = None,
    ) -> list[PositionSample]: ...

    @abstractmethod
    def get_laps(
        self, session_key: int | str, driver_number: int | None = None,
    ) -> list[LapData]: ...

    @abstractmethod
    def get_race_control(self, session_key: int | str) -> list[RaceControlMessage]: ...

    @abstractmethod
    def get_weather(self, session_key: int | str) -> list[WeatherData]: ...

    @abstractmethod
    def get_car_data(
        self, session_key: int | str, driver_number: int, since: str | None = None,
    ) -> list[CarTelemetry]: ...

    @abstractmethod
    def get_location(
        self, session_key: int | str, date_start: str, date_end: str,
    ) -> list[LocationSample]: ...

    @abstractmethod
    def get_session_snapshot(self, session_key: int | str) -> SessionSnapshot:
        """Drivers, positions, laps, race control and weather, all or nothing."""
