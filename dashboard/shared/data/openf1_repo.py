"""OpenF1 API repository implementation."""

from __future__ import annotations

import asyncio
import threading
import time
from typing import Any

import streamlit as st
from pydantic import BaseModel

from f1feed import LATEST, AsyncOpenF1Client, Filter, OpenF1Client, OpenF1Error

from ..api_logging import log_api_call
from ..config import load_settings
from ..services.common import unique_meetings
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

_SETTINGS = load_settings()

# Static reference data changes rarely; timing data changes every poll
_STATIC_TTL = 600
_LIVE_TTL = max(1, int(_SETTINGS.refresh_seconds))

# ── Rate limiting ────────────────────────────────────────────────────────────

_last_request_time: float = 0.0
_rate_limit_lock = threading.Lock()
_MIN_REQUEST_INTERVAL = 0.35  # OpenF1 allows 3 req/s; 350ms keeps us safe


def _rate_limit() -> None:
    """Sleep if needed to respect the OpenF1 API rate limit."""
    global _last_request_time
    with _rate_limit_lock:
        now = time.monotonic()
        elapsed = now - _last_request_time
        if elapsed < _MIN_REQUEST_INTERVAL:
            time.sleep(_MIN_REQUEST_INTERVAL - elapsed)
        _last_request_time = time.monotonic()


def _client() -> OpenF1Client:
    return OpenF1Client(base_url=_SETTINGS.api_base_url, timeout=_SETTINGS.api_timeout)


def _session_param(session_key: int | str) -> int | str:
    return LATEST if session_key == LATEST else int(session_key)


def _to_contract(model: BaseModel, contract: type) -> Any:
    """Dump a record to the fields of a TypedDict contract, dates as ISO strings."""
    return model.model_dump(mode="json", include=set(contract.__annotations__))


# ── Cached fetch helpers ─────────────────────────────────────────────────────


@st.cache_data(ttl=_STATIC_TTL)
def _fetch_sessions(year: int | None, meeting_key: int | None) -> list[SessionData]:
    _rate_limit()
    try:
        with _client() as f1:
            sessions = f1.sessions(year=year, meeting_key=meeting_key)
    except OpenF1Error as exc:
        raise F1DataError(
            f"Failed to fetch sessions (year={year}, meeting={meeting_key}): {exc}",
        ) from exc
    return [_to_contract(s, SessionData) for s in sessions if s.session_key is not None]


@st.cache_data(ttl=_LIVE_TTL)
def _fetch_latest_session() -> SessionData | None:
    _rate_limit()
    try:
        with _client() as f1:
            session = f1.latest_session()
    except OpenF1Error as exc:
        raise F1DataError(f"Failed to fetch the latest session: {exc}") from exc
    return _to_contract(session, SessionData) if session else None


@st.cache_data(ttl=_STATIC_TTL)
def _fetch_drivers(session_key: int | str) -> list[DriverInfo]:
    _rate_limit()
    try:
        with _client() as f1:
            drivers = f1.drivers(session_key=session_key)
    except OpenF1Error as exc:
        raise SessionFetchError(session_key, f"failed to fetch drivers: {exc}") from exc
    return [_to_contract(d, DriverInfo) for d in drivers if d.driver_number is not None]


@st.cache_data(ttl=_LIVE_TTL)
def _fetch_positions(session_key: int | str, driver_number: int | None) -> list[PositionSample]:
    _rate_limit()
    try:
        with _client() as f1:
            positions = f1.position(session_key=session_key, driver_number=driver_number)
    except OpenF1Error as exc:
        raise SessionFetchError(session_key, f"failed to fetch positions: {exc}") from exc
    return [_to_contract(p, PositionSample) for p in positions]


@st.cache_data(ttl=_LIVE_TTL)
def _fetch_laps(session_key: int | str, driver_number: int | None) -> list[LapData]:
    _rate_limit()
    try:
        with _client() as f1:
            laps = f1.laps(session_key=session_key, driver_number=driver_number)
    except OpenF1Error as exc:
        raise SessionFetchError(session_key, f"failed to fetch laps: {exc}") from exc
    return [_to_contract(lap, LapData) for lap in laps]


@st.cache_data(ttl=_LIVE_TTL)
def _fetch_race_control(session_key: int | str) -> list[RaceControlMessage]:
    _rate_limit()
    try:
        with _client() as f1:
            messages = f1.race_control(session_key=session_key)
    except OpenF1Error as exc:
        raise SessionFetchError(session_key, f"failed to fetch race control: {exc}") from exc
    return [_to_contract(m, RaceControlMessage) for m in messages]


@st.cache_data(ttl=_LIVE_TTL)
def _fetch_weather(session_key: int | str) -> list[WeatherData]:
    _rate_limit()
    try:
        with _client() as f1:
            weather = f1.weather(session_key=session_key)
    except OpenF1Error as exc:
        raise SessionFetchError(session_key, f"failed to fetch weather: {exc}") from exc
    return [_to_contract(w, WeatherData) for w in weather]


@st.cache_data(ttl=_LIVE_TTL)
def _fetch_car_data(
    session_key: int | str, driver_number: int, since: str | None,
) -> list[CarTelemetry]:
    _rate_limit()
    try:
        with _client() as f1:
            samples = f1.car_data(
                session_key=session_key,
                driver_number=driver_number,
                date=Filter(gte=since) if since else None,
            )
    except OpenF1Error as exc:
        raise SessionFetchError(
            session_key, f"failed to fetch car data for driver {driver_number}: {exc}",
        ) from exc
    return [_to_contract(s, CarTelemetry) for s in samples]


@st.cache_data(ttl=_STATIC_TTL)
def _fetch_location(
    session_key: int | str, date_start: str, date_end: str,
) -> list[LocationSample]:
    _rate_limit()
    try:
        with _client() as f1:
            samples = f1.location(
                session_key=session_key, date=Filter(gt=date_start, lt=date_end),
            )
    except OpenF1Error as exc:
        raise SessionFetchError(session_key, f"failed to fetch location: {exc}") from exc
    return [_to_contract(s, LocationSample) for s in samples]


async def _gather_snapshot(session_key: int | str) -> SessionSnapshot:
    async with AsyncOpenF1Client(
        base_url=_SETTINGS.api_base_url, timeout=_SETTINGS.api_timeout,
    ) as f1:
        snapshot = await f1.session_snapshot(session_key)
    return {
        "drivers": [
            _to_contract(d, DriverInfo) for d in snapshot.drivers if d.driver_number is not None
        ],
        "positions": [_to_contract(p, PositionSample) for p in snapshot.positions],
        "laps": [_to_contract(lap, LapData) for lap in snapshot.laps],
        "race_control": [_to_contract(m, RaceControlMessage) for m in snapshot.race_control],
        "weather": [_to_contract(w, WeatherData) for w in snapshot.weather],
    }


@st.cache_data(ttl=_LIVE_TTL)
def _fetch_session_snapshot(session_key: int | str) -> SessionSnapshot:
    _rate_limit()
    try:
        return asyncio.run(_gather_snapshot(session_key))
    except OpenF1Error as exc:
        raise SessionFetchError(session_key, f"failed to fetch session snapshot: {exc}") from exc


# ── Repository class ─────────────────────────────────────────────────────────


class OpenF1Repository(F1DataRepository):
    """OpenF1 API data repository."""

    @log_api_call
    def get_sessions(
        self, year: int | None = None, meeting_key: int | None = None,
    ) -> list[SessionData]:
        return _fetch_sessions(year, meeting_key)

    @log_api_call
    def get_latest_session(self) -> SessionData | None:
        return _fetch_latest_session()

    @log_api_call
    def get_meetings(self, year: int) -> list[MeetingData]:
        # /meetings lags behind /sessions early in a weekend
        return unique_meetings(_fetch_sessions(year, None))

    @log_api_call
    def get_drivers(self, session_key: int | str) -> list[DriverInfo]:
        return _fetch_drivers(_session_param(session_key))

    @log_api_call
    def get_positions(
        self, session_key: int | str, driver_number: int | None = None,
    ) -> list[PositionSample]:
        return _fetch_positions(_session_param(session_key), driver_number)

    @log_api_call
    def get_laps(
        self, session_key: int | str, driver_number: int | None = None,
    ) -> list[LapData]:
        return _fetch_laps(_session_param(session_key), driver_number)

    @log_api_call
    def get_race_control(self, session_key: int | str) -> list[RaceControlMessage]:
        return _fetch_race_control(_session_param(session_key))

    @log_api_call
    def get_weather(self, session_key: int | str) -> list[WeatherData]:
        return _fetch_weather(_session_param(session_key))

    @log_api_call
    def get_car_data(
        self, session_key: int | str, driver_number: int, since: str | None = None,
    ) -> list[CarTelemetry]:
        return _fetch_car_data(_session_param(session_key), driver_number, since)

    @log_api_call
    def get_location(
        self, session_key: int | str, date_start: str, date_end: str,
    ) -> list[LocationSample]:
        return _fetch_location(_session_param(session_key), date_start, date_end)

    @log_api_call
    def get_session_snapshot(self, session_key: int | str) -> SessionSnapshot:
        return _fetch_session_snapshot(_session_param(session_key))
