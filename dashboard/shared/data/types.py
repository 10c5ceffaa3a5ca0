"""Data contracts for the dashboard data layer.

Timestamps are ISO 8601 strings so every record survives ``st.cache_data``
pickling unchanged. Optional fields are None until the feed publishes them.
"""

from __future__ import annotations

from typing import TypedDict


class DriverInfo(TypedDict):
    driver_number: int
    name_acronym: str | None
    full_name: str | None
    team_name: str | None
    team_colour: str | None
    headshot_url: str | None


class PositionSample(TypedDict):
    date: str | None
    driver_number: int | None
    position: int | None


class LapData(TypedDict):
    lap_number: int | None
    lap_duration: float | None
    is_pit_out_lap: bool | None
    duration_sector_1: float | None
    duration_sector_2: float | None
    duration_sector_3: float | None
    i1_speed: float | None
    i2_speed: float | None
    st_speed: float | None
    driver_number: int | None
    date_start: str | None


class RaceControlMessage(TypedDict):
    date: str | None
    category: str | None
    flag: str | None
    driver_number: int | None
    lap_number: int | None
    message: str | None
    scope: str | None
    sector: int | None


class WeatherData(TypedDict):
    date: str | None
    air_temperature: float | None
    track_temperature: float | None
    humidity: float | None
    pressure: float | None
    rainfall: int | None
    wind_direction: int | None
    wind_speed: float | None


class SessionData(TypedDict):
    session_key: int
    session_name: str | None
    session_type: str | None
    meeting_key: int | None
    location: str | None
    circuit_short_name: str | None
    country_name: str | None
    date_start: str | None
    year: int | None


class MeetingData(TypedDict):
    meeting_key: int
    location: str | None
    circuit_short_name: str | None
    country_name: str | None


class CarTelemetry(TypedDict):
    date: str | None
    driver_number: int | None
    speed: int | None
    throttle: int | None
    rpm: int | None
    brake: int | None
    n_gear: int | None
    drs: int | None


class LocationSample(TypedDict):
    date: str | None
    driver_number: int | None
    x: float | None
    y: float | None
    z: float | None


class SessionSnapshot(TypedDict):
    drivers: list[DriverInfo]
    positions: list[PositionSample]
    laps: list[LapData]
    race_control: list[RaceControlMessage]
    weather: list[WeatherData]
