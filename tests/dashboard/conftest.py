"""Shared fixtures for dashboard tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from shared.data.base import F1DataRepository

RACE_START = datetime(2024, 3, 2, 15, 0, tzinfo=timezone.utc)


def _iso(moment: datetime | None) -> str | None:
    return moment.isoformat() if moment is not None else None


# ── Sample data factories ────────────────────────────────────────────────────


def _make_driver(
    driver_number: int,
    name_acronym: str | None = None,
    team_name: str | None = "Red Bull Racing",
    team_colour: str | None = "3671C6",
    full_name: str | None = None,
) -> dict:
    return {
        "driver_number": driver_number,
        "name_acronym": name_acronym,
        "full_name": full_name,
        "team_name": team_name,
        "team_colour": team_colour,
        "headshot_url": None,
    }


def _make_lap(
    driver_number: int,
    lap_number: int,
    date_start: datetime | None = None,
    lap_duration: float | None = 90.0,
    is_pit_out_lap: bool = False,
    sectors: tuple[float | None, float | None, float | None] = (28.0, 34.0, 28.0),
) -> dict:
    return {
        "lap_number": lap_number,
        "lap_duration": lap_duration,
        "is_pit_out_lap": is_pit_out_lap,
        "duration_sector_1": sectors[0],
        "duration_sector_2": sectors[1],
        "duration_sector_3": sectors[2],
        "i1_speed": 300.0,
        "i2_speed": 280.0,
        "st_speed": 310.0,
        "driver_number": driver_number,
        "date_start": _iso(date_start),
    }


def _make_position(driver_number: int, position: int, date: datetime | None) -> dict:
    return {"driver_number": driver_number, "position": position, "date": _iso(date)}


def _make_race_control(
    date: datetime | None,
    flag: str | None = "YELLOW",
    category: str = "Flag",
    message: str | None = "YELLOW IN TRACK SECTOR 4",
    driver_number: int | None = None,
) -> dict:
    return {
        "date": _iso(date),
        "category": category,
        "flag": flag,
        "driver_number": driver_number,
        "lap_number": None,
        "message": message,
        "scope": "Sector",
        "sector": 4,
    }


def _make_race_laps(
    driver_number: int,
    count: int,
    lap_time: float = 90.0,
    offset: float = 0.0,
    pit_out_laps: tuple[int, ...] = (),
) -> list[dict]:
    """Back-to-back laps starting at RACE_START + *offset* seconds."""
    laps = []
    started = RACE_START + timedelta(seconds=offset)
    for number in range(1, count + 1):
        laps.append(_make_lap(
            driver_number, number, started, lap_time,
            is_pit_out_lap=number in pit_out_laps,
        ))
        started += timedelta(seconds=lap_time)
    return laps


@pytest.fixture
def make_driver():
    """Factory fixture for creating driver dicts."""
    return _make_driver


@pytest.fixture
def make_lap():
    """Factory fixture for creating lap dicts."""
    return _make_lap


@pytest.fixture
def make_race_laps():
    return _make_race_laps


@pytest.fixture
def make_position():
    return _make_position


@pytest.fixture
def make_race_control():
    return _make_race_control


@pytest.fixture
def sample_drivers() -> list[dict]:
    return [
        _make_driver(1, "VER", full_name="Max Verstappen"),
        _make_driver(11, "PER", full_name="Sergio Perez"),
        _make_driver(44, "HAM", team_name="Ferrari", team_colour="E80020",
                     full_name="Lewis Hamilton"),
    ]


@pytest.fixture
def mock_repo() -> MagicMock:
    return MagicMock(spec=F1DataRepository)
