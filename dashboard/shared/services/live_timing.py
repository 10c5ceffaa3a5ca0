"""Live session views: timing board, race-control feed and car telemetry."""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass
from datetime import datetime

from f1feed.models.telemetry import DRS_OPEN_THRESHOLD

from ..api_logging import log_service_call
from ..constants import RACE_CONTROL_HISTORY, TELEMETRY_WINDOW
from ..data.base import F1DataRepository
from ..data.types import (
    CarTelemetry,
    DriverInfo,
    LapData,
    PositionSample,
    RaceControlMessage,
    WeatherData,
)
from .common import (
    driver_label,
    final_positions,
    latest_lap_by_driver,
    normalize_team_color,
    parse_timestamp,
)


@dataclass(frozen=True)
class LiveTimingRow:
    position: int
    driver_number: int
    name_acronym: str
    full_name: str | None
    team_name: str | None
    team_colour: str
    lap_number: int | None
    last_lap_time: float | None
    sector_1_time: float | None
    sector_2_time: float | None
    sector_3_time: float | None
    is_pit_out_lap: bool


@dataclass(frozen=True)
class RaceControlFeed:
    messages: tuple[RaceControlMessage, ...]
    weather: WeatherData | None


@dataclass(frozen=True)
class TelemetryPoint:
    date: datetime
    speed: int | None
    throttle: int | None
    rpm: int | None
    brake: int | None
    drs_open: bool


@dataclass(frozen=True)
class TelemetryTrace:
    driver_number: int
    name_acronym: str
    team_colour: str
    points: tuple[TelemetryPoint, ...]


def _by_date(records: list[dict]) -> list[dict]:
    dated = [(parse_timestamp(r.get("date")), r) for r in records]
    dated = [item for item in dated if item[0] is not None]
    dated.sort(key=lambda item: item[0])
    return [r for _, r in dated]


class LiveTimingService:
    """Encapsulates all business logic for the live session page."""

    def __init__(self, repo: F1DataRepository) -> None:
        self._repo = repo

    # ── Timing board ─────────────────────────────────────────────────────────

    @log_service_call
    def fetch_board(
        self,
        session_key: int | str,
        selected: Collection[int] | None = None,
    ) -> list[LiveTimingRow]:
        drivers = self._repo.get_drivers(session_key)
        positions = self._repo.get_positions(session_key)
        laps = self._repo.get_laps(session_key)
        return self.build_board(drivers, positions, laps, selected)

    @staticmethod
    def build_board(
        drivers: list[DriverInfo],
        positions: list[PositionSample],
        laps: list[LapData],
        selected: Collection[int] | None = None,
    ) -> list[LiveTimingRow]:
        """Running order from each driver's latest position sample.

        Drivers without a position sample are left off the board. An empty
        or None *selected* shows everyone.
        """
        current = final_positions(positions)
        latest_laps = latest_lap_by_driver(laps)

        rows = []
        for driver in drivers:
            dn = driver["driver_number"]
            if dn not in current or (selected and dn not in selected):
                continue
            lap = latest_laps.get(dn, {})
            rows.append(LiveTimingRow(
                position=current[dn],
                driver_number=dn,
                name_acronym=driver_label(driver),
                full_name=driver.get("full_name"),
                team_name=driver.get("team_name"),
                team_colour=normalize_team_color(driver.get("team_colour")),
                lap_number=lap.get("lap_number"),
                last_lap_time=lap.get("lap_duration"),
                sector_1_time=lap.get("duration_sector_1"),
                sector_2_time=lap.get("duration_sector_2"),
                sector_3_time=lap.get("duration_sector_3"),
                is_pit_out_lap=bool(lap.get("is_pit_out_lap")),
            ))
        rows.sort(key=lambda r: (r.position, r.driver_number))
        return rows

    # ── Race control ─────────────────────────────────────────────────────────

    @log_service_call
    def fetch_race_control(self, session_key: int | str) -> RaceControlFeed:
        messages = self._repo.get_race_control(session_key)
        weather = self._repo.get_weather(session_key)
        return self.race_control_feed(messages, weather)

    @staticmethod
    def race_control_feed(
        messages: list[RaceControlMessage],
        weather: list[WeatherData],
        limit: int = RACE_CONTROL_HISTORY,
    ) -> RaceControlFeed:
        """The *limit* most recent messages, newest first, with current weather."""
        recent = _by_date(messages)[-limit:] if limit > 0 else []
        readings = _by_date(weather)
        return RaceControlFeed(
            messages=tuple(reversed(recent)),
            weather=readings[-1] if readings else None,
        )

    # ── Telemetry ────────────────────────────────────────────────────────────

    @log_service_call
    def fetch_car_data(
        self,
        session_key: int | str,
        driver_numbers: list[int],
        since: str | None = None,
    ) -> dict[int, list[CarTelemetry]]:
        return {
            dn: self._repo.get_car_data(session_key, dn, since) for dn in driver_numbers
        }

    @staticmethod
    def telemetry_traces(
        drivers: list[DriverInfo],
        car_data: dict[int, list[CarTelemetry]],
        window: int = TELEMETRY_WINDOW,
    ) -> list[TelemetryTrace]:
        """The last *window* samples per driver, in the order of *car_data*."""
        by_number = {d["driver_number"]: d for d in drivers}
        traces = []
        for dn, samples in car_data.items():
            driver = by_number.get(dn, {"driver_number": dn})
            recent = _by_date(samples)[-window:] if window > 0 else []
            traces.append(TelemetryTrace(
                driver_number=dn,
                name_acronym=driver_label(driver),
                team_colour=normalize_team_color(driver.get("team_colour")),
                points=tuple(
                    TelemetryPoint(
                        date=parse_timestamp(s["date"]),
                        speed=s.get("speed"),
                        throttle=s.get("throttle"),
                        rpm=s.get("rpm"),
                        brake=s.get("brake"),
                        drs_open=(s.get("drs") or 0) >= DRS_OPEN_THRESHOLD,
                    )
                    for s in recent
                ),
            ))
        return traces
