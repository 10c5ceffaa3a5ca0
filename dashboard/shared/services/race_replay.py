"""Race replay service: loads a race, derives the grid and builds frames."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from ..api_logging import log_service_call, log_warning
from ..config import ReplayTolerances
from ..data.base import F1DataRepository
from ..data.errors import F1DataError
from ..data.types import (
    DriverInfo,
    LocationSample,
    PositionSample,
    SessionData,
    SessionSnapshot,
)
from .common import (
    driver_label,
    final_positions,
    group_by_driver,
    is_qualifying_session,
    nearest_within,
    normalize_team_color,
    parse_timestamp,
    timed_series,
)
from .timeline import DriverFrameState, TimelineBuilder, TimelineFrame


@dataclass(frozen=True)
class RaceStats:
    leader: DriverFrameState | None
    total_pit_stops: int
    drivers_in_pit: int
    flag_count: int


@dataclass(frozen=True)
class TrackCar:
    driver_number: int
    name_acronym: str
    team_colour: str
    x: float
    y: float
    position: int | None


@dataclass(frozen=True)
class TrackFrame:
    timestamp: datetime
    cars: tuple[TrackCar, ...]


def build_track_frames(
    drivers: list[DriverInfo],
    locations: list[LocationSample],
    positions: list[PositionSample],
    tolerance: timedelta | None = None,
) -> tuple[TrackFrame, ...]:
    """Group location pings by timestamp into on-track frames.

    Each car is tagged with its running position when a position sample lies
    within *tolerance* of the ping, otherwise None.
    """
    tolerance = tolerance or ReplayTolerances().position_to_location
    by_number = {d["driver_number"]: d for d in drivers}
    position_series = {
        dn: timed_series(samples, "position")
        for dn, samples in group_by_driver(positions).items()
    }

    pings: dict[datetime, list[TrackCar]] = {}
    for ping in locations:
        moment = parse_timestamp(ping.get("date"))
        dn = ping.get("driver_number")
        if moment is None or dn is None or ping.get("x") is None or ping.get("y") is None:
            continue
        driver = by_number.get(dn, {"driver_number": dn})
        pings.setdefault(moment, []).append(TrackCar(
            driver_number=dn,
            name_acronym=driver_label(driver),
            team_colour=normalize_team_color(driver.get("team_colour")),
            x=ping["x"],
            y=ping["y"],
            position=nearest_within(position_series.get(dn, []), moment, tolerance),
        ))

    return tuple(
        TrackFrame(
            timestamp=moment,
            cars=tuple(sorted(cars, key=lambda c: (c.position is None, c.position or 0, c.driver_number))),
        )
        for moment, cars in sorted(pings.items())
    )


class RaceReplayService:
    """Encapsulates data loading and derivation for the race replay page."""

    def __init__(
        self,
        repo: F1DataRepository,
        tolerances: ReplayTolerances | None = None,
    ) -> None:
        self._repo = repo
        self._tolerances = tolerances or ReplayTolerances()
        self._builder = TimelineBuilder(self._tolerances)

    @log_service_call
    def load_inputs(self, session_key: int | str) -> SessionSnapshot:
        """Fetch every replay input for a session in one all-or-nothing call."""
        return self._repo.get_session_snapshot(session_key)

    @log_service_call
    def get_qualifying_grid(
        self,
        session: SessionData,
        drivers: list[DriverInfo],
    ) -> dict[int, int]:
        """Starting grid from the meeting's qualifying, else driver-number order."""
        try:
            grid = self._qualifying_positions(session)
        except F1DataError as exc:
            log_warning("qualifying lookup failed for session %s: %s", session["session_key"], exc)
            grid = {}

        if grid:
            return grid

        log_warning(
            "no qualifying positions for session %s, using driver numbers for grid order",
            session["session_key"],
        )
        numbers = sorted({d["driver_number"] for d in drivers})
        return {dn: slot for slot, dn in enumerate(numbers, start=1)}

    def _qualifying_positions(self, session: SessionData) -> dict[int, int]:
        if session.get("meeting_key") is None:
            return {}
        sessions = self._repo.get_sessions(
            year=session.get("year"), meeting_key=session["meeting_key"],
        )
        qualifying = next(
            (s for s in sessions if (s.get("session_name") or "") == "Qualifying"),
            None,
        ) or next((s for s in sessions if is_qualifying_session(s)), None)
        if qualifying is None:
            return {}
        return final_positions(self._repo.get_positions(qualifying["session_key"]))

    @log_service_call
    def build_timeline(self, session: SessionData) -> tuple[TimelineFrame, ...]:
        snapshot = self.load_inputs(session["session_key"])
        if not snapshot["drivers"]:
            return ()
        grid = self.get_qualifying_grid(session, snapshot["drivers"])
        return self._builder.build(
            snapshot["drivers"],
            snapshot["positions"],
            snapshot["laps"],
            grid,
            snapshot["race_control"],
        )

    @log_service_call
    def load_track_frames(
        self,
        session_key: int | str,
        date_start: str,
        date_end: str,
    ) -> tuple[TrackFrame, ...]:
        """Location replay for a time window of a session."""
        locations = self._repo.get_location(session_key, date_start, date_end)
        if not locations:
            return ()
        drivers = self._repo.get_drivers(session_key)
        positions = self._repo.get_positions(session_key)
        return build_track_frames(
            drivers, locations, positions, self._tolerances.position_to_location,
        )

    @staticmethod
    def race_stats(frame: TimelineFrame) -> RaceStats:
        return RaceStats(
            leader=frame.drivers[0] if frame.drivers else None,
            total_pit_stops=sum(d.pit_stops for d in frame.drivers),
            drivers_in_pit=sum(1 for d in frame.drivers if d.is_in_pit),
            flag_count=len(frame.flags),
        )

    @staticmethod
    def frame_index_for_lap(frames: tuple[TimelineFrame, ...], lap: int) -> int:
        """Index of the first frame at or beyond *lap*, else the last frame."""
        for idx, frame in enumerate(frames):
            if frame.lap_number >= lap:
                return idx
        return max(len(frames) - 1, 0)
