"""Race replay timeline: synthetic progress frames from laps and positions.

Lap completions, position samples and race-control messages arrive on
unrelated cadences. The builder joins them by nearest timestamp, merges every
driver's lap completions into one chronological stream and folds that stream
into an evenly spaced sequence of immutable frames.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from ..api_logging import log_service_call
from ..config import ReplayTolerances
from ..constants import (
    FRAMES_PER_LAP,
    GLOBAL_PROGRESS_FLOOR,
    MAX_REPLAY_FRAMES,
    MIN_PROGRESS,
    MIN_REPLAY_LAPS,
    POSITION_BIAS_ORIGIN,
    POSITION_BIAS_STEP,
    PRE_START_PROGRESS_FACTOR,
)
from ..data.types import DriverInfo, LapData, PositionSample, RaceControlMessage
from .common import (
    driver_label,
    group_by_driver,
    nearest_within,
    normalize_team_color,
    parse_timestamp,
    timed_series,
)


@dataclass(frozen=True)
class DriverFrameState:
    driver_number: int
    name_acronym: str
    full_name: str
    team_colour: str
    position: int
    progress: float
    current_lap_number: int
    pit_stops: int
    is_in_pit: bool
    last_lap_time: float | None
    sector_1_time: float | None
    sector_2_time: float | None
    sector_3_time: float | None


@dataclass(frozen=True)
class FrameFlag:
    type: str
    message: str | None
    driver_number: int | None


@dataclass(frozen=True)
class TimelineFrame:
    timestamp: datetime | None
    lap_number: int
    total_laps: int
    drivers: tuple[DriverFrameState, ...]
    flags: tuple[FrameFlag, ...]


@dataclass(frozen=True)
class InterpolatedDriverState:
    state: DriverFrameState
    progress: float
    position: float
    position_change: int


# ── Internal fold state ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class _LapCompletion:
    at: datetime
    driver_number: int
    lap_number: int
    cumulative_time: float
    position: int
    pit_out: bool


@dataclass(frozen=True)
class _RunningState:
    position: int
    lap_number: int = 0
    cumulative_time: float = 0.0
    pit_stops: int = 0
    in_pit: bool = False
    baseline_progress: float = 0.0


def _apply_completions(
    states: dict[int, _RunningState],
    completions: list[_LapCompletion],
) -> dict[int, _RunningState]:
    """Return the next snapshot after applying *completions* in order."""
    next_states = {
        dn: replace(s, in_pit=False) if s.in_pit else s for dn, s in states.items()
    }
    for c in completions:
        current = next_states.get(c.driver_number)
        if current is None or c.lap_number <= current.lap_number:
            continue
        next_states[c.driver_number] = replace(
            current,
            lap_number=c.lap_number,
            cumulative_time=c.cumulative_time,
            position=c.position,
            pit_stops=current.pit_stops + (1 if c.pit_out else 0),
            in_pit=c.pit_out,
        )
    return next_states


def _progress(
    state: _RunningState,
    position: int,
    total_laps: int,
    global_progress: float,
) -> float:
    if state.lap_number > 0:
        lap_progress = state.lap_number / total_laps
        bias = (POSITION_BIAS_ORIGIN - position) * POSITION_BIAS_STEP
        progress = min(lap_progress + bias, 1.0)
        progress = max(progress, global_progress * GLOBAL_PROGRESS_FLOOR)
    else:
        progress = max(global_progress * PRE_START_PROGRESS_FACTOR, MIN_PROGRESS)
    return max(progress, state.baseline_progress, MIN_PROGRESS)


def _laps_by_number(laps: list[dict]) -> dict[int, dict]:
    return {lap["lap_number"]: lap for lap in laps if lap.get("lap_number") is not None}


def _flag_events(race_control: list[RaceControlMessage]) -> list[tuple[datetime, FrameFlag]]:
    events = []
    for msg in race_control:
        if not (msg.get("flag") or msg.get("category") == "Flag"):
            continue
        moment = parse_timestamp(msg.get("date"))
        if moment is None:
            continue
        events.append((moment, FrameFlag(
            type=msg.get("flag") or "FLAG",
            message=msg.get("message"),
            driver_number=msg.get("driver_number"),
        )))
    return events


# ── Builder ──────────────────────────────────────────────────────────────────


class TimelineBuilder:
    """Builds the replay frame sequence for one race session.

    Output is a fully materialised tuple; identical inputs give identical
    frames.
    """

    def __init__(self, tolerances: ReplayTolerances | None = None) -> None:
        self._tolerances = tolerances or ReplayTolerances()

    @log_service_call
    def build(
        self,
        drivers: list[DriverInfo],
        positions: list[PositionSample],
        laps: list[LapData],
        qualifying_grid: dict[int, int],
        race_control: list[RaceControlMessage],
    ) -> tuple[TimelineFrame, ...]:
        laps_by_driver = group_by_driver(laps)
        unique_drivers = {d["driver_number"]: d for d in reversed(drivers)}
        eligible = [
            d for dn, d in sorted(unique_drivers.items())
            if len(laps_by_driver.get(dn, [])) > MIN_REPLAY_LAPS
        ]
        if not eligible:
            return ()

        total_laps = max((lap.get("lap_number") or 0 for lap in laps), default=0)
        total_laps = max(total_laps, 1)

        grid = {
            d["driver_number"]: qualifying_grid.get(d["driver_number"]) or d["driver_number"]
            for d in eligible
        }
        completions = self._completions(eligible, positions, laps_by_driver, grid)
        frame_times = self._frame_times(completions, laps_by_driver, eligible, total_laps)
        frame_count = len(frame_times) - 1

        numbered_laps = {
            d["driver_number"]: _laps_by_number(laps_by_driver[d["driver_number"]])
            for d in eligible
        }
        flags = sorted(_flag_events(race_control), key=lambda item: item[0])
        completion_times = [c.at for c in completions]

        states = {dn: _RunningState(position=pos) for dn, pos in grid.items()}
        applied = 0
        frames: list[TimelineFrame] = []
        for i, at in enumerate(frame_times):
            cutoff = applied
            if at is not None:
                cutoff = bisect.bisect_right(completion_times, at)
            states = _apply_completions(states, completions[applied:cutoff])
            applied = cutoff

            global_progress = i / frame_count if frame_count else 0.0
            ranking = sorted(
                eligible,
                key=lambda d: (
                    states[d["driver_number"]].position,
                    grid[d["driver_number"]],
                    d["driver_number"],
                ),
            )
            driver_states = []
            for rank, driver in enumerate(ranking, start=1):
                dn = driver["driver_number"]
                progress = _progress(states[dn], rank, total_laps, global_progress)
                states[dn] = replace(states[dn], baseline_progress=progress)
                driver_states.append(self._driver_state(
                    driver, states[dn], rank, progress,
                    # times shown are those of the last completed lap
                    numbered_laps[dn].get(states[dn].lap_number),
                ))

            frames.append(TimelineFrame(
                timestamp=at,
                lap_number=max(max(s.lap_number for s in states.values()), 1),
                total_laps=total_laps,
                drivers=tuple(driver_states),
                flags=self._active_flags(flags, at),
            ))
        return tuple(frames)

    def _completions(
        self,
        eligible: list[DriverInfo],
        positions: list[PositionSample],
        laps_by_driver: dict[int, list[dict]],
        grid: dict[int, int],
    ) -> list[_LapCompletion]:
        positions_by_driver = group_by_driver(positions)
        completions: list[_LapCompletion] = []
        for driver in eligible:
            dn = driver["driver_number"]
            samples = timed_series(positions_by_driver.get(dn, []), "position")
            timed_laps = sorted(
                (lap for lap in laps_by_driver[dn]
                 if lap.get("lap_duration") is not None and lap.get("lap_number") is not None),
                key=lambda lap: lap["lap_number"],
            )
            cumulative = 0.0
            for lap in timed_laps:
                cumulative += lap["lap_duration"]
                started = parse_timestamp(lap.get("date_start"))
                if started is None:
                    continue
                finished = started + timedelta(seconds=lap["lap_duration"])
                matched = nearest_within(samples, finished, self._tolerances.position_to_lap)
                completions.append(_LapCompletion(
                    at=finished,
                    driver_number=dn,
                    lap_number=lap["lap_number"],
                    cumulative_time=cumulative,
                    position=matched if matched is not None else grid[dn],
                    pit_out=bool(lap.get("is_pit_out_lap")),
                ))
        completions.sort(key=lambda c: c.at)
        return completions

    @staticmethod
    def _frame_times(
        completions: list[_LapCompletion],
        laps_by_driver: dict[int, list[dict]],
        eligible: list[DriverInfo],
        total_laps: int,
    ) -> list[datetime | None]:
        if not completions:
            starts = [
                parse_timestamp(lap.get("date_start"))
                for d in eligible
                for lap in laps_by_driver[d["driver_number"]]
            ]
            return [min((s for s in starts if s is not None), default=None)]

        frame_count = min(total_laps * FRAMES_PER_LAP, MAX_REPLAY_FRAMES)
        start, end = completions[0].at, completions[-1].at
        step = (end - start) / frame_count
        return [start + step * i for i in range(frame_count)] + [end]

    def _active_flags(
        self,
        flags: list[tuple[datetime, FrameFlag]],
        at: datetime | None,
    ) -> tuple[FrameFlag, ...]:
        if at is None:
            return ()
        window = self._tolerances.flag_to_frame
        return tuple(flag for moment, flag in flags if abs(moment - at) < window)

    @staticmethod
    def _driver_state(
        driver: DriverInfo,
        state: _RunningState,
        position: int,
        progress: float,
        latest_lap: dict | None,
    ) -> DriverFrameState:
        latest_lap = latest_lap or {}
        dn = driver["driver_number"]
        return DriverFrameState(
            driver_number=dn,
            name_acronym=driver_label(driver),
            full_name=driver.get("full_name") or f"Driver {dn}",
            team_colour=normalize_team_color(driver.get("team_colour")),
            position=position,
            progress=progress,
            current_lap_number=state.lap_number,
            pit_stops=state.pit_stops,
            is_in_pit=state.in_pit,
            last_lap_time=latest_lap.get("lap_duration"),
            sector_1_time=latest_lap.get("duration_sector_1"),
            sector_2_time=latest_lap.get("duration_sector_2"),
            sector_3_time=latest_lap.get("duration_sector_3"),
        )


# ── Playback interpolation ───────────────────────────────────────────────────


def _lerp(start: float, end: float, ratio: float) -> float:
    return start * (1 - ratio) + end * ratio


def interpolate_frame(
    previous: TimelineFrame | None,
    current: TimelineFrame,
    ratio: float,
) -> tuple[InterpolatedDriverState, ...]:
    """Blend progress and position between two frames for sub-frame playback.

    Ratio 0 gives the previous frame's values and ratio 1 the current
    frame's. Drivers missing from *previous* keep their current state.
    """
    ratio = min(max(ratio, 0.0), 1.0)
    before = {s.driver_number: s for s in previous.drivers} if previous else {}

    blended = []
    for state in current.drivers:
        prior = before.get(state.driver_number)
        if prior is None:
            blended.append(InterpolatedDriverState(
                state=state,
                progress=state.progress,
                position=float(state.position),
                position_change=0,
            ))
            continue
        blended.append(InterpolatedDriverState(
            state=state,
            progress=_lerp(prior.progress, state.progress, ratio),
            position=_lerp(prior.position, state.position, ratio),
            position_change=state.position - prior.position,
        ))
    return tuple(blended)
