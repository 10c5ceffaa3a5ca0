"""Service layer: replay, standings and live-timing logic for the F1 dashboard."""

from .championship import ChampionshipService
from .common import (
    driver_label,
    final_positions,
    is_qualifying_session,
    is_race_session,
    normalize_team_color,
    parse_timestamp,
    sort_sessions_recent_first,
    unique_meetings,
)
from .live_timing import (
    LiveTimingRow,
    LiveTimingService,
    RaceControlFeed,
    TelemetryPoint,
    TelemetryTrace,
)
from .race_replay import RaceReplayService, RaceStats, TrackCar, TrackFrame, build_track_frames
from .standings import (
    ChampionshipStandings,
    ConstructorDriver,
    ConstructorStanding,
    DriverStanding,
    RaceClassification,
    StandingsAggregator,
    points_for_position,
)
from .timeline import (
    DriverFrameState,
    FrameFlag,
    InterpolatedDriverState,
    TimelineBuilder,
    TimelineFrame,
    interpolate_frame,
)

__all__ = [
    "ChampionshipService",
    "ChampionshipStandings",
    "ConstructorDriver",
    "ConstructorStanding",
    "DriverFrameState",
    "DriverStanding",
    "FrameFlag",
    "InterpolatedDriverState",
    "LiveTimingRow",
    "LiveTimingService",
    "RaceClassification",
    "RaceControlFeed",
    "RaceReplayService",
    "RaceStats",
    "StandingsAggregator",
    "TelemetryPoint",
    "TelemetryTrace",
    "TimelineBuilder",
    "TimelineFrame",
    "TrackCar",
    "TrackFrame",
    "build_track_frames",
    "driver_label",
    "final_positions",
    "interpolate_frame",
    "is_qualifying_session",
    "is_race_session",
    "normalize_team_color",
    "parse_timestamp",
    "points_for_position",
    "sort_sessions_recent_first",
    "unique_meetings",
]
