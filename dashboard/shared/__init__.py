"""Shared dashboard utilities."""

# --- Constants & formatting ---
from .config import DashboardSettings, ReplayTolerances, load_settings
from .constants import F1_RED, FLAG_COLORS, PLOTLY_LAYOUT_DEFAULTS
from .formatters import format_lap_time, format_position, format_position_change

# --- Data layer ---
from .data import F1DataError, get_repository

# --- Service layer ---
from .services import (
    ChampionshipService,
    LiveTimingService,
    RaceReplayService,
    normalize_team_color,
)

# --- UI components ---
from .sidebar import SessionSelection, render_session_sidebar

__all__ = [
    "ChampionshipService",
    "DashboardSettings",
    "F1DataError",
    "F1_RED",
    "FLAG_COLORS",
    "LiveTimingService",
    "PLOTLY_LAYOUT_DEFAULTS",
    "RaceReplayService",
    "ReplayTolerances",
    "SessionSelection",
    "format_lap_time",
    "format_position",
    "format_position_change",
    "get_repository",
    "load_settings",
    "normalize_team_color",
    "render_session_sidebar",
]
