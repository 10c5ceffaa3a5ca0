"""Shared constants for the F1 live dashboard."""

from __future__ import annotations

F1_RED = "#E10600"

# ── Championship ─────────────────────────────────────────────────────────────

POINTS_TABLE: tuple[int, ...] = (25, 18, 15, 12, 10, 8, 6, 4, 2, 1)
PODIUM_POSITIONS = 3

# ── Race replay ──────────────────────────────────────────────────────────────

# Drivers with this many laps or fewer are treated as non-finishers
MIN_REPLAY_LAPS = 3
FRAMES_PER_LAP = 2
MAX_REPLAY_FRAMES = 100

# Visual smoothing heuristic; changing these changes visible replay behaviour
POSITION_BIAS_ORIGIN = 20
POSITION_BIAS_STEP = 0.002
GLOBAL_PROGRESS_FLOOR = 0.8
PRE_START_PROGRESS_FACTOR = 0.1
MIN_PROGRESS = 0.01

REPLAY_SUBSTEPS = 4
PLAYBACK_SPEEDS: tuple[float, ...] = (0.5, 1.0, 2.0)
MAX_PLAYBACK_SPEED = 10.0
SECONDS_PER_FRAME = 2.0

# ── Live views ───────────────────────────────────────────────────────────────

RACE_CONTROL_HISTORY = 15
TELEMETRY_WINDOW = 100
TELEMETRY_REFRESH_SECONDS = 10

TELEMETRY_METRICS: dict[str, dict] = {
    "speed": {"title": "Speed (km/h)", "range": [0, 350]},
    "throttle": {"title": "Throttle (%)", "range": [0, 100]},
    "rpm": {"title": "RPM", "range": [8000, 12000]},
}

FLAG_COLORS: dict[str, str] = {
    "GREEN": "#39B54A",
    "YELLOW": "#FFD700",
    "DOUBLE YELLOW": "#FFB000",
    "RED": "#E10600",
    "BLUE": "#0067FF",
    "CHEQUERED": "#FFFFFF",
    "CLEAR": "#39B54A",
    "FLAG": "#888888",
}

POSITION_COLORS: dict[str, str] = {
    "P1": "#FACC15",
    "P2": "#D1D5DB",
    "P3": "#FB923C",
    "POINTS": "#4ADE80",
    "OTHER": "#FFFFFF",
}

PLOTLY_LAYOUT_DEFAULTS = dict(
    paper_bgcolor="rgba(0,0,0,0)",
    plot_bgcolor="rgba(0,0,0,0)",
    font_color="#F0F0F0",
    margin=dict(l=40, r=20, t=40, b=40),
)

FIRST_OPENF1_SEASON = 2023
