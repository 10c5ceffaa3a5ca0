"""Formatting helpers for the F1 dashboard."""

from __future__ import annotations

from datetime import datetime

from .constants import POSITION_COLORS

PLACEHOLDER = "—"
LAP_TIME_PLACEHOLDER = "--:--.---"


def format_lap_time(seconds: float | None) -> str:
    """Format seconds as m:ss.fff, or a dashed placeholder while unavailable."""
    if not seconds:
        return LAP_TIME_PLACEHOLDER
    mins, secs = divmod(seconds, 60)
    return f"{int(mins)}:{secs:06.3f}"


def format_sector_time(seconds: float | None) -> str:
    if seconds is None:
        return PLACEHOLDER
    return f"{seconds:.3f}"


def format_position(position: int | None) -> str:
    return f"P{position}" if position else "--"


def position_color(position: int) -> str:
    """Podium colours for P1-P3, the points colour through P10."""
    if position <= 3:
        return POSITION_COLORS[f"P{position}"]
    if position <= 10:
        return POSITION_COLORS["POINTS"]
    return POSITION_COLORS["OTHER"]


def format_position_change(change: float | int | None) -> str | None:
    """Positions gained as '▲2', lost as '▼1', None when unchanged.

    A negative change means the driver moved up the order.
    """
    if not change:
        return None
    places = round(abs(change))
    if places == 0:
        return None
    return f"▲{places}" if change < 0 else f"▼{places}"


def format_clock(moment: datetime | str | None) -> str:
    """Wall-clock time of day (HH:MM:SS) for message feeds."""
    if moment is None:
        return PLACEHOLDER
    if isinstance(moment, str):
        moment = datetime.fromisoformat(moment)
    return moment.strftime("%H:%M:%S")


def format_temperature(celsius: float | None) -> str:
    return f"{celsius:.1f}°C" if celsius is not None else PLACEHOLDER
