"""Shared pure functions for the service layer (no Streamlit dependency)."""

from __future__ import annotations

import bisect
import re
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta, timezone
from typing import Any, TypeVar

from ..constants import F1_RED

T = TypeVar("T")

_HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{3,8}$")


def parse_timestamp(value: str | datetime | None) -> datetime | None:
    """Parse an ISO 8601 feed timestamp; naive values are taken as UTC."""
    if value is None:
        return None
    if isinstance(value, datetime):
        moment = value
    else:
        try:
            moment = datetime.fromisoformat(value)
        except ValueError:
            return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def normalize_team_color(team_colour: str | None) -> str:
    """Return a validated hex color string with '#' prefix, defaulting to F1_RED."""
    if team_colour:
        candidate = team_colour if team_colour.startswith("#") else f"#{team_colour}"
        if _HEX_COLOR_RE.match(candidate):
            return candidate
    return F1_RED


def driver_label(driver: dict) -> str:
    return driver.get("name_acronym") or f"D{driver.get('driver_number')}"


def group_by_driver(records: Iterable[dict]) -> dict[int, list[dict]]:
    """Bucket records by driver_number, skipping rows without one."""
    grouped: dict[int, list[dict]] = {}
    for record in records:
        dn = record.get("driver_number")
        if dn is None:
            continue
        grouped.setdefault(dn, []).append(record)
    return grouped


def final_positions(positions: Iterable[dict]) -> dict[int, int]:
    """Map each driver to the position of their chronologically latest sample.

    Samples sharing a timestamp resolve to the one listed last.
    """
    latest: dict[int, tuple[datetime, int]] = {}
    for sample in positions:
        dn = sample.get("driver_number")
        position = sample.get("position")
        moment = parse_timestamp(sample.get("date"))
        if dn is None or position is None or moment is None:
            continue
        current = latest.get(dn)
        if current is None or moment >= current[0]:
            latest[dn] = (moment, position)
    return {dn: position for dn, (_, position) in latest.items()}


def latest_lap_by_driver(laps: Iterable[dict]) -> dict[int, dict]:
    """Map each driver to their highest-numbered lap."""
    latest: dict[int, dict] = {}
    for lap in laps:
        dn = lap.get("driver_number")
        number = lap.get("lap_number")
        if dn is None or number is None:
            continue
        if dn not in latest or number > latest[dn]["lap_number"]:
            latest[dn] = lap
    return latest


def timed_series(records: Iterable[dict], value_key: str) -> list[tuple[datetime, Any]]:
    """Return (timestamp, value) pairs sorted by time, dropping undated or empty rows."""
    series = []
    for record in records:
        moment = parse_timestamp(record.get("date"))
        value = record.get(value_key)
        if moment is None or value is None:
            continue
        series.append((moment, value))
    series.sort(key=lambda item: item[0])
    return series


def nearest_within(
    series: Sequence[tuple[datetime, T]],
    target: datetime,
    tolerance: timedelta,
) -> T | None:
    """Value of the sample closest to *target*, if strictly inside *tolerance*.

    *series* must be sorted by time. On an exact tie the earlier sample wins.
    """
    if not series:
        return None
    idx = bisect.bisect_left(series, target, key=lambda item: item[0])
    candidates = [series[i] for i in (idx - 1, idx) if 0 <= i < len(series)]
    best = min(candidates, key=lambda item: abs(item[0] - target))
    if abs(best[0] - target) < tolerance:
        return best[1]
    return None


def is_race_session(session: dict) -> bool:
    """Grand Prix races only; sprints score on a different table."""
    name = (session.get("session_name") or "").lower()
    return "race" in name and "sprint" not in name


def is_qualifying_session(session: dict) -> bool:
    name = (session.get("session_name") or "").lower()
    return "qualifying" in name or "shootout" in name


def sort_sessions_recent_first(sessions: list[dict]) -> list[dict]:
    epoch = datetime.min.replace(tzinfo=timezone.utc)
    return sorted(
        sessions,
        key=lambda s: parse_timestamp(s.get("date_start")) or epoch,
        reverse=True,
    )


def unique_meetings(sessions: list[dict]) -> list[dict]:
    """Collapse a season's sessions into one entry per meeting, in first-seen order."""
    meetings: dict[int, dict] = {}
    for s in sessions:
        key = s.get("meeting_key")
        if key is None or key in meetings:
            continue
        meetings[key] = {
            "meeting_key": key,
            "location": s.get("location"),
            "circuit_short_name": s.get("circuit_short_name"),
            "country_name": s.get("country_name"),
        }
    return list(meetings.values())
