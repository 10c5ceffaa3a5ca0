"""Shared sidebar rendering for session selection."""

from __future__ import annotations

import datetime
from dataclasses import dataclass

import streamlit as st

from .constants import FIRST_OPENF1_SEASON
from .data import F1DataError, SessionData, get_repository
from .services.common import driver_label, is_race_session, sort_sessions_recent_first

LATEST_LABEL = "Latest session"


@dataclass(frozen=True)
class SessionSelection:
    """Result of the session sidebar cascade."""

    session: SessionData
    label: str
    drivers: list[dict]
    selected_drivers: list[int]

    @property
    def session_key(self) -> int:
        return self.session["session_key"]


def session_label(session: SessionData) -> str:
    place = session.get("location") or session.get("circuit_short_name") or "Unknown"
    day = (session.get("date_start") or "")[:10]
    return f"{place} · {session.get('session_name') or 'Session'} ({day})"


def render_year_selector(key: str = "year") -> int:
    current_year = datetime.date.today().year
    years = list(range(current_year, FIRST_OPENF1_SEASON - 1, -1))
    return st.sidebar.selectbox("Year", years, key=key)


def render_session_sidebar(
    race_only: bool = False,
    select_drivers: bool = True,
) -> SessionSelection | None:
    """Render the year/session/driver cascade in the sidebar.

    Returns a SessionSelection on success, or None (with st.stop()) on failure.
    """
    repo = get_repository()
    selected_year = render_year_selector()

    # Sessions
    try:
        sessions = sort_sessions_recent_first(repo.get_sessions(year=selected_year))
        latest = None if race_only else repo.get_latest_session()
    except F1DataError as exc:
        st.sidebar.error(f"Failed to load sessions: {exc}")
        st.stop()
        return None  # unreachable, but helps type checkers

    if race_only:
        sessions = [s for s in sessions if is_race_session(s)]

    session_options: dict[str, SessionData] = {}
    if latest is not None:
        session_options[LATEST_LABEL] = latest
    for s in sessions:
        session_options.setdefault(session_label(s), s)

    if not session_options:
        st.sidebar.warning("No sessions found for this year.")
        st.stop()
        return None
    selected_label = st.sidebar.selectbox("Session", list(session_options.keys()))
    selected_session = session_options[selected_label]

    # Drivers
    try:
        drivers = repo.get_drivers(selected_session["session_key"])
    except F1DataError as exc:
        st.sidebar.error(f"Failed to load drivers: {exc}")
        st.stop()
        return None

    if not drivers:
        st.sidebar.warning("No drivers found for this session.")
        st.stop()
        return None

    selected_drivers: list[int] = []
    if select_drivers:
        labels = {
            f"{driver_label(d)} · {d.get('team_name') or ''}".rstrip(" ·"): d["driver_number"]
            for d in sorted(drivers, key=lambda d: d["driver_number"])
        }
        chosen = st.sidebar.multiselect("Drivers", list(labels.keys()))
        selected_drivers = [labels[name] for name in chosen]

    return SessionSelection(
        session=selected_session,
        label=selected_label,
        drivers=drivers,
        selected_drivers=selected_drivers,
    )
