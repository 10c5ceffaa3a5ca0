"""F1 Championship: driver and constructor standings derived from race results."""

from __future__ import annotations

import plotly.graph_objects as go
import streamlit as st

from shared import (
    ChampionshipService,
    F1DataError,
    PLOTLY_LAYOUT_DEFAULTS,
    get_repository,
)
from shared.formatters import position_color
from shared.services import ChampionshipStandings
from shared.sidebar import render_year_selector

# ── Page config ──────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="F1 Championship",
    page_icon="\U0001f3c6",
    layout="wide",
)


# ── Sidebar ──────────────────────────────────────────────────────────────────

st.sidebar.title("Championship")

year = render_year_selector()


@st.cache_data(ttl=600, show_spinner=False)
def load_standings(season: int) -> ChampionshipStandings:
    return ChampionshipService(get_repository()).get_standings(season)


with st.spinner(f"Aggregating {year} race results..."):
    try:
        standings = load_standings(year)
    except F1DataError as exc:
        st.error(f"Failed to load the {year} season: {exc}")
        st.stop()

st.markdown(f"# {year} World Championship")
st.caption(f"Last updated {standings.last_updated:%Y-%m-%d %H:%M:%S} UTC")

if standings.skipped_sessions:
    st.warning(
        f"{len(standings.skipped_sessions)} race(s) could not be loaded and are not counted: "
        + ", ".join(str(k) for k in standings.skipped_sessions),
    )

if not standings.drivers:
    st.info("No race results available for this season yet.")
    st.stop()


tab_drivers, tab_constructors = st.tabs(["Drivers", "Constructors"])


# ── Drivers ──────────────────────────────────────────────────────────────────

with tab_drivers:
    col_table, col_chart = st.columns([3, 2])

    with col_table:
        st.dataframe(
            [
                {
                    "Pos": d.position,
                    "Driver": d.full_name,
                    "Code": d.name_acronym,
                    "Team": d.team_name,
                    "Points": d.points,
                    "Wins": d.wins,
                    "Podiums": d.podiums,
                }
                for d in standings.drivers
            ],
            use_container_width=True,
            hide_index=True,
        )

    with col_chart:
        top = standings.drivers[:10]
        fig = go.Figure(go.Bar(
            x=[d.points for d in top],
            y=[d.name_acronym for d in top],
            orientation="h",
            marker_color=[d.team_colour for d in top],
            marker_line=dict(color=[position_color(d.position) for d in top], width=2),
            text=[d.points for d in top],
            textposition="outside",
            hovertemplate="%{y}: %{x} pts<extra></extra>",
        ))
        fig.update_layout(
            **PLOTLY_LAYOUT_DEFAULTS,
            title="Top 10 drivers",
            yaxis=dict(autorange="reversed"),
            xaxis_title="Points",
            height=450,
        )
        st.plotly_chart(fig, use_container_width=True)


# ── Constructors ─────────────────────────────────────────────────────────────

with tab_constructors:
    col_table, col_chart = st.columns([3, 2])

    with col_table:
        st.dataframe(
            [
                {
                    "Pos": c.position,
                    "Team": c.team_name,
                    "Points": c.points,
                    "Wins": c.wins,
                    "Podiums": c.podiums,
                    "Drivers": ", ".join(f"{d.name_acronym} ({d.points})" for d in c.drivers),
                }
                for c in standings.constructors
            ],
            use_container_width=True,
            hide_index=True,
        )

    with col_chart:
        fig = go.Figure()
        for c in standings.constructors:
            for d in c.drivers:
                fig.add_trace(go.Bar(
                    x=[d.points],
                    y=[c.team_name],
                    orientation="h",
                    name=d.name_acronym,
                    marker_color=c.team_colour,
                    marker_line=dict(color="#111111", width=1),
                    showlegend=False,
                    hovertemplate=f"{d.name_acronym}: %{{x}} pts<extra>{c.team_name}</extra>",
                ))
        fig.update_layout(
            **PLOTLY_LAYOUT_DEFAULTS,
            title="Points by team and driver",
            barmode="stack",
            yaxis=dict(autorange="reversed", categoryorder="array",
                       categoryarray=[c.team_name for c in standings.constructors]),
            xaxis_title="Points",
            height=450,
        )
        st.plotly_chart(fig, use_container_width=True)
