"""F1 Live Dashboard: Streamlit + Plotly + OpenF1 API."""

from __future__ import annotations

import plotly.graph_objects as go
import streamlit as st
from plotly.subplots import make_subplots

from shared import (
    F1DataError,
    FLAG_COLORS,
    LiveTimingService,
    PLOTLY_LAYOUT_DEFAULTS,
    format_lap_time,
    format_position,
    get_repository,
    load_settings,
    render_session_sidebar,
)
from shared.constants import TELEMETRY_METRICS, TELEMETRY_REFRESH_SECONDS
from shared.formatters import (
    PLACEHOLDER,
    format_clock,
    format_sector_time,
    format_temperature,
    position_color,
)

# ── Page config ──────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="F1 Live Dashboard",
    page_icon="\U0001f3ce\ufe0f",
    layout="wide",
)

settings = load_settings()
service = LiveTimingService(get_repository())


# ── Sidebar: cascading selection ────────────────────────────────────────────

st.sidebar.title("F1 Live Dashboard")

selection = render_session_sidebar()
if selection is None:
    st.stop()

session_key = selection.session_key
selected_drivers = selection.selected_drivers
drivers = selection.drivers

st.sidebar.caption(f"Live views refresh every {settings.refresh_seconds:g}s.")


# ── Header ───────────────────────────────────────────────────────────────────

session = selection.session
st.markdown(
    f"# {session.get('session_name') or 'Session'}"
    f"  \n**{session.get('location') or ''}** | {session.get('country_name') or ''}"
)

tab_timing, tab_telemetry, tab_control = st.tabs(["Live Timing", "Telemetry", "Race Control"])


# ── Tab 1: Live Timing ───────────────────────────────────────────────────────


@st.fragment(run_every=settings.refresh_seconds)
def render_timing() -> None:
    try:
        rows = service.fetch_board(session_key, selected_drivers)
    except F1DataError as exc:
        st.error(f"Failed to load timing data: {exc}")
        return

    if not rows:
        st.info("No timing data available for this session yet.")
        return

    table = [
        {
            "Pos": format_position(r.position),
            "Driver": r.name_acronym,
            "Name": r.full_name or PLACEHOLDER,
            "Team": r.team_name or PLACEHOLDER,
            "Lap": r.lap_number or "--",
            "Last Lap": format_lap_time(r.last_lap_time),
            "S1": format_sector_time(r.sector_1_time),
            "S2": format_sector_time(r.sector_2_time),
            "S3": format_sector_time(r.sector_3_time),
            "Pit Out": "PIT" if r.is_pit_out_lap else "",
        }
        for r in rows
    ]
    st.dataframe(
        table,
        use_container_width=True,
        hide_index=True,
        column_config={"Pos": st.column_config.TextColumn(width="small")},
    )

    # Running-order strip, coloured by team
    fig = go.Figure(go.Bar(
        x=[r.name_acronym for r in rows],
        y=[len(rows) - r.position + 1 for r in rows],
        marker_color=[r.team_colour for r in rows],
        marker_line=dict(color=[position_color(r.position) for r in rows], width=2),
        text=[format_position(r.position) for r in rows],
        textposition="outside",
        hovertemplate="%{x}<br>%{text}<extra></extra>",
    ))
    fig.update_layout(
        **PLOTLY_LAYOUT_DEFAULTS,
        yaxis=dict(visible=False),
        height=260,
        showlegend=False,
    )
    st.plotly_chart(fig, use_container_width=True)


with tab_timing:
    render_timing()


# ── Tab 2: Telemetry ─────────────────────────────────────────────────────────


@st.fragment(run_every=TELEMETRY_REFRESH_SECONDS)
def render_telemetry() -> None:
    if not selected_drivers:
        st.info("Select one or more drivers in the sidebar to see car telemetry.")
        return

    try:
        car_data = service.fetch_car_data(session_key, selected_drivers)
    except F1DataError as exc:
        st.error(f"Failed to load telemetry: {exc}")
        return

    traces = service.telemetry_traces(drivers, car_data)
    if not any(t.points for t in traces):
        st.info("No telemetry samples for the selected drivers.")
        return

    fig = make_subplots(
        rows=len(TELEMETRY_METRICS), cols=1, shared_xaxes=True, vertical_spacing=0.06,
        subplot_titles=[m["title"] for m in TELEMETRY_METRICS.values()],
    )
    for row, (metric, spec) in enumerate(TELEMETRY_METRICS.items(), start=1):
        for trace in traces:
            fig.add_trace(go.Scatter(
                x=[p.date for p in trace.points],
                y=[getattr(p, metric) for p in trace.points],
                mode="lines",
                name=trace.name_acronym,
                legendgroup=trace.name_acronym,
                showlegend=row == 1,
                line=dict(color=trace.team_colour, width=2),
                hovertemplate=f"{trace.name_acronym} %{{y}}<extra></extra>",
            ), row=row, col=1)
        fig.update_yaxes(range=spec["range"], row=row, col=1)

    fig.update_layout(**PLOTLY_LAYOUT_DEFAULTS, height=720)
    st.plotly_chart(fig, use_container_width=True)

    cols = st.columns(len(traces))
    for col, trace in zip(cols, traces, strict=True):
        latest = trace.points[-1] if trace.points else None
        with col:
            st.markdown(f"**{trace.name_acronym}**")
            if latest is None:
                st.caption("No samples")
                continue
            st.metric("Speed", f"{latest.speed or 0} km/h")
            st.caption(
                f"Brake {'ON' if latest.brake else 'off'} | DRS {'OPEN' if latest.drs_open else 'closed'}",
            )


with tab_telemetry:
    render_telemetry()


# ── Tab 3: Race Control ──────────────────────────────────────────────────────


@st.fragment(run_every=settings.refresh_seconds)
def render_race_control() -> None:
    try:
        feed = service.fetch_race_control(session_key)
    except F1DataError as exc:
        st.error(f"Failed to load race control: {exc}")
        return

    if feed.weather is not None:
        w = feed.weather
        c1, c2, c3, c4 = st.columns(4)
        c1.metric("Air", format_temperature(w.get("air_temperature")))
        c2.metric("Track", format_temperature(w.get("track_temperature")))
        wind = w.get("wind_speed")
        c3.metric(
            "Wind",
            f"{wind} m/s" if wind is not None else PLACEHOLDER,
            delta=f"{w.get('wind_direction')}°" if w.get("wind_direction") is not None else None,
            delta_color="off",
        )
        humidity = w.get("humidity")
        c4.metric("Humidity", f"{humidity}%" if humidity is not None else PLACEHOLDER)

    if not feed.messages:
        st.info("No race control messages yet.")
        return

    for msg in feed.messages:
        flag = (msg.get("flag") or "").upper()
        color = FLAG_COLORS.get(flag, FLAG_COLORS["FLAG"]) if flag else "#555555"
        st.markdown(
            f'<div style="border-left:4px solid {color};padding:0.25rem 0.75rem;'
            f'margin-bottom:0.4rem">'
            f"<b>{format_clock(msg.get('date'))}</b> · {msg.get('category') or ''}"
            f"{' · ' + flag if flag else ''}<br>{msg.get('message') or ''}</div>",
            unsafe_allow_html=True,
        )


with tab_control:
    render_race_control()
