"""F1 Race Replay: synthetic race progress rebuilt from laps and positions."""

from __future__ import annotations

from datetime import timedelta

import plotly.graph_objects as go
import streamlit as st

from shared import (
    F1DataError,
    FLAG_COLORS,
    PLOTLY_LAYOUT_DEFAULTS,
    RaceReplayService,
    format_lap_time,
    format_position,
    format_position_change,
    get_repository,
    load_settings,
    render_session_sidebar,
)
from shared.constants import (
    MAX_PLAYBACK_SPEED,
    PLAYBACK_SPEEDS,
    REPLAY_SUBSTEPS,
    SECONDS_PER_FRAME,
)
from shared.formatters import format_clock, format_sector_time
from shared.services import TimelineFrame, interpolate_frame

# ── Page config ──────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="F1 Race Replay",
    page_icon="\U0001f3ce\ufe0f",
    layout="wide",
)

settings = load_settings()

# Location pings either side of the selected frame
TRACK_WINDOW = timedelta(seconds=5)


# ── Sidebar ──────────────────────────────────────────────────────────────────

st.sidebar.title("Race Replay")

selection = render_session_sidebar(race_only=True, select_drivers=False)
if selection is None:
    st.stop()

session = selection.session


@st.cache_data(ttl=600, show_spinner=False)
def load_timeline(race: dict) -> tuple[TimelineFrame, ...]:
    service = RaceReplayService(get_repository(), settings.tolerances)
    return service.build_timeline(race)


with st.spinner("Rebuilding race timeline..."):
    try:
        frames = load_timeline(session)
    except F1DataError as exc:
        st.error(f"Failed to load race data: {exc}")
        st.stop()

if not frames:
    st.warning("Not enough lap data to replay this race.")
    st.stop()

service = RaceReplayService(get_repository(), settings.tolerances)


# ── Playback controls ────────────────────────────────────────────────────────

st.markdown(f"# {selection.label}")

total_laps = frames[0].total_laps
if st.session_state.get("replay_frame", 0) > len(frames) - 1:
    st.session_state["replay_frame"] = 0

ctrl_frame, ctrl_lap, ctrl_speed = st.columns([3, 1, 1])

with ctrl_lap:
    jump_lap = st.number_input("Jump to lap", min_value=1, max_value=total_laps, value=1)
    if st.button("Go"):
        st.session_state["replay_frame"] = service.frame_index_for_lap(frames, int(jump_lap))

with ctrl_speed:
    speed_label = st.selectbox(
        "Speed",
        [f"{s:g}x" for s in PLAYBACK_SPEEDS] + ["Custom"],
        index=PLAYBACK_SPEEDS.index(1.0),
    )
    if speed_label == "Custom":
        speed = st.number_input(
            "Custom speed", min_value=0.1, max_value=MAX_PLAYBACK_SPEED, value=1.0, step=0.1,
        )
    else:
        speed = float(speed_label.rstrip("x"))

with ctrl_frame:
    frame_idx = st.slider("Frame", 0, len(frames) - 1, key="replay_frame")

frame = frames[frame_idx]
previous = frames[frame_idx - 1] if frame_idx > 0 else None


# ── Race stats ───────────────────────────────────────────────────────────────

stats = service.race_stats(frame)
m1, m2, m3, m4, m5 = st.columns(5)
m1.metric("Lap", f"{frame.lap_number}/{frame.total_laps}")
m2.metric("Leader", stats.leader.name_acronym if stats.leader else "--")
m3.metric("Pit Stops", stats.total_pit_stops)
m4.metric("In Pit", stats.drivers_in_pit)
m5.metric("Flags", stats.flag_count)

if frame.timestamp is not None:
    st.caption(f"Race time {format_clock(frame.timestamp)} UTC")

for flag in frame.flags:
    color = FLAG_COLORS.get(flag.type.upper(), FLAG_COLORS["FLAG"])
    st.markdown(
        f'<span style="color:{color};font-weight:bold">{flag.type}</span> '
        f"{flag.message or ''}",
        unsafe_allow_html=True,
    )


# ── Progress chart (animated from the selected frame) ────────────────────────


def _progress_bars(states) -> go.Bar:
    ordered = sorted(states, key=lambda s: s.position)
    return go.Bar(
        x=[s.progress for s in ordered],
        y=[s.state.name_acronym for s in ordered],
        orientation="h",
        marker_color=[s.state.team_colour for s in ordered],
        text=[
            f"{format_position(s.state.position)}"
            f"{' ' + change if (change := format_position_change(s.position_change)) else ''}"
            f"{' PIT' if s.state.is_in_pit else ''}"
            for s in ordered
        ],
        textposition="inside",
        hovertemplate="%{y}<br>%{x:.1%}<extra></extra>",
    )


start = interpolate_frame(previous, frame, 1.0)
animation_frames = []
for idx in range(frame_idx + 1, len(frames)):
    for step in range(1, REPLAY_SUBSTEPS + 1):
        blended = interpolate_frame(frames[idx - 1], frames[idx], step / REPLAY_SUBSTEPS)
        animation_frames.append(go.Frame(data=[_progress_bars(blended)], name=f"{idx}.{step}"))

substep_ms = int(SECONDS_PER_FRAME * 1000 / speed / REPLAY_SUBSTEPS)

fig = go.Figure(data=[_progress_bars(start)], frames=animation_frames)
fig.update_layout(
    **PLOTLY_LAYOUT_DEFAULTS,
    xaxis=dict(range=[0, 1], tickformat=".0%", title="Race progress"),
    yaxis=dict(autorange="reversed", type="category"),
    height=max(400, 28 * len(frame.drivers)),
    showlegend=False,
    updatemenus=[dict(
        type="buttons",
        showactive=False,
        x=0, y=1.08, xanchor="left",
        buttons=[
            dict(
                label="Play",
                method="animate",
                args=[None, dict(
                    frame=dict(duration=substep_ms, redraw=True),
                    transition=dict(duration=0),
                    fromcurrent=True,
                )],
            ),
            dict(
                label="Pause",
                method="animate",
                args=[[None], dict(frame=dict(duration=0, redraw=False), mode="immediate")],
            ),
        ],
    )],
)
st.plotly_chart(fig, use_container_width=True)


# ── Frame leaderboard ────────────────────────────────────────────────────────

st.subheader("Classification at this frame")

changes = {s.state.driver_number: s.position_change for s in start}
st.dataframe(
    [
        {
            "Pos": format_position(d.position),
            "": format_position_change(changes.get(d.driver_number)) or "",
            "Driver": d.name_acronym,
            "Name": d.full_name,
            "Lap": d.current_lap_number,
            "Last Lap": format_lap_time(d.last_lap_time),
            "S1": format_sector_time(d.sector_1_time),
            "S2": format_sector_time(d.sector_2_time),
            "S3": format_sector_time(d.sector_3_time),
            "Stops": d.pit_stops,
            "Progress": f"{d.progress:.1%}",
        }
        for d in frame.drivers
    ],
    use_container_width=True,
    hide_index=True,
)


# ── Track positions ──────────────────────────────────────────────────────────

if frame.timestamp is not None and st.checkbox("Show car positions on track"):
    window_start = (frame.timestamp - TRACK_WINDOW).isoformat()
    window_end = (frame.timestamp + TRACK_WINDOW).isoformat()
    try:
        track_frames = service.load_track_frames(session["session_key"], window_start, window_end)
    except F1DataError as exc:
        st.error(f"Failed to load car locations: {exc}")
        track_frames = ()

    if not track_frames:
        st.info("No location data around this moment.")
    else:
        snapshot = min(track_frames, key=lambda f: abs(f.timestamp - frame.timestamp))
        track_fig = go.Figure(go.Scatter(
            x=[c.x for c in snapshot.cars],
            y=[c.y for c in snapshot.cars],
            mode="markers+text",
            text=[c.name_acronym for c in snapshot.cars],
            textposition="top center",
            marker=dict(size=12, color=[c.team_colour for c in snapshot.cars]),
            hovertext=[format_position(c.position) for c in snapshot.cars],
            hovertemplate="%{text} %{hovertext}<extra></extra>",
        ))
        track_fig.update_layout(
            **PLOTLY_LAYOUT_DEFAULTS,
            xaxis=dict(visible=False),
            yaxis=dict(visible=False, scaleanchor="x"),
            height=500,
            showlegend=False,
        )
        st.plotly_chart(track_fig, use_container_width=True)
