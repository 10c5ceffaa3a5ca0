"""Tests for shared/services/live_timing.py."""

from __future__ import annotations

from datetime import timedelta

import pytest

from shared.services.live_timing import LiveTimingRow, LiveTimingService
from tests.dashboard.conftest import (
    RACE_START,
    _make_lap,
    _make_position,
    _make_race_control,
)


def _at(seconds: float) -> str:
    return (RACE_START + timedelta(seconds=seconds)).isoformat()


@pytest.fixture
def service(mock_repo):
    return LiveTimingService(mock_repo)


@pytest.fixture
def positions():
    return [
        _make_position(1, 2, RACE_START),
        _make_position(44, 1, RACE_START),
        _make_position(1, 1, RACE_START + timedelta(seconds=30)),
        _make_position(44, 2, RACE_START + timedelta(seconds=30)),
    ]


@pytest.fixture
def laps():
    return [
        _make_lap(1, 1, RACE_START, 95.0, is_pit_out_lap=True),
        _make_lap(1, 2, RACE_START + timedelta(seconds=95), 91.2),
        _make_lap(44, 1, RACE_START, 95.5),
    ]


class TestTimingBoard:
    def test_running_order(self, sample_drivers, positions, laps):
        rows = LiveTimingService.build_board(sample_drivers, positions, laps)
        assert [r.driver_number for r in rows] == [1, 44]
        assert [r.position for r in rows] == [1, 2]
        assert all(isinstance(r, LiveTimingRow) for r in rows)

    def test_driver_without_position_omitted(self, sample_drivers, positions, laps):
        rows = LiveTimingService.build_board(sample_drivers, positions, laps)
        assert 11 not in {r.driver_number for r in rows}

    def test_latest_lap_details(self, sample_drivers, positions, laps):
        leader = LiveTimingService.build_board(sample_drivers, positions, laps)[0]
        assert leader.lap_number == 2
        assert leader.last_lap_time == 91.2
        assert leader.sector_2_time == 34.0
        assert not leader.is_pit_out_lap
        assert leader.team_colour == "#3671C6"
        assert leader.name_acronym == "VER"

    def test_driver_without_laps(self, sample_drivers, positions):
        rows = LiveTimingService.build_board(sample_drivers, positions, [])
        assert rows[0].lap_number is None
        assert rows[0].last_lap_time is None
        assert rows[0].is_pit_out_lap is False

    def test_selection_filters(self, sample_drivers, positions, laps):
        rows = LiveTimingService.build_board(sample_drivers, positions, laps, selected=[44])
        assert [r.driver_number for r in rows] == [44]

    def test_empty_selection_shows_everyone(self, sample_drivers, positions, laps):
        rows = LiveTimingService.build_board(sample_drivers, positions, laps, selected=[])
        assert len(rows) == 2

    def test_fetch_board(self, service, mock_repo, sample_drivers, positions, laps):
        mock_repo.get_drivers.return_value = sample_drivers
        mock_repo.get_positions.return_value = positions
        mock_repo.get_laps.return_value = laps
        rows = service.fetch_board("latest")
        mock_repo.get_drivers.assert_called_once_with("latest")
        mock_repo.get_positions.assert_called_once_with("latest")
        mock_repo.get_laps.assert_called_once_with("latest")
        assert len(rows) == 2


class TestRaceControlFeed:
    def test_newest_first(self):
        messages = [
            _make_race_control(RACE_START + timedelta(minutes=m), message=f"msg {m}")
            for m in (5, 1, 3)
        ]
        feed = LiveTimingService.race_control_feed(messages, [])
        assert [m["message"] for m in feed.messages] == ["msg 5", "msg 3", "msg 1"]

    def test_limit(self):
        messages = [
            _make_race_control(RACE_START + timedelta(minutes=m), message=f"msg {m}")
            for m in range(20)
        ]
        feed = LiveTimingService.race_control_feed(messages, [], limit=15)
        assert len(feed.messages) == 15
        assert feed.messages[0]["message"] == "msg 19"
        assert feed.messages[-1]["message"] == "msg 5"

    def test_undated_messages_dropped(self):
        feed = LiveTimingService.race_control_feed([_make_race_control(None)], [])
        assert feed.messages == ()

    def test_latest_weather(self):
        weather = [
            {"date": _at(120), "air_temperature": 31.0, "track_temperature": 44.0},
            {"date": _at(60), "air_temperature": 30.0, "track_temperature": 43.0},
        ]
        feed = LiveTimingService.race_control_feed([], weather)
        assert feed.weather["air_temperature"] == 31.0

    def test_no_weather(self):
        assert LiveTimingService.race_control_feed([], []).weather is None

    def test_fetch_race_control(self, service, mock_repo):
        mock_repo.get_race_control.return_value = [_make_race_control(RACE_START)]
        mock_repo.get_weather.return_value = []
        feed = service.fetch_race_control(9472)
        assert len(feed.messages) == 1
        mock_repo.get_weather.assert_called_once_with(9472)


class TestTelemetry:
    def _sample(self, seconds, speed=300, drs=0):
        return {
            "date": _at(seconds), "driver_number": 1, "speed": speed,
            "throttle": 100, "rpm": 11000, "brake": 0, "n_gear": 7, "drs": drs,
        }

    def test_window(self, sample_drivers):
        samples = [self._sample(s, speed=200 + s) for s in range(150)]
        traces = LiveTimingService.telemetry_traces(sample_drivers, {1: samples}, window=100)
        points = traces[0].points
        assert len(points) == 100
        assert points[0].speed == 250
        assert points[-1].speed == 349

    def test_sorted_by_date(self, sample_drivers):
        samples = [self._sample(2, speed=2), self._sample(1, speed=1)]
        traces = LiveTimingService.telemetry_traces(sample_drivers, {1: samples})
        assert [p.speed for p in traces[0].points] == [1, 2]

    @pytest.mark.parametrize(("drs", "is_open"), [(0, False), (8, False), (10, True), (12, True)])
    def test_drs_open(self, sample_drivers, drs, is_open):
        traces = LiveTimingService.telemetry_traces(
            sample_drivers, {1: [self._sample(0, drs=drs)]},
        )
        assert traces[0].points[0].drs_open is is_open

    def test_trace_metadata(self, sample_drivers):
        traces = LiveTimingService.telemetry_traces(sample_drivers, {44: [], 1: []})
        assert [(t.driver_number, t.name_acronym) for t in traces] == [(44, "HAM"), (1, "VER")]
        assert traces[0].team_colour == "#E80020"
        assert traces[0].points == ()

    def test_fetch_car_data(self, service, mock_repo):
        mock_repo.get_car_data.return_value = [self._sample(0)]
        data = service.fetch_car_data(9472, [1, 44], since="2024-03-02T15:00:00")
        assert set(data) == {1, 44}
        mock_repo.get_car_data.assert_any_call(9472, 44, "2024-03-02T15:00:00")
