"""Tests for shared/services/common.py: pure functions."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from shared.services.common import (
    driver_label,
    group_by_driver,
    is_qualifying_session,
    is_race_session,
    latest_lap_by_driver,
    nearest_within,
    normalize_team_color,
    parse_timestamp,
    sort_sessions_recent_first,
    timed_series,
    unique_meetings,
)
from tests.dashboard.conftest import RACE_START


class TestParseTimestamp:
    def test_iso_with_offset(self):
        assert parse_timestamp("2024-03-02T15:00:00+00:00") == RACE_START

    def test_naive_is_utc(self):
        assert parse_timestamp("2024-03-02T15:00:00") == RACE_START

    def test_fractional_seconds(self):
        moment = parse_timestamp("2024-03-02T15:00:00.250000+00:00")
        assert moment == RACE_START + timedelta(milliseconds=250)

    def test_datetime_passthrough(self):
        naive = datetime(2024, 3, 2, 15, 0)
        assert parse_timestamp(naive) == RACE_START

    def test_none(self):
        assert parse_timestamp(None) is None

    def test_unparseable(self):
        assert parse_timestamp("not a date") is None


class TestNormalizeTeamColor:
    def test_adds_hash(self):
        assert normalize_team_color("3671C6") == "#3671C6"

    def test_keeps_hash(self):
        assert normalize_team_color("#E80020") == "#E80020"

    def test_none(self):
        assert normalize_team_color(None) == "#E10600"

    def test_empty(self):
        assert normalize_team_color("") == "#E10600"

    def test_invalid(self):
        assert normalize_team_color("not-a-colour") == "#E10600"


class TestDriverLabel:
    def test_acronym(self, make_driver):
        assert driver_label(make_driver(1, "VER")) == "VER"

    def test_falls_back_to_number(self, make_driver):
        assert driver_label(make_driver(81, None)) == "D81"


class TestLapHelpers:
    def test_group_by_driver(self, make_lap):
        laps = [make_lap(1, 1), make_lap(44, 1), make_lap(1, 2)]
        laps.append({**make_lap(1, 3), "driver_number": None})
        grouped = group_by_driver(laps)
        assert sorted(grouped) == [1, 44]
        assert len(grouped[1]) == 2

    def test_latest_lap_by_driver(self, make_lap):
        laps = [make_lap(1, 3), make_lap(1, 5), make_lap(1, 4), make_lap(44, 2)]
        latest = latest_lap_by_driver(laps)
        assert latest[1]["lap_number"] == 5
        assert latest[44]["lap_number"] == 2


class TestTimedSeries:
    def test_sorted_and_filtered(self, make_position):
        samples = [
            make_position(1, 3, RACE_START + timedelta(seconds=10)),
            make_position(1, 1, RACE_START),
            make_position(1, 2, None),
            {"driver_number": 1, "position": None, "date": RACE_START.isoformat()},
        ]
        series = timed_series(samples, "position")
        assert series == [(RACE_START, 1), (RACE_START + timedelta(seconds=10), 3)]


class TestNearestWithin:
    @pytest.fixture
    def series(self):
        return [
            (RACE_START, "a"),
            (RACE_START + timedelta(seconds=10), "b"),
            (RACE_START + timedelta(seconds=20), "c"),
        ]

    def test_closest(self, series):
        target = RACE_START + timedelta(seconds=12)
        assert nearest_within(series, target, timedelta(seconds=60)) == "b"

    def test_tie_prefers_earlier(self, series):
        target = RACE_START + timedelta(seconds=5)
        assert nearest_within(series, target, timedelta(seconds=60)) == "a"

    def test_before_first_and_after_last(self, series):
        assert nearest_within(series, RACE_START - timedelta(seconds=3), timedelta(seconds=5)) == "a"
        assert nearest_within(series, RACE_START + timedelta(seconds=24), timedelta(seconds=5)) == "c"

    def test_boundary_excluded(self, series):
        target = RACE_START + timedelta(seconds=25)
        assert nearest_within(series, target, timedelta(seconds=5)) is None

    def test_empty(self):
        assert nearest_within([], RACE_START, timedelta(seconds=60)) is None


class TestSessionHelpers:
    @pytest.mark.parametrize(
        ("name", "race", "qualifying"),
        [
            ("Race", True, False),
            ("Sprint", False, False),
            ("Qualifying", False, True),
            ("Sprint Shootout", False, True),
            ("Practice 2", False, False),
            (None, False, False),
        ],
    )
    def test_session_kinds(self, name, race, qualifying):
        session = {"session_name": name}
        assert is_race_session(session) is race
        assert is_qualifying_session(session) is qualifying

    def test_sort_recent_first(self):
        sessions = [
            {"session_key": 1, "date_start": "2024-03-02T15:00:00+00:00"},
            {"session_key": 2, "date_start": None},
            {"session_key": 3, "date_start": "2024-05-19T13:00:00+00:00"},
        ]
        assert [s["session_key"] for s in sort_sessions_recent_first(sessions)] == [3, 1, 2]

    def test_unique_meetings(self):
        sessions = [
            {"meeting_key": 1229, "location": "Sakhir", "circuit_short_name": "Sakhir",
             "country_name": "Bahrain", "session_key": 9468},
            {"meeting_key": 1229, "location": "Sakhir", "session_key": 9472},
            {"meeting_key": 1230, "location": "Jeddah", "circuit_short_name": "Jeddah",
             "country_name": "Saudi Arabia", "session_key": 9480},
            {"meeting_key": None, "session_key": 1},
        ]
        meetings = unique_meetings(sessions)
        assert [m["meeting_key"] for m in meetings] == [1229, 1230]
        assert meetings[0] == {
            "meeting_key": 1229,
            "location": "Sakhir",
            "circuit_short_name": "Sakhir",
            "country_name": "Bahrain",
        }
