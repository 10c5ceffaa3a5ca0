"""Season championship service: race results fetched per session and ranked."""

from __future__ import annotations

from datetime import datetime, timezone

from ..api_logging import log_service_call, log_warning
from ..data.base import F1DataRepository
from ..data.errors import F1DataError
from ..data.types import SessionData
from .common import is_race_session, parse_timestamp
from .standings import ChampionshipStandings, RaceClassification, StandingsAggregator


class ChampionshipService:
    """Builds driver and constructor standings for a season."""

    def __init__(
        self,
        repo: F1DataRepository,
        aggregator: StandingsAggregator | None = None,
    ) -> None:
        self._repo = repo
        self._aggregator = aggregator or StandingsAggregator()

    @log_service_call
    def race_sessions(self, year: int) -> list[SessionData]:
        """Race sessions of *year* in chronological order, sprints excluded."""
        sessions = [s for s in self._repo.get_sessions(year=year) if is_race_session(s)]
        epoch = datetime.min.replace(tzinfo=timezone.utc)
        return sorted(
            sessions,
            key=lambda s: (parse_timestamp(s.get("date_start")) or epoch, s["session_key"]),
        )

    @log_service_call
    def get_standings(self, year: int, now: datetime | None = None) -> ChampionshipStandings:
        """Aggregate every race of *year* that can be fetched.

        A race whose data cannot be fetched is skipped and listed in
        ``skipped_sessions``; the remaining races still count.
        """
        classifications: list[RaceClassification] = []
        skipped: list[int] = []
        for session in self.race_sessions(year):
            session_key = session["session_key"]
            try:
                drivers = self._repo.get_drivers(session_key)
                positions = self._repo.get_positions(session_key)
            except F1DataError as exc:
                log_warning("skipping race session %s in %s standings: %s", session_key, year, exc)
                skipped.append(session_key)
                continue
            classifications.append(
                RaceClassification.from_samples(session_key, drivers, positions),
            )

        return self._aggregator.aggregate(
            classifications,
            last_updated=now or datetime.now(timezone.utc),
            skipped_sessions=skipped,
        )
