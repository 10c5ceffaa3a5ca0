"""Championship standings aggregated from per-race final classifications."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from ..api_logging import log_service_call
from ..constants import PODIUM_POSITIONS, POINTS_TABLE
from ..data.types import DriverInfo
from .common import driver_label, final_positions, normalize_team_color

UNKNOWN_TEAM = "Unknown"


@dataclass(frozen=True)
class RaceClassification:
    """One race's result: who drove, and where each driver finished."""

    session_key: int
    drivers: tuple[DriverInfo, ...]
    final_positions: dict[int, int]

    @classmethod
    def from_samples(
        cls,
        session_key: int,
        drivers: Iterable[DriverInfo],
        positions: Iterable[dict],
    ) -> RaceClassification:
        return cls(
            session_key=session_key,
            drivers=tuple(drivers),
            final_positions=final_positions(positions),
        )


@dataclass(frozen=True)
class DriverStanding:
    position: int
    driver_number: int
    name_acronym: str
    full_name: str
    team_name: str
    team_colour: str
    points: int
    wins: int
    podiums: int


@dataclass(frozen=True)
class ConstructorDriver:
    driver_number: int
    name_acronym: str
    points: int


@dataclass(frozen=True)
class ConstructorStanding:
    position: int
    team_name: str
    team_colour: str
    points: int
    wins: int
    podiums: int
    drivers: tuple[ConstructorDriver, ...]


@dataclass(frozen=True)
class ChampionshipStandings:
    drivers: tuple[DriverStanding, ...]
    constructors: tuple[ConstructorStanding, ...]
    last_updated: datetime
    skipped_sessions: tuple[int, ...] = ()


def points_for_position(position: int) -> int:
    """Points scored for a finishing position; outside the top ten scores nothing."""
    if 1 <= position <= len(POINTS_TABLE):
        return POINTS_TABLE[position - 1]
    return 0


# ── Accumulators ─────────────────────────────────────────────────────────────


@dataclass
class _Tally:
    points: int = 0
    wins: int = 0
    podiums: int = 0

    def add(self, position: int) -> int:
        scored = points_for_position(position)
        self.points += scored
        self.wins += 1 if position == 1 else 0
        self.podiums += 1 if 1 <= position <= PODIUM_POSITIONS else 0
        return scored

    @property
    def rank_key(self) -> tuple[int, int, int]:
        return (-self.points, -self.wins, -self.podiums)


@dataclass
class _DriverEntry:
    driver: DriverInfo
    tally: _Tally = field(default_factory=_Tally)


@dataclass
class _TeamEntry:
    team_colour: str
    tally: _Tally = field(default_factory=_Tally)
    contributions: dict[int, ConstructorDriver] = field(default_factory=dict)


class StandingsAggregator:
    """Ranks drivers and constructors by points, then wins, then podiums."""

    @log_service_call
    def aggregate(
        self,
        classifications: Iterable[RaceClassification],
        last_updated: datetime,
        skipped_sessions: Iterable[int] = (),
    ) -> ChampionshipStandings:
        driver_entries: dict[int, _DriverEntry] = {}
        team_entries: dict[str, _TeamEntry] = {}

        for race in classifications:
            race_drivers = {d["driver_number"]: d for d in race.drivers}
            finishers = sorted(race.final_positions.items(), key=lambda item: (item[1], item[0]))
            for dn, position in finishers:
                driver = race_drivers.get(dn)
                if driver is None:
                    continue

                entry = driver_entries.setdefault(dn, _DriverEntry(driver=driver))
                scored = entry.tally.add(position)

                team_name = driver.get("team_name") or UNKNOWN_TEAM
                team = team_entries.setdefault(
                    team_name,
                    _TeamEntry(team_colour=normalize_team_color(driver.get("team_colour"))),
                )
                team.tally.add(position)
                previous = team.contributions.get(dn)
                team.contributions[dn] = ConstructorDriver(
                    driver_number=dn,
                    name_acronym=driver_label(driver),
                    points=(previous.points if previous else 0) + scored,
                )

        return ChampionshipStandings(
            drivers=self._rank_drivers(driver_entries),
            constructors=self._rank_constructors(team_entries),
            last_updated=last_updated,
            skipped_sessions=tuple(skipped_sessions),
        )

    @staticmethod
    def _rank_drivers(entries: dict[int, _DriverEntry]) -> tuple[DriverStanding, ...]:
        ordered = sorted(entries.items(), key=lambda item: item[1].tally.rank_key)
        return tuple(
            DriverStanding(
                position=rank,
                driver_number=dn,
                name_acronym=driver_label(entry.driver),
                full_name=entry.driver.get("full_name") or f"Driver {dn}",
                team_name=entry.driver.get("team_name") or UNKNOWN_TEAM,
                team_colour=normalize_team_color(entry.driver.get("team_colour")),
                points=entry.tally.points,
                wins=entry.tally.wins,
                podiums=entry.tally.podiums,
            )
            for rank, (dn, entry) in enumerate(ordered, start=1)
        )

    @staticmethod
    def _rank_constructors(entries: dict[str, _TeamEntry]) -> tuple[ConstructorStanding, ...]:
        ordered = sorted(entries.items(), key=lambda item: item[1].tally.rank_key)
        return tuple(
            ConstructorStanding(
                position=rank,
                team_name=name,
                team_colour=entry.team_colour,
                points=entry.tally.points,
                wins=entry.tally.wins,
                podiums=entry.tally.podiums,
                drivers=tuple(sorted(
                    entry.contributions.values(), key=lambda c: (-c.points, c.driver_number),
                )),
            )
            for rank, (name, entry) in enumerate(ordered, start=1)
        )
