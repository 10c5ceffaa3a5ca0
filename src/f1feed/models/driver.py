"""Driver model."""

from __future__ import annotations

from f1feed.models._base import Record


class Driver(Record):
    """A driver's entry for one session."""

    broadcast_name: str | None = None
    country_code: str | None = None
    driver_number: int | None = None
    first_name: str | None = None
    full_name: str | None = None
    headshot_url: str | None = None
    last_name: str | None = None
    name_acronym: str | None = None
    team_colour: str | None = None
    team_name: str | None = None

    @property
    def label(self) -> str:
        """Acronym for compact displays, falling back to the car number."""
        return self.name_acronym or f"D{self.driver_number}"
