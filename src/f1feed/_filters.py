"""Query parameter building for OpenF1 comparison filters."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

LATEST = "latest"


def _render(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


@dataclass(frozen=True)
class Filter:
    """A comparison filter for one query parameter.

    Usage:
        Filter(gte=5)                     # lap_number>=5
        Filter(gt="2024-03-02T15:00:00")  # date>2024-03-02T15:00:00
        Filter(gte=5, lte=10)             # lap_number>=5&lap_number<=10
    """

    gt: int | float | str | datetime | None = None
    gte: int | float | str | datetime | None = None
    lt: int | float | str | datetime | None = None
    lte: int | float | str | datetime | None = None

    def to_params(self, key: str) -> list[tuple[str, str]]:
        """Expand into (key_with_operator, value) pairs."""
        operators = (
            (">", self.gt),
            (">=", self.gte),
            ("<", self.lt),
            ("<=", self.lte),
        )
        return [(f"{key}{op}", _render(value)) for op, value in operators if value is not None]


def build_query_params(**kwargs: Any) -> list[tuple[str, str]]:
    """Build query parameter tuples from keyword arguments.

    Plain values become equality filters, ``Filter`` instances become comparison
    operators and ``None`` values are dropped, so optional arguments can be
    forwarded unconditionally. ``session_key="latest"`` passes through untouched.
    """
    params: list[tuple[str, str]] = []
    for key, value in kwargs.items():
        if value is None:
            continue
        if isinstance(value, Filter):
            params.extend(value.to_params(key))
        else:
            params.append((key, _render(value)))
    return params
