"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta

from f1feed._http import DEFAULT_BASE_URL, DEFAULT_TIMEOUT

_PREFIX = "F1_DASH_"


@dataclass(frozen=True)
class ReplayTolerances:
    """Matching windows for correlating independently sampled feeds.

    These are empirical: position samples, lap completions, flags and location
    pings arrive on unrelated cadences and are joined by nearest timestamp.
    """

    position_to_lap: timedelta = timedelta(seconds=60)
    flag_to_frame: timedelta = timedelta(seconds=30)
    position_to_location: timedelta = timedelta(seconds=5)


@dataclass(frozen=True)
class DashboardSettings:
    api_base_url: str = DEFAULT_BASE_URL
    api_timeout: float = DEFAULT_TIMEOUT
    refresh_seconds: float = 5.0
    tolerances: ReplayTolerances = field(default_factory=ReplayTolerances)


def _float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{_PREFIX}{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{_PREFIX}{name} must be positive, got {raw!r}")
    return value


def load_settings(environ: Mapping[str, str] | None = None) -> DashboardSettings:
    """Build settings from ``F1_DASH_*`` variables, defaulting anything unset."""
    env = os.environ if environ is None else environ
    defaults = ReplayTolerances()
    tolerances = ReplayTolerances(
        position_to_lap=timedelta(seconds=_float(
            env, "POSITION_TOLERANCE", defaults.position_to_lap.total_seconds(),
        )),
        flag_to_frame=timedelta(seconds=_float(
            env, "FLAG_TOLERANCE", defaults.flag_to_frame.total_seconds(),
        )),
        position_to_location=timedelta(seconds=_float(
            env, "LOCATION_TOLERANCE", defaults.position_to_location.total_seconds(),
        )),
    )
    return DashboardSettings(
        api_base_url=env.get(_PREFIX + "API_BASE_URL") or DEFAULT_BASE_URL,
        api_timeout=_float(env, "API_TIMEOUT", DEFAULT_TIMEOUT),
        refresh_seconds=_float(env, "REFRESH_SECONDS", 5.0),
        tolerances=tolerances,
    )
