"""Public client classes for the OpenF1 API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import TypeAdapter

from f1feed._filters import LATEST, build_query_params
from f1feed._http import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, AsyncTransport, SyncTransport
from f1feed.exceptions import OpenF1ValidationError
from f1feed.models import (
    CarData,
    Driver,
    Lap,
    Location,
    Meeting,
    Position,
    RaceControl,
    Session,
    TeamRadio,
    Weather,
)


T = TypeVar("T")


def _validate_list(model_type: type[T], data: list[dict[str, Any]]) -> list[T]:
    """Validate a list of dicts against a record model."""
    try:
        adapter = TypeAdapter(list[model_type])
        return adapter.validate_python(data)
    except Exception as exc:
        raise OpenF1ValidationError(
            f"Failed to validate {model_type.__name__} response: {exc}"
        ) from exc


@dataclass(frozen=True)
class SessionSnapshot:
    """Everything the live and replay views need for one session, fetched together."""

    drivers: list[Driver]
    positions: list[Position]
    laps: list[Lap]
    race_control: list[RaceControl]
    weather: list[Weather]


class OpenF1Client:
    """Synchronous client for the OpenF1 API.

    Usage:
        with OpenF1Client() as f1:
            laps = f1.laps(session_key=9161, driver_number=1)
            live = f1.latest_session()
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._transport = SyncTransport(base_url=base_url, timeout=timeout)

    def __enter__(self) -> OpenF1Client:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connection."""
        self._transport.close()

    def _get(self, endpoint: str, model: type[T], **kwargs: Any) -> list[T]:
        params = build_query_params(**kwargs)
        data = self._transport.get(endpoint, params)
        return _validate_list(model, data)

    # ── Endpoints ──────────────────────────────────────────────

    def car_data(self, **kwargs: Any) -> list[CarData]:
        """Car channels: speed, throttle, brake, RPM, gear, DRS."""
        return self._get("/car_data", CarData, **kwargs)

    def drivers(self, **kwargs: Any) -> list[Driver]:
        return self._get("/drivers", Driver, **kwargs)

    def laps(self, **kwargs: Any) -> list[Lap]:
        return self._get("/laps", Lap, **kwargs)

    def location(self, **kwargs: Any) -> list[Location]:
        return self._get("/location", Location, **kwargs)

    def meetings(self, **kwargs: Any) -> list[Meeting]:
        return self._get("/meetings", Meeting, **kwargs)

    def position(self, **kwargs: Any) -> list[Position]:
        """Running-order changes throughout a session."""
        return self._get("/position", Position, **kwargs)

    def race_control(self, **kwargs: Any) -> list[RaceControl]:
        """Flags, safety cars, incidents and DRS notices."""
        return self._get("/race_control", RaceControl, **kwargs)

    def sessions(self, **kwargs: Any) -> list[Session]:
        return self._get("/sessions", Session, **kwargs)

    def team_radio(self, **kwargs: Any) -> list[TeamRadio]:
        return self._get("/team_radio", TeamRadio, **kwargs)

    def weather(self, **kwargs: Any) -> list[Weather]:
        return self._get("/weather", Weather, **kwargs)

    # ── Helpers ────────────────────────────────────────────────

    def latest_session(self) -> Session | None:
        """Return the session currently running (or most recently run), if any."""
        sessions = self.sessions(session_key=LATEST)
        return sessions[0] if sessions else None


class AsyncOpenF1Client:
    """Asynchronous client for the OpenF1 API.

    Usage:
        async with AsyncOpenF1Client() as f1:
            snapshot = await f1.session_snapshot(9161)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._transport = AsyncTransport(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> AsyncOpenF1Client:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP connection."""
        await self._transport.close()

    async def _get(self, endpoint: str, model: type[T], **kwargs: Any) -> list[T]:
        params = build_query_params(**kwargs)
        data = await self._transport.get(endpoint, params)
        return _validate_list(model, data)

    # ── Endpoints ──────────────────────────────────────────────

    async def car_data(self, **kwargs: Any) -> list[CarData]:
        """Car channels: speed, throttle, brake, RPM, gear, DRS."""
        return await self._get("/car_data", CarData, **kwargs)

    async def drivers(self, **kwargs: Any) -> list[Driver]:
        return await self._get("/drivers", Driver, **kwargs)

    async def laps(self, **kwargs: Any) -> list[Lap]:
        return await self._get("/laps", Lap, **kwargs)

    async def location(self, **kwargs: Any) -> list[Location]:
        return await self._get("/location", Location, **kwargs)

    async def meetings(self, **kwargs: Any) -> list[Meeting]:
        return await self._get("/meetings", Meeting, **kwargs)

    async def position(self, **kwargs: Any) -> list[Position]:
        """Running-order changes throughout a session."""
        return await self._get("/position", Position, **kwargs)

    async def race_control(self, **kwargs: Any) -> list[RaceControl]:
        """Flags, safety cars, incidents and DRS notices."""
        return await self._get("/race_control", RaceControl, **kwargs)

    async def sessions(self, **kwargs: Any) -> list[Session]:
        return await self._get("/sessions", Session, **kwargs)

    async def team_radio(self, **kwargs: Any) -> list[TeamRadio]:
        return await self._get("/team_radio", TeamRadio, **kwargs)

    async def weather(self, **kwargs: Any) -> list[Weather]:
        return await self._get("/weather", Weather, **kwargs)

    # ── Helpers ────────────────────────────────────────────────

    async def latest_session(self) -> Session | None:
        """Return the session currently running (or most recently run), if any."""
        sessions = await self.sessions(session_key=LATEST)
        return sessions[0] if sessions else None

    async def session_snapshot(self, session_key: int | str) -> SessionSnapshot:
        """Fetch drivers, positions, laps, race control and weather concurrently.

        All five requests must succeed; the first failure propagates and no
        partial snapshot is returned.
        """
        drivers, positions, laps, race_control, weather = await asyncio.gather(
            self.drivers(session_key=session_key),
            self.position(session_key=session_key),
            self.laps(session_key=session_key),
            self.race_control(session_key=session_key),
            self.weather(session_key=session_key),
        )
        return SessionSnapshot(
            drivers=drivers,
            positions=positions,
            laps=laps,
            race_control=race_control,
            weather=weather,
        )
