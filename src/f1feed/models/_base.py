"""Common base for OpenF1 record models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Record(BaseModel):
    """An immutable OpenF1 record.

    Every field is optional: the feed is eventually consistent and publishes
    partial rows while a session is live. Unknown fields are ignored so new API
    columns do not break validation.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    meeting_key: int | None = None
    session_key: int | None = None
