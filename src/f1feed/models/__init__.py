"""OpenF1 record models."""

from f1feed.models.driver import Driver
from f1feed.models.race_control import RaceControl, TeamRadio
from f1feed.models.session import Meeting, Session
from f1feed.models.telemetry import CarData, Location, Weather
from f1feed.models.timing import Lap, Position

__all__ = [
    "CarData",
    "Driver",
    "Lap",
    "Location",
    "Meeting",
    "Position",
    "RaceControl",
    "Session",
    "TeamRadio",
    "Weather",
]
