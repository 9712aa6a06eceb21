"""Pydantic models for the portfolio site."""

from datetime import datetime, timedelta
from enum import Enum

from pydantic import BaseModel, Field

MARKER_TTL = timedelta(days=1)


class DeviceClass(str, Enum):
    MOBILE = "mobile"
    DESKTOP = "desktop"


# --- Third-party lookups ---


class Repo(BaseModel):
    """A public repository as returned by the GitHub listing endpoint."""
    id: int
    name: str
    html_url: str
    description: str | None = None
    language: str | None = None
    topics: list[str] = Field(default_factory=list)
    fork: bool = False
    updated_at: datetime


class ProjectListing(BaseModel):
    """What the projects section renders: repos, or an inline error."""
    username: str
    repos: list[Repo] = Field(default_factory=list)
    error: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.repos


class GeoInfo(BaseModel):
    ip: str | None = None
    country_name: str | None = None


# --- Media ---


class PlaybackMarker(BaseModel):
    """Last known playback position of the background media."""
    position: float
    written_at: datetime
    expires_at: datetime

    @classmethod
    def at(cls, position: float, now: datetime) -> "PlaybackMarker":
        return cls(position=position, written_at=now, expires_at=now + MARKER_TTL)

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


# --- Relay ---


class RelayResult(BaseModel):
    status: int
    body: str
