"""Data models shared by the orchestrator and the inventory client."""

from dataclasses import dataclass
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class Track(BaseModel):
    """A playable track as listed by the inventory service.

    Tracks are immutable once fetched. The orchestrator references them and
    locates them in the queue by ``id``, never by value.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    url: str
    title: str
    added_at: str | None = Field(default=None, alias="addedAt")
    session_id: str | None = None
    total_segments: int | None = None
    segment_duration: float | None = None
    listen_count: int = 0


class RepeatMode(str, Enum):
    """Repeat modes, cycled none -> all -> one -> none."""

    NONE = "none"
    ALL = "all"
    ONE = "one"


class PlaybackState(str, Enum):
    """Transport state requested of the streaming engine."""

    PLAYING = "playing"
    PAUSED = "paused"
    STOPPED = "stopped"


@dataclass(frozen=True)
class SleepTimerState:
    """Snapshot of the sleep timer."""

    selected_minutes: int = 0
    remaining_seconds: int = 0
    fading: bool = False

    @property
    def armed(self) -> bool:
        return self.selected_minutes > 0


class DownloadResponse(BaseModel):
    """Result of a completed add-track request."""

    id: str
    title: str
    session_id: str
    playlist_url: str
    total_segments: int
    segment_duration: float


class DownloadStatus(BaseModel):
    """Status of an add-track request on the inventory service."""

    id: str
    status: str
    progress: str | None = None
    error: str | None = None
    session: DownloadResponse | None = None


class ServerMode(BaseModel):
    """Read/write mode advertised by the inventory service."""

    readonly: bool = False
    mode: str = "readwrite"
