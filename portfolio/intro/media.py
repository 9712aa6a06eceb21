"""Background media and its resume marker.

The page plays a looping background video with a separate audio track. While
the video plays its position is written to a marker that expires after a day;
on the next load the marker (if still fresh) seeds both elements so the
music picks up roughly where the visitor left it.
"""

import abc
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from portfolio.intro.scheduler import Scheduler
from portfolio.models import PlaybackMarker

logger = logging.getLogger(__name__)

MARKER_KEY = "videoTime"
TICK_INTERVAL_MS = 250


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MarkerStore(abc.ABC):
    """Key-value store holding the single playback marker."""

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self.clock = clock or _utcnow

    @abc.abstractmethod
    def _load(self) -> dict[str, Any] | None:
        ...

    @abc.abstractmethod
    def _save(self, data: dict[str, Any]) -> None:
        ...

    def write(self, position: float) -> PlaybackMarker:
        marker = PlaybackMarker.at(position, self.clock())
        self._save(marker.model_dump(mode="json"))
        return marker

    def read(self) -> PlaybackMarker | None:
        """Return the marker, or None if there is none or it has expired."""
        data = self._load()
        if data is None:
            return None
        try:
            marker = PlaybackMarker(**data)
        except (TypeError, ValueError) as e:
            logger.warning("Ignoring unreadable playback marker: %s", e)
            return None
        if marker.is_expired(self.clock()):
            logger.debug("Playback marker expired at %s", marker.expires_at)
            return None
        return marker

    def resume_position(self) -> float:
        marker = self.read()
        return marker.position if marker else 0.0


class MemoryMarkerStore(MarkerStore):
    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        super().__init__(clock)
        self.data: dict[str, dict[str, Any]] = {}

    def _load(self) -> dict[str, Any] | None:
        return self.data.get(MARKER_KEY)

    def _save(self, data: dict[str, Any]) -> None:
        self.data[MARKER_KEY] = data


class FileMarkerStore(MarkerStore):
    """Marker persisted as JSON on disk, for the CLI dry run."""

    def __init__(self, path: Path, clock: Callable[[], datetime] | None = None) -> None:
        super().__init__(clock)
        self.path = path

    def _load(self) -> dict[str, Any] | None:
        if not self.path.exists():
            return None
        try:
            return json.loads(self.path.read_text()).get(MARKER_KEY)
        except (json.JSONDecodeError, AttributeError) as e:
            logger.warning("Could not parse %s: %s", self.path, e)
            return None

    def _save(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({MARKER_KEY: data}))


class MediaElement:
    """Headless stand-in for an <audio>/<video> element."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.current_time = 0.0
        self.playing = False
        self.volume = 1.0

    def play(self) -> None:
        self.playing = True

    def pause(self) -> None:
        self.playing = False

    def advance(self, seconds: float) -> None:
        if self.playing:
            self.current_time += seconds

    def __repr__(self) -> str:
        state = "playing" if self.playing else "paused"
        return f"MediaElement({self.name} {state} @ {self.current_time:.2f}s)"


class MediaTracker:
    """Owns the audio/video pair and keeps the resume marker current."""

    def __init__(
        self,
        store: MarkerStore,
        audio: MediaElement | None = None,
        video: MediaElement | None = None,
    ) -> None:
        self.store = store
        self.audio = audio or MediaElement("audio")
        self.video = video or MediaElement("video")
        self._scheduler: Scheduler | None = None
        self._tick_handle: object | None = None
        self._interval_ms = TICK_INTERVAL_MS

    def seed(self) -> float:
        """Set both elements' start position from a fresh marker, else 0."""
        position = self.store.resume_position()
        self.audio.current_time = position
        self.video.current_time = position
        if position:
            logger.info("Resuming background media at %.1fs", position)
        return position

    def play(self) -> None:
        self.video.play()
        self.audio.play()

    def pause(self) -> None:
        self.video.pause()
        self.audio.pause()

    @property
    def playing(self) -> bool:
        return self.video.playing or self.audio.playing

    def toggle(self) -> bool:
        """Flip play/pause on both elements. Returns True if now playing."""
        if self.playing:
            self.pause()
        else:
            self.play()
        return self.playing

    def on_timeupdate(self) -> None:
        self.store.write(self.video.current_time)

    def start_tracking(self, scheduler: Scheduler, interval_ms: int = TICK_INTERVAL_MS) -> None:
        """Write the marker on a fixed cadence for as long as tracking runs."""
        self._scheduler = scheduler
        self._interval_ms = interval_ms
        self._tick_handle = scheduler.call_later(interval_ms, self._tick)

    def stop_tracking(self) -> None:
        if self._scheduler is not None and self._tick_handle is not None:
            self._scheduler.cancel(self._tick_handle)
        self._tick_handle = None

    def _tick(self) -> None:
        if self._scheduler is None:
            return
        seconds = self._interval_ms / 1000
        self.video.advance(seconds)
        self.audio.advance(seconds)
        if self.video.playing:
            self.on_timeupdate()
        self._tick_handle = self._scheduler.call_later(self._interval_ms, self._tick)
