"""Intro sequencer: runs the typed intro and tears it down on skip.

The intro is an explicit list of steps. Each step waits ``delay_ms``, types
its fragments, runs its completion hook and then ``advance()`` schedules the
next one. ``skip()`` may arrive at any point (click, key, or the auto-skip at
the end of the list); it flips ``state.skipped`` once, cancels every timer the
intro still has outstanding and switches the page to its post-intro state.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Callable

from portfolio.config import IntroConfig
from portfolio.intro.device import is_touch_only_device
from portfolio.intro.media import MediaTracker
from portfolio.intro.page import Page
from portfolio.intro.scheduler import Scheduler
from portfolio.intro.typewriter import Typewriter

logger = logging.getLogger(__name__)

AUTO_SKIP_MS = 500
INTRO_FADE_OUT_MS = 100
HEADER_EFFECT_MS = 200
BRAND_REVEAL_MS = 1350
BRAND_RATE_MS = 40
MEDIA_START_MS = 200
BACKGROUND_FADE_MS = 200


@dataclass
class SequenceStep:
    """One unit of the intro: wait, type, then hand over to the next step.

    A step without ``target`` types nothing; it only waits ``delay_ms``.
    """
    name: str
    fragments: list[str] = field(default_factory=list)
    rate_ms: int = 0
    delay_ms: int = 0
    target: str | None = None
    on_complete: Callable[[], None] | None = None


@dataclass
class SequencerState:
    skipped: bool = False
    finished: bool = False
    index: int = -1
    pending: list[Any] = field(default_factory=list)


class IntroSequencer:
    def __init__(
        self,
        page: Page,
        scheduler: Scheduler,
        media: MediaTracker,
        config: IntroConfig | None = None,
        platform: str | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.page = page
        self.scheduler = scheduler
        self.media = media
        self.config = config or IntroConfig()
        self.rng = rng or random.Random()
        self.ignore_video = is_touch_only_device(platform)
        self.state = SequencerState()
        self.steps: list[SequenceStep] = []
        self._writers: list[Typewriter] = []

    # --- page load ---

    def load(self) -> None:
        """Prepare the page: pick the background and seed media position."""
        if self.ignore_video:
            logger.info("Touch-only device, using static background")
            self.page.use_static_background()
        self.media.seed()

    def run(self, steps: list[SequenceStep]) -> None:
        """Start the step chain.

        Does nothing if the visitor already skipped or a chain is already running.
        """
        if self.state.skipped:
            logger.debug("Intro already skipped, not running %d steps", len(steps))
            return
        if self.state.index >= 0:
            logger.warning("Intro already running (step %d), ignoring second run", self.state.index)
            return
        self.steps = list(steps)
        self.state.index = -1
        self.advance()

    # --- chain ---

    def _track(self, handle: Any) -> None:
        self.state.pending.append(handle)

    def _untrack(self, handle: Any) -> None:
        if handle in self.state.pending:
            self.state.pending.remove(handle)

    def _call_later(self, delay_ms: float, fn: Callable[[], None]) -> Any:
        """Schedule an intro timer that stays in ``state.pending`` until it fires."""
        handle: Any = None

        def fire() -> None:
            self._untrack(handle)
            fn()

        handle = self.scheduler.call_later(delay_ms, fire)
        self._track(handle)
        return handle

    def schedule_step(self, step: SequenceStep) -> Any:
        """Register ``step``; its hook only runs if the intro was not skipped."""

        def finish() -> None:
            self._writers = [w for w in self._writers if not w.done]
            if self.state.skipped:
                return
            logger.debug("Step %s complete at %.0fms", step.name, self.scheduler.now_ms)
            if step.on_complete is not None:
                step.on_complete()
            self.advance()

        def begin() -> None:
            if self.state.skipped:
                return
            if step.target is None:
                finish()
                return
            writer = Typewriter(
                self.page, self.scheduler, step.target, step.fragments, step.rate_ms,
                on_complete=finish, track=self._track, untrack=self._untrack,
            )
            self._writers.append(writer)
            writer.start()

        return self._call_later(step.delay_ms, begin)

    def advance(self) -> None:
        """Move to the next step, or arm the auto-skip after the last one."""
        if self.state.skipped:
            return
        self.state.index += 1
        if self.state.index < len(self.steps):
            self.schedule_step(self.steps[self.state.index])
            return
        self.state.finished = True
        logger.debug("Intro finished, auto-skipping in %dms", AUTO_SKIP_MS)
        self._call_later(AUTO_SKIP_MS, self.skip)

    # --- skip ---

    def skip(self) -> bool:
        """Abort the intro and show the page. Returns False if already skipped."""
        if self.state.skipped:
            return False
        self.state.skipped = True

        for handle in self.state.pending:
            self.scheduler.cancel(handle)
        self.state.pending.clear()
        for writer in self._writers:
            writer.cancel()
        self._writers.clear()

        logger.info("Intro skipped at %.0fms (step %d)", self.scheduler.now_ms, self.state.index)
        self.page.teardown_intro()
        self.scheduler.call_later(INTRO_FADE_OUT_MS, self._show_page)
        return True

    def _show_page(self) -> None:
        self.page.start_marquee()
        self.scheduler.call_later(HEADER_EFFECT_MS, self._animate_header)
        self.scheduler.call_later(BRAND_REVEAL_MS, self._reveal_brand)
        self.scheduler.call_later(MEDIA_START_MS, self._start_media)

    def _animate_header(self) -> None:
        if self.config.effects:
            self.page.animate_brand_header(self.rng.choice(self.config.effects))

    def _reveal_brand(self) -> None:
        Typewriter(
            self.page, self.scheduler, "brand", self.config.brand_description,
            BRAND_RATE_MS, on_complete=self.page.clear_cursor,
        ).start()

    def _start_media(self) -> None:
        if not self.ignore_video:
            self.media.play()
        self.media.start_tracking(self.scheduler)
        self.page.show_content()
        self.scheduler.call_later(BACKGROUND_FADE_MS, self._fade_in_audio)

    def _fade_in_audio(self) -> None:
        if self.ignore_video:
            return
        self.media.audio.volume = self.config.music_volume
        self.page.fade_in_audio(self.config.music_volume, self.config.music_fade_in_ms)

    # --- input ---

    def handle_click(self) -> None:
        self.skip()

    def handle_key(self, key: str) -> None:
        """Any key skips the intro; afterwards space toggles the background media."""
        if not self.state.skipped:
            self.skip()
            return
        if key == " ":
            playing = self.media.toggle()
            logger.debug("Background media %s", "playing" if playing else "paused")
