"""Character-by-character text reveal, Typed.js style."""

import logging
from typing import Callable

from portfolio.intro.page import Page
from portfolio.intro.scheduler import Scheduler

logger = logging.getLogger(__name__)

BACK_DELAY_MS = 700
BACK_SPEED_MS = 0


def reveal_units(fragment: str) -> list[str]:
    """Split a fragment into the chunks revealed per tick.

    Each plain character is its own chunk; an HTML tag is one chunk so markup
    never shows up half-typed.
    """
    units: list[str] = []
    i = 0
    while i < len(fragment):
        if fragment[i] == "<":
            end = fragment.find(">", i)
            if end != -1:
                units.append(fragment[i:end + 1])
                i = end + 1
                continue
        units.append(fragment[i])
        i += 1
    return units


class Typewriter:
    """Types ``fragments`` into ``target``, one after another.

    Every fragment but the last is erased after ``back_delay_ms``. Each timer
    this creates goes through ``track`` so the owner can cancel it wholesale,
    and through ``untrack`` once it has fired.
    """

    def __init__(
        self,
        page: Page,
        scheduler: Scheduler,
        target: str,
        fragments: list[str],
        rate_ms: int,
        on_complete: Callable[[], None] | None = None,
        track: Callable[[object], None] | None = None,
        untrack: Callable[[object], None] | None = None,
        back_delay_ms: int = BACK_DELAY_MS,
        back_speed_ms: int = BACK_SPEED_MS,
    ) -> None:
        self.page = page
        self.scheduler = scheduler
        self.target = target
        self.fragments = fragments
        self.rate_ms = rate_ms
        self.on_complete = on_complete
        self.back_delay_ms = back_delay_ms
        self.back_speed_ms = back_speed_ms
        self._track = track
        self._untrack = untrack
        self._handle: object | None = None
        self.cancelled = False
        self.done = False

    def start(self) -> None:
        self._type(0, reveal_units(self.fragments[0]) if self.fragments else [], 0)

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        if self._handle is not None:
            self.scheduler.cancel(self._handle)
            self._handle = None

    def _later(self, delay_ms: float, fn: Callable[[], None]) -> None:
        if self.cancelled:
            return
        handle: object | None = None

        def fire() -> None:
            if self._untrack is not None:
                self._untrack(handle)
            fn()

        handle = self.scheduler.call_later(delay_ms, fire)
        self._handle = handle
        if self._track is not None:
            self._track(handle)

    def _type(self, frag: int, units: list[str], shown: int) -> None:
        if self.cancelled:
            return
        if shown < len(units):
            self.page.set_text(self.target, "".join(units[:shown + 1]))
            self._later(self.rate_ms, lambda: self._type(frag, units, shown + 1))
            return

        if frag + 1 < len(self.fragments):
            self._later(self.back_delay_ms, lambda: self._erase(frag, units, len(units)))
            return

        self.done = True
        logger.debug("Typewriter %s finished at %.0fms", self.target, self.scheduler.now_ms)
        if self.on_complete is not None:
            self.on_complete()

    def _erase(self, frag: int, units: list[str], shown: int) -> None:
        if self.cancelled:
            return
        if shown > 0:
            self.page.set_text(self.target, "".join(units[:shown - 1]))
            self._later(self.back_speed_ms, lambda: self._erase(frag, units, shown - 1))
            return
        nxt = frag + 1
        self._type(nxt, reveal_units(self.fragments[nxt]), 0)
