"""The page surface the intro controller drives.

The browser owns the actual DOM; this interface is the set of effects the
controller is allowed to request. ``RecordingPage`` keeps an ordered action log
and the current text of each line, which is all the CLI dry run and the tests
need to observe.
"""

import abc
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class Page(abc.ABC):
    @abc.abstractmethod
    def set_text(self, target: str, text: str) -> None:
        """Replace the visible text of a typed line (``line1``, ``brand``, ...)."""

    @abc.abstractmethod
    def clear_cursor(self) -> None:
        ...

    @abc.abstractmethod
    def use_static_background(self) -> None:
        ...

    @abc.abstractmethod
    def teardown_intro(self) -> None:
        ...

    @abc.abstractmethod
    def start_marquee(self) -> None:
        ...

    @abc.abstractmethod
    def animate_brand_header(self, effect: str) -> None:
        ...

    @abc.abstractmethod
    def show_content(self) -> None:
        ...

    @abc.abstractmethod
    def fade_in_audio(self, volume: float, duration_ms: int) -> None:
        ...


class RecordingPage(Page):
    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self.clock = clock
        self.actions: list[tuple] = []
        self.timeline: list[tuple[float, tuple]] = []
        self.text: dict[str, str] = {}
        self.intro_visible = True

    def _record(self, *action: object) -> None:
        logger.debug("page: %s", action)
        self.actions.append(action)
        if self.clock is not None:
            self.timeline.append((self.clock(), action))

    def action_names(self) -> list[str]:
        return [a[0] for a in self.actions]

    def set_text(self, target: str, text: str) -> None:
        self.text[target] = text
        self._record("set_text", target, text)

    def clear_cursor(self) -> None:
        self._record("clear_cursor")

    def use_static_background(self) -> None:
        self._record("use_static_background")

    def teardown_intro(self) -> None:
        self.intro_visible = False
        self._record("teardown_intro")

    def start_marquee(self) -> None:
        self._record("start_marquee")

    def animate_brand_header(self, effect: str) -> None:
        self._record("animate_brand_header", effect)

    def show_content(self) -> None:
        self._record("show_content")

    def fade_in_audio(self, volume: float, duration_ms: int) -> None:
        self._record("fade_in_audio", volume, duration_ms)
