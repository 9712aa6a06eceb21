"""The intro as the landing page plays it."""

import random

from portfolio.geolocation import personalize
from portfolio.intro.page import Page
from portfolio.intro.sequencer import SequenceStep
from portfolio.models import GeoInfo

TYPE_RATE_MS = 30
TAGLINE_RATE_MS = 120
LINE_DELAY_MS = 500
IDLE_BEFORE_SKIP_MS = 1000


def greeting_line(name: str, country: str) -> str:
    return (
        f"Welcome back, <i style='color: #0f0'>{name}</i>! "
        f"By the way, nice to see someone from {country} here ;)"
    )


def build_intro_steps(
    page: Page,
    geo: GeoInfo | None,
    tagline: str,
    rng: random.Random | None = None,
) -> list[SequenceStep]:
    name, country = personalize(geo, rng)
    return [
        SequenceStep(
            name="authenticate",
            target="line1",
            fragments=[
                "Authenticating...",
                "Granting access to <span style='font-size: 14px; color: #06d;'>[unknown]</span>...",
            ],
            rate_ms=TYPE_RATE_MS,
            on_complete=page.clear_cursor,
        ),
        SequenceStep(
            name="greeting",
            target="line2",
            fragments=[
                "Access granted! <span style='font-size: 14px; color: #0f0;'>[success]</span>",
                greeting_line(name, country),
            ],
            rate_ms=TYPE_RATE_MS,
            delay_ms=LINE_DELAY_MS,
            on_complete=page.clear_cursor,
        ),
        SequenceStep(
            name="tagline",
            target="line4",
            fragments=[tagline],
            rate_ms=TAGLINE_RATE_MS,
            delay_ms=LINE_DELAY_MS,
        ),
        SequenceStep(
            name="idle",
            delay_ms=IDLE_BEFORE_SKIP_MS,
            on_complete=page.clear_cursor,
        ),
    ]
