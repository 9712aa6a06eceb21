"""Shared test fixtures for portfolio tests."""

import random
from datetime import datetime, timedelta, timezone

import pytest

from portfolio.config import Config, GeolocationConfig, GitHubConfig, IntroConfig, RelayConfig
from portfolio.intro.media import MediaTracker, MemoryMarkerStore
from portfolio.intro.page import RecordingPage
from portfolio.intro.scheduler import FakeScheduler
from portfolio.intro.sequencer import IntroSequencer

DESKTOP_UA = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 Chrome/120.0 Safari/537.36"


class FrozenClock:
    """Wall clock the tests move by hand."""

    def __init__(self) -> None:
        self.now = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture()
def clock():
    return FrozenClock()


@pytest.fixture()
def scheduler():
    return FakeScheduler()


@pytest.fixture()
def page(scheduler):
    return RecordingPage(clock=lambda: scheduler.now_ms)


@pytest.fixture()
def marker_store(clock):
    return MemoryMarkerStore(clock=clock)


@pytest.fixture()
def media(marker_store):
    return MediaTracker(marker_store)


@pytest.fixture()
def intro_config():
    return IntroConfig(effects=["zoomIn"], brand_description=["dev"])


@pytest.fixture()
def make_sequencer(page, scheduler, media, intro_config):
    """Factory so tests can pick the platform string."""
    def _make(platform: str | None = DESKTOP_UA) -> IntroSequencer:
        return IntroSequencer(
            page, scheduler, media, intro_config,
            platform=platform, rng=random.Random(0),
        )
    return _make


@pytest.fixture()
def sequencer(make_sequencer):
    return make_sequencer()


@pytest.fixture()
def config(tmp_path):
    """Config with every path pointed into tmp_path."""
    site = tmp_path / "site"
    site.mkdir()
    (site / "index.html").write_text("<html><body>intro</body></html>")
    return Config(
        relay=RelayConfig(
            webhook_url="https://discord.example/api/webhooks/1/abc",
            upload_dir=str(tmp_path / "uploads"),
            site_root=str(site),
        ),
        github=GitHubConfig(username="zyphcore"),
        geolocation=GeolocationConfig(api_key="test-key"),
        intro=IntroConfig(marker_path=str(tmp_path / "marker.json")),
    )
