"""Tests for the intro sequencer: step chaining, skip and post-intro state."""

import random
from unittest.mock import MagicMock

from portfolio.intro.media import MediaTracker, MemoryMarkerStore
from portfolio.intro.page import RecordingPage
from portfolio.intro.scheduler import FakeScheduler
from portfolio.intro.script import build_intro_steps
from portfolio.intro.sequencer import IntroSequencer, SequenceStep
from portfolio.models import GeoInfo

IPHONE_UA = "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 Mobile/15E148"


def _two_steps(first_done=None, second_done=None) -> list[SequenceStep]:
    return [
        SequenceStep("first", target="line1", fragments=["abc"], rate_ms=10, on_complete=first_done),
        SequenceStep(
            "second", target="line2", fragments=["xyz"], rate_ms=10, delay_ms=100,
            on_complete=second_done,
        ),
    ]


def _fresh(intro_config, platform=None):
    scheduler = FakeScheduler()
    page = RecordingPage()
    media = MediaTracker(MemoryMarkerStore())
    seq = IntroSequencer(page, scheduler, media, intro_config, platform=platform, rng=random.Random(0))
    return seq, page, scheduler


class TestSkip:
    def test_skip_twice_same_as_once(self, intro_config):
        once, once_page, once_clock = _fresh(intro_config)
        twice, twice_page, twice_clock = _fresh(intro_config)

        for seq, clock in ((once, once_clock), (twice, twice_clock)):
            seq.load()
            seq.run(_two_steps())
            clock.advance(15)

        assert once.skip() is True
        assert twice.skip() is True
        assert twice.skip() is False

        once_clock.advance(5000)
        twice_clock.advance(5000)

        assert once_page.actions == twice_page.actions
        assert once.state == twice.state
        assert twice_page.action_names().count("teardown_intro") == 1

    def test_skip_after_natural_finish_is_noop(self, sequencer, page, scheduler):
        sequencer.run(_two_steps())
        scheduler.advance(10_000)
        assert sequencer.state.finished
        assert sequencer.state.skipped  # auto-skip fired
        before = list(page.actions)

        assert sequencer.skip() is False
        scheduler.advance(1000)
        assert "teardown_intro" not in [a[0] for a in page.actions[len(before):]]

    def test_no_step_callback_after_skip(self, sequencer, page, scheduler):
        spy_first, spy_second = MagicMock(), MagicMock()
        sequencer.run(_two_steps(spy_first, spy_second))
        scheduler.advance(15)
        assert page.text["line1"] == "ab"

        sequencer.skip()
        scheduler.advance(10_000)

        spy_first.assert_not_called()
        spy_second.assert_not_called()
        assert page.text["line1"] == "ab"
        assert "line2" not in page.text
        teardown = page.action_names().index("teardown_intro")
        later_targets = {a[1] for a in page.actions[teardown:] if a[0] == "set_text"}
        assert later_targets <= {"brand"}

    def test_skip_cancels_every_pending_handle(self, sequencer, scheduler):
        sequencer.run(_two_steps())
        scheduler.advance(40)  # first step done, second step's delay timer queued
        pending = list(sequencer.state.pending)
        assert len(pending) == 1
        assert not any(h.fired for h in pending)

        sequencer.skip()
        scheduler.advance(1000)

        assert sequencer.state.pending == []
        assert not any(h.fired for h in pending)

    def test_pending_holds_only_live_timers(self, sequencer, scheduler):
        sequencer.run([
            SequenceStep("long", target="line1", fragments=["abcdefghij"], rate_ms=10),
            SequenceStep("late", target="line2", fragments=["xyz"], rate_ms=10, delay_ms=1000),
        ])
        scheduler.advance(500)

        assert len(sequencer.state.pending) == 1
        assert not any(h.fired for h in sequencer.state.pending)
        assert sequencer._writers == []

    def test_skip_before_run_blocks_steps(self, sequencer, page, scheduler):
        """A slow geolocation lookup must not stop the visitor from skipping."""
        sequencer.load()
        assert sequencer.skip() is True
        sequencer.run(_two_steps())
        scheduler.advance(10_000)

        assert "line1" not in page.text
        assert "show_content" in page.action_names()

    def test_schedule_step_tracks_handle(self, sequencer):
        handle = sequencer.schedule_step(SequenceStep("wait", delay_ms=50))
        assert handle in sequencer.state.pending
        sequencer.skip()
        assert handle.cancelled


class TestChain:
    def test_steps_run_in_order(self, sequencer, scheduler):
        order: list[str] = []
        sequencer.run(_two_steps(lambda: order.append("first"), lambda: order.append("second")))
        scheduler.advance(29)
        assert order == []
        scheduler.advance(1)
        assert order == ["first"]
        scheduler.advance(100)
        assert order == ["first"]
        scheduler.advance(30)
        assert order == ["first", "second"]

    def test_second_run_is_ignored(self, sequencer, page, scheduler):
        sequencer.run(_two_steps())
        scheduler.advance(15)
        sequencer.run(_two_steps())
        scheduler.advance(145)

        typed = [a[2] for a in page.actions if a[:2] == ("set_text", "line1")]
        assert typed == ["a", "ab", "abc"]
        assert [a[2] for a in page.actions if a[:2] == ("set_text", "line2")] == ["x", "xy", "xyz"]
        assert sequencer.state.index == 2
        assert sequencer.state.finished

    def test_finish_arms_auto_skip(self, sequencer, scheduler):
        sequencer.run(_two_steps())
        scheduler.advance(160)
        assert sequencer.state.finished
        assert not sequencer.state.skipped
        scheduler.advance(500)
        assert sequencer.state.skipped

    def test_step_without_target_only_waits(self, sequencer, page, scheduler):
        hook = MagicMock()
        sequencer.run([SequenceStep("idle", delay_ms=1000, on_complete=hook)])
        scheduler.advance(999)
        hook.assert_not_called()
        scheduler.advance(1)
        hook.assert_called_once()
        assert "set_text" not in page.action_names()

    def test_full_intro_script(self, sequencer, page, scheduler):
        geo = GeoInfo(ip="203.0.113.7", country_name="Netherlands")
        sequencer.load()
        sequencer.run(build_intro_steps(page, geo, "tagline", rng=random.Random(0)))
        scheduler.advance(20_000)

        assert sequencer.state.finished
        assert sequencer.state.skipped
        assert page.text["line1"].startswith("Granting access to ")
        assert "203.0.113.7" in page.text["line2"]
        assert "Netherlands" in page.text["line2"]
        assert page.text["line4"] == "tagline"
        assert page.text["brand"] == "dev"


class TestPostIntro:
    def test_desktop_plays_media(self, sequencer, page, scheduler, media):
        sequencer.load()
        sequencer.skip()
        scheduler.advance(1000)

        names = page.action_names()
        assert names.index("teardown_intro") < names.index("start_marquee") < names.index("show_content")
        assert ("animate_brand_header", "zoomIn") in page.actions
        assert ("fade_in_audio", 0.1, 4000) in page.actions
        assert media.video.playing and media.audio.playing
        assert media.audio.volume == 0.1

    def test_post_intro_timings(self, sequencer, page, scheduler):
        sequencer.skip()
        scheduler.advance(3000)
        at = {action[0]: t for t, action in page.timeline if action[0] != "set_text"}
        assert at["teardown_intro"] == 0
        assert at["start_marquee"] == 100
        assert at["animate_brand_header"] == 300
        assert at["show_content"] == 300
        assert at["fade_in_audio"] == 500

    def test_mobile_suppresses_video(self, make_sequencer, page, scheduler, media):
        seq = make_sequencer(IPHONE_UA)
        seq.load()
        seq.skip()
        scheduler.advance(3000)

        names = page.action_names()
        assert names[0] == "use_static_background"
        assert "show_content" in names
        assert "fade_in_audio" not in names
        assert not media.video.playing

    def test_load_seeds_media_from_marker(self, sequencer, marker_store, media):
        marker_store.write(42.5)
        sequencer.load()
        assert media.audio.current_time == 42.5
        assert media.video.current_time == 42.5


class TestInput:
    def test_click_skips(self, sequencer):
        sequencer.handle_click()
        assert sequencer.state.skipped

    def test_key_skips_then_space_toggles(self, sequencer, scheduler, media):
        sequencer.handle_key("Enter")
        assert sequencer.state.skipped
        scheduler.advance(1000)
        assert media.playing

        sequencer.handle_key(" ")
        assert not media.playing
        sequencer.handle_key(" ")
        assert media.playing

        sequencer.handle_key("a")
        assert media.playing
