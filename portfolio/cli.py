"""CLI entry point for the portfolio site."""

import argparse
import asyncio
import logging
import random

from portfolio.config import Config, load_config
from portfolio.contact import CONTACT_OPTIONS
from portfolio.geolocation import lookup, personalize
from portfolio.github import fetch_repos
from portfolio.intro.media import FileMarkerStore, MediaTracker
from portfolio.intro.page import RecordingPage
from portfolio.intro.scheduler import AsyncioScheduler, FakeScheduler
from portfolio.intro.script import build_intro_steps, greeting_line
from portfolio.intro.sequencer import IntroSequencer

logger = logging.getLogger(__name__)

SETTLE_MS = 5000
MAX_INTRO_MS = 60_000


def _print_timeline(page: RecordingPage) -> None:
    for t, action in page.timeline:
        name, *args = action
        if name == "set_text":
            continue
        print(f"  {t:7.0f}ms  {name} {' '.join(str(a) for a in args)}".rstrip())
    print("\nFinal text:")
    for target, text in page.text.items():
        print(f"  {target}: {text}")


def run_intro_dry(
    config: Config,
    platform: str | None = None,
    skip_at: int | None = None,
    use_geo: bool = True,
) -> RecordingPage:
    """Play the intro against a fake clock and return the recorded page."""
    scheduler = FakeScheduler()
    page = RecordingPage(clock=lambda: scheduler.now_ms)
    media = MediaTracker(FileMarkerStore(config.resolved_marker_path))
    sequencer = IntroSequencer(page, scheduler, media, config.intro, platform=platform)

    sequencer.load()
    geo = lookup(config.geolocation) if use_geo else None
    sequencer.run(build_intro_steps(page, geo, config.intro.brand_tagline))

    if skip_at is not None:
        scheduler.advance(skip_at)
        sequencer.skip()
    else:
        while not sequencer.state.skipped and scheduler.now_ms < MAX_INTRO_MS:
            scheduler.advance(100)
    scheduler.advance(SETTLE_MS)
    media.stop_tracking()
    return page


async def run_intro_live(config: Config, platform: str | None = None) -> RecordingPage:
    """Play the intro in real time on the running event loop."""
    loop = asyncio.get_running_loop()
    scheduler = AsyncioScheduler(loop)
    page = RecordingPage(clock=lambda: scheduler.now_ms)
    media = MediaTracker(FileMarkerStore(config.resolved_marker_path))
    sequencer = IntroSequencer(page, scheduler, media, config.intro, platform=platform)

    sequencer.load()
    geo = await loop.run_in_executor(None, lookup, config.geolocation)
    sequencer.run(build_intro_steps(page, geo, config.intro.brand_tagline))

    while not sequencer.state.skipped:
        await asyncio.sleep(0.1)
    await asyncio.sleep(SETTLE_MS / 1000)
    media.stop_tracking()
    return page


def main() -> None:
    parser = argparse.ArgumentParser(description="Portfolio site")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    # serve command
    serve_parser = sub.add_parser("serve", help="Serve the site and the upload relay")
    serve_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    serve_parser.add_argument("--port", type=int, default=None, help="Override PORT")

    # projects command
    projects_parser = sub.add_parser("projects", help="Show the repos the projects section lists")
    projects_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    projects_parser.add_argument("--username", default=None, help="Override GITHUB_USERNAME")

    # geo command
    geo_parser = sub.add_parser("geo", help="Show the personalized intro greeting")
    geo_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    # intro command
    intro_parser = sub.add_parser("intro", help="Play the intro sequence headlessly")
    intro_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    intro_parser.add_argument("--platform", default=None, help="User agent / platform string")
    intro_parser.add_argument(
        "--skip-at", type=int, default=None,
        help="Skip the intro after this many ms (plays to the end if omitted)",
    )
    intro_parser.add_argument("--no-geo", action="store_true", help="Don't look up the visitor")
    intro_parser.add_argument(
        "--live", action="store_true",
        help="Run in real time on an asyncio loop instead of a fake clock",
    )

    # contact command
    contact_parser = sub.add_parser("contact", help="List contact options and their mailto links")
    contact_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config()

    if args.command == "serve":
        from portfolio.relay import serve

        if args.port:
            config.relay.port = args.port
        serve(config)

    elif args.command == "projects":
        if args.username:
            config.github.username = args.username
        listing = fetch_repos(config.github)
        if listing.error:
            print(listing.error)
        if listing.is_empty:
            print("No projects found. Set GITHUB_USERNAME to fetch public repos.")
            return
        for repo in listing.repos:
            print(f"  {repo.name} [{repo.language or '-'}] {repo.updated_at.date()}")
            print(f"    {repo.description or 'No description'}")
            if repo.topics:
                print(f"    topics: {', '.join(repo.topics[:3])}")

    elif args.command == "geo":
        name, country = personalize(lookup(config.geolocation), random.Random())
        print(greeting_line(name, country))

    elif args.command == "intro":
        if args.live:
            page = asyncio.run(run_intro_live(config, platform=args.platform))
        else:
            page = run_intro_dry(
                config, platform=args.platform, skip_at=args.skip_at,
                use_geo=not args.no_geo,
            )
        _print_timeline(page)

    elif args.command == "contact":
        for option in CONTACT_OPTIONS:
            print(f"  {option.title}: {option.desc}")
            print(f"    {option.mailto()}")

    else:
        parser.print_help()


if __name__ == "__main__":
    main()
