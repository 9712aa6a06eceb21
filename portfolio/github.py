"""Public repository listing for the projects section."""

import logging
from typing import Any

import requests
from pydantic import ValidationError

from portfolio.config import PLACEHOLDER_USERNAME, GitHubConfig
from portfolio.models import ProjectListing, Repo

logger = logging.getLogger(__name__)

API_ERROR = "GitHub API error"


def select_recent_repos(repos: list[Repo], limit: int = 12) -> list[Repo]:
    """Drop forks, newest update first, keep at most ``limit``."""
    own = [r for r in repos if not r.fork]
    own.sort(key=lambda r: r.updated_at, reverse=True)
    return own[:limit]


def _parse_repos(data: list[dict[str, Any]]) -> list[Repo]:
    repos: list[Repo] = []
    for item in data:
        if not isinstance(item, dict):
            continue
        try:
            repos.append(Repo(**item))
        except ValidationError as e:
            # One odd entry shouldn't hide the rest of the list
            logger.warning("Skipping repo %r: %s", item.get("name"), e)
    return repos


def fetch_repos(
    config: GitHubConfig,
    session: requests.Session | None = None,
) -> ProjectListing:
    """Fetch and select the user's repositories.

    Failures never raise; they come back as ``ProjectListing.error`` so the
    page can show an inline message and the empty state.
    """
    username = config.username
    if not username or username == PLACEHOLDER_USERNAME:
        logger.info("No GitHub username configured, skipping repo fetch")
        return ProjectListing(username=username or "")

    url = f"{config.api_base}/users/{username}/repos"
    http = session or requests
    logger.info("Fetching repos for %s", username)
    try:
        resp = http.get(
            url,
            params={"per_page": 100, "sort": "updated"},
            headers={"Accept": "application/vnd.github.v3+json"},
            timeout=config.timeout,
        )
    except requests.RequestException as e:
        logger.warning("Repo fetch failed: %s", e)
        return ProjectListing(username=username, error=str(e))

    if not resp.ok:
        logger.warning("GitHub returned %s for %s", resp.status_code, url)
        return ProjectListing(username=username, error=API_ERROR)

    try:
        data = resp.json()
    except ValueError as e:
        logger.warning("GitHub response was not JSON: %s", e)
        return ProjectListing(username=username, error=API_ERROR)
    if not isinstance(data, list):
        return ProjectListing(username=username, error=API_ERROR)

    repos = select_recent_repos(_parse_repos(data), limit=config.limit)
    logger.info("Selected %d of %d repos", len(repos), len(data))
    return ProjectListing(username=username, repos=repos)
