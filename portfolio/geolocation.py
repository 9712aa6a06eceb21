"""Best-effort visitor geolocation for the intro greeting."""

import logging
import random

import requests

from portfolio.config import GeolocationConfig
from portfolio.models import GeoInfo

logger = logging.getLogger(__name__)

USERNAME_PLACEHOLDERS = ("user", "dude")
COUNTRY_PLACEHOLDER = "your country"


def lookup(config: GeolocationConfig, session: requests.Session | None = None) -> GeoInfo | None:
    """Ask the geolocation service who the visitor is.

    Never raises: any network, HTTP or decoding failure returns None and the
    greeting falls back to placeholder text.
    """
    params = {"apiKey": config.api_key} if config.api_key else {}
    http = session or requests
    try:
        resp = http.get(config.url, params=params, timeout=config.timeout)
        resp.raise_for_status()
        data = resp.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("Geolocation lookup failed: %s", e)
        return None

    if not isinstance(data, dict):
        logger.warning("Unexpected geolocation payload: %r", type(data).__name__)
        return None
    return GeoInfo(ip=data.get("ip"), country_name=data.get("country_name"))


def personalize(geo: GeoInfo | None, rng: random.Random | None = None) -> tuple[str, str]:
    """Return (name, country) for the greeting, substituting placeholders."""
    rng = rng or random.Random()
    ip = geo.ip if geo else None
    country = geo.country_name if geo else None
    return (
        ip or rng.choice(USERNAME_PLACEHOLDERS),
        country or COUNTRY_PLACEHOLDER,
    )
