"""Configuration loading for the portfolio site."""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

PLACEHOLDER_USERNAME = "your-github-username"


class RelayConfig(BaseModel):
    webhook_url: str | None = None
    host: str = "0.0.0.0"
    port: int = 3000
    upload_dir: str = "uploads"
    site_root: str = "site"
    timeout: float = 30.0


class GitHubConfig(BaseModel):
    username: str = PLACEHOLDER_USERNAME
    api_base: str = "https://api.github.com"
    limit: int = 12
    timeout: float = 10.0


class GeolocationConfig(BaseModel):
    url: str = "https://api.ipgeolocation.io/ipgeo"
    api_key: str | None = None
    timeout: float = 5.0


class IntroConfig(BaseModel):
    brand_tagline: str = "<i style='color: #F62459'>obnoxious.club $$$</i>"
    brand_description: list[str] = Field(default_factory=lambda: [
        "developer & designer",
        "I build responsive apps, polished interfaces, and secure systems.",
    ])
    effects: list[str] = Field(default_factory=lambda: [
        "bounceIn", "fadeIn", "flipInX", "lightSpeedIn", "rotateIn", "zoomIn",
    ])
    music_volume: float = 0.1
    music_fade_in_ms: int = 4000
    marker_path: str = "data/playback_marker.json"


class Config(BaseModel):
    relay: RelayConfig = Field(default_factory=RelayConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    geolocation: GeolocationConfig = Field(default_factory=GeolocationConfig)
    intro: IntroConfig = Field(default_factory=IntroConfig)

    @property
    def resolved_upload_dir(self) -> Path:
        """Resolve upload_dir relative to project root."""
        return _resolve(self.relay.upload_dir)

    @property
    def resolved_site_root(self) -> Path:
        return _resolve(self.relay.site_root)

    @property
    def resolved_marker_path(self) -> Path:
        return _resolve(self.intro.marker_path)


def _project_root() -> Path:
    """Return the portfolio project root directory."""
    return Path(__file__).parent.parent


def _resolve(path: str) -> Path:
    p = Path(path).expanduser()
    if p.is_absolute():
        return p
    return _project_root() / p


def _apply_env(raw: dict[str, Any], env: dict[str, str]) -> dict[str, Any]:
    """Overlay environment variables on top of file values."""
    overrides = {
        "WEBHOOK_URL": ("relay", "webhook_url"),
        "PORT": ("relay", "port"),
        "GITHUB_USERNAME": ("github", "username"),
        "IPGEOLOCATION_API_KEY": ("geolocation", "api_key"),
    }
    for var, (section, key) in overrides.items():
        value = env.get(var)
        if not value:
            continue
        if key == "port" and not value.isdigit():
            logger.warning("Ignoring non-numeric %s=%r", var, value)
            continue
        section_values = raw.get(section) or {}
        section_values[key] = value
        raw[section] = section_values
    return raw


def load_config(
    config_path: Path | None = None,
    env: dict[str, str] | None = None,
) -> Config:
    """Load config from YAML file. Falls back to defaults if file missing.

    Environment variables (WEBHOOK_URL, PORT, GITHUB_USERNAME,
    IPGEOLOCATION_API_KEY) win over whatever the file says.
    """
    if config_path is None:
        config_path = _project_root() / "config.yaml"
    if env is None:
        env = dict(os.environ)

    raw: dict[str, Any] = {}
    if config_path.exists():
        raw = yaml.safe_load(config_path.read_text()) or {}
    # a section header with nothing under it parses as None
    raw = {k: v for k, v in raw.items() if v is not None}

    return Config(**_apply_env(raw, env))
