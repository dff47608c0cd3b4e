"""
Configuration loader — reads config.yml into a validated Settings model.

Precedence (highest first):
    CLI flags  >  BREW_SEARCH_* env vars  >  config.yml  >  defaults

The config file is optional.  When present it is a flat YAML mapping
of the Settings fields, e.g.::

    brewfile: ~/dotfiles/Brewfile
    cache_ttl_hours: 6
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from brew_search.core.services.registry_client import (
    CASKS_API_URL,
    DEFAULT_TIMEOUT_S,
    FORMULAE_API_URL,
)

logger = logging.getLogger(__name__)

APP_NAME = "brew-search"
CONFIG_FILE = "config.yml"

# env var → Settings field
_ENV_OVERRIDES: dict[str, str] = {
    "BREW_SEARCH_BREWFILE": "brewfile",
    "BREW_SEARCH_CACHE_DIR": "cache_dir",
    "BREW_SEARCH_CACHE_TTL_HOURS": "cache_ttl_hours",
    "BREW_SEARCH_REQUEST_TIMEOUT": "request_timeout",
    "BREW_SEARCH_BREW_BIN": "brew_bin",
}


class ConfigError(Exception):
    """Raised when configuration is invalid or the home directory is unknown."""


def home_dir() -> Path:
    """The user's home directory.

    Raises:
        ConfigError: If it cannot be determined.
    """
    try:
        return Path.home()
    except (RuntimeError, KeyError) as e:
        raise ConfigError(f"Failed to get home directory: {e}") from e


def default_config_path(home: Path | None = None) -> Path:
    """``$XDG_CONFIG_HOME/brew-search/config.yml`` (``~/.config`` by default)."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else (home or home_dir()) / ".config"
    return base / APP_NAME / CONFIG_FILE


class Settings(BaseModel):
    """Runtime settings for one brew-search run."""

    model_config = ConfigDict(extra="ignore")

    brewfile: Path
    cache_dir: Path
    cache_ttl_hours: float = Field(default=24.0, gt=0)
    request_timeout: float = Field(default=DEFAULT_TIMEOUT_S, gt=0)
    formulae_url: str = FORMULAE_API_URL
    casks_url: str = CASKS_API_URL
    brew_bin: str = "brew"

    @field_validator("brewfile", "cache_dir", mode="before")
    @classmethod
    def _expand_user(cls, value: Any) -> Any:
        if isinstance(value, (str, Path)):
            return Path(value).expanduser()
        return value

    @classmethod
    def defaults(cls, home: Path) -> dict[str, Any]:
        return {
            "brewfile": home / "Brewfile",
            "cache_dir": home / ".cache" / APP_NAME,
        }


def load_settings(
    path: Path | None = None,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """Build Settings from defaults, the config file, env vars and overrides.

    Args:
        path: Explicit config file.  Must exist when given.  When None,
            the default location is used if it exists.
        env: Environment mapping (default: ``os.environ``).
        overrides: Values from CLI flags; None values are ignored.

    Raises:
        ConfigError: If the file is unreadable or invalid, or the
            resulting settings fail validation.
    """
    env = os.environ if env is None else env
    home = home_dir()

    data: dict[str, Any] = Settings.defaults(home)

    if path is not None:
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        data.update(_read_yaml(path))
    else:
        candidate = default_config_path(home)
        if candidate.is_file():
            data.update(_read_yaml(candidate))

    for var, field in _ENV_OVERRIDES.items():
        value = env.get(var)
        if value:
            data[field] = value

    for field, value in (overrides or {}).items():
        if value is not None:
            data[field] = value

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    logger.debug("Settings: %s", settings.model_dump(mode="json"))
    return settings


def _read_yaml(path: Path) -> dict[str, Any]:
    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")
    return data
