"""Configuration loader for nippo.

Credentials come from the environment (NIPPO_GITHUB_USER_NAME and
NIPPO_GITHUB_API_TOKEN). Optional settings are read from a YAML file at
~/.config/nippo/config.yaml (or a custom path).

Requires PyYAML (pip install pyyaml).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from nippo.errors import ConfigurationError


USER_ENV_VAR = "NIPPO_GITHUB_USER_NAME"
TOKEN_ENV_VAR = "NIPPO_GITHUB_API_TOKEN"

DEFAULT_CONFIG_PATH = os.path.expanduser("~/.config/nippo/config.yaml")
DEFAULT_TIMEOUT = 60.0

VIEWS = ("classified", "latest")
ISSUE_CLOSED_BY = ("created", "closed")


@dataclass
class Credentials:
    """GitHub login and access token used for one run."""

    user: str
    token: str

    def __repr__(self) -> str:
        return f"Credentials(user={self.user!r}, token='***')"


@dataclass
class Config:
    """Optional report settings."""

    timeout: float = DEFAULT_TIMEOUT
    timezone: str = ""           # IANA name; empty means system local time
    issue_closed_by: str = "created"
    view: str = "classified"
    detailed: bool = False

    def tzinfo(self) -> Optional[ZoneInfo]:
        """Return the configured timezone, or None for system local time."""
        if not self.timezone:
            return None
        return ZoneInfo(self.timezone)


def load_credentials(environ: Optional[Mapping[str, str]] = None) -> Credentials:
    """Read GitHub credentials from the environment.

    Args:
        environ: Mapping to read from. Defaults to os.environ.

    Returns:
        A Credentials instance.

    Raises:
        ConfigurationError: If either variable is unset or empty.
    """
    env = os.environ if environ is None else environ
    user = (env.get(USER_ENV_VAR) or "").strip()
    token = (env.get(TOKEN_ENV_VAR) or "").strip()

    missing = [name for name, value in ((USER_ENV_VAR, user), (TOKEN_ENV_VAR, token)) if not value]
    if missing:
        raise ConfigurationError(
            f"missing required environment variable(s): {', '.join(missing)}"
        )
    return Credentials(user=user, token=token)


def _expand_path(path: str) -> str:
    """Expand ~ and environment variables in a path."""
    return os.path.expanduser(os.path.expandvars(path))


def _parse_timeout(value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigurationError(f"timeout must be a positive number, got {value!r}")
    return float(value)


def _parse_choice(key: str, value, choices: tuple[str, ...]) -> str:
    if value not in choices:
        raise ConfigurationError(
            f"{key} must be one of {', '.join(choices)}, got {value!r}"
        )
    return value


def _parse_timezone(value) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"timezone must be a string, got {value!r}")
    if value:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(f"unknown timezone {value!r}") from e
    return value


def load_config(config_path: Optional[str] = None) -> Config:
    """Load settings from a YAML file.

    Args:
        config_path: Path to the YAML file. Defaults to
            ~/.config/nippo/config.yaml.

    Returns:
        A Config instance. A missing file or an empty document yields the
        defaults.

    Raises:
        ConfigurationError: If the file is not valid YAML, is not a
            mapping, or holds an invalid value.
    """
    path = _expand_path(config_path) if config_path else DEFAULT_CONFIG_PATH

    if not os.path.isfile(path):
        if config_path:
            raise ConfigurationError(f"config file not found: {path}")
        return Config()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"cannot parse {path}: {e}") from e

    if data is None:
        return Config()
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping")

    cfg = Config()
    if "timeout" in data:
        cfg.timeout = _parse_timeout(data["timeout"])
    if "timezone" in data:
        cfg.timezone = _parse_timezone(data["timezone"] or "")
    if "issue_closed_by" in data:
        cfg.issue_closed_by = _parse_choice("issue_closed_by", data["issue_closed_by"], ISSUE_CLOSED_BY)
    if "view" in data:
        cfg.view = _parse_choice("view", data["view"], VIEWS)
    if "detailed" in data:
        if not isinstance(data["detailed"], bool):
            raise ConfigurationError(f"detailed must be true or false, got {data['detailed']!r}")
        cfg.detailed = data["detailed"]
    return cfg
