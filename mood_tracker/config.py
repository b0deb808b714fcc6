"""Configuration loading for the mood tracker service."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml

DEFAULT_WEBHOOK_TIMEOUT = 10.0

WEBHOOK_URL_ENV_VARS = ("MAKE_WEBHOOK_URL", "WEBHOOK_URL")
WEBHOOK_TIMEOUT_ENV_VAR = "MOOD_TRACKER_WEBHOOK_TIMEOUT"
CONFIG_PATH_ENV_VAR = "MOOD_TRACKER_CONFIG"


class ConfigurationError(RuntimeError):
    """Raised when the service settings cannot be loaded."""


@dataclass(frozen=True)
class ServiceSettings:
    """Runtime settings for submission forwarding."""

    webhook_url: Optional[str] = None
    webhook_timeout: float = DEFAULT_WEBHOOK_TIMEOUT

    @staticmethod
    def from_dict(data: Mapping[str, object]) -> "ServiceSettings":
        """Create :class:`ServiceSettings` from raw dictionary data."""
        raw_url = data.get("webhook_url")
        webhook_url = str(raw_url).strip() if raw_url is not None else None
        return ServiceSettings(
            webhook_url=webhook_url or None,
            webhook_timeout=_parse_timeout(data.get("webhook_timeout"), DEFAULT_WEBHOOK_TIMEOUT),
        )


def _parse_timeout(value: object, default: float) -> float:
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return default
    try:
        timeout = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid webhook timeout value {value!r}") from exc
    if timeout <= 0:
        raise ConfigurationError(f"Webhook timeout must be positive, got {timeout}")
    return timeout


def resolve_webhook_url(environ: Mapping[str, str]) -> Optional[str]:
    """Return the first non-empty webhook destination from the environment."""
    for name in WEBHOOK_URL_ENV_VARS:
        value = environ.get(name)
        if value and value.strip():
            return value.strip()
    return None


def _load_config_file(config_path: Path) -> Dict[str, object]:
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
    except OSError as exc:
        raise ConfigurationError(f"Failed to read configuration file {config_path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Malformed configuration file {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Configuration file {config_path} must contain a mapping")
    return raw


def load_settings(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ServiceSettings:
    """Load settings from an optional YAML file, overridden by environment variables."""
    env = os.environ if environ is None else environ

    if config_path is None and env.get(CONFIG_PATH_ENV_VAR):
        config_path = Path(env[CONFIG_PATH_ENV_VAR]).expanduser().resolve(strict=False)

    file_settings = (
        ServiceSettings.from_dict(_load_config_file(config_path))
        if config_path is not None
        else ServiceSettings()
    )

    webhook_url = resolve_webhook_url(env) or file_settings.webhook_url
    webhook_timeout = _parse_timeout(env.get(WEBHOOK_TIMEOUT_ENV_VAR), file_settings.webhook_timeout)

    return ServiceSettings(webhook_url=webhook_url, webhook_timeout=webhook_timeout)


__all__ = [
    "ConfigurationError",
    "DEFAULT_WEBHOOK_TIMEOUT",
    "ServiceSettings",
    "load_settings",
    "resolve_webhook_url",
]
