"""Application settings loaded from YAML.

Example ``flexconf.yaml``:

```yaml
default_backend: Windows WASAPI

backends:
  - value: Windows WASAPI
    display_name: WASAPI
  - value: MME
    display_name: MME

update_check:
  owner: some-owner
  repo: some-repo
  timeout: 10

enumeration:
  max_attempts: 1
  min_wait: 0.1
  max_wait: 1.0
```

Every section is optional; missing values fall back to the defaults below.
"""
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from ..utils.connection import RetryPolicy
from .schema import DEFAULT_BACKEND

logger = logging.getLogger(__name__)

SETTINGS_ENV = "FLEXCONF_SETTINGS"


class SettingsError(Exception):
    """Settings file exists but cannot be used."""
    pass


@dataclass(frozen=True)
class AudioBackend:
    """A backend the driver can be told to use."""
    value: str          # what goes into the driver file
    display_name: str   # what the backend picker shows


DEFAULT_BACKENDS = (
    AudioBackend(value="Windows WASAPI", display_name="WASAPI"),
    AudioBackend(value="Windows DirectSound", display_name="DirectSound"),
    AudioBackend(value="MME", display_name="MME"),
    AudioBackend(value="Windows WDM-KS", display_name="WDM-KS"),
)


@dataclass(frozen=True)
class UpdateCheckSettings:
    """Where to look for new releases."""
    owner: str = "ramiro-uziel"
    repo: str = "FlexASIO-Fluent"
    timeout: float = 10.0

    @property
    def latest_release_url(self) -> str:
        return f"https://api.github.com/repos/{self.owner}/{self.repo}/releases/latest"


@dataclass
class AppSettings:
    """Everything the application reads from its settings file."""
    backends: list[AudioBackend] = field(default_factory=lambda: list(DEFAULT_BACKENDS))
    default_backend: str = DEFAULT_BACKEND
    update_check: UpdateCheckSettings = field(default_factory=UpdateCheckSettings)
    enumeration: RetryPolicy = field(default_factory=RetryPolicy)
    source: Optional[str] = None

    def get_backend(self, value: str) -> AudioBackend:
        """Look up a backend by value or display name."""
        for backend in self.backends:
            if backend.value == value or backend.display_name == value:
                return backend
        raise KeyError(f"Unknown backend: {value}")

    def backend_values(self) -> list[str]:
        return [b.value for b in self.backends]

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: Optional[str] = None) -> "AppSettings":
        """Build settings from parsed YAML, validating as we go."""
        if not isinstance(data, dict):
            raise SettingsError("Settings must be a mapping at the top level")

        settings = cls(source=source)

        if "backends" in data:
            settings.backends = _parse_backends(data["backends"])

        default_backend = data.get("default_backend", settings.default_backend)
        if default_backend not in settings.backend_values():
            logger.warning(
                f"default_backend {default_backend!r} is not in the backend list"
            )
        settings.default_backend = default_backend

        update = data.get("update_check") or {}
        if not isinstance(update, dict):
            raise SettingsError("update_check must be a mapping")
        settings.update_check = UpdateCheckSettings(
            owner=str(update.get("owner", settings.update_check.owner)),
            repo=str(update.get("repo", settings.update_check.repo)),
            timeout=_number(update, "timeout", settings.update_check.timeout),
        )

        enumeration = data.get("enumeration") or {}
        if not isinstance(enumeration, dict):
            raise SettingsError("enumeration must be a mapping")
        max_attempts = int(_number(enumeration, "max_attempts", settings.enumeration.max_attempts))
        if max_attempts < 1:
            raise SettingsError("enumeration.max_attempts must be at least 1")
        settings.enumeration = RetryPolicy(
            max_attempts=max_attempts,
            min_wait=_number(enumeration, "min_wait", settings.enumeration.min_wait),
            max_wait=_number(enumeration, "max_wait", settings.enumeration.max_wait),
        )

        return settings


def _number(section: dict, key: str, default: float) -> float:
    value = section.get(key, default)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise SettingsError(f"{key} must be a number, got {value!r}")


def _parse_backends(raw: Any) -> list[AudioBackend]:
    if not isinstance(raw, list) or not raw:
        raise SettingsError("backends must be a non-empty list")

    backends = []
    for item in raw:
        if isinstance(item, str):
            backends.append(AudioBackend(value=item, display_name=item))
        elif isinstance(item, dict) and item.get("value"):
            backends.append(AudioBackend(
                value=str(item["value"]),
                display_name=str(item.get("display_name") or item["value"]),
            ))
        else:
            raise SettingsError(f"Invalid backend entry: {item!r}")
    return backends


def find_settings_file() -> Optional[Path]:
    """Find flexconf.yaml, or None if there is none."""
    env_path = os.environ.get(SETTINGS_ENV)
    if env_path:
        return Path(env_path)

    search_paths = [
        Path.cwd() / "flexconf.yaml",
        Path.home() / ".config" / "flexconf" / "flexconf.yaml",
    ]
    for path in search_paths:
        if path.exists():
            return path
    return None


def load_settings(path: Optional[str | Path] = None) -> AppSettings:
    """
    Load application settings.

    Args:
        path: Explicit settings file; searched for when omitted

    Returns:
        AppSettings, the built-in defaults when no file is found

    Raises:
        SettingsError: If the file cannot be read or is malformed
    """
    settings_path = Path(path) if path else find_settings_file()
    if settings_path is None:
        logger.debug("No settings file found, using defaults")
        return AppSettings()

    try:
        with open(settings_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise SettingsError(f"Cannot read settings file {settings_path}: {e}")
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML in {settings_path}: {e}")

    logger.info(f"Loaded settings from {settings_path}")
    return AppSettings.from_dict(data or {}, source=str(settings_path))
