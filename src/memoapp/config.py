"""Configuration loading from environment variables and memoapp.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

from memoapp.errors import ConfigError

DEFAULT_API_BASE = "https://challenge-server.tracks.run/memoapp"
_CONFIG_FILENAME = "memoapp.toml"
_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


@dataclass
class RemoteConfig:
    """Where the memo API lives."""

    base_url: str = DEFAULT_API_BASE
    timeout: float = 30.0


@dataclass
class ModeConfig:
    """Failure policy. ``offline_demo`` substitutes demo data on remote failure."""

    offline_demo: bool = False


@dataclass
class MemoAppConfig:
    """Top-level memoapp configuration."""

    remote: RemoteConfig = field(default_factory=RemoteConfig)
    mode: ModeConfig = field(default_factory=ModeConfig)
    log_level: str = "INFO"


def _parse_bool(name: str, value: object) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUTHY:
        return True
    if text in _FALSY:
        return False
    raise ConfigError(f"{name}: expected a boolean, got {value!r}")


def _parse_timeout(value: object) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"timeout: expected a number, got {value!r}") from None
    if timeout <= 0:
        raise ConfigError(f"timeout: must be positive, got {timeout}")
    return timeout


def load_config(config_path: Path | None = None) -> MemoAppConfig:
    """Load configuration from environment variables and optional memoapp.toml.

    Priority: environment variables > memoapp.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        # Search current dir and ~/.memoapp/
        for candidate in [Path.cwd() / _CONFIG_FILENAME, Path.home() / ".memoapp" / _CONFIG_FILENAME]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    remote_data = file_data.get("remote", {})
    mode_data = file_data.get("mode", {})

    return MemoAppConfig(
        remote=RemoteConfig(
            base_url=os.getenv("MEMOAPP_API_BASE", remote_data.get("base_url", DEFAULT_API_BASE)),
            timeout=_parse_timeout(os.getenv("MEMOAPP_TIMEOUT", remote_data.get("timeout", 30))),
        ),
        mode=ModeConfig(
            offline_demo=_parse_bool(
                "offline_demo",
                os.getenv("MEMOAPP_OFFLINE_DEMO", mode_data.get("offline_demo", False)),
            ),
        ),
        log_level=os.getenv("MEMOAPP_LOG_LEVEL", file_data.get("log_level", "INFO")),
    )
