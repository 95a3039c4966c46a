from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

CONFIG_DIR_NAME = ".lazylinear"
CONFIG_FILE_NAME = "config.json"

logger = logging.getLogger(__name__)


def default_config_dir() -> Path:
    return Path.home() / CONFIG_DIR_NAME


def default_config_path() -> Path:
    override = os.getenv("LAZYLINEAR_CONFIG_PATH")
    if override:
        return Path(override).expanduser()
    return default_config_dir() / CONFIG_FILE_NAME


def _to_float(value: Any, default: float, minimum: float) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        parsed = default
    return max(minimum, parsed)


@dataclass(frozen=True)
class AppConfig:
    api_key: str = ""
    request_timeout_seconds: float = 30.0
    config_source: str = "defaults"

    @classmethod
    def from_env(cls, path: Path | None = None) -> "AppConfig":
        config = load_config(path)
        env_key = os.getenv("LINEAR_API_KEY")
        if env_key:
            config = AppConfig(
                api_key=env_key.strip(),
                request_timeout_seconds=config.request_timeout_seconds,
                config_source=f"{config.config_source}+env",
            )
        env_timeout = os.getenv("LAZYLINEAR_TIMEOUT")
        if env_timeout is not None:
            config = AppConfig(
                api_key=config.api_key,
                request_timeout_seconds=_to_float(env_timeout, config.request_timeout_seconds, 1.0),
                config_source=config.config_source,
            )
        return config


def load_config(path: Path | None = None) -> AppConfig:
    """Read the config file; a missing or broken file yields defaults."""
    path = path or default_config_path()
    if not path.exists():
        return AppConfig()
    try:
        loaded = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("could not load config from %s: %s", path, e)
        return AppConfig()
    if not isinstance(loaded, dict):
        logger.warning("ignoring config %s: top level is not an object", path)
        return AppConfig()
    defaults = AppConfig()
    return AppConfig(
        api_key=str(loaded.get("api_key") or "").strip(),
        request_timeout_seconds=_to_float(
            loaded.get("request_timeout_seconds", defaults.request_timeout_seconds),
            defaults.request_timeout_seconds,
            1.0,
        ),
        config_source=str(path),
    )


def save_config(config: AppConfig, path: Path | None = None) -> Path:
    path = path or default_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {"api_key": config.api_key}
    if config.request_timeout_seconds != AppConfig.request_timeout_seconds:
        payload["request_timeout_seconds"] = config.request_timeout_seconds
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    return path
