"""
Configuration management for Graph Room.

Handles persistent configuration including:
- Server title and port
- Log level
- Canvas size

Config is stored in config.json next to the executable/project root.
Environment variables (GRAPHROOM_*) take priority over the file; app.py loads
a .env file into the environment before settings are read.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from graphroom.paths import get_config_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "GRAPHROOM_"

DEFAULTS = {
    "title": "Graph Room",
    "port": 8080,
    "log_level": "INFO",
    "canvas_width": 1200,
    "canvas_height": 700,
}


@dataclass(frozen=True)
class Settings:
    """Resolved application settings."""
    title: str = DEFAULTS["title"]
    port: int = DEFAULTS["port"]
    log_level: str = DEFAULTS["log_level"]
    canvas_width: int = DEFAULTS["canvas_width"]
    canvas_height: int = DEFAULTS["canvas_height"]


def load_config(config_path: Optional[Path] = None) -> dict:
    """Load configuration from config.json."""
    config_path = config_path or get_config_path()
    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
                return data if isinstance(data, dict) else {}
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Ignoring unreadable config file {config_path}: {e}")
            return {}
    return {}


def _lookup(key: str, config: dict) -> Any:
    """
    Resolve a single setting.

    Priority:
    1. Environment variable GRAPHROOM_<KEY>
    2. Stored in config.json
    3. Built-in default
    """
    env_value = os.environ.get(ENV_PREFIX + key.upper())
    if env_value:
        return env_value
    if key in config:
        return config[key]
    return DEFAULTS[key]


def _as_int(key: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid value for {key}: {value!r}, using {DEFAULTS[key]}")
        return DEFAULTS[key]


def get_settings(config_path: Optional[Path] = None) -> Settings:
    """Build Settings from environment, config.json and defaults."""
    config = load_config(config_path)
    level = str(_lookup("log_level", config)).upper()
    if not isinstance(logging.getLevelName(level), int):
        logger.warning(f"Unknown log level {level!r}, using {DEFAULTS['log_level']}")
        level = DEFAULTS["log_level"]
    return Settings(
        title=str(_lookup("title", config)),
        port=_as_int("port", _lookup("port", config)),
        log_level=level,
        canvas_width=_as_int("canvas_width", _lookup("canvas_width", config)),
        canvas_height=_as_int("canvas_height", _lookup("canvas_height", config)),
    )
