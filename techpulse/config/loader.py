"""YAML configuration loader with environment variable overrides.

Configuration is loaded in layers (later layers override earlier):

  1. ``config/config.yaml``  -- tuning defaults checked into the repo
  2. ``.env`` file           -- local developer overrides (not committed)
  3. Environment variables   -- set at deploy time

``load_config()`` reads the YAML file, then deep-merges the env-derived
values from :class:`~techpulse.config.settings.Settings` on top.  Missing
YAML sections fall back to :data:`DEFAULTS`, so a bare checkout runs
without a config file.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

from techpulse.config.settings import Settings

DEFAULTS: dict[str, Any] = {
    "ingestion": {
        "batch_size": 5,
    },
    "feed": {
        "page_size": 10,
    },
    "search": {
        "limit": 5,
    },
    "classifier": {
        "temperature": 0.2,
        "max_tokens": 400,
    },
    "chat": {
        "temperature": 0.5,
        "max_tokens": 800,
    },
}


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.
        settings: Pre-built settings; a fresh ``Settings()`` is read when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    config = copy.deepcopy(DEFAULTS)

    config_path = Path(path)
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}
        _deep_merge(config, yaml_config)

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
        "llm": {
            "text_model": settings.openai_text_model or "gpt-4o-mini",
            "embedding_model": settings.openai_embedding_model or "text-embedding-3-small",
            "configured": bool(settings.openai_api_key),
        },
        "storage": {
            "database_path": settings.database_path,
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(config, env_overrides)
    return config


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
