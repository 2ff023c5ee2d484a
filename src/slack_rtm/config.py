"""Configuration loading for the RTM stream.

Layered lookup:
1. Explicit path argument (highest precedence)
2. Environment variable SLACK_RTM_CONFIG
3. Fallback to "config/default.yaml"

Values can be overridden from environment variables with prefix
``SLACK_RTM__`` (e.g., SLACK_RTM__STREAM__INFLATE=true).
"""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "SLACK_RTM__"

DEFAULTS: Dict[str, Any] = {
    "slack": {
        "api_url": "https://slack.com/api",
        "token_env": "SLACK_TOKEN",
        "timeout": 10,
        "max_retries": 3,
    },
    "stream": {"inflate": False, "format_text": True},
    "server": {"cors_origins": ["*"]},
    "logging": {"level": "INFO"},
}


def _coerce(value: str) -> Any:
    if value.lower() in {"true", "false"}:
        return value.lower() == "true"
    try:
        if "." in value:
            return float(value)
        return int(value)
    except ValueError:
        return value


def _apply_env_overrides(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Apply environment variable overrides with prefix SLACK_RTM__."""
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        # e.g., SLACK_RTM__SLACK__API_URL -> cfg["slack"]["api_url"]
        parts = key[len(ENV_PREFIX):].lower().split("__")
        sub = cfg
        for p in parts[:-1]:
            if p not in sub or not isinstance(sub[p], dict):
                sub[p] = {}
            sub = sub[p]
        sub[parts[-1]] = _coerce(value)
    return cfg


def _merge(base: Dict[str, Any], extra: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in extra.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config(path: str | None = None) -> Dict[str, Any]:
    """Load YAML configuration, layered over the built-in defaults.

    Parameters
    ----------
    path : str | None
        Optional path to a configuration file. If not provided, the
        environment variable ``SLACK_RTM_CONFIG`` is consulted. As a
        last resort ``config/default.yaml`` is used.

    Returns
    -------
    Dict[str, Any]
        Configuration dictionary with environment overrides applied.
    """
    if path is None:
        path = os.environ.get("SLACK_RTM_CONFIG", "config/default.yaml")

    cfg = copy.deepcopy(DEFAULTS)
    path_obj = Path(path)
    if not path_obj.exists():
        logger.warning("Config file not found at %s. Using defaults.", path_obj)
        return _apply_env_overrides(cfg)

    with path_obj.open("r", encoding="utf-8") as f:
        try:
            loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise RuntimeError(f"Failed to parse config file {path_obj}: {e}")

    if not isinstance(loaded, dict):
        raise RuntimeError(f"Invalid config format in {path_obj}, expected dict.")

    return _apply_env_overrides(_merge(cfg, loaded))
