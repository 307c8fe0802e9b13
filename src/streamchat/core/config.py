# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Defines the config unit so this responsibility stays isolated, testable, and easy to evolve.

"""
Configuration loading utilities for StreamChat.

Conventions:
- Application config: resources/config/app.json (or $STREAMCHAT_CONFIG)
- Environment variables (STREAMCHAT_*) override JSON values.
- JSON values can reference environment variables using ${VAR_NAME} placeholders.

API keys are never part of the configuration; they are supplied by the end
user per request.
"""

from __future__ import annotations

import copy
import json
import os
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from streamchat.services.exceptions import ConfigurationError

BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent
CONFIG_DIR = BASE_DIR / "resources" / "config"
STATIC_DIR = Path(__file__).resolve().parent.parent / "static"

DEFAULT_ENDPOINT = "https://openrouter.ai/api/v1/chat/completions"
# Hard ceiling on messages kept per session; config may only lower it.
MAX_HISTORY_LIMIT = 25
DEFAULT_HISTORY_LIMIT = MAX_HISTORY_LIMIT
DEFAULT_PORT = 7860

DEFAULTS: Dict[str, Any] = {
    "llm": {
        "endpoint": DEFAULT_ENDPOINT,
        "timeout_s": 60,
        "temperature": 0.7,
        "max_tokens": None,
    },
    "session": {"history_limit": DEFAULT_HISTORY_LIMIT},
    "server": {"host": "127.0.0.1", "port": DEFAULT_PORT},
}

_ENV_PATTERN = re.compile(r"\$\{([A-Z0-9_]+)\}")

# env var -> (section, key, caster)
_ENV_OVERRIDES = {
    "STREAMCHAT_ENDPOINT": ("llm", "endpoint", str),
    "STREAMCHAT_TIMEOUT_S": ("llm", "timeout_s", int),
    "STREAMCHAT_TEMPERATURE": ("llm", "temperature", float),
    "STREAMCHAT_MAX_TOKENS": ("llm", "max_tokens", int),
    "STREAMCHAT_HISTORY_LIMIT": ("session", "history_limit", int),
    "STREAMCHAT_HOST": ("server", "host", str),
    "STREAMCHAT_PORT": ("server", "port", int),
}


def default_config_path() -> Path:
    override = os.getenv("STREAMCHAT_CONFIG")
    if override:
        return Path(override)
    return CONFIG_DIR / "app.json"


def _interpolate_env(value: Any) -> Any:
    """Interpolate ${VAR} placeholders within strings using environment variables.

    Non-string types are returned unchanged.
    """
    if isinstance(value, str):

        def replace(match: re.Match[str]) -> str:
            var = match.group(1)
            return os.getenv(var, match.group(0))  # leave placeholder if unset

        return _ENV_PATTERN.sub(replace, value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(v) for v in value]
    return value


def _deep_merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Deeply merge mapping 'override' into dict 'base'. Returns new dict.

    - For dict values, merges recursively.
    - For lists and scalars, override replaces base.
    """
    result: Dict[str, Any] = dict(base)
    for k, v in override.items():
        if isinstance(v, Mapping) and isinstance(result.get(k), Mapping):
            result[k] = _deep_merge(dict(result[k]), v)  # type: ignore[index]
        else:
            result[k] = v
    return result


def load_json_file(path: os.PathLike[str] | str | None) -> Dict[str, Any]:
    """Load JSON from path if it exists; return empty dict if missing.

    Raises ValueError for malformed JSON.
    """
    if path is None:
        return {}
    p = Path(path)
    if not p.exists():
        return {}
    try:
        with p.open("r", encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, dict) else {}
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON at {p}: {e}") from e


def _env_overrides() -> Dict[str, Any]:
    """Collect STREAMCHAT_* environment variables into a nested dict structure."""
    result: Dict[str, Dict[str, Any]] = {}
    for var, (section, key, caster) in _ENV_OVERRIDES.items():
        raw = os.getenv(var)
        if raw is None or raw == "":
            continue
        try:
            value = caster(raw)
        except ValueError as e:
            raise ConfigurationError(f"{var} has an invalid value") from e
        result.setdefault(section, {})[key] = value
    return result


def _check_config(config: Dict[str, Any]) -> Dict[str, Any]:
    llm_cfg = config.get("llm") or {}
    endpoint = llm_cfg.get("endpoint")
    if not isinstance(endpoint, str) or not endpoint.startswith("https://"):
        raise ConfigurationError("llm.endpoint must be an https:// URL")
    try:
        llm_cfg["timeout_s"] = int(llm_cfg.get("timeout_s") or 60)
        llm_cfg["temperature"] = float(llm_cfg.get("temperature", 0.7))
        if llm_cfg.get("max_tokens") is not None:
            llm_cfg["max_tokens"] = int(llm_cfg["max_tokens"])
        session_cfg = config.get("session") or {}
        session_cfg["history_limit"] = int(
            session_cfg.get("history_limit") or DEFAULT_HISTORY_LIMIT
        )
        server_cfg = config.get("server") or {}
        server_cfg["port"] = int(server_cfg.get("port") or DEFAULT_PORT)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration value: {e}") from e
    if not 1 <= session_cfg["history_limit"] <= MAX_HISTORY_LIMIT:
        raise ConfigurationError(
            f"session.history_limit must be between 1 and {MAX_HISTORY_LIMIT}"
        )
    config["llm"] = llm_cfg
    config["session"] = session_cfg
    config["server"] = server_cfg
    return config


def load_app_config(
    path: os.PathLike[str] | str | None = None,
    defaults: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Load application configuration applying precedence and interpolation.

    Precedence: env overrides > JSON file > defaults
    """
    if path is None:
        path = default_config_path()
    base = _deep_merge(copy.deepcopy(DEFAULTS), defaults or {})
    json_config = load_json_file(path)
    json_config = _interpolate_env(json_config)
    merged = _deep_merge(base, json_config)
    merged = _deep_merge(merged, _env_overrides())
    return _check_config(merged)
