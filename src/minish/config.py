# minish — Minimal Interactive Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Configuration and data root resolution for minish.

Handles:
- Data root resolution (MINISH_DATA_HOME, ~/.local/share)
- Packaged YAML defaults loading (minish/defaults/system.yaml)
- Optional user override file (MINISH_CONFIG), deep-merged over defaults
- ShellConfig wrapper implementing the ConfigModel protocol
"""

from __future__ import annotations

import copy
import os
from importlib import resources as importlib_resources
from pathlib import Path
from typing import Any

import yaml


DEFAULT_PROMPT_TEMPLATE = "{cwd} [{user}] $ "
DEFAULT_FALLBACK_PROMPT = "$ "
DEFAULT_FAREWELL = "exiting gracefully..."


# -----------------------
# Config model wrapper
# -----------------------


class ShellConfig:
    """Simple config wrapper that implements ConfigModel protocol."""

    def __init__(self, config_dict: dict[str, Any]):
        self._config = config_dict

    @property
    def prompt_template(self) -> str:
        return str(self.get_path("prompt.template", DEFAULT_PROMPT_TEMPLATE))

    @property
    def fallback_prompt(self) -> str:
        return str(self.get_path("prompt.fallback", DEFAULT_FALLBACK_PROMPT))

    @property
    def farewell(self) -> str:
        return str(self.get_path("loop.farewell", DEFAULT_FAREWELL))

    @property
    def exit_on_eof(self) -> bool:
        return bool(self.get_path("loop.exit_on_eof", True))

    @property
    def collapse_whitespace(self) -> bool:
        return bool(self.get_path("parser.collapse_whitespace", False))

    @property
    def inherit_stdin(self) -> bool:
        return bool(self.get_path("execution.inherit_stdin", True))

    @property
    def ui(self) -> dict[str, Any]:
        ui_cfg = self._config.get("ui", {})
        return ui_cfg if isinstance(ui_cfg, dict) else {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def get_path(self, path: str, default: Any = None) -> Any:
        """
        Nested lookup using dot-separated path.
        Example: get_path("loop.farewell", "") -> farewell message
        """
        if not path:
            return default

        cur: Any = self._config
        for part in path.split("."):
            if not isinstance(cur, dict):
                return default
            if part not in cur:
                return default
            cur = cur[part]
        return cur


# -----------------------
# Data root
# -----------------------


def get_data_root() -> Path:
    """Get the data root directory for minish.

    Resolution order:
    1. MINISH_DATA_HOME environment variable (if set)
    2. ~/.local/share (default, XDG_DATA_HOME is ignored)
    """
    data_home = os.getenv("MINISH_DATA_HOME")
    if data_home:
        root = Path(data_home)
    else:
        root = Path.home() / ".local" / "share"

    root.mkdir(parents=True, exist_ok=True)
    return root


def logs_dir(data_root: Path) -> Path:
    """<data_root>/minish/logs"""
    return data_root / "minish" / "logs"


# -----------------------
# Packaged defaults loading
# -----------------------


def _defaults_dir() -> Path:
    """Return the installed path to packaged defaults directory."""
    return Path(
        importlib_resources.files("minish.defaults")
    )  # type: ignore[arg-type]


def _load_yaml_mapping(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config YAML {path} must load to a mapping/dict.")
    return data


def load_defaults_yaml(filename: str) -> dict[str, Any]:
    """
    Load a YAML file from minish/defaults/.
    """
    defaults_dir = _defaults_dir()
    path = defaults_dir / filename
    if not path.exists():
        raise FileNotFoundError(
            f"Missing defaults YAML: {filename} "
            f"(looked in {defaults_dir})"
        )
    return _load_yaml_mapping(path)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of base with override merged in (nested dicts merged)."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_system_config(override_path: Path | None = None) -> ShellConfig:
    """
    Load system.yaml from packaged defaults and return a ShellConfig wrapper.

    If override_path is None, MINISH_CONFIG is consulted. The override file
    must exist and load to a mapping.
    """
    data = load_defaults_yaml("system.yaml")

    if override_path is None:
        env_path = os.getenv("MINISH_CONFIG")
        if env_path:
            override_path = Path(env_path).expanduser()

    if override_path is not None:
        data = deep_merge(data, _load_yaml_mapping(override_path))

    return ShellConfig(data)
