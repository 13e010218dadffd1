"""Configuration models and loaders for partialdump.

This module defines the dump policy (limits, key lists and hooks) and the
command line configuration, and how values are loaded from YAML plus
environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path
from re import Pattern
from typing import Any, Callable

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CONFIG_PATH = "partialdump.yaml"

DEFAULT_MAX_TOTAL_LEN = 80
DEFAULT_MAX_LEN = 32
DEFAULT_MAX_KEYS = 5
DEFAULT_MAX_ELEMS = 5


class LoggingConfig(BaseModel):
    """Logging-related configuration."""

    model_config = ConfigDict(populate_by_name=True)

    level: str = "INFO"
    json_logs: bool = Field(default=False, alias="json")


class DumpOptions(BaseModel):
    """Limits, key lists and hooks applied by one partial dump.

    A limit of ``0`` disables that limit. ``max_keys`` keeps its configured
    value. The limit actually applied to mappings is ``effective_max_keys``,
    which makes room for every distinct precious key.
    """

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    max_total_len: int = DEFAULT_MAX_TOTAL_LEN
    max_len: int = DEFAULT_MAX_LEN
    max_keys: int = DEFAULT_MAX_KEYS
    max_elems: int = DEFAULT_MAX_ELEMS

    precious_keys: list[Any] = Field(default_factory=list)
    worthless_keys: list[Any] = Field(default_factory=list)
    hide_keys: list[Any] = Field(default_factory=list)
    mask_keys_regex: Pattern[str] | None = None

    pair_filter: Callable[..., Any] | None = None
    dd_filter: Callable[..., Any] | None = None

    @field_validator("max_total_len", "max_len", "max_keys", "max_elems")
    @classmethod
    def _validate_non_negative_limits(cls, value: int) -> int:
        """Ensure limits are non-negative (0 disables a limit)."""
        if value < 0:
            raise ValueError("limits must be >= 0")
        return value

    @field_validator("max_total_len", "max_len")
    @classmethod
    def _validate_room_for_ellipsis(cls, value: int) -> int:
        """Length limits must leave room for the ellipsis when they apply."""
        if 0 < value < 3:
            raise ValueError("length limits must be 0 (disabled) or >= 3")
        return value

    @field_validator("precious_keys", "worthless_keys", "hide_keys", mode="before")
    @classmethod
    def _none_to_empty_list(cls, value: Any) -> Any:
        """Treat explicit YAML `null` for key lists as an empty list."""
        if value is None:
            return []
        return value

    @property
    def effective_max_keys(self) -> int:
        """Key limit raised to fit all distinct precious keys, 0 when disabled."""
        if not self.max_keys:
            return 0
        return max(self.max_keys, len(set(self.precious_keys)))


class PartialDumpConfig(BaseModel):
    """Top-level configuration of the partialdump command line tool."""

    model_config = ConfigDict(extra="forbid")

    options: DumpOptions = Field(default_factory=DumpOptions)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("options", "logging", mode="before")
    @classmethod
    def _none_to_defaults(cls, value: Any) -> Any:
        """Treat an empty YAML section as defaults."""
        if value is None:
            return {}
        return value


def _load_yaml(path: str | None) -> dict[str, Any]:
    """Load a YAML file into a dictionary.

    Missing files are treated as empty config for environment-only setups.
    """
    if not path:
        return {}
    cfg_path = Path(path)
    if not cfg_path.exists():
        return {}
    with cfg_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config root must be object: {path}")
    return data


def _split_key_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _override_from_env(data: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides on top of file configuration."""
    env_map = {
        "options.max_total_len": "PARTIALDUMP_MAX_TOTAL_LEN",
        "options.max_len": "PARTIALDUMP_MAX_LEN",
        "options.max_keys": "PARTIALDUMP_MAX_KEYS",
        "options.max_elems": "PARTIALDUMP_MAX_ELEMS",
        "options.precious_keys": "PARTIALDUMP_PRECIOUS_KEYS",
        "options.worthless_keys": "PARTIALDUMP_WORTHLESS_KEYS",
        "options.hide_keys": "PARTIALDUMP_HIDE_KEYS",
        "options.mask_keys_regex": "PARTIALDUMP_MASK_KEYS_REGEX",
        "logging.level": "PARTIALDUMP_LOG_LEVEL",
        "logging.json_logs": "PARTIALDUMP_LOG_JSON",
    }

    out = dict(data)
    out["options"] = dict(out.get("options") or {})
    out["logging"] = dict(out.get("logging") or {})

    for key, env_name in env_map.items():
        value = os.getenv(env_name)
        if value is None:
            continue

        section, name = key.split(".", 1)
        if name in {"max_total_len", "max_len", "max_keys", "max_elems"}:
            out[section][name] = int(value)
        elif name in {"precious_keys", "worthless_keys", "hide_keys"}:
            out[section][name] = _split_key_list(value)
        elif name == "json_logs":
            out[section]["json"] = value.lower() in {"1", "true", "yes", "on"}
        else:
            out[section][name] = value

    return out


def load_config(path: str | None = None) -> PartialDumpConfig:
    """Load, merge, and validate partialdump configuration."""
    final_path = path or os.getenv("PARTIALDUMP_CONFIG") or DEFAULT_CONFIG_PATH
    raw = _load_yaml(final_path)
    raw = _override_from_env(raw)
    return PartialDumpConfig.model_validate(raw)
