"""Configuration loader for p4unity.

Reads p4unity.toml (or p4unity.yaml) from the working directory, which is the
directory of p4d when invoked as a trigger. Selected keys can be overridden
from the environment so credentials need not live on disk.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from p4unity.errors import ConfigError

DEFAULT_CONFIG_NAMES = ("p4unity.toml", "p4unity.yaml")

_TRUE_VALUES = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_VALUES = {"0", "f", "F", "FALSE", "false", "False"}


def parse_bool(value: str) -> bool:
    """Parse a boolean override value."""
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean: {value!r}")


@dataclass(frozen=True)
class AppConfig:
    """Settings for one p4unity invocation."""

    verbose_logs: bool = False
    perforce_server: str = ""
    perforce_user: str = ""
    perforce_pass: str = ""
    bypass_keyphrase: str = ""
    # depot directory prefixes subject to validation; empty validates nothing
    path_whitelist: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AppConfig:
        """Parse and validate a config mapping."""
        whitelist = data.get("path_whitelist", [])
        if isinstance(whitelist, str) or not all(isinstance(p, str) for p in whitelist):
            raise TypeError("path_whitelist must be a list of strings")

        verbose = data.get("verbose_logs", False)
        if not isinstance(verbose, bool):
            raise TypeError("verbose_logs must be a boolean")

        strings = {}
        for key in ("perforce_server", "perforce_user", "perforce_pass", "bypass_keyphrase"):
            value = data.get(key, "")
            if not isinstance(value, str):
                raise TypeError(f"{key} must be a string")
            strings[key] = value

        return cls(verbose_logs=verbose, path_whitelist=tuple(whitelist), **strings)


# config field -> (environment variable, parser)
ENV_OVERRIDES: dict[str, tuple[str, Callable[[str], Any]]] = {
    "verbose_logs": ("P4U_VERBOSE", parse_bool),
    "perforce_server": ("P4U_SERVER", str),
    "perforce_user": ("P4U_USER", str),
    "perforce_pass": ("P4U_PASS", str),
    "bypass_keyphrase": ("P4U_BYPASS", str),
}


def apply_env_overrides(config: AppConfig, environ: Mapping[str, str] | None = None) -> AppConfig:
    """Return a copy of `config` with non-empty environment overrides applied.

    Raises:
        ConfigError: If an override value cannot be parsed
    """
    env = os.environ if environ is None else environ
    changes: dict[str, Any] = {}
    for name, (variable, parse) in ENV_OVERRIDES.items():
        raw = env.get(variable, "")
        if not raw:
            continue
        try:
            changes[name] = parse(raw)
        except ValueError as e:
            raise ConfigError(f"Override failure - {variable}: {e}") from e
    return replace(config, **changes)


def _read_mapping(path: Path) -> Mapping[str, Any]:
    if path.suffix == ".toml":
        try:
            with open(path, "rb") as f:
                return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Malformed TOML config at {path}: {e}") from e

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed YAML config at {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config structure in {path}: top level must be a mapping")
    return data


def find_config(directory: Path) -> Path | None:
    """Return the first default config file present in `directory`."""
    for name in DEFAULT_CONFIG_NAMES:
        candidate = directory / name
        if candidate.exists():
            return candidate
    return None


def load_config(path: Path | None = None, environ: Mapping[str, str] | None = None) -> AppConfig:
    """Load configuration from disk and apply environment overrides.

    Priority order when `path` is not given:
    1. ./p4unity.toml (preferred)
    2. ./p4unity.yaml (fallback)

    Raises:
        ConfigError: If no config file is found, or it is malformed or invalid
    """
    config_path = path or find_config(Path.cwd())
    if config_path is None:
        raise ConfigError(f"{DEFAULT_CONFIG_NAMES[0]} not found in {Path.cwd()}")
    if not config_path.exists():
        raise ConfigError(f"{config_path} not found")

    data = _read_mapping(config_path)
    try:
        config = AppConfig.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid config structure in {config_path}: {e}") from e

    return apply_env_overrides(config, environ)
