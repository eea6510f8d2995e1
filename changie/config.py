"""Layered configuration: explicit values, environment, config file, defaults."""

from __future__ import annotations

import json
import logging
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

log = logging.getLogger(__name__)

_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}
_EXTENSIONS = ("json", "toml", "yaml", "yml")


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or parsed."""


def _flatten(data: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for key, value in data.items():
        name = f"{prefix}{str(key).lower()}"
        if isinstance(value, Mapping):
            flat.update(_flatten(value, f"{name}."))
        else:
            flat[name] = value
    return flat


def _parse(path: Path) -> dict[str, Any]:
    suffix = path.suffix.lstrip(".").lower()
    if suffix not in _EXTENSIONS:
        raise ConfigError(f'Unsupported Config Type "{suffix}"')
    text = path.read_text(encoding="utf-8")
    try:
        if suffix == "json":
            data = json.loads(text) if text.strip() else {}
        elif suffix == "toml":
            data = tomllib.loads(text)
        else:
            data = yaml.safe_load(text) or {}
    except (ValueError, yaml.YAMLError) as exc:
        raise ConfigError(f"While parsing config: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ConfigError("While parsing config: top level is not a mapping")
    return _flatten(data)


class Config:
    """Configuration values looked up by dotted key.

    Precedence, highest first: values given with ``set``, environment
    variables (``app.log_level`` is read from ``APP_LOG_LEVEL``), values from
    the config file, and defaults.
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env = os.environ if env is None else env
        self._overrides: dict[str, Any] = {}
        self._file: dict[str, Any] = {}
        self._defaults: dict[str, Any] = {}
        self.config_file: Path | None = None

    def set_default(self, key: str, value: Any) -> None:
        self._defaults[key.lower()] = value

    def set(self, key: str, value: Any) -> None:
        self._overrides[key.lower()] = value

    def get(self, key: str) -> Any:
        """Return the value for ``key`` or None if it is not set anywhere."""
        key = key.lower()
        if key in self._overrides:
            return self._overrides[key]
        env_value = self._env.get(key.replace(".", "_").upper())
        if env_value:
            return env_value
        if key in self._file:
            return self._file[key]
        return self._defaults.get(key)

    def get_str(self, key: str) -> str:
        value = self.get(key)
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    def get_bool(self, key: str) -> bool:
        value = self.get(key)
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return value != 0
        if isinstance(value, str):
            stripped = value.strip()
            if stripped in _TRUE:
                return True
            if stripped in _FALSE:
                return False
        return False

    def read_file(self, path: str | os.PathLike[str]) -> None:
        """Load values from a YAML, JSON or TOML file."""
        file_path = Path(path)
        try:
            self._file = _parse(file_path)
        except OSError as exc:
            raise ConfigError(f"open {file_path}: {exc.strerror or exc}") from exc
        self.config_file = file_path


def _find_home_config(binary_name: str) -> Path | None:
    try:
        home = Path.home()
    except RuntimeError as exc:
        raise ConfigError(f"cannot determine home directory: {exc}") from exc
    for extension in _EXTENSIONS:
        candidate = home / f".{binary_name}.{extension}"
        if candidate.is_file():
            return candidate
    return None


def load_config(config_file: str | None, binary_name: str = "changie") -> Config:
    """Build the configuration from an explicit file or ``~/.<binary_name>.*``."""
    config = Config()
    config.set_default("app.log_level", "info")

    path = Path(config_file) if config_file else _find_home_config(binary_name)
    if path is None:
        log.info("No config file found, using defaults and environment variables")
        return config

    try:
        config.read_file(path)
    except ConfigError as exc:
        log.error("Failed to read config file: %s", exc)
        raise ConfigError(f"failed to read config file: {exc}") from exc
    log.info("Using config file: %s", path)
    return config