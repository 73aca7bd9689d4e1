# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Layered configuration loading (defaults, TOML files, environment)."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Final, Protocol

from .config import ConfigError, CueBridgeConfig

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
STANDALONE_FILENAME: Final[str] = ".cuebridge.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "cuebridge"
ENV_EXECUTABLE: Final[str] = "CUEBRIDGE_EXECUTABLE"
ENV_TIMEOUT: Final[str] = "CUEBRIDGE_TIMEOUT"


class ConfigSource(Protocol):
    """Provide a fragment of configuration data."""

    name: str

    def load(self) -> Mapping[str, Any]:
        """Return the configuration fragment supplied by this source."""
        ...


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Unable to read {path}: {exc}") from exc


def _normalise_keys(fragment: Mapping[str, Any]) -> dict[str, Any]:
    return {str(key).replace("-", "_"): value for key, value in fragment.items()}


class TomlConfigSource:
    """Load a standalone ``.cuebridge.toml`` document."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.name = str(path)

    def load(self) -> Mapping[str, Any]:
        if not self.path.is_file():
            return {}
        return _normalise_keys(_read_toml(self.path))


class PyProjectConfigSource(TomlConfigSource):
    """Read configuration from ``[tool.cuebridge]`` within ``pyproject.toml``."""

    def load(self) -> Mapping[str, Any]:
        if not self.path.is_file():
            return {}
        section = _read_toml(self.path).get(PYPROJECT_TOOL_KEY, {}).get(PYPROJECT_SECTION_KEY, {})
        if not isinstance(section, Mapping):
            raise ConfigError(f"[tool.{PYPROJECT_SECTION_KEY}] in {self.path} must be a table")
        return _normalise_keys(section)


class EnvironmentConfigSource:
    """Map ``CUEBRIDGE_*`` environment variables onto configuration fields."""

    name = "environment"

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env = os.environ if env is None else env

    def load(self) -> Mapping[str, Any]:
        fragment: dict[str, Any] = {}
        if executable := self._env.get(ENV_EXECUTABLE):
            fragment["executable_path"] = executable
        if timeout := self._env.get(ENV_TIMEOUT):
            fragment["timeout"] = timeout
        return fragment


def default_sources(root: Path, env: Mapping[str, str] | None = None) -> list[ConfigSource]:
    """Return the sources consulted for ``root`` in ascending precedence."""

    return [
        PyProjectConfigSource(root / PYPROJECT_FILENAME),
        TomlConfigSource(root / STANDALONE_FILENAME),
        EnvironmentConfigSource(env),
    ]


def load_config(
    root: Path | None = None,
    *,
    sources: Sequence[ConfigSource] | None = None,
    env: Mapping[str, str] | None = None,
) -> CueBridgeConfig:
    """Build a :class:`CueBridgeConfig` by layering configuration sources.

    Args:
        root: Project directory searched for ``pyproject.toml`` and ``.cuebridge.toml``.
            Defaults to the current working directory.
        sources: Explicit sources overriding the defaults derived from ``root``.
        env: Environment mapping used instead of :data:`os.environ`.

    Returns:
        CueBridgeConfig: Validated configuration.

    Raises:
        ConfigError: If any source is malformed or the merged values are invalid.
    """

    active = list(sources) if sources is not None else default_sources(root or Path.cwd(), env)
    merged: dict[str, Any] = {}
    for source in active:
        merged.update(source.load())
    try:
        return CueBridgeConfig.model_validate(merged)
    except ValueError as exc:
        raise ConfigError(f"Invalid cuebridge configuration: {exc}") from exc


__all__ = [
    "ENV_EXECUTABLE",
    "ENV_TIMEOUT",
    "ConfigSource",
    "EnvironmentConfigSource",
    "PyProjectConfigSource",
    "TomlConfigSource",
    "default_sources",
    "load_config",
]
