# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration model for the cue command bridge."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TOOL_NAME: Final[str] = "cue"
DEFAULT_TIMEOUT_SECONDS: Final[float] = 5.0


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class VetExitPolicy(str, Enum):
    """Decide which ``cue vet`` exit statuses still have their output parsed."""

    PARSE_ANY_EXIT = "parse-any-exit"
    ZERO_EXIT_ONLY = "zero-exit-only"


class CueBridgeConfig(BaseModel):
    """Immutable settings shared by the command runner and the cue service."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    executable_path: Path | None = Field(default=None, alias="executable-path")
    tool_name: str = Field(default=DEFAULT_TOOL_NAME, alias="tool-name", min_length=1)
    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    vet_exit_policy: VetExitPolicy = Field(default=VetExitPolicy.PARSE_ANY_EXIT, alias="vet-exit-policy")

    @field_validator("executable_path", mode="before")
    @classmethod
    def _blank_path_is_unset(cls, value: Any) -> Any:
        """Treat empty strings as "no configured path" so ``PATH`` is searched."""

        if isinstance(value, str) and not value.strip():
            return None
        return value

    def with_overrides(self, **overrides: Any) -> CueBridgeConfig:
        """Return a validated copy with ``overrides`` applied.

        Args:
            **overrides: Field names mapped to replacement values. ``None`` values are ignored.

        Returns:
            CueBridgeConfig: New configuration instance.

        Raises:
            ConfigError: If the resulting configuration fails validation.
        """

        payload = self.model_dump(by_alias=False)
        payload.update({key: value for key, value in overrides.items() if value is not None})
        try:
            return CueBridgeConfig.model_validate(payload)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc


__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "DEFAULT_TOOL_NAME",
    "ConfigError",
    "CueBridgeConfig",
    "VetExitPolicy",
]
