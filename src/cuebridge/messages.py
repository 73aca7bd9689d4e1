# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing message catalog with optional TOML-based localisation."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Final

EXE_NOT_FOUND: Final[str] = "formatter.exeNotFound"
USER_PATH_NOT_FOUND: Final[str] = "formatter.userPathNotFound"
EXECUTE_ERROR: Final[str] = "formatter.cueExecuteError"
CANCELLED: Final[str] = "formatter.cancelled"

DEFAULT_MESSAGES: Final[Mapping[str, str]] = {
    EXE_NOT_FOUND: (
        "The cue executable could not be found on PATH. Install cue or configure the path to the executable."
    ),
    USER_PATH_NOT_FOUND: "The configured cue executable does not exist or is not executable: {path}",
    EXECUTE_ERROR: "An error occurred while executing cue.",
    CANCELLED: "The cue command was cancelled.",
}


@dataclass(frozen=True, slots=True)
class MessageCatalog:
    """Resolve message keys to localised, user-facing text."""

    messages: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_MESSAGES))

    def get(self, key: str, **params: object) -> str:
        """Return the text registered for ``key`` with ``params`` interpolated.

        Args:
            key: Message identifier such as ``formatter.exeNotFound``.
            **params: Placeholder values substituted into the template.

        Returns:
            str: Rendered message, or ``key`` itself when no template is known.
        """

        template = self.messages.get(key) or DEFAULT_MESSAGES.get(key)
        if template is None:
            return key
        try:
            return template.format(**params)
        except (KeyError, IndexError):
            return template

    def with_overrides(self, overrides: Mapping[str, str]) -> MessageCatalog:
        """Return a catalog whose templates are replaced by ``overrides``."""

        merged = dict(self.messages)
        merged.update(overrides)
        return MessageCatalog(messages=merged)

    @classmethod
    def from_toml(cls, path: Path) -> MessageCatalog:
        """Load localised templates from a flat or ``[messages]`` TOML table.

        Args:
            path: TOML document mapping message keys to templates.

        Returns:
            MessageCatalog: Catalog with the document's entries layered over the defaults.

        Raises:
            OSError: If ``path`` cannot be read.
            tomllib.TOMLDecodeError: If the document is not valid TOML.
        """

        with path.open("rb") as handle:
            data = tomllib.load(handle)
        table = data.get("messages", data)
        overrides = {str(key): value for key, value in _flatten(table).items() if isinstance(value, str)}
        return cls().with_overrides(overrides)


def _flatten(table: Mapping[str, object], prefix: str = "") -> dict[str, object]:
    # TOML parses ``formatter.exeNotFound = "..."`` as a nested table.
    flat: dict[str, object] = {}
    for key, value in table.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, Mapping):
            flat.update(_flatten(value, f"{dotted}."))
        else:
            flat[dotted] = value
    return flat


@lru_cache(maxsize=1)
def default_catalog() -> MessageCatalog:
    """Return the process-wide catalog holding the built-in English messages."""

    return MessageCatalog()


__all__ = [
    "CANCELLED",
    "DEFAULT_MESSAGES",
    "EXECUTE_ERROR",
    "EXE_NOT_FOUND",
    "USER_PATH_NOT_FOUND",
    "MessageCatalog",
    "default_catalog",
]
