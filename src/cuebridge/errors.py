# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy raised by the cue command bridge."""

from __future__ import annotations

from typing import ClassVar

from .messages import CANCELLED, EXE_NOT_FOUND, EXECUTE_ERROR, USER_PATH_NOT_FOUND, MessageCatalog, default_catalog


class CueBridgeError(RuntimeError):
    """Base class for failures that should be surfaced to the user."""

    default_key: ClassVar[str] = EXECUTE_ERROR

    def __init__(self, *, message_key: str | None = None, **params: object) -> None:
        """Initialise the error with a catalog key and template parameters.

        Args:
            message_key: Catalog key describing the failure; defaults to the class key.
            **params: Values interpolated into the message template.
        """

        self.message_key = message_key or self.default_key
        self.params = dict(params)
        super().__init__(default_catalog().get(self.message_key, **self.params))

    def localized(self, catalog: MessageCatalog) -> str:
        """Return the message rendered through ``catalog``."""

        return catalog.get(self.message_key, **self.params)


class ExecutableNotFound(CueBridgeError):
    """Raised when the tool cannot be located before any process is spawned."""

    default_key = EXE_NOT_FOUND

    @classmethod
    def for_configured_path(cls, path: str) -> ExecutableNotFound:
        """Return an error describing an invalid configured executable path."""

        return cls(message_key=USER_PATH_NOT_FOUND, path=path)


class ExecuteError(CueBridgeError):
    """Raised when spawning the tool or talking to its streams fails.

    The lower-level :class:`OSError` is chained as ``__cause__``.
    """

    default_key = EXECUTE_ERROR


class OperationCancelled(CueBridgeError):
    """Raised when the caller cancels a running command."""

    default_key = CANCELLED


__all__ = ["CueBridgeError", "ExecutableNotFound", "ExecuteError", "OperationCancelled"]
