# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (logging, errors, state)."""

from __future__ import annotations

from dataclasses import dataclass

import typer

from ..core.logging import fail as core_fail
from ..core.logging import info as core_info
from ..core.logging import ok as core_ok
from ..core.logging import section as core_section
from ..core.runtime.di import ServiceContainer
from ..errors import CueBridgeError
from ..messages import MessageCatalog
from ..runtime.console.manager import detect_tty
from ..service import CueCommandService


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Adapter around project logging helpers respecting CLI emoji and colour settings."""

    use_emoji: bool
    use_color: bool | None = None

    def fail(self, message: str) -> None:
        """Log a failure message to standard error."""

        core_fail(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def section(self, title: str) -> None:
        """Print a section header, drawn as a rule when colour is active."""

        core_section(title, use_color=detect_tty() if self.use_color is None else self.use_color)

    def ok(self, message: str) -> None:
        """Log a success message."""

        core_ok(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def info(self, message: str) -> None:
        """Log an informational message."""

        core_info(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def echo(self, message: str, *, newline: bool = True) -> None:
        """Write ``message`` verbatim to stdout using Typer's echo helper."""

        typer.echo(message, nl=newline)


def build_cli_logger(*, emoji: bool, no_color: bool = False) -> CLILogger:
    """Return a ``CLILogger`` configured for the provided presentation flags."""

    return CLILogger(use_emoji=emoji, use_color=False if no_color else None)


@dataclass(slots=True)
class CLIState:
    """Per-invocation state shared by every command through ``ctx.obj``."""

    services: ServiceContainer
    logger: CLILogger

    @property
    def service(self) -> CueCommandService:
        """Return the configured :class:`CueCommandService`."""

        return self.services.resolve("cue_service")

    def error_from(self, exc: CueBridgeError, *, exit_code: int = 2) -> CLIError:
        """Return a :class:`CLIError` carrying the localised text of ``exc``."""

        catalog: MessageCatalog = self.services.resolve("message_catalog")
        return CLIError(exc.localized(catalog), exit_code=exit_code)


__all__ = ["CLIError", "CLILogger", "CLIState", "build_cli_logger"]
