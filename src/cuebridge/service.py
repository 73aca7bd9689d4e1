# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""High-level ``cue fmt`` and ``cue vet`` operations."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from .config import CueBridgeConfig, VetExitPolicy
from .core.models import DiagnosticRecord
from .core.runtime.process import ExecutionResult
from .core.runtime.runner import CommandRunner
from .parsers import VET_PARSER, GroupedTextParser

LOGGER = logging.getLogger(__name__)

FMT_SUBCOMMAND: Final[str] = "fmt"
VET_SUBCOMMAND: Final[str] = "vet"
STDIN_MARKER: Final[str] = "-"


@dataclass(frozen=True, slots=True)
class CueCommandService:
    """Format and check CUE sources through the external ``cue`` binary.

    The service is constructed explicitly with its runner and passed to callers;
    it holds no mutable state, so one instance can serve concurrent requests.
    """

    runner: CommandRunner = field(default_factory=CommandRunner)
    vet_exit_policy: VetExitPolicy = VetExitPolicy.PARSE_ANY_EXIT
    parser: GroupedTextParser = VET_PARSER

    @classmethod
    def from_config(cls, config: CueBridgeConfig) -> CueCommandService:
        """Return a service wired to a runner built from ``config``."""

        return cls(runner=CommandRunner.from_config(config), vet_exit_policy=config.vet_exit_policy)

    def with_timeout(self, timeout: float) -> CueCommandService:
        """Return a service identical to this one except for its timeout in seconds."""

        return CueCommandService(
            runner=self.runner.with_timeout(timeout),
            vet_exit_policy=self.vet_exit_policy,
            parser=self.parser,
        )

    def format(self, content: str, *, cancel_event: threading.Event | None = None) -> str | None:
        """Run ``cue fmt -`` on ``content``.

        Args:
            content: CUE source text written to the tool's stdin.
            cancel_event: Optional event that aborts the call when set.

        Returns:
            str | None: Formatted text for a clean exit, otherwise ``None``.

        Raises:
            ExecutableNotFound: If the ``cue`` executable cannot be located.
            ExecuteError: If the process cannot be launched or its streams fail.
        """

        result = self.runner.run((FMT_SUBCOMMAND, STDIN_MARKER), stdin=content, cancel_event=cancel_event)
        return self._formatted(result)

    async def format_async(self, content: str) -> str | None:
        """Asynchronous variant of :meth:`format`."""

        result = await self.runner.run_async((FMT_SUBCOMMAND, STDIN_MARKER), stdin=content)
        return self._formatted(result)

    def check(self, file: Path, *, cancel_event: threading.Event | None = None) -> list[DiagnosticRecord]:
        """Run ``cue vet`` on ``file`` and return the reported problems.

        Args:
            file: CUE source file to check. Every record refers to this path.
            cancel_event: Optional event that aborts the call when set.

        Returns:
            list[DiagnosticRecord]: Diagnostics in output order; empty when the tool
            timed out or produced nothing usable.

        Raises:
            ExecutableNotFound: If the ``cue`` executable cannot be located.
            ExecuteError: If the process cannot be launched or its streams fail.
        """

        result = self.runner.run((VET_SUBCOMMAND, str(file.absolute())), cancel_event=cancel_event)
        return self._diagnostics(result, file)

    async def check_async(self, file: Path) -> list[DiagnosticRecord]:
        """Asynchronous variant of :meth:`check`."""

        result = await self.runner.run_async((VET_SUBCOMMAND, str(file.absolute())))
        return self._diagnostics(result, file)

    vet = check
    vet_async = check_async

    @staticmethod
    def _formatted(result: ExecutionResult) -> str | None:
        if result.succeeded:
            return result.stdout
        LOGGER.debug(
            "cue fmt produced no output (state=%s exit_code=%s): %s",
            result.state.value,
            result.exit_code,
            result.stderr.strip(),
        )
        return None

    def _diagnostics(self, result: ExecutionResult, file: Path) -> list[DiagnosticRecord]:
        if not result.completed:
            LOGGER.debug("cue vet did not complete for %s (state=%s)", file, result.state.value)
            return []
        if result.exit_code != 0 and self.vet_exit_policy is VetExitPolicy.ZERO_EXIT_ONLY:
            LOGGER.debug("Discarding cue vet output for %s (exit_code=%s)", file, result.exit_code)
            return []
        return self.parser.parse(result.stdout, file=file)


__all__ = ["FMT_SUBCOMMAND", "STDIN_MARKER", "VET_SUBCOMMAND", "CueCommandService"]
