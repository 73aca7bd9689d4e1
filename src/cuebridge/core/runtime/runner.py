# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command runner binding executable resolution to process execution."""

from __future__ import annotations

import threading
from collections.abc import Sequence
from dataclasses import dataclass, replace
from pathlib import Path

from ...config import DEFAULT_TIMEOUT_SECONDS, DEFAULT_TOOL_NAME, CueBridgeConfig
from ..environment import resolve_executable
from .process import ExecutionResult, ToolInvocation, build_invocation, execute, execute_async


@dataclass(frozen=True, slots=True)
class CommandRunner:
    """Run the external tool with an immutable configuration.

    The executable is resolved again for every call so a tool installed or removed
    while the runner is alive is picked up without restarting. Instances hold no
    mutable state and may be shared between threads and asyncio tasks.
    """

    executable_path: Path | None = None
    tool_name: str = DEFAULT_TOOL_NAME
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    search_path: str | None = None

    @classmethod
    def from_config(cls, config: CueBridgeConfig) -> CommandRunner:
        """Return a runner mirroring the executable and timeout settings of ``config``."""

        return cls(
            executable_path=config.executable_path,
            tool_name=config.tool_name,
            timeout=config.timeout,
        )

    def with_timeout(self, timeout: float) -> CommandRunner:
        """Return a copy of the runner that enforces ``timeout`` seconds."""

        if timeout <= 0:
            raise ValueError("timeout must be positive")
        return replace(self, timeout=timeout)

    def resolve_executable(self) -> Path:
        """Return the executable path, raising :class:`ExecutableNotFound` when absent."""

        return resolve_executable(self.executable_path, name=self.tool_name, search_path=self.search_path)

    def invocation(self, args: Sequence[str], *, stdin: str | None = None) -> ToolInvocation:
        """Build the invocation for ``args`` against a freshly resolved executable."""

        return build_invocation(self.resolve_executable(), args, stdin=stdin, timeout=self.timeout)

    def run(
        self,
        args: Sequence[str],
        *,
        stdin: str | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ExecutionResult:
        """Execute the tool with ``args`` and block until it finishes or times out."""

        return execute(self.invocation(args, stdin=stdin), cancel_event=cancel_event)

    async def run_async(self, args: Sequence[str], *, stdin: str | None = None) -> ExecutionResult:
        """Execute the tool with ``args`` without blocking the event loop."""

        return await execute_async(self.invocation(args, stdin=stdin))


__all__ = ["CommandRunner"]
