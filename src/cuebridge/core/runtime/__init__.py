# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Runtime helpers (process execution, command runner)."""

from .process import ExecutionResult, ProcessLifecycle, ProcessState, ToolInvocation, execute, execute_async
from .runner import CommandRunner

__all__ = [
    "CommandRunner",
    "ExecutionResult",
    "ProcessLifecycle",
    "ProcessState",
    "ToolInvocation",
    "execute",
    "execute_async",
]
