# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Subprocess execution with timeouts, stdin feeding and guaranteed child cleanup."""

from __future__ import annotations

import asyncio
import logging
import os
import signal

# Bandit: subprocess usage is intentional, we provide a controlled wrapper around
# external tool execution with argument vectors and no ``shell=True``.
import subprocess  # nosec B404 suppression_valid: Shell-free subprocess wrapper enforces safe execution.
import threading
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Final

from ...errors import ExecuteError, OperationCancelled

LOGGER = logging.getLogger(__name__)

STREAM_ENCODING: Final[str] = "utf-8"
_POLL_INTERVAL: Final[float] = 0.05
_REAP_TIMEOUT: Final[float] = 2.0
_POSIX: Final[bool] = os.name == "posix"


class ProcessState(str, Enum):
    """Lifecycle states of a child process owned by :class:`ProcessLifecycle`."""

    SPAWNED = "spawned"
    RUNNING = "running"
    COMPLETED = "completed"
    TIMED_OUT = "timed-out"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class ToolInvocation:
    """Immutable description of one external tool call."""

    executable: Path
    args: tuple[str, ...] = ()
    stdin: str | None = None
    timeout: float | None = None
    cwd: Path | None = None
    env: Mapping[str, str] | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.args, tuple):
            object.__setattr__(self, "args", tuple(self.args))
        if self.timeout is not None and self.timeout < 0:
            raise ValueError("timeout must be non-negative")

    @property
    def argv(self) -> list[str]:
        """Return the full argument vector starting with the executable."""

        return [str(self.executable), *self.args]

    def environment(self) -> dict[str, str]:
        """Return the parent environment merged with the invocation overrides."""

        merged = dict(os.environ)
        if self.env:
            merged.update(self.env)
        return merged


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Captured outcome of a single :class:`ToolInvocation`."""

    stdout: str
    stderr: str
    state: ProcessState
    exit_code: int | None = None
    elapsed: float = 0.0

    @property
    def timed_out(self) -> bool:
        """Return ``True`` when the process was killed after exceeding its timeout."""

        return self.state is ProcessState.TIMED_OUT

    @property
    def completed(self) -> bool:
        """Return ``True`` when the process exited on its own with a non-negative status.

        A negative exit code means the child was killed by a signal, which counts as a crash.
        """

        return self.state is ProcessState.COMPLETED and self.exit_code is not None and self.exit_code >= 0

    @property
    def succeeded(self) -> bool:
        """Return ``True`` for a completed run that exited with status zero."""

        return self.completed and self.exit_code == 0


def _kill_process_tree(process: subprocess.Popen[str] | asyncio.subprocess.Process) -> None:
    """Forcefully terminate ``process`` and, on POSIX, its whole process group."""

    if _POSIX:
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except (ProcessLookupError, PermissionError):
            pass
        else:
            return
    try:
        process.kill()
    except ProcessLookupError:
        pass


class ProcessLifecycle:
    """Own a child process handle from spawn until it has been reaped.

    Every path that leaves :attr:`ProcessState.RUNNING` without the child exiting on
    its own kills the child before control returns to the caller.
    """

    def __init__(self, invocation: ToolInvocation) -> None:
        self._invocation = invocation
        self._process: subprocess.Popen[str] | None = None
        self._state: ProcessState | None = None
        self._started = 0.0

    @property
    def state(self) -> ProcessState | None:
        """Return the current lifecycle state, ``None`` before spawning."""

        return self._state

    def spawn(self) -> None:
        """Launch the child process.

        Raises:
            ExecuteError: If the operating system refuses to start the process.
        """

        invocation = self._invocation
        LOGGER.debug("Executing %s", " ".join(invocation.argv))
        try:
            # Bandit: the argument vector comes from the resolved executable and fixed subcommands.
            self._process = subprocess.Popen(  # nosec B603 - controlled arguments, no shell
                invocation.argv,
                stdin=subprocess.PIPE if invocation.stdin is not None else subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=str(invocation.cwd) if invocation.cwd is not None else None,
                env=invocation.environment(),
                text=True,
                encoding=STREAM_ENCODING,
                errors="replace",
                start_new_session=_POSIX,
            )
        except OSError as exc:
            raise ExecuteError() from exc
        self._started = time.monotonic()
        self._state = ProcessState.SPAWNED

    def wait(self, *, cancel_event: threading.Event | None = None) -> ExecutionResult:
        """Feed stdin and block until the child exits, times out or is cancelled.

        Args:
            cancel_event: Optional event that aborts the wait and kills the child when set.

        Returns:
            ExecutionResult: Captured streams and the terminal lifecycle state.

        Raises:
            ExecuteError: If interacting with the child's streams fails.
            OperationCancelled: If ``cancel_event`` was set before the child exited.
        """

        if self._process is None or self._state is not ProcessState.SPAWNED:
            raise RuntimeError("wait() requires a freshly spawned process")
        self._state = ProcessState.RUNNING
        try:
            return self._communicate(cancel_event)
        except OSError as exc:
            raise ExecuteError() from exc
        finally:
            if self._state is ProcessState.RUNNING:
                self._terminate(ProcessState.CANCELLED)
            self._close_stdin()

    def _communicate(self, cancel_event: threading.Event | None) -> ExecutionResult:
        process = self._process
        assert process is not None
        timeout = self._invocation.timeout
        deadline = None if timeout is None else self._started + timeout
        payload = self._invocation.stdin
        while True:
            slice_timeout = self._next_slice(deadline, polling=cancel_event is not None)
            try:
                stdout, stderr = process.communicate(input=payload, timeout=slice_timeout)
            except subprocess.TimeoutExpired:
                # communicate() refuses input once it has started writing it.
                payload = None
                if cancel_event is not None and cancel_event.is_set():
                    self._terminate(ProcessState.CANCELLED)
                    raise OperationCancelled() from None
                if deadline is not None and time.monotonic() >= deadline:
                    LOGGER.warning("Command timed out after %.1fs: %s", timeout, self._invocation.argv[0])
                    self._terminate(ProcessState.TIMED_OUT)
                    return self._result("", "", exit_code=None)
                continue
            self._state = ProcessState.COMPLETED
            return self._result(stdout, stderr, exit_code=process.returncode)

    @staticmethod
    def _next_slice(deadline: float | None, *, polling: bool) -> float | None:
        if deadline is None:
            return _POLL_INTERVAL if polling else None
        remaining = max(deadline - time.monotonic(), 0.0)
        return min(remaining, _POLL_INTERVAL) if polling else remaining

    def _terminate(self, state: ProcessState) -> None:
        """Kill the child together with its process group and reap it.

        The group is signalled even when the leader already exited, since background
        children may still hold the output pipes. Partial output is discarded.
        """

        process = self._process
        assert process is not None
        self._state = state
        _kill_process_tree(process)
        try:
            process.communicate(timeout=_REAP_TIMEOUT)
        except (subprocess.TimeoutExpired, OSError, ValueError):
            for stream in (process.stdout, process.stderr):
                if stream is not None:
                    stream.close()
            process.wait()

    def _close_stdin(self) -> None:
        process = self._process
        if process is None or process.stdin is None or process.stdin.closed:
            return
        try:
            process.stdin.close()
        except OSError:
            LOGGER.debug("stdin of %s was already broken", self._invocation.argv[0])

    def _result(self, stdout: str | None, stderr: str | None, *, exit_code: int | None) -> ExecutionResult:
        assert self._state is not None
        return ExecutionResult(
            stdout=stdout or "",
            stderr=stderr or "",
            state=self._state,
            exit_code=exit_code,
            elapsed=time.monotonic() - self._started,
        )


def execute(invocation: ToolInvocation, *, cancel_event: threading.Event | None = None) -> ExecutionResult:
    """Run ``invocation`` to completion and capture its output.

    Args:
        invocation: Executable, arguments, optional stdin payload and timeout.
        cancel_event: Optional event that kills the child and aborts the call when set.

    Returns:
        ExecutionResult: Streams and lifecycle state. Timeouts are reported through
        :attr:`ExecutionResult.state`, never raised.

    Raises:
        ExecuteError: If the process cannot be started or its streams fail.
        OperationCancelled: If ``cancel_event`` is set while the child is running.
    """

    lifecycle = ProcessLifecycle(invocation)
    lifecycle.spawn()
    return lifecycle.wait(cancel_event=cancel_event)


async def _reap_async(process: asyncio.subprocess.Process) -> None:
    # The group may outlive its leader.
    _kill_process_tree(process)
    await process.wait()


async def execute_async(invocation: ToolInvocation) -> ExecutionResult:
    """Asynchronous counterpart of :func:`execute` with identical semantics.

    Cancelling the awaiting task kills and reaps the child before
    :class:`asyncio.CancelledError` propagates.
    """

    LOGGER.debug("Executing %s", " ".join(invocation.argv))
    try:
        # Bandit: the argument vector comes from the resolved executable and fixed subcommands.
        process = await asyncio.create_subprocess_exec(  # nosec B603 - controlled arguments, no shell
            *invocation.argv,
            stdin=asyncio.subprocess.PIPE if invocation.stdin is not None else asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(invocation.cwd) if invocation.cwd is not None else None,
            env=invocation.environment(),
            start_new_session=_POSIX,
        )
    except OSError as exc:
        raise ExecuteError() from exc

    started = time.monotonic()
    payload = invocation.stdin.encode(STREAM_ENCODING) if invocation.stdin is not None else None
    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(payload), timeout=invocation.timeout)
    except TimeoutError:
        LOGGER.warning("Command timed out after %.1fs: %s", invocation.timeout, invocation.argv[0])
        await _reap_async(process)
        return ExecutionResult(
            stdout="",
            stderr="",
            state=ProcessState.TIMED_OUT,
            elapsed=time.monotonic() - started,
        )
    except asyncio.CancelledError:
        await _reap_async(process)
        raise
    except OSError as exc:
        await _reap_async(process)
        raise ExecuteError() from exc
    finally:
        if process.stdin is not None and not process.stdin.is_closing():
            process.stdin.close()

    return ExecutionResult(
        stdout=stdout.decode(STREAM_ENCODING, errors="replace"),
        stderr=stderr.decode(STREAM_ENCODING, errors="replace"),
        state=ProcessState.COMPLETED,
        exit_code=process.returncode,
        elapsed=time.monotonic() - started,
    )


def build_invocation(
    executable: Path,
    args: Sequence[str],
    *,
    stdin: str | None = None,
    timeout: float | None = None,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> ToolInvocation:
    """Return a :class:`ToolInvocation` with ``args`` frozen into a tuple."""

    return ToolInvocation(
        executable=executable,
        args=tuple(args),
        stdin=stdin,
        timeout=timeout,
        cwd=cwd,
        env=env,
    )


__all__ = [
    "STREAM_ENCODING",
    "ExecutionResult",
    "ProcessLifecycle",
    "ProcessState",
    "ToolInvocation",
    "build_invocation",
    "execute",
    "execute_async",
]
