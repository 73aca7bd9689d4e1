# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Bridge between editor integrations and the ``cue`` command-line tool."""

from __future__ import annotations

from importlib import metadata

from .config import CueBridgeConfig, VetExitPolicy
from .core.models import DiagnosticRecord
from .errors import CueBridgeError, ExecutableNotFound, ExecuteError, OperationCancelled
from .service import CueCommandService

__all__ = [
    "CueBridgeConfig",
    "CueBridgeError",
    "CueCommandService",
    "DiagnosticRecord",
    "ExecutableNotFound",
    "ExecuteError",
    "OperationCancelled",
    "VetExitPolicy",
    "__version__",
]

try:
    __version__ = metadata.version("cuebridge")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"
