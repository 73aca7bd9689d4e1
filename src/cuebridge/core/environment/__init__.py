# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Environment helpers for locating external tools."""

from __future__ import annotations

from .executable import is_executable_file, resolve_executable

__all__ = ["is_executable_file", "resolve_executable"]
