# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate the external tool executable."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from ...errors import ExecutableNotFound

LOGGER = logging.getLogger(__name__)


def is_executable_file(path: Path) -> bool:
    """Return ``True`` when ``path`` is a regular file the current user may execute."""

    return path.is_file() and os.access(path, os.X_OK)


def resolve_executable(
    configured_path: str | Path | None,
    *,
    name: str = "cue",
    search_path: str | None = None,
) -> Path:
    """Return the absolute path of the tool executable.

    A non-empty ``configured_path`` always wins and is never replaced by a ``PATH``
    lookup, even when it turns out to be invalid.

    Args:
        configured_path: User-configured override, or ``None``/empty to search ``PATH``.
        name: Canonical executable name searched on ``PATH``.
        search_path: Explicit ``os.pathsep``-separated directory list used instead of
            the ``PATH`` environment variable.

    Returns:
        Path: Absolute path to an executable file.

    Raises:
        ExecutableNotFound: If the configured path is not an executable file, or
            ``name`` cannot be found on the search path.
    """

    configured = str(configured_path).strip() if configured_path is not None else ""
    if configured:
        candidate = Path(configured).expanduser()
        if not is_executable_file(candidate):
            raise ExecutableNotFound.for_configured_path(configured)
        return candidate.absolute()

    found = shutil.which(name, path=search_path)
    if found is None:
        LOGGER.debug("%s not found on search path", name)
        raise ExecutableNotFound()
    resolved = Path(found)
    if not is_executable_file(resolved):
        raise ExecutableNotFound()
    return resolved.absolute()


__all__ = ["is_executable_file", "resolve_executable"]
