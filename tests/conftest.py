# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from tests.helpers.cue import LINTING_ERRORS_OUTPUT

ScriptFactory = Callable[[str, str], Path]


@pytest.fixture
def make_script(tmp_path: Path) -> ScriptFactory:
    """Return a factory writing executable ``/bin/sh`` scripts into ``tmp_path/bin``."""

    bin_dir = tmp_path / "bin"
    bin_dir.mkdir(exist_ok=True)

    def _make(name: str, body: str) -> Path:
        script = bin_dir / name
        script.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
        script.chmod(0o755)
        return script

    return _make


@pytest.fixture
def fake_cue(make_script: ScriptFactory, tmp_path: Path) -> Path:
    """Return a stand-in ``cue`` binary.

    ``fmt`` echoes stdin back, ``vet`` records its arguments in ``tmp_path/vet-args``
    and prints the LintingErrors diagnostics with exit status 1.
    """

    args_file = tmp_path / "vet-args"
    body = f"""
case "$1" in
  fmt)
    cat
    ;;
  vet)
    printf '%s\\n' "$@" > '{args_file}'
    printf '%s' "{LINTING_ERRORS_OUTPUT}"
    exit 1
    ;;
  *)
    exit 64
    ;;
esac
"""
    return make_script("cue", body)
