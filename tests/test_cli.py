# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the cuebridge command-line interface."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from cuebridge.cli.app import app
from cuebridge.config_loader import ENV_EXECUTABLE, ENV_TIMEOUT
from tests.conftest import ScriptFactory
from tests.helpers.cue import posix_only

pytestmark = posix_only


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv(ENV_EXECUTABLE, raising=False)
    monkeypatch.delenv(ENV_TIMEOUT, raising=False)
    monkeypatch.chdir(tmp_path)


def _invoke(*args: str, input_text: str | None = None):  # noqa: ANN202
    return CliRunner().invoke(app, ["--no-emoji", "--no-color", *args], input=input_text)


def test_fmt_reads_stdin(fake_cue: Path) -> None:
    result = _invoke("--cue", str(fake_cue), "fmt", input_text="a: 1\n")

    assert result.exit_code == 0
    assert result.output == "a: 1\n"


def test_fmt_write_rewrites_file(make_script: ScriptFactory, tmp_path: Path) -> None:
    script = make_script("cue", "tr -s ' '")
    target = tmp_path / "conf.cue"
    target.write_text("a:    1\n", encoding="utf-8")

    result = _invoke("--cue", str(script), "fmt", "--write", str(target))

    assert result.exit_code == 0
    assert target.read_text(encoding="utf-8") == "a: 1\n"
    assert "Formatted" in result.output


def test_fmt_failure_exits_non_zero(make_script: ScriptFactory) -> None:
    script = make_script("cue", "exit 1")

    result = _invoke("--cue", str(script), "fmt", input_text="a: 1\n")

    assert result.exit_code == 1
    assert "did not produce formatted output" in result.output


def test_vet_prints_diagnostics(fake_cue: Path, tmp_path: Path) -> None:
    target = tmp_path / "LintingErrors.cue"
    target.write_text("a: [1 2]\n", encoding="utf-8")

    result = _invoke("--cue", str(fake_cue), "vet", str(target))

    assert result.exit_code == 1
    assert f"{target}:7:1: missing ',' before newline in list literal:" in result.output
    assert f"{target}:9:3: missing ',' in list literal:" in result.output


def test_vet_clean_file(make_script: ScriptFactory, tmp_path: Path) -> None:
    script = make_script("cue", "exit 0")
    target = tmp_path / "ok.cue"
    target.write_text("a: 1\n", encoding="utf-8")

    result = _invoke("--cue", str(script), "vet", str(target))

    assert result.exit_code == 0
    assert "No problems reported" in result.output


def test_doctor_reports_executable(fake_cue: Path) -> None:
    result = _invoke("--cue", str(fake_cue), "--timeout", "2", "doctor")

    assert result.exit_code == 0
    assert str(fake_cue) in result.output
    assert "timeout: 2s" in result.output
    assert "--- cuebridge doctor ---" in result.output


def test_doctor_without_cue_on_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PATH", str(tmp_path))

    result = _invoke("doctor")

    assert result.exit_code == 2
    assert "could not be found on PATH" in result.output


def test_invalid_configured_path_uses_localised_message(tmp_path: Path) -> None:
    messages = tmp_path / "messages.toml"
    messages.write_text('"formatter.userPathNotFound" = "Kein cue unter {path}"\n', encoding="utf-8")

    result = _invoke("--messages", str(messages), "--cue", str(tmp_path / "missing"), "doctor")

    assert result.exit_code == 2
    assert f"Kein cue unter {tmp_path / 'missing'}" in result.output


def test_invalid_project_config_is_reported(tmp_path: Path) -> None:
    (tmp_path / ".cuebridge.toml").write_text("timeout = -1\n", encoding="utf-8")

    result = _invoke("doctor")

    assert result.exit_code == 2
    assert "Invalid cuebridge configuration" in result.output
