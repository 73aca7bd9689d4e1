# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the cue fmt / cue vet service."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import pytest

from cuebridge import CueBridgeConfig, CueCommandService, ExecutableNotFound, VetExitPolicy
from cuebridge.core.runtime import CommandRunner
from tests.conftest import ScriptFactory
from tests.helpers.cue import posix_only

pytestmark = posix_only


def _service(executable: Path, **overrides: object) -> CueCommandService:
    config = CueBridgeConfig(executable_path=executable, timeout=10).with_overrides(**overrides)
    return CueCommandService.from_config(config)


def test_format_returns_stdout_verbatim(fake_cue: Path) -> None:
    source = 'a: 1\nb: "two"\n'

    assert _service(fake_cue).format(source) == source


def test_format_exit_code_one_returns_none(make_script: ScriptFactory, caplog: pytest.LogCaptureFixture) -> None:
    script = make_script("cue", 'echo "a: 1"\necho "expected label" >&2\nexit 1')

    with caplog.at_level(logging.DEBUG, logger="cuebridge.service"):
        assert _service(script).format("a: 1") is None

    assert "expected label" in caplog.text


def test_format_invokes_fmt_with_stdin_marker(make_script: ScriptFactory) -> None:
    script = make_script("cue", 'printf "%s|" "$@"')

    assert _service(script).format("") == "fmt|-|"


def test_format_timeout_returns_none(make_script: ScriptFactory) -> None:
    script = make_script("cue", "exec sleep 30")

    assert _service(script).with_timeout(0.3).format("a: 1") is None


def test_check_parses_output_on_nonzero_exit(fake_cue: Path, tmp_path: Path) -> None:
    target = tmp_path / "LintingErrors.cue"
    target.write_text("a: [1 2]\n", encoding="utf-8")

    records = _service(fake_cue).check(target)

    assert [(r.file, r.line, r.column, r.message) for r in records] == [
        (target, 7, 1, "missing ',' before newline in list literal:"),
        (target, 9, 3, "missing ',' in list literal:"),
    ]


def test_check_passes_absolute_path(fake_cue: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "conf.cue").write_text("a: 1\n", encoding="utf-8")

    _service(fake_cue).vet(Path("conf.cue"))

    assert (tmp_path / "vet-args").read_text(encoding="utf-8").splitlines() == [
        "vet",
        str(tmp_path / "conf.cue"),
    ]


def test_check_zero_exit_only_policy_discards_failed_runs(fake_cue: Path, tmp_path: Path) -> None:
    service = _service(fake_cue, vet_exit_policy=VetExitPolicy.ZERO_EXIT_ONLY)

    assert service.check(tmp_path / "LintingErrors.cue") == []


def test_check_clean_run(make_script: ScriptFactory, tmp_path: Path) -> None:
    script = make_script("cue", "exit 0")

    assert _service(script).check(tmp_path / "ok.cue") == []


def test_check_timeout_returns_empty(make_script: ScriptFactory, tmp_path: Path) -> None:
    script = make_script("cue", "printf 'boom:\\n    ./x.cue:1:1\\n'\nexec sleep 30")

    assert _service(script).with_timeout(0.3).check(tmp_path / "x.cue") == []


def test_missing_executable_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PATH", str(tmp_path))
    service = CueCommandService(runner=CommandRunner())

    with pytest.raises(ExecutableNotFound):
        service.format("a: 1")
    with pytest.raises(ExecutableNotFound):
        service.check(tmp_path / "x.cue")


def test_with_timeout_keeps_policy(fake_cue: Path) -> None:
    service = _service(fake_cue, vet_exit_policy=VetExitPolicy.ZERO_EXIT_ONLY)

    shorter = service.with_timeout(1.5)

    assert shorter.runner.timeout == 1.5
    assert shorter.vet_exit_policy is VetExitPolicy.ZERO_EXIT_ONLY
    assert service.runner.timeout == 10


def test_runner_with_timeout_rejects_non_positive() -> None:
    with pytest.raises(ValueError):
        CommandRunner().with_timeout(0)


def test_async_variants(fake_cue: Path, tmp_path: Path) -> None:
    service = _service(fake_cue)
    target = tmp_path / "LintingErrors.cue"

    async def scenario() -> tuple[str | None, int]:
        formatted, records = await asyncio.gather(service.format_async("x: 1\n"), service.check_async(target))
        return formatted, len(records)

    assert asyncio.run(scenario()) == ("x: 1\n", 2)


def test_service_is_safe_for_concurrent_calls(fake_cue: Path) -> None:
    service = _service(fake_cue)

    async def scenario() -> list[str | None]:
        return await asyncio.gather(*(service.format_async(f"v: {index}\n") for index in range(8)))

    assert asyncio.run(scenario()) == [f"v: {index}\n" for index in range(8)]


def test_check_crashed_run_returns_empty(make_script: ScriptFactory, tmp_path: Path) -> None:
    script = make_script("cue", "printf 'bad:\\n    ./x.cue:1:2\\n'\nkill -9 $$")
    service = _service(script)

    assert service.check(tmp_path / "x.cue") == []
    assert asyncio.run(service.check_async(tmp_path / "x.cue")) == []
