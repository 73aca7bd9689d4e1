# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the message catalog and error localisation."""

from __future__ import annotations

from pathlib import Path

from cuebridge.errors import ExecutableNotFound, ExecuteError, OperationCancelled
from cuebridge.messages import (
    CANCELLED,
    EXE_NOT_FOUND,
    EXECUTE_ERROR,
    USER_PATH_NOT_FOUND,
    MessageCatalog,
    default_catalog,
)


def test_default_messages_cover_every_error() -> None:
    catalog = default_catalog()
    for key in (EXE_NOT_FOUND, USER_PATH_NOT_FOUND, EXECUTE_ERROR, CANCELLED):
        assert catalog.get(key) != key


def test_unknown_key_falls_back_to_key() -> None:
    assert MessageCatalog().get("formatter.unknown") == "formatter.unknown"


def test_parameters_are_interpolated() -> None:
    assert "/opt/cue" in MessageCatalog().get(USER_PATH_NOT_FOUND, path="/opt/cue")


def test_missing_parameters_leave_template_untouched() -> None:
    assert "{path}" in MessageCatalog().get(USER_PATH_NOT_FOUND)


def test_from_toml_reads_nested_dotted_keys(tmp_path: Path) -> None:
    path = tmp_path / "messages_de.toml"
    path.write_text(
        "[messages]\n"
        'formatter.exeNotFound = "cue wurde nicht gefunden."\n'
        '"formatter.userPathNotFound" = "Ungültiger Pfad: {path}"\n',
        encoding="utf-8",
    )

    catalog = MessageCatalog.from_toml(path)

    assert catalog.get(EXE_NOT_FOUND) == "cue wurde nicht gefunden."
    assert catalog.get(USER_PATH_NOT_FOUND, path="/x") == "Ungültiger Pfad: /x"
    assert catalog.get(EXECUTE_ERROR) == default_catalog().get(EXECUTE_ERROR)


def test_errors_carry_keys_and_localise() -> None:
    catalog = MessageCatalog().with_overrides({EXE_NOT_FOUND: "introuvable"})

    missing = ExecutableNotFound()
    configured = ExecutableNotFound.for_configured_path("/nope")

    assert missing.message_key == EXE_NOT_FOUND
    assert missing.localized(catalog) == "introuvable"
    assert configured.message_key == USER_PATH_NOT_FOUND
    assert "/nope" in str(configured)
    assert ExecuteError().message_key == EXECUTE_ERROR
    assert OperationCancelled().message_key == CANCELLED
