# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the cuebridge package."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class DiagnosticRecord(BaseModel):
    """Describe one problem reported by ``cue vet``, anchored to a source position.

    ``file`` is always the path handed to the check operation; positions embedded in
    tool output only contribute their line and column.
    """

    model_config = ConfigDict(frozen=True)

    file: Path
    line: int = Field(ge=1)
    column: int = Field(ge=1)
    message: str

    def format_location(self) -> str:
        """Return the ``file:line:column`` triple used in compiler-style output."""

        return f"{self.file}:{self.line}:{self.column}"


__all__ = ["DiagnosticRecord"]
