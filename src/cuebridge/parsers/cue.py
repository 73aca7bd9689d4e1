# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parser for ``cue vet`` diagnostics.

``cue vet`` prints an unindented message followed by indented positions::

    missing ',' before newline in list literal:
        ./LintingErrors.cue:7:1
    missing ',' in list literal:
        ./LintingErrors.cue:9:3
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path
from typing import Final

from ..core.models import DiagnosticRecord
from .base import GroupedTextParser, PositionPattern

CUE_CONTINUATION_PREFIX: Final[str] = "   "
CUE_POSITION_PATTERN: Final[re.Pattern[str]] = re.compile(r"^ {4}.*:(?P<line>\d+):(?P<column>\d+)$")

VET_PARSER: Final[GroupedTextParser] = GroupedTextParser(
    position=PositionPattern(CUE_POSITION_PATTERN),
    continuation_prefix=CUE_CONTINUATION_PREFIX,
)


def parse_vet(output: str | Sequence[str], *, file: Path) -> list[DiagnosticRecord]:
    """Return the diagnostics in ``cue vet`` output, attributed to ``file``."""

    return VET_PARSER.parse(output, file=file)


__all__ = ["CUE_CONTINUATION_PREFIX", "CUE_POSITION_PATTERN", "VET_PARSER", "parse_vet"]
