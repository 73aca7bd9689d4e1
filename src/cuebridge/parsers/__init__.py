# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers turning raw tool output into diagnostic records."""

from __future__ import annotations

from .base import GroupedTextParser, PositionPattern, group_ordered, split_lines
from .cue import CUE_CONTINUATION_PREFIX, CUE_POSITION_PATTERN, VET_PARSER, parse_vet

__all__ = [
    "CUE_CONTINUATION_PREFIX",
    "CUE_POSITION_PATTERN",
    "VET_PARSER",
    "GroupedTextParser",
    "PositionPattern",
    "group_ordered",
    "parse_vet",
    "split_lines",
]
