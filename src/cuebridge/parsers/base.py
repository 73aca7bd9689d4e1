# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared parser infrastructure for grouped, line-oriented tool output."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final, TypeVar

from ..core.models import DiagnosticRecord

ItemT = TypeVar("ItemT")

_LINE_BREAK: Final[re.Pattern[str]] = re.compile(r"\r?\n")


def split_lines(text: str) -> list[str]:
    """Split ``text`` on LF or CRLF line endings.

    Unlike :meth:`str.splitlines` this does not break on form feeds or other
    Unicode separators that may legitimately appear inside messages.
    """

    return _LINE_BREAK.split(text)


def group_ordered(items: Iterable[ItemT], starts_group: Callable[[ItemT], bool]) -> list[list[ItemT]]:
    """Partition ``items`` into consecutive runs, each opened by a ``starts_group`` item.

    ``[A, B, C, A, A, D]`` grouped on ``x == A`` yields ``[[A, B, C], [A], [A, D]]``.
    The first item always opens a group, whether or not it satisfies the predicate.

    Args:
        items: Sequence of elements to partition, consumed in order.
        starts_group: Predicate marking elements that open a new group.

    Returns:
        list[list[ItemT]]: Groups in input order.
    """

    groups: list[list[ItemT]] = []
    for item in items:
        if not groups or starts_group(item):
            groups.append([])
        groups[-1].append(item)
    return groups


@dataclass(frozen=True, slots=True)
class PositionPattern:
    """Extract a ``(line, column)`` pair from a position line.

    ``regex`` must expose the line and column as named groups ``line`` and ``column``.
    """

    regex: re.Pattern[str]

    def match(self, text: str) -> tuple[int, int] | None:
        """Return the 1-based position described by ``text`` or ``None``."""

        found = self.regex.match(text)
        if found is None:
            return None
        try:
            line, column = int(found.group("line")), int(found.group("column"))
        except ValueError:
            # Digit strings beyond the interpreter's int conversion limit.
            return None
        if line < 1 or column < 1:
            return None
        return line, column


@dataclass(frozen=True, slots=True)
class GroupedTextParser:
    """Turn header-plus-indented-positions output into :class:`DiagnosticRecord` values.

    Every line not starting with ``continuation_prefix`` opens a group whose first
    line is the message. The remaining lines of the group are matched against
    ``position``; each match yields one record and non-matching lines are dropped.
    """

    position: PositionPattern
    continuation_prefix: str

    def starts_group(self, line: str) -> bool:
        """Return ``True`` when ``line`` is a message header rather than a continuation."""

        return not line.startswith(self.continuation_prefix)

    def group(self, text: str | Sequence[str]) -> list[list[str]]:
        """Return the raw line groups found in ``text``."""

        lines = split_lines(text) if isinstance(text, str) else list(text)
        return group_ordered(lines, self.starts_group)

    def parse(self, text: str | Sequence[str], *, file: Path) -> list[DiagnosticRecord]:
        """Parse ``text`` into records attributed to ``file``.

        Args:
            text: Raw tool output or pre-split lines.
            file: Source file the check ran against; used for every record.

        Returns:
            list[DiagnosticRecord]: Records in the order their position lines appeared.
        """

        records: list[DiagnosticRecord] = []
        for message, *positions in self.group(text):
            for raw_line in positions:
                position = self.position.match(raw_line)
                if position is None:
                    continue
                line, column = position
                records.append(DiagnosticRecord(file=file, line=line, column=column, message=message))
        return records


__all__ = [
    "GroupedTextParser",
    "PositionPattern",
    "group_ordered",
    "split_lines",
]
