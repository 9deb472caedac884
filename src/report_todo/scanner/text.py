"""Offset-based views into an immutable text buffer."""

from __future__ import annotations

import bisect
from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class LineSpan:
    """One line of a buffer, ``[start, end)``, including its newline."""

    start: int
    end: int


@dataclass(frozen=True)
class CommentSpan:
    """A fully closed, possibly multi-line comment, ``[start, end)``."""

    start: int
    end: int


class TextBuffer:
    """File contents plus a line-start table for row/column lookups.

    Rows and columns are 1-indexed, offsets 0-indexed. Every offset handed
    in is checked against the buffer bounds.
    """

    def __init__(self, text: str) -> None:
        self._text = text
        starts = [0]
        pos = text.find("\n")
        while pos != -1:
            starts.append(pos + 1)
            pos = text.find("\n", pos + 1)
        # A trailing newline does not open another line
        if len(starts) > 1 and starts[-1] == len(text):
            starts.pop()
        self._starts = starts

    @property
    def text(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    @property
    def line_count(self) -> int:
        return len(self._starts) if self._text else 0

    def lines(self) -> Iterator[LineSpan]:
        if not self._text:
            return
        for i, start in enumerate(self._starts):
            end = self._starts[i + 1] if i + 1 < len(self._starts) else len(self._text)
            yield LineSpan(start, end)

    def slice(self, start: int, end: int) -> str:
        self._check(start)
        self._check(end)
        if end < start:
            raise ValueError(f"span end {end} before start {start}")
        return self._text[start:end]

    def row_col(self, offset: int) -> tuple[int, int]:
        self._check(offset)
        index = bisect.bisect_right(self._starts, offset) - 1
        return index + 1, offset - self._starts[index] + 1

    def line_at(self, row: int) -> str:
        """Text of line ``row`` without its line terminator."""
        if not 1 <= row <= max(self.line_count, 1):
            raise ValueError(f"row {row} outside 1..{self.line_count}")
        start = self._starts[row - 1]
        end = self._starts[row] if row < len(self._starts) else len(self._text)
        return self._text[start:end].rstrip("\r\n")

    def _check(self, offset: int) -> None:
        if not 0 <= offset <= len(self._text):
            raise ValueError(f"offset {offset} outside buffer of length {len(self._text)}")
