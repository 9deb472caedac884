"""Unified diff parser — recovers added/removed lines and their rows.

Only the subset of the format that ``git diff --unified=0`` produces is
understood: file headers (``--- a/x`` / ``+++ b/x``), hunk headers
(``@@ -r,n +r,n @@``) and hunk bodies with no context lines.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from report_todo.errors import MalformedDiff

_HUNK_HEADER = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")

_DEV_NULL = "/dev/null"

_OCTAL_ESCAPE = re.compile(r"[0-7]{3}")

_C_ESCAPES = {
    "a": 0x07,
    "b": 0x08,
    "t": 0x09,
    "n": 0x0A,
    "v": 0x0B,
    "f": 0x0C,
    "r": 0x0D,
    '"': 0x22,
    "\\": 0x5C,
}


@dataclass(frozen=True)
class ChangedLine:
    """A removed or added line with its row in the old or new file."""

    text: str
    row: int


@dataclass
class Hunk:
    """One ``@@`` block of a diff."""

    file: str
    removed_range: range
    added_range: range
    removed: list[ChangedLine] = field(default_factory=list)
    added: list[ChangedLine] = field(default_factory=list)


def parse_range(start: str, length: str | None) -> range:
    """``-r,n`` / ``+r,n`` fields; a missing length means one line."""
    first = int(start)
    count = 1 if length is None else int(length)
    return range(first, first + count)


def unquote_path(quoted: str) -> str:
    """Decode the body of a C-style quoted path as git writes it.

    Bytes outside printable ASCII appear as three-digit octal escapes, so
    ``\\303\\244`` is the UTF-8 encoding of ``ä``.
    """
    raw = bytearray()
    i = 0
    while i < len(quoted):
        ch = quoted[i]
        if ch != "\\":
            raw.extend(ch.encode("utf-8"))
            i += 1
            continue
        escape = quoted[i + 1 : i + 2]
        if escape and escape in _C_ESCAPES:
            raw.append(_C_ESCAPES[escape])
            i += 2
        elif _OCTAL_ESCAPE.fullmatch(quoted, i + 1, i + 4):
            raw.append(int(quoted[i + 1 : i + 4], 8))
            i += 4
        else:
            raise MalformedDiff("invalid escape in quoted path", quoted)
    return raw.decode("utf-8", errors="replace")


def _header_path(value: str) -> str:
    """Path named by a ``---``/``+++`` line, unquoted and without its terminator."""
    # git ends the path with a tab when it contains a space
    path = value.split("\t", 1)[0]
    if len(path) >= 2 and path.startswith('"') and path.endswith('"'):
        return unquote_path(path[1:-1])
    return path


class UnifiedDiffParser:
    """Reads hunks one at a time from the text of a unified diff."""

    def __init__(self, text: str) -> None:
        # Only "\n" separates lines; form feeds and the like are line content
        lines = text.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        self._lines = [line.rstrip("\r") for line in lines]
        self._pos = 0
        self._file: str | None = None
        if self._lines:
            self._read_file_header()

    def has_more(self) -> bool:
        return self._pos < len(self._lines)

    def read_hunk(self) -> Hunk:
        line = self._next("expected a hunk header")
        m = _HUNK_HEADER.match(line)
        if m is None:
            raise MalformedDiff("invalid hunk header", line)
        if self._file is None:
            raise MalformedDiff("hunk before any file header", line)

        hunk = Hunk(
            file=self._file,
            removed_range=parse_range(m.group(1), m.group(2)),
            added_range=parse_range(m.group(3), m.group(4)),
        )
        for row in hunk.removed_range:
            hunk.removed.append(ChangedLine(self._body_line("-"), row))
        for row in hunk.added_range:
            hunk.added.append(ChangedLine(self._body_line("+"), row))
        self._skip_no_newline_markers()

        nxt = self._peek()
        if nxt is not None and (nxt.startswith("diff ") or nxt.startswith("--- ")):
            self._read_file_header()
        return hunk

    def hunks(self) -> Iterator[Hunk]:
        """Iterate over the remaining hunks."""
        while self.has_more():
            yield self.read_hunk()

    def _read_file_header(self) -> None:
        while True:
            line = self._peek()
            if line is None:
                # Trailing block without ---/+++ (binary file, mode change)
                return
            if line.startswith("--- ") or line.startswith("+++ "):
                break
            self._pos += 1

        source = self._next("expected '--- ' line")
        if not source.startswith("--- "):
            raise MalformedDiff("remove line invalid", source)
        target = self._next("expected '+++ ' line")
        if not target.startswith("+++ "):
            raise MalformedDiff("add line invalid", target)

        path = _header_path(target[len("+++ ") :])
        if path == _DEV_NULL:
            old = _header_path(source[len("--- ") :])
            path = old[len("a/") :] if old.startswith("a/") else old
        elif path.startswith("b/"):
            path = path[len("b/") :]
        else:
            raise MalformedDiff("add line has no 'b/' prefix", target)
        self._file = path

    def _body_line(self, prefix: str) -> str:
        self._skip_no_newline_markers()
        line = self._next(f"hunk body ended early, expected a '{prefix}' line")
        if not line.startswith(prefix):
            raise MalformedDiff(f"expected a '{prefix}' line", line)
        return line[1:].rstrip()

    def _skip_no_newline_markers(self) -> None:
        while (line := self._peek()) is not None and line.startswith("\\"):
            self._pos += 1

    def _peek(self) -> str | None:
        if self._pos < len(self._lines):
            return self._lines[self._pos]
        return None

    def _next(self, expectation: str) -> str:
        line = self._peek()
        if line is None:
            last = self._lines[-1] if self._lines else ""
            raise MalformedDiff(f"unexpected end of diff, {expectation} after", last)
        self._pos += 1
        return line
