"""Comment scope tracking — folds tokenizer scope events into comment spans.

A tokenizer reports, per line, where lexical scopes open and close. Comments
show up as scopes whose name starts with ``comment``; they can span several
lines and can nest (a doc comment containing something that looks like a
comment opener). Counting how many comment scopes are open is enough to know
when the outermost one closes, whatever the language.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Union

from report_todo.errors import ScopeStackError
from report_todo.scanner.text import CommentSpan, LineSpan

COMMENT_PREFIX = "comment"


@dataclass(frozen=True)
class Push:
    scope: str


@dataclass(frozen=True)
class Pop:
    count: int = 1


@dataclass(frozen=True)
class Clear:
    """Set aside the top ``count`` scopes (all of them when ``None``)."""

    count: int | None = None


@dataclass(frozen=True)
class Restore:
    """Bring back the most recently cleared scopes."""


@dataclass(frozen=True)
class Noop:
    pass


ScopeOp = Union[Push, Pop, Clear, Restore, Noop]


def is_comment_scope(scope: str) -> bool:
    """``comment`` and any dotted child such as ``comment.line.double-slash``."""
    return scope == COMMENT_PREFIX or scope.startswith(COMMENT_PREFIX + ".")


class CommentScopeTracker:
    """Tracks the scope stack of one file and emits closed comment spans."""

    def __init__(self, is_comment: Callable[[str], bool] = is_comment_scope) -> None:
        self._is_comment = is_comment
        self._stack: list[str] = []
        self._cleared: list[list[str]] = []
        self._comment_level = 0
        self._comment_start: int | None = None

    @property
    def comment_level(self) -> int:
        return self._comment_level

    @property
    def comment_start(self) -> int | None:
        return self._comment_start

    @property
    def scopes(self) -> tuple[str, ...]:
        return tuple(self._stack)

    @property
    def is_balanced(self) -> bool:
        """True when no comment is open and nothing is left cleared."""
        return self._comment_level == 0 and not self._cleared

    def process_line(
        self,
        events: Iterable[tuple[int, ScopeOp]],
        line: LineSpan,
    ) -> list[CommentSpan]:
        """Apply one line's events; return comments that closed on this line.

        Offsets in ``events`` are relative to ``line.start``. A comment that
        opened on an earlier line is returned on the line where it closes.
        """
        comments: list[CommentSpan] = []
        for offset, op in events:
            position = line.start + offset
            if isinstance(op, Push):
                self._push(op.scope, position)
            elif isinstance(op, Pop):
                self._pop(op.count, position, comments)
            elif isinstance(op, Clear):
                self._clear(op.count)
            elif isinstance(op, Restore):
                self._restore()
            elif isinstance(op, Noop):
                continue
            else:
                raise TypeError(f"unknown scope operation: {op!r}")
        return comments

    def _push(self, scope: str, position: int) -> None:
        if self._is_comment(scope):
            if self._comment_level == 0:
                self._comment_start = position
            self._comment_level += 1
        self._stack.append(scope)

    def _pop(self, count: int, position: int, comments: list[CommentSpan]) -> None:
        for _ in range(count):
            if not self._stack:
                raise ScopeStackError(
                    f"pop at offset {position} with an empty scope stack"
                )
            scope = self._stack.pop()
            if not self._is_comment(scope):
                continue
            self._comment_level -= 1
            if self._comment_level == 0:
                assert self._comment_start is not None
                comments.append(CommentSpan(self._comment_start, position))
                self._comment_start = None

    def _clear(self, count: int | None) -> None:
        if count is None:
            cleared, self._stack = self._stack, []
        else:
            keep = len(self._stack) - min(count, len(self._stack))
            cleared = self._stack[keep:]
            del self._stack[keep:]
        self._cleared.append(cleared)

    def _restore(self) -> None:
        if not self._cleared:
            raise ScopeStackError("restore without a matching clear")
        self._stack.extend(self._cleared.pop())
