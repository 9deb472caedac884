"""Tokenizer adapter — turns a lexer's token stream into per-line scope events."""

from __future__ import annotations

import bisect
from collections.abc import Iterator
from pathlib import Path
from typing import Protocol, runtime_checkable

from pygments.lexer import Lexer
from pygments.lexers import get_lexer_for_filename
from pygments.lexers.special import TextLexer
from pygments.token import Comment, String, _TokenType
from pygments.util import ClassNotFound

from report_todo.scanner.scopes import Pop, Push, ScopeOp
from report_todo.scanner.text import TextBuffer

DOC_COMMENT_SCOPE = "comment.block.documentation"

LineEvents = list[tuple[int, ScopeOp]]


@runtime_checkable
class Tokenizer(Protocol):
    """Anything that can describe a file as scope events, line by line."""

    @property
    def grammar(self) -> str:
        """Short name of the grammar in use."""
        ...

    def scope_events(self, buffer: TextBuffer) -> Iterator[LineEvents]:
        """Yield one event list per line of ``buffer``, offsets line-relative."""
        ...


def scope_for_token(ttype: _TokenType) -> str | None:
    """Scope name for a token type, or None when it is not a comment."""
    if ttype in Comment.Preproc or ttype in Comment.PreprocFile:
        return None
    if ttype in Comment:
        return ".".join(part.lower() for part in ttype)
    if ttype in String.Doc:
        return DOC_COMMENT_SCOPE
    return None


class PygmentsTokenizer:
    """Scope events derived from a Pygments lexer.

    The whole file sits inside a ``source.<grammar>`` scope; every run of
    comment tokens becomes one pushed scope, popped where the run ends.
    """

    def __init__(self, lexer: Lexer) -> None:
        self._lexer = lexer

    @property
    def grammar(self) -> str:
        aliases = getattr(self._lexer, "aliases", None)
        return aliases[0] if aliases else self._lexer.name.lower()

    def scope_events(self, buffer: TextBuffer) -> Iterator[LineEvents]:
        lines = list(buffer.lines())
        if not lines:
            return
        starts = [line.start for line in lines]
        per_line: list[LineEvents] = [[] for _ in lines]

        def emit(position: int, op: ScopeOp) -> None:
            index = max(bisect.bisect_right(starts, position) - 1, 0)
            per_line[index].append((position - starts[index], op))

        emit(0, Push(f"source.{self.grammar}"))
        current: str | None = None
        for index, ttype, value in self._lexer.get_tokens_unprocessed(buffer.text):
            if not value:
                continue
            scope = scope_for_token(ttype)
            if scope == current:
                continue
            if current is not None:
                emit(index, Pop(1))
            if scope is not None:
                emit(index, Push(scope))
            current = scope

        end = len(buffer)
        if current is not None:
            emit(end, Pop(1))
        emit(end, Pop(1))

        yield from per_line


def find_tokenizer(path: str | Path) -> PygmentsTokenizer | None:
    """Pick a grammar from the file name; None when there is no comment syntax."""
    name = Path(path).name
    try:
        lexer = get_lexer_for_filename(name, stripnl=False, ensurenl=False)
    except ClassNotFound:
        return None
    if isinstance(lexer, TextLexer):
        return None
    return PygmentsTokenizer(lexer)
