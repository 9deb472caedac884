"""Classification rules — the compiled tracked pattern and forbidden keywords."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from report_todo.config import DEFAULT_FORBIDDEN_KEYWORDS, DEFAULT_MATCH_ISSUE
from report_todo.errors import ConfigurationError

# ${name}, $name, ${1}, $1 and $$ for a literal dollar sign. A bare name
# takes every word character that follows, so $1abc names a group "1abc".
_PLACEHOLDER = re.compile(r"\$(?:\{(\w+)\}|(\w+)|(\$))")


@dataclass(frozen=True)
class ClassificationRules:
    """Patterns used to classify a line.

    ``tracked`` must carry at least one capture group; group 1 is the issue
    id. Forbidden keywords are only consulted when ``tracked`` did not match.
    """

    tracked: re.Pattern[str]
    forbidden: tuple[re.Pattern[str], ...] = ()
    link_template: str | None = None

    @classmethod
    def compile(
        cls,
        match_issue: str = DEFAULT_MATCH_ISSUE,
        issue_link_format: str | None = None,
        forbidden_keywords: Iterable[str] = DEFAULT_FORBIDDEN_KEYWORDS,
    ) -> ClassificationRules:
        """Compile user-supplied patterns, case-insensitively."""
        try:
            tracked = re.compile(rf"\b{match_issue}", re.IGNORECASE)
        except re.error as exc:
            raise ConfigurationError(
                f"invalid --match-issue pattern {match_issue!r}: {exc}"
            ) from exc
        if tracked.groups < 1:
            raise ConfigurationError(
                f"--match-issue pattern {match_issue!r} needs a capture group "
                "for the issue number"
            )

        forbidden: list[re.Pattern[str]] = []
        for keyword in forbidden_keywords:
            try:
                forbidden.append(re.compile(rf"\b{keyword}\b", re.IGNORECASE))
            except re.error as exc:
                raise ConfigurationError(
                    f"invalid --forbid keyword {keyword!r}: {exc}"
                ) from exc

        if issue_link_format is not None:
            _check_template(tracked, issue_link_format)

        return cls(
            tracked=tracked,
            forbidden=tuple(forbidden),
            link_template=issue_link_format,
        )

    def expand_link(self, match: re.Match[str]) -> str | None:
        """Substitute the captures of ``match`` into the link template."""
        if self.link_template is None:
            return None

        def _sub(m: re.Match[str]) -> str:
            if m.group(3):
                return "$"
            ref = m.group(1) or m.group(2)
            group = int(ref) if ref.isdigit() else ref
            return match.group(group) or ""

        return _PLACEHOLDER.sub(_sub, self.link_template)


def _check_template(tracked: re.Pattern[str], template: str) -> None:
    for m in _PLACEHOLDER.finditer(template):
        if m.group(3):
            continue
        ref = m.group(1) or m.group(2)
        if ref.isdigit():
            if int(ref) > tracked.groups:
                raise ConfigurationError(
                    f"--issue-link-format refers to group {ref}, "
                    f"pattern has {tracked.groups}"
                )
        elif ref not in tracked.groupindex:
            hint = ""
            number = re.match(r"\d+", ref)
            if number:
                hint = f"; write ${{{number.group()}}} to put text after a group number"
            raise ConfigurationError(
                f"--issue-link-format refers to unknown group {ref!r}{hint}"
            )
