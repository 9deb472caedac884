"""Directory walk honoring ``.gitignore`` and the project ignore file."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

import pathspec

from report_todo.config import DEFAULT_IGNORE_FILENAME
from report_todo.errors import ScanIOError

logger = logging.getLogger(__name__)

GITIGNORE = ".gitignore"
DOT_IGNORE = ".ignore"
STANDARD_IGNORE_FILES = (GITIGNORE, DOT_IGNORE)

# Repository-local excludes, read once for the walk root
GIT_INFO_EXCLUDE = Path(".git", "info", "exclude")

# Never descended into, whatever the ignore files say
_ALWAYS_SKIP_DIRS = {".git", ".hg", ".svn"}


@dataclass(frozen=True)
class _IgnoreLayer:
    """Patterns read from the ignore files of one directory."""

    base: Path
    spec: pathspec.PathSpec

    def matches(self, path: Path, is_dir: bool) -> bool:
        rel = path.relative_to(self.base).as_posix()
        if is_dir:
            rel += "/"
        return self.spec.match_file(rel)


def read_ignore_file(path: Path) -> list[str]:
    """Return pattern lines of an ignore file, [] when it cannot be read."""
    try:
        return path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Skipping ignore file %s: %s", path, exc)
        return []


def _raise_walk_error(exc: OSError) -> None:
    raise ScanIOError(f"error walking {exc.filename}: {exc.strerror or exc}") from exc


def walk_files(
    root: str | Path,
    ignore_filenames: Sequence[str] = (*STANDARD_IGNORE_FILES, DEFAULT_IGNORE_FILENAME),
    include_hidden: bool = False,
) -> Iterator[Path]:
    """Yield regular files under ``root`` in walk order.

    Ignore files apply to the directory they live in and everything below
    it, like git. When ``root`` holds a ``.git`` directory, its
    ``info/exclude`` patterns apply to the whole tree. Hidden entries are
    skipped unless ``include_hidden``. A directory that cannot be listed aborts the walk with ``ScanIOError``.
    """
    root = Path(root)
    if not root.is_dir():
        raise ScanIOError(f"not a directory: {root}")

    layers: dict[Path, list[_IgnoreLayer]] = {}

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        current = Path(dirpath)
        if current == root:
            inherited = _repo_excludes(root)
        else:
            inherited = layers.get(current.parent, [])
        active = list(inherited)

        patterns: list[str] = []
        for name in ignore_filenames:
            if name in filenames:
                patterns.extend(read_ignore_file(current / name))
        if patterns:
            active.append(
                _IgnoreLayer(current, pathspec.GitIgnoreSpec.from_lines(patterns))
            )
        layers[current] = active

        dirnames[:] = sorted(
            d
            for d in dirnames
            if d not in _ALWAYS_SKIP_DIRS
            and (include_hidden or not d.startswith("."))
            and not _ignored(current / d, active, is_dir=True)
        )

        for name in sorted(filenames):
            if not include_hidden and name.startswith("."):
                continue
            path = current / name
            if _ignored(path, active, is_dir=False):
                continue
            if not path.is_file():
                continue
            yield path


def _ignored(path: Path, layers: list[_IgnoreLayer], is_dir: bool) -> bool:
    return any(layer.matches(path, is_dir) for layer in layers)


def _repo_excludes(root: Path) -> list[_IgnoreLayer]:
    exclude = root / GIT_INFO_EXCLUDE
    if not exclude.is_file():
        return []
    patterns = read_ignore_file(exclude)
    if not patterns:
        return []
    return [_IgnoreLayer(root, pathspec.GitIgnoreSpec.from_lines(patterns))]
