"""Global configuration — defaults, YAML config files, env vars."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from report_todo.errors import ConfigurationError

DEFAULT_MATCH_ISSUE = r"todo\(#(?P<issue_number>\d+)\):"
DEFAULT_FORBIDDEN_KEYWORDS = ("todo",)
DEFAULT_IGNORE_FILENAME = ".todoignore"

# Looked up in the scan root, first hit wins
LOCAL_CONFIG_NAMES = ("report_todo.yaml", ".report_todo.yaml")

# YAML key → ReportConfig attribute
_YAML_KEYS = {
    "match_issue": "match_issue",
    "issue_link_format": "issue_link_format",
    "forbid": "forbidden_keywords",
    "all": "report_all",
    "ignore_filename": "ignore_filename",
    "workers": "workers",
}


def _default_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "report-todo"
    return Path.home() / ".config" / "report-todo"


@dataclass
class ReportConfig:
    """Settings for one run of report-todo."""

    match_issue: str = DEFAULT_MATCH_ISSUE
    issue_link_format: str | None = None
    forbidden_keywords: tuple[str, ...] = DEFAULT_FORBIDDEN_KEYWORDS
    report_all: bool = False
    ignore_filename: str = DEFAULT_IGNORE_FILENAME
    workers: int | None = None
    config_dir: Path = field(default_factory=_default_config_dir)

    @classmethod
    def load(
        cls,
        root: str | Path = ".",
        path: str | Path | None = None,
    ) -> ReportConfig:
        """Build config from the global file, the project file and env vars.

        Later sources override earlier ones:
          1. ``$XDG_CONFIG_HOME/report-todo/config.yaml``
          2. ``path`` if given, else ``report_todo.yaml`` / ``.report_todo.yaml``
             in ``root``
          3. ``REPORT_TODO_*`` environment variables
        """
        config = cls()

        global_file = config.config_dir / "config.yaml"
        if global_file.is_file():
            config.update_from_file(global_file)

        if path is not None:
            config.update_from_file(Path(path))
        else:
            for name in LOCAL_CONFIG_NAMES:
                candidate = Path(root) / name
                if candidate.is_file():
                    config.update_from_file(candidate)
                    break

        config.update_from_env(os.environ)
        return config

    def update_from_file(self, path: Path) -> None:
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigurationError(f"cannot read config file {path}: {exc}") from exc
        if data is None:
            return
        if not isinstance(data, dict):
            raise ConfigurationError(f"config file {path} must be a mapping")
        self.update_from_mapping(data, source=str(path))

    def update_from_mapping(self, data: dict, source: str = "<mapping>") -> None:
        for key, value in data.items():
            attr = _YAML_KEYS.get(key)
            if attr is None:
                raise ConfigurationError(f"unknown key {key!r} in {source}")
            setattr(self, attr, _coerce(attr, value, source))

    def update_from_env(self, environ) -> None:
        env_match = environ.get("REPORT_TODO_MATCH_ISSUE")
        if env_match:
            self.match_issue = env_match

        env_link = environ.get("REPORT_TODO_ISSUE_LINK_FORMAT")
        if env_link:
            self.issue_link_format = env_link

        env_forbid = environ.get("REPORT_TODO_FORBID")
        if env_forbid:
            self.forbidden_keywords = tuple(
                k.strip() for k in env_forbid.split(",") if k.strip()
            )

        env_workers = environ.get("REPORT_TODO_WORKERS")
        if env_workers:
            self.workers = _coerce("workers", env_workers, "REPORT_TODO_WORKERS")


def _coerce(attr: str, value, source: str):
    """Validate a raw config value for the named attribute."""
    if attr == "forbidden_keywords":
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigurationError(f"'forbid' in {source} must be a list of strings")
        return tuple(value)
    if attr == "report_all":
        if not isinstance(value, bool):
            raise ConfigurationError(f"'all' in {source} must be a boolean")
        return value
    if attr == "workers":
        if value is None:
            return None
        try:
            workers = int(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"'workers' in {source} must be an integer") from None
        if workers < 1:
            raise ConfigurationError(f"'workers' in {source} must be at least 1")
        return workers
    if value is None and attr == "issue_link_format":
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"'{attr}' in {source} must be a string")
    return value
