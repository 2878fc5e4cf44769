"""Configuration loading utilities for the directory watcher."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

import yaml # type: ignore

from .events import EventKind

logger = logging.getLogger(__name__)

DEFAULT_EVENTS = [
    EventKind.CREATE,
    EventKind.DELETE,
    EventKind.MODIFY,
    EventKind.MOVE,
    EventKind.ATTRIB,
]


class ConfigError(Exception):
    """Raised when the configuration file is missing or invalid."""


@dataclass
class WatcherConfig:
    """How the external filesystem watcher is invoked."""

    command: str = "inotifywait"
    events: List[EventKind] = field(default_factory=lambda: list(DEFAULT_EVENTS))
    recursive: bool = True
    extra_args: List[str] = field(default_factory=list)


@dataclass
class QueryConfig:
    """How the external process-listing tool is invoked."""

    command: str = "pgrep"
    args: List[str] = field(default_factory=lambda: ["-a", "-x"])
    timeout: Optional[float] = None


@dataclass
class AppConfig:
    """Top-level configuration structure."""

    watcher: WatcherConfig = field(default_factory=WatcherConfig)
    query: QueryConfig = field(default_factory=QueryConfig)


def load_config(path: Optional[Path]) -> AppConfig:
    """Load and validate the YAML configuration file.

    ``None`` yields the defaults, which run ``inotifywait`` and ``pgrep -a -x``.
    """

    if path is None:
        return AppConfig()

    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as exc:  # pragma: no cover - logging helper
        raise ConfigError(f"Failed to parse YAML configuration: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    config = AppConfig(
        watcher=_parse_watcher_config(data.get("watcher")),
        query=_parse_query_config(data.get("query")),
    )
    logger.debug("Loaded configuration from %s: %s", path, config)
    return config


def _parse_watcher_config(raw: Any) -> WatcherConfig:
    if raw is None:
        return WatcherConfig()
    if not isinstance(raw, dict):
        raise ConfigError("'watcher' section must be a mapping")

    command = raw.get("command", "inotifywait")
    if not isinstance(command, str) or not command:
        raise ConfigError("watcher.command must be a non-empty string")

    events_raw = _ensure_str_list(raw.get("events"), "watcher.events")
    events: List[EventKind] = []
    for name in events_raw:
        try:
            events.append(EventKind(name.strip().lower()))
        except ValueError as exc:
            allowed = ", ".join(option.value for option in EventKind)
            raise ConfigError(f"watcher.events entries must be one of: {allowed}") from exc
    if not events:
        events = list(DEFAULT_EVENTS)

    recursive_flag = raw.get("recursive", True)
    if not isinstance(recursive_flag, bool):
        raise ConfigError("watcher.recursive must be a boolean")

    return WatcherConfig(
        command=command,
        events=events,
        recursive=recursive_flag,
        extra_args=_ensure_str_list(raw.get("extra_args"), "watcher.extra_args"),
    )


def _parse_query_config(raw: Any) -> QueryConfig:
    if raw is None:
        return QueryConfig()
    if not isinstance(raw, dict):
        raise ConfigError("'query' section must be a mapping")

    command = raw.get("command", "pgrep")
    if not isinstance(command, str) or not command:
        raise ConfigError("query.command must be a non-empty string")

    if "args" in raw:
        args = _ensure_str_list(raw.get("args"), "query.args")
    else:
        args = ["-a", "-x"]

    timeout = raw.get("timeout")
    timeout_val: Optional[float] = None
    if timeout is not None:
        if isinstance(timeout, bool):
            raise ConfigError("query.timeout must be numeric")
        try:
            timeout_val = float(timeout)
        except (TypeError, ValueError) as exc:
            raise ConfigError("query.timeout must be numeric") from exc
        if timeout_val <= 0:
            raise ConfigError("query.timeout must be positive")

    return QueryConfig(command=command, args=args, timeout=timeout_val)


def _ensure_str_list(value: Any, field_name: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise ConfigError(f"{field_name} must be a list of strings")
    items: List[str] = []
    for elem in value:
        if not isinstance(elem, str):
            raise ConfigError(f"{field_name} must contain only strings")
        items.append(elem)
    return items
