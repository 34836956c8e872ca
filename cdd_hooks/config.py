"""Typed view of `.cdd/config.yaml`."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .logging import get_logger
from .stores.project_files import read_config_document

ALL_EVENTS = "all"
CUSTOM_NOTIFIER = "custom"

EventFilter = Union[str, Tuple[str, ...]]

_logger = get_logger("config")


@dataclass(frozen=True)
class NotifierConfig:
    """A single entry under ``notifications.notifiers``."""

    type: str
    events: EventFilter = ()
    command: Optional[str] = None
    url: Optional[str] = None
    body_template: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_custom(self) -> bool:
        return self.type == CUSTOM_NOTIFIER

    def matches(self, event: str) -> bool:
        """Return True when this notifier subscribes to ``event``."""
        if self.events == ALL_EVENTS:
            return True
        return event in self.events


@dataclass
class NotificationsConfig:
    """Notification switch and configured back-ends."""

    enabled: bool = False
    notifiers: List[NotifierConfig] = field(default_factory=list)


@dataclass
class PathsConfig:
    """Project layout hints."""

    source: Optional[str] = None
    tests: Optional[str] = None
    migrations: Optional[str] = None


@dataclass
class CddConfig:
    """Project settings with defaults applied."""

    project_name: Optional[str] = None
    debug: bool = False
    paths: PathsConfig = field(default_factory=PathsConfig)
    notifications: NotificationsConfig = field(default_factory=NotificationsConfig)


def load_config(cdd_root: Path | None) -> CddConfig:
    """Read and validate the configuration document. Missing or malformed files yield defaults."""
    if cdd_root is None:
        return CddConfig()
    data = read_config_document(cdd_root)
    if data is None:
        return CddConfig()
    return config_from_document(data)


def config_from_document(data: Mapping[str, Any]) -> CddConfig:
    paths_data = _as_dict(data.get("paths"))
    paths = PathsConfig(
        source=_as_str(paths_data.get("source")),
        tests=_as_str(paths_data.get("tests")),
        migrations=_as_str(paths_data.get("migrations")),
    )

    notifications_data = _as_dict(data.get("notifications"))
    notifications = NotificationsConfig(
        enabled=_as_bool(notifications_data.get("enabled")) or False,
        notifiers=_parse_notifiers(notifications_data.get("notifiers")),
    )

    return CddConfig(
        project_name=_as_str(data.get("project_name")),
        debug=_as_bool(data.get("debug")) or False,
        paths=paths,
        notifications=notifications,
    )


def notifier_from_mapping(raw: Mapping[str, Any]) -> Optional[NotifierConfig]:
    """Build a notifier entry, or None when it cannot be launched."""
    kind = _as_str(raw.get("type"))
    if not kind:
        _logger.debug("Skipping notifier without a type: %s", dict(raw))
        return None
    command = _as_str(raw.get("command"))
    if kind == CUSTOM_NOTIFIER and not (command and command.strip()):
        _logger.debug("Skipping custom notifier without a command")
        return None
    return NotifierConfig(
        type=kind,
        events=_as_event_filter(raw.get("events")),
        command=command,
        url=_as_str(raw.get("url")),
        body_template=_as_str(raw.get("body_template")),
        options=dict(raw),
    )


def _parse_notifiers(value: Any) -> List[NotifierConfig]:
    if not isinstance(value, list):
        return []
    notifiers: List[NotifierConfig] = []
    for raw in value:
        if not isinstance(raw, dict):
            continue
        notifier = notifier_from_mapping(raw)
        if notifier is not None:
            notifiers.append(notifier)
    return notifiers


def _as_event_filter(value: Any) -> EventFilter:
    if value == ALL_EVENTS:
        return ALL_EVENTS
    return tuple(_as_str_list(value))


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return str(value).lower()
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "ALL_EVENTS",
    "CddConfig",
    "NotificationsConfig",
    "NotifierConfig",
    "PathsConfig",
    "config_from_document",
    "load_config",
    "notifier_from_mapping",
]
