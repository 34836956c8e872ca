"""Persist the monitor snapshot and fan an event out to matching notifiers."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from ..config import NotifierConfig, load_config
from ..logging import get_logger
from ..stores.monitor import write_snapshot
from .launcher import NotifierLauncher

ROOT_REFERENCE_KEY = "_cdd_root"
NOTIFIER_CONFIG_KEY = "notifier_config"

_logger = get_logger("notify.dispatcher")


@dataclass
class DispatchResult:
    """What a dispatch call managed to do. Failures show up here, never as exceptions."""

    event: str
    snapshot: Dict[str, Any]
    snapshot_written: bool = False
    launched: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


def dispatch(
    event: str,
    payload: Mapping[str, Any] | None,
    cdd_root: Path,
    *,
    launcher: NotifierLauncher | None = None,
    now: datetime | None = None,
) -> DispatchResult:
    """Write the snapshot, then launch every notifier subscribed to ``event``.

    The snapshot write always happens before any notifier starts. Notifier
    configuration is re-read on every call.
    """
    if not isinstance(event, str) or not event:
        raise ValueError("dispatch requires a non-empty event name")

    snapshot = build_snapshot(event, payload, now=now)
    result = DispatchResult(event=event, snapshot=snapshot)

    try:
        result.snapshot_written = write_snapshot(cdd_root, snapshot)
    except Exception:  # pragma: no cover
        _logger.exception("Snapshot write failed for %s", event)

    try:
        notifications = load_config(cdd_root).notifications
    except Exception:
        _logger.exception("Notifier configuration unreadable; skipping notifications")
        return result

    if not notifications.enabled or not notifications.notifiers:
        _logger.debug("Notifications disabled or empty; %s recorded only", event)
        return result

    launcher = launcher or NotifierLauncher()
    for notifier in notifications.notifiers:
        if not notifier.matches(event):
            continue
        try:
            launched = launcher.launch(notifier, build_notifier_payload(snapshot, notifier, cdd_root))
        except Exception:
            _logger.exception("Notifier %s failed to launch", notifier.type)
            launched = False
        (result.launched if launched else result.failed).append(notifier.type)

    _logger.debug(
        "Dispatched %s: %d launched, %d failed", event, len(result.launched), len(result.failed)
    )
    return result


def build_snapshot(
    event: str, payload: Mapping[str, Any] | None, *, now: Optional[datetime] = None
) -> Dict[str, Any]:
    """Payload fields plus ``event`` and ``updated_at``. No merge with earlier snapshots."""
    snapshot = dict(payload or {})
    snapshot["event"] = event
    snapshot["updated_at"] = timestamp(now)
    return snapshot


def build_notifier_payload(
    snapshot: Mapping[str, Any], notifier: NotifierConfig, cdd_root: Path
) -> str:
    """Self-contained JSON message for one notifier process."""
    message = dict(snapshot)
    message[NOTIFIER_CONFIG_KEY] = dict(notifier.options)
    message[ROOT_REFERENCE_KEY] = str(cdd_root)
    return json.dumps(message, default=str)


def timestamp(now: Optional[datetime] = None) -> str:
    """UTC ISO-8601 timestamp with a trailing ``Z``."""
    moment = now or datetime.now(UTC)
    return moment.isoformat().replace("+00:00", "Z")


__all__ = [
    "DispatchResult",
    "build_notifier_payload",
    "build_snapshot",
    "dispatch",
    "timestamp",
]
