"""Persistent "last known status" snapshot at `.cdd/monitor/state.json`."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..logging import get_logger

MONITOR_DIR = "monitor"
SNAPSHOT_FILE = "state.json"

_logger = get_logger("stores.monitor")


def monitor_path(cdd_root: Path) -> Path:
    return cdd_root / MONITOR_DIR / SNAPSHOT_FILE


def write_snapshot(cdd_root: Path, data: Mapping[str, Any]) -> bool:
    """Overwrite the snapshot with ``data``. Returns False instead of raising.

    No locking: concurrent writers race and the last one wins.
    """
    path = monitor_path(cdd_root)
    try:
        serialised = json.dumps(dict(data), indent=2, default=str)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(serialised, encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        _logger.debug("Snapshot write to %s failed: %s", path, exc)
        return False
    return True


def read_snapshot(cdd_root: Path) -> Optional[Dict[str, Any]]:
    """Return the last snapshot, or None when missing or malformed."""
    path = monitor_path(cdd_root)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        _logger.debug("Snapshot at %s unreadable: %s", path, exc)
        return None
    if not isinstance(data, dict):
        return None
    return data


__all__ = ["monitor_path", "read_snapshot", "write_snapshot"]
