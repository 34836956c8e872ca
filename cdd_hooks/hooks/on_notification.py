"""Notification hook: turn host notifications into ``needs_input``/``needs_permission`` events."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Mapping, Optional, Tuple

from ..context import HookContext
from ..events import NEEDS_INPUT, NEEDS_PERMISSION, STATUS_NEEDS_INPUT, STATUS_NEEDS_PERMISSION
from ..logging import get_logger
from ..notify.dispatcher import DispatchResult, dispatch
from ..notify.launcher import NotifierLauncher
from .base import load_project

PERMISSION_TYPES = frozenset({"permission_prompt", "permission", "tool_permission", "tool_approval"})
IGNORED_TYPES = frozenset({"auth_success"})

_PERMISSION_RE = re.compile(r"permission", re.IGNORECASE)

logger = get_logger("hooks.on_notification")


def notification_type(hook_input: Mapping[str, Any]) -> str:
    value = hook_input.get("type") or hook_input.get("notification_type") or ""
    return value if isinstance(value, str) else str(value)


def notification_message(hook_input: Mapping[str, Any]) -> Optional[str]:
    value = hook_input.get("message") or hook_input.get("title")
    return value if isinstance(value, str) and value else None


def map_notification(hook_input: Mapping[str, Any]) -> Optional[Tuple[str, str]]:
    """Return ``(event, status)`` for a host notification, or None to ignore it.

    Unrecognised types are reported as needing input.
    """
    kind = notification_type(hook_input)
    message = notification_message(hook_input) or ""
    if kind in PERMISSION_TYPES or _PERMISSION_RE.search(message):
        return NEEDS_PERMISSION, STATUS_NEEDS_PERMISSION
    if kind and kind not in IGNORED_TYPES:
        return NEEDS_INPUT, STATUS_NEEDS_INPUT
    return None


def run(
    hook_input: Mapping[str, Any] | None,
    *,
    launcher: NotifierLauncher | None = None,
    environ: Mapping[str, str] | None = None,
    now: datetime | None = None,
    verbose: bool = False,
) -> Optional[DispatchResult]:
    if not hook_input:
        return None
    try:
        context = HookContext.from_input(hook_input, environ=environ)
        if context.cdd_root is None:
            return None
        context.configure_logging(verbose=verbose)
        kind = notification_type(hook_input) or "unknown"
        logger.debug("Hook fired: type=%s cwd=%s", kind, context.cwd)

        mapped = map_notification(hook_input)
        if mapped is None:
            logger.debug("Ignoring notification type %s", kind)
            return None
        event, status = mapped
        logger.debug("Mapped %s -> %s", kind, event)

        view = load_project(context)
        if view is None:
            return None
        payload = view.status_payload(
            status,
            last_response=notification_message(hook_input),
            started_at=view.previous_started_at(),
        )
        return dispatch(event, payload, view.cdd_root, launcher=launcher, now=now)
    except Exception:
        logger.exception("notification hook failed")
        return None


__all__ = ["map_notification", "run"]
