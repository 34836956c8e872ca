"""Stop hook: record that the agent stopped and alert the configured notifiers."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, Optional

from ..context import HookContext
from ..events import STATUS_STOPPED, STOPPED
from ..logging import get_logger
from ..notify.dispatcher import DispatchResult, dispatch
from ..notify.launcher import NotifierLauncher
from ..transcript import find_transcript_path, last_assistant_message
from .base import load_project

logger = get_logger("hooks.on_stop")


def run(
    hook_input: Mapping[str, Any] | None,
    *,
    launcher: NotifierLauncher | None = None,
    environ: Mapping[str, str] | None = None,
    projects_dir: Path | None = None,
    now: datetime | None = None,
    verbose: bool = False,
) -> Optional[DispatchResult]:
    try:
        context = HookContext.from_input(hook_input, environ=environ)
        if context.cdd_root is None:
            return None
        context.configure_logging(verbose=verbose)
        logger.debug("Hook fired in %s (session %s)", context.cwd, context.session_id)

        view = load_project(context)
        if view is None:
            logger.debug("No state document; nothing to report")
            return None

        transcript_hint = (hook_input or {}).get("transcript_path")
        transcript = find_transcript_path(
            context.session_id,
            transcript_hint if isinstance(transcript_hint, str) else None,
            projects_dir=projects_dir,
        )
        last_response = last_assistant_message(transcript)
        if transcript is None:
            logger.debug("No transcript found for session %s", context.session_id)
        else:
            logger.debug("Transcript excerpt: %d chars", len(last_response or ""))

        payload = view.status_payload(
            STATUS_STOPPED,
            last_response=last_response,
            started_at=view.previous_started_at(),
        )
        return dispatch(STOPPED, payload, view.cdd_root, launcher=launcher, now=now)
    except Exception:
        logger.exception("stop hook failed")
        return None


__all__ = ["run"]
