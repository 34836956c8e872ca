"""SessionStart hook: print the project status for the host and announce the session."""

from __future__ import annotations

import sys
from datetime import datetime
from typing import IO, Any, Mapping, Optional

from ..context import HookContext
from ..events import SESSION_STARTED, STATUS_STARTED
from ..logging import get_logger
from ..notify.dispatcher import DispatchResult, dispatch, timestamp
from ..notify.launcher import NotifierLauncher
from ..progress import BUILD_CYCLE, COMPLETE, FOUNDATION, PLANNING, next_planning_command
from .base import ProjectView, load_project

logger = get_logger("hooks.session_start")


def status_line(view: ProjectView) -> str:
    """``[CDD] <project> | Phase: <LABEL> | ...`` summary shown at session start."""
    parts = [f"[CDD] {view.context.project_name}", f"Phase: {view.phase_label}"]
    phase = view.state.phase_key

    suggestion: Optional[str] = None
    if phase in {BUILD_CYCLE, COMPLETE}:
        stats = view.stats
        if stats is not None:
            if stats.active:
                parts.append(f"Module: {stats.active} ({stats.ratio})")
            else:
                parts.append(f"{stats.ratio} complete")
        if phase == BUILD_CYCLE:
            suggestion = "Use /cdd:resume to continue"
    elif phase == PLANNING:
        command = next_planning_command(view.state)
        if command:
            suggestion = f"Next: {command}"
    elif phase == FOUNDATION:
        suggestion = "Use /cdd:foundation to continue"

    if suggestion:
        parts.append(suggestion)
    return " | ".join(parts)


def run(
    hook_input: Mapping[str, Any] | None,
    *,
    stdout: IO[str] | None = None,
    launcher: NotifierLauncher | None = None,
    environ: Mapping[str, str] | None = None,
    now: datetime | None = None,
    verbose: bool = False,
) -> Optional[DispatchResult]:
    stdout = stdout or sys.stdout
    try:
        context = HookContext.from_input(hook_input, environ=environ)
        view = load_project(context)
        if view is None:
            return None
        context.configure_logging(verbose=verbose)
        logger.debug("Session %s started in %s", context.session_id, context.cwd)

        stdout.write(status_line(view) + "\n")
        stdout.flush()

        payload = view.status_payload(STATUS_STARTED, started_at=timestamp(now))
        return dispatch(SESSION_STARTED, payload, view.cdd_root, launcher=launcher, now=now)
    except Exception:
        logger.exception("session-start hook failed")
        return None


__all__ = ["run", "status_line"]
