"""Project view and status payload shared by the host hooks."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from ..context import HookContext
from ..progress import (
    ModuleStats,
    ProjectState,
    derive_stats,
    next_planning_command,
    phase_label,
    planning_step,
)
from ..stores.monitor import read_snapshot
from ..stores.project_files import read_state_document


@dataclass
class ProjectView:
    """State document plus the values every hook derives from it."""

    context: HookContext
    cdd_root: Path
    state: ProjectState
    stats: Optional[ModuleStats]

    @property
    def phase_label(self) -> str:
        return phase_label(self.state.phase)

    def status_payload(
        self,
        status: str,
        *,
        last_response: Optional[str] = None,
        started_at: Optional[str] = None,
    ) -> Dict[str, Any]:
        return {
            "session_id": self.context.session_id,
            "status": status,
            "phase": self.phase_label,
            "module": self.stats.active if self.stats else None,
            "modules_complete": self.stats.ratio if self.stats else None,
            "project": self.context.project_name,
            "cwd": str(self.context.cwd),
            "last_response": last_response,
            "started_at": started_at,
        }

    def report(self) -> Dict[str, Any]:
        """Derived phase and progress plus the last recorded snapshot."""
        stats = self.stats
        return {
            "project": self.context.project_name,
            "phase": self.state.phase,
            "phase_label": self.phase_label,
            "modules_total": stats.total if stats else 0,
            "modules_complete": stats.complete if stats else 0,
            "active_module": stats.active if stats else None,
            "planning_step": planning_step(self.state),
            "next_command": next_planning_command(self.state),
            "snapshot": read_snapshot(self.cdd_root),
        }

    def previous_started_at(self) -> Optional[str]:
        """``started_at`` carried by the last snapshot, if any."""
        snapshot = read_snapshot(self.cdd_root) or {}
        started_at = snapshot.get("started_at")
        return started_at if isinstance(started_at, str) and started_at else None


def load_project(context: HookContext) -> Optional[ProjectView]:
    """Return the project view, or None when the directory is not a CDD project."""
    cdd_root = context.cdd_root
    if cdd_root is None:
        return None
    document = read_state_document(cdd_root)
    if document is None:
        return None
    state = ProjectState.from_document(document)
    return ProjectView(context=context, cdd_root=cdd_root, state=state, stats=derive_stats(state))


__all__ = ["ProjectView", "load_project"]
