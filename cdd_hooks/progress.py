"""Derive workflow phase and module progress from the project-state document."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

PLANNING = "planning"
FOUNDATION = "foundation"
BUILD_CYCLE = "build_cycle"
COMPLETE = "complete"

PHASE_LABELS: Dict[str, str] = {
    PLANNING: "PLANNING",
    FOUNDATION: "FOUNDATION",
    BUILD_CYCLE: "BUILD",
    COMPLETE: "COMPLETE",
}

DONE_MODULE_STATUSES = frozenset({"complete", "verified"})
ACTIVE_MODULE_STATUS = "in_progress"

PLANNING_STEPS = ("brief", "plan", "modularize", "contract")
DONE_PLANNING_STATUSES = frozenset({"complete", "done"})

PLANNING_NEXT_COMMANDS: Dict[str, str] = {
    "pending": "/cdd:brief",
    "brief": "/cdd:plan",
    "plan": "/cdd:modularize",
    "modularize": "/cdd:contract",
    "contract": "/cdd:foundation",
}


@dataclass(frozen=True)
class ModuleStats:
    """Module completion counts. ``active`` is the first in-progress module."""

    total: int
    complete: int
    active: Optional[str]

    @property
    def ratio(self) -> str:
        return f"{self.complete}/{self.total}"


@dataclass
class ProjectState:
    """Read-only snapshot of `.cdd/state.yaml` with defaults applied."""

    phase: str = PLANNING
    modules: Dict[str, Optional[str]] = field(default_factory=dict)
    planning: Dict[str, Optional[str]] = field(default_factory=dict)

    @classmethod
    def from_document(cls, document: Mapping[str, Any] | None) -> "ProjectState":
        if not document:
            return cls()
        phase = document.get("phase")
        return cls(
            phase=str(phase) if isinstance(phase, (str, int, float)) and phase != "" else PLANNING,
            modules=_statuses(document.get("modules")),
            planning=_statuses(document.get("planning")),
        )

    @property
    def phase_key(self) -> str:
        return self.phase.replace("-", "_")


def derive_stats(state: ProjectState) -> Optional[ModuleStats]:
    """Count modules; None when the document declares none."""
    if not state.modules:
        return None
    complete = 0
    active: Optional[str] = None
    for name, status in state.modules.items():
        if status in DONE_MODULE_STATUSES:
            complete += 1
        elif status == ACTIVE_MODULE_STATUS and active is None:
            active = name
    return ModuleStats(total=len(state.modules), complete=complete, active=active)


def phase_label(phase: str | None) -> str:
    """Display label for ``phase``; unknown phases are upper-cased as-is."""
    if not phase:
        return PHASE_LABELS[PLANNING]
    return PHASE_LABELS.get(phase.replace("-", "_"), phase.upper())


def planning_step(state: ProjectState) -> str:
    """Return the last completed planning step, or ``pending``."""
    last = "pending"
    for step in PLANNING_STEPS:
        if state.planning.get(step) in DONE_PLANNING_STATUSES:
            last = step
    return last


def next_planning_command(state: ProjectState) -> Optional[str]:
    return PLANNING_NEXT_COMMANDS.get(planning_step(state))


def progress_label(state: ProjectState, stats: ModuleStats | None = None) -> str:
    """Compact ``PHASE: module (c/t)`` rendering used by the status line."""
    label = phase_label(state.phase)
    stats = stats if stats is not None else derive_stats(state)
    if stats is None:
        return label
    if stats.active:
        return f"{label}: {stats.active} ({stats.ratio})"
    return f"{label}: {stats.ratio}"


def _statuses(value: Any) -> Dict[str, Optional[str]]:
    if not isinstance(value, dict):
        return {}
    result: Dict[str, Optional[str]] = {}
    for name, entry in value.items():
        status = entry.get("status") if isinstance(entry, dict) else None
        result[str(name)] = status if isinstance(status, str) else None
    return result


__all__ = [
    "ModuleStats",
    "PHASE_LABELS",
    "ProjectState",
    "derive_stats",
    "next_planning_command",
    "phase_label",
    "planning_step",
    "progress_label",
]
