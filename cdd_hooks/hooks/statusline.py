"""Status bar renderer: ``Model │ PHASE: module (c/t) │ dir``."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import IO, Any, List, Mapping

from ..context import hook_cwd
from ..logging import get_logger
from ..progress import ProjectState, progress_label
from ..stores.project_files import find_cdd_root, read_state_document

DIM = "\x1b[2m"
RESET = "\x1b[0m"
SEPARATOR = " │ "

logger = get_logger("hooks.statusline")


def segments(hook_input: Mapping[str, Any] | None) -> List[str]:
    hook_input = hook_input or {}
    cwd = Path(hook_cwd(hook_input))
    parts: List[str] = []

    model = hook_input.get("model")
    if isinstance(model, dict) and isinstance(model.get("display_name"), str) and model["display_name"]:
        parts.append(model["display_name"])

    cdd_root = find_cdd_root(cwd)
    if cdd_root is not None:
        document = read_state_document(cdd_root)
        if document is not None:
            parts.append(progress_label(ProjectState.from_document(document)))

    parts.append(cwd.name)
    return parts


def render(hook_input: Mapping[str, Any] | None) -> str:
    """Dimmed segments joined by a box-drawing separator; no trailing newline."""
    return SEPARATOR.join(f"{DIM}{part}{RESET}" for part in segments(hook_input))


def run(hook_input: Mapping[str, Any] | None, *, stdout: IO[str] | None = None) -> str:
    stdout = stdout or sys.stdout
    try:
        output = render(hook_input)
    except Exception:
        logger.exception("statusline render failed")
        return ""
    stdout.write(output)
    stdout.flush()
    return output


__all__ = ["render", "run", "segments"]
