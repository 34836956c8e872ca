"""PreToolUse hook: warn, never block, when a write lands outside the active module."""

from __future__ import annotations

import os
import sys
from datetime import datetime
from pathlib import Path
from typing import IO, Any, Mapping, Optional

from ..config import PathsConfig
from ..context import HookContext
from ..events import SCOPE_WARNING, STATUS_RUNNING
from ..logging import get_logger
from ..notify.dispatcher import DispatchResult, dispatch
from ..notify.launcher import NotifierLauncher
from ..progress import BUILD_CYCLE
from ..stores.project_files import CDD_DIRNAME, read_contract
from .base import load_project

SHARED_DIRS = frozenset({"shared", "common", "lib", "utils", "helpers"})
DEFAULT_SOURCE_DIR = "src"

logger = get_logger("hooks.scope_guard")


def relative_path(file_path: str, cwd: Path) -> Optional[str]:
    """Forward-slash path of ``file_path`` relative to ``cwd``; None when it leaves the project."""
    target = Path(file_path)
    if not target.is_absolute():
        target = cwd / target
    try:
        relative = os.path.relpath(target, cwd)
    except ValueError:
        # Different drives on Windows.
        return None
    relative = relative.replace("\\", "/")
    if relative == ".." or relative.startswith("../"):
        return None
    return relative


def in_scope(
    relative: str,
    module: str,
    paths: PathsConfig,
    contract: Mapping[str, Any] | None = None,
) -> bool:
    """Return True when ``relative`` may be written while ``module`` is being built.

    Always allowed: `.cdd/`, files at the project root and shared helper
    directories. Otherwise the path must sit under the tests or migrations
    directory, ``<source>/<module>``, or the contract's ``source_path``.
    """
    if relative.startswith(f"{CDD_DIRNAME}/"):
        return True
    if "/" not in relative:
        return True
    if relative.split("/", 1)[0] in SHARED_DIRS:
        return True

    prefixes = [paths.tests, paths.migrations]
    if paths.source:
        prefixes.append(f"{_normalise(paths.source)}/{module}")
    source_path = (contract or {}).get("source_path")
    if isinstance(source_path, str):
        prefixes.append(source_path)
    return any(prefix and _is_under(relative, prefix) for prefix in prefixes)


def warning_line(relative: str, module: str, paths: PathsConfig) -> str:
    source = paths.source or DEFAULT_SOURCE_DIR
    return f'[CDD] Warning: Writing to {relative} but active module is "{module}" ({source}/{module}/)'


def run(
    hook_input: Mapping[str, Any] | None,
    *,
    stdout: IO[str] | None = None,
    launcher: NotifierLauncher | None = None,
    environ: Mapping[str, str] | None = None,
    now: datetime | None = None,
    verbose: bool = False,
) -> Optional[DispatchResult]:
    if not hook_input:
        return None
    stdout = stdout or sys.stdout
    try:
        context = HookContext.from_input(hook_input, environ=environ)
        view = load_project(context)
        if view is None:
            return None
        context.configure_logging(verbose=verbose)

        if view.state.phase_key != BUILD_CYCLE:
            return None
        module = view.stats.active if view.stats else None
        if not module:
            return None

        tool_input = hook_input.get("tool_input")
        file_path = tool_input.get("file_path") if isinstance(tool_input, dict) else None
        if not isinstance(file_path, str) or not file_path:
            return None
        relative = relative_path(file_path, context.cwd)
        if relative is None:
            return None

        paths = context.config.paths
        if in_scope(relative, module, paths, read_contract(view.cdd_root, module)):
            logger.debug("In scope: %s (module: %s)", relative, module)
            return None

        logger.debug("Out of scope: %s (module: %s)", relative, module)
        stdout.write(warning_line(relative, module, paths) + "\n")
        stdout.flush()

        payload = view.status_payload(STATUS_RUNNING, started_at=view.previous_started_at())
        payload["warning_file"] = relative
        payload["message"] = f"Out-of-scope write: {relative}"
        return dispatch(SCOPE_WARNING, payload, view.cdd_root, launcher=launcher, now=now)
    except Exception:
        logger.exception("scope-guard hook failed")
        return None


def _normalise(prefix: str) -> str:
    return prefix.replace("\\", "/").strip("/")


def _is_under(relative: str, prefix: str) -> bool:
    normalised = _normalise(prefix)
    return bool(normalised) and (relative == normalised or relative.startswith(normalised + "/"))


__all__ = ["in_scope", "relative_path", "run", "warning_line"]
