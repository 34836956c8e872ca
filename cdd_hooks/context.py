"""Per-invocation context resolved once and passed to hooks and notifiers."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from .config import CddConfig, load_config
from .logging import configure_logging
from .stores.project_files import find_cdd_root

DEBUG_ENV = "CDD_DEBUG"
DEBUG_LOG_FILE = "debug.log"


@dataclass
class HookContext:
    """Everything a single hook or notifier run needs to know about its project."""

    cwd: Path
    cdd_root: Optional[Path]
    config: CddConfig = field(default_factory=CddConfig)
    debug: bool = False
    session_id: Optional[str] = None

    @classmethod
    def from_input(
        cls,
        payload: Mapping[str, Any] | None,
        *,
        environ: Mapping[str, str] | None = None,
    ) -> "HookContext":
        """Resolve the project from the host's JSON input."""
        payload = payload or {}
        cwd = Path(hook_cwd(payload))
        session_id = payload.get("session_id")
        context = cls.for_root(find_cdd_root(cwd), cwd=cwd, environ=environ)
        context.session_id = session_id if isinstance(session_id, str) else None
        return context

    @classmethod
    def for_root(
        cls,
        cdd_root: Path | None,
        *,
        cwd: Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "HookContext":
        environ = os.environ if environ is None else environ
        config = load_config(cdd_root)
        debug = environ.get(DEBUG_ENV) == "1" or (cdd_root is not None and config.debug)
        if cwd is None:
            cwd = cdd_root.parent if cdd_root is not None else Path.cwd()
        return cls(cwd=cwd, cdd_root=cdd_root, config=config, debug=debug)

    @property
    def project_name(self) -> str:
        return self.config.project_name or self.cwd.name

    @property
    def debug_log(self) -> Optional[Path]:
        if not self.debug or self.cdd_root is None:
            return None
        return self.cdd_root / DEBUG_LOG_FILE

    def configure_logging(self, *, verbose: bool = False) -> None:
        configure_logging(verbose=verbose, debug_log=self.debug_log)


def hook_cwd(payload: Mapping[str, Any]) -> str:
    """Working directory hint: ``workspace.current_dir``, then ``cwd``, then the process cwd."""
    workspace = payload.get("workspace")
    if isinstance(workspace, dict):
        current = workspace.get("current_dir")
        if isinstance(current, str) and current:
            return current
    cwd = payload.get("cwd")
    if isinstance(cwd, str) and cwd:
        return cwd
    return os.getcwd()


__all__ = ["DEBUG_ENV", "HookContext", "hook_cwd"]
