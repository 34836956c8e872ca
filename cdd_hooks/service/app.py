"""FastAPI application exposing project status and manual dispatch."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .. import __version__
from ..context import HookContext
from ..hooks.base import ProjectView, load_project
from ..notify.dispatcher import DispatchResult, dispatch
from ..notify.launcher import NotifierLauncher
from ..stores.project_files import find_cdd_root


class HealthResponse(BaseModel):
    status: str


class StatusResponse(BaseModel):
    project: str
    phase: str
    phase_label: str
    modules_total: int
    modules_complete: int
    active_module: Optional[str] = None
    planning_step: str
    next_command: Optional[str] = None
    snapshot: Optional[Dict[str, Any]] = None


class DispatchRequest(BaseModel):
    event: str
    payload: Dict[str, Any] = Field(default_factory=dict)


class DispatchResponse(BaseModel):
    event: str
    snapshot_written: bool
    launched: List[str]
    failed: List[str]
    snapshot: Dict[str, Any]


def context_for(path: Path | str) -> HookContext:
    cwd = Path(path).resolve()
    return HookContext.for_root(find_cdd_root(cwd), cwd=cwd)


def _default_context() -> HookContext:
    return context_for(Path.cwd())


def create_app(
    context_factory: Callable[[], HookContext] = _default_context,
    *,
    launcher_factory: Callable[[], NotifierLauncher] = NotifierLauncher,
) -> FastAPI:
    """Create the FastAPI application serving one project directory."""

    app = FastAPI(title="CDD Hooks Service", version=__version__)

    async def get_project() -> ProjectView:
        # Re-read per request so edits to `.cdd/` show up immediately.
        view = load_project(context_factory())
        if view is None:
            raise HTTPException(status_code=404, detail="No .cdd project found")
        return view

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/status", response_model=StatusResponse)
    async def status(view: ProjectView = Depends(get_project)) -> StatusResponse:
        return StatusResponse(**view.report())

    @app.post("/dispatch", response_model=DispatchResponse)
    async def dispatch_event(
        request: DispatchRequest,
        view: ProjectView = Depends(get_project),
    ) -> DispatchResponse:
        cdd_root = view.cdd_root

        def _run_dispatch() -> DispatchResult:
            return dispatch(request.event, request.payload, cdd_root, launcher=launcher_factory())

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, _run_dispatch)
        return DispatchResponse(
            event=result.event,
            snapshot_written=result.snapshot_written,
            launched=result.launched,
            failed=result.failed,
            snapshot=result.snapshot,
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Any, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    path: Path | str = ".", host: str = "127.0.0.1", port: int = 8765
) -> None:  # pragma: no cover - integration path
    app = create_app(lambda: context_for(path))
    uvicorn.run(app, host=host, port=port)


__all__ = ["create_app", "context_for", "run_service"]
