"""Tests for the SessionStart hook."""

from __future__ import annotations

import io
from datetime import datetime, timezone
from pathlib import Path

from cdd_hooks.hooks import session_start
from cdd_hooks.stores import read_snapshot
from tests._fixtures.project_builder import ProjectBuilder

NOW = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)

BUILD_STATE = """
phase: build_cycle
modules:
  auth:
    status: complete
  billing:
    status: in_progress
"""


def test_prints_build_status_and_dispatches(project_builder: ProjectBuilder, launcher) -> None:
    cdd_root = project_builder.state(BUILD_STATE)
    project_builder.config("project_name: shop\n")
    out = io.StringIO()

    result = session_start.run(
        {"cwd": str(project_builder.root), "session_id": "s-1"}, stdout=out, launcher=launcher, now=NOW
    )

    assert out.getvalue() == (
        "[CDD] shop | Phase: BUILD | Module: billing (1/2) | Use /cdd:resume to continue\n"
    )
    assert result is not None and result.event == "session_started"
    snapshot = read_snapshot(cdd_root)
    assert snapshot is not None
    assert snapshot["status"] == "STARTED"
    assert snapshot["session_id"] == "s-1"
    assert snapshot["phase"] == "BUILD"
    assert snapshot["module"] == "billing"
    assert snapshot["modules_complete"] == "1/2"
    assert snapshot["project"] == "shop"
    assert snapshot["started_at"] == "2024-05-01T09:30:00Z"
    assert snapshot["updated_at"] == "2024-05-01T09:30:00Z"


def test_planning_phase_suggests_next_command(project_builder: ProjectBuilder, launcher) -> None:
    project_builder.state(
        """
        phase: planning
        planning:
          brief:
            status: complete
        """
    )
    out = io.StringIO()

    session_start.run({"cwd": str(project_builder.root)}, stdout=out, launcher=launcher)

    assert out.getvalue() == "[CDD] demo | Phase: PLANNING | Next: /cdd:plan\n"


def test_complete_phase_without_active_module(project_builder: ProjectBuilder, launcher) -> None:
    project_builder.state(
        """
        phase: complete
        modules:
          auth:
            status: verified
        """
    )
    out = io.StringIO()

    session_start.run({"cwd": str(project_builder.root)}, stdout=out, launcher=launcher)

    assert out.getvalue() == "[CDD] demo | Phase: COMPLETE | 1/1 complete\n"


def test_foundation_phase(project_builder: ProjectBuilder, launcher) -> None:
    project_builder.state("phase: foundation\n")
    out = io.StringIO()

    session_start.run({"workspace": {"current_dir": str(project_builder.root)}}, stdout=out, launcher=launcher)

    assert out.getvalue() == "[CDD] demo | Phase: FOUNDATION | Use /cdd:foundation to continue\n"


def test_non_cdd_directory_is_a_silent_no_op(tmp_path: Path, launcher) -> None:
    out = io.StringIO()

    assert session_start.run({"cwd": str(tmp_path)}, stdout=out, launcher=launcher) is None
    assert out.getvalue() == ""
    assert not (tmp_path / ".cdd").exists()
