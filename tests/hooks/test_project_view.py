"""Tests for the project view shared by hooks, CLI and service."""

from __future__ import annotations

from pathlib import Path

from cdd_hooks.context import HookContext
from cdd_hooks.hooks.base import load_project
from tests._fixtures.project_builder import ProjectBuilder


def test_load_project_carries_root(project_builder: ProjectBuilder) -> None:
    project_builder.state("phase: planning\n")

    view = load_project(HookContext.from_input({"cwd": str(project_builder.root)}, environ={}))

    assert view is not None
    assert view.cdd_root == project_builder.cdd_root
    assert view.previous_started_at() is None
    assert view.report()["snapshot"] is None


def test_previous_started_at_reads_snapshot(project_builder: ProjectBuilder) -> None:
    project_builder.state("phase: planning\n")
    project_builder.snapshot({"started_at": "2024-05-01T09:00:00Z"})

    view = load_project(HookContext.from_input({"cwd": str(project_builder.root)}, environ={}))

    assert view is not None
    assert view.previous_started_at() == "2024-05-01T09:00:00Z"


def test_load_project_outside_project(tmp_path: Path) -> None:
    assert load_project(HookContext.from_input({"cwd": str(tmp_path)}, environ={})) is None
