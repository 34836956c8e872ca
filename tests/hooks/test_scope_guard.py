"""Tests for the PreToolUse scope guard."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from cdd_hooks.config import PathsConfig
from cdd_hooks.hooks import scope_guard
from cdd_hooks.stores import read_snapshot
from tests._fixtures.project_builder import ProjectBuilder

BUILD_STATE = """
phase: build_cycle
modules:
  auth:
    status: complete
  billing:
    status: in_progress
"""

PATHS = PathsConfig(source="src/", tests="tests/", migrations="db/migrations")


@pytest.mark.parametrize(
    ("relative", "expected"),
    [
        (".cdd/state.yaml", True),
        ("README.md", True),
        ("shared/money.py", True),
        ("tests/billing/test_invoice.py", True),
        ("db/migrations/0001.sql", True),
        ("src/billing/invoice.py", True),
        ("src/billing", True),
        ("src/auth/login.py", False),
        ("src/billing_old/x.py", False),
        ("docs/guide.md", False),
    ],
)
def test_in_scope(relative: str, expected: bool) -> None:
    assert scope_guard.in_scope(relative, "billing", PATHS) is expected


def test_contract_source_path_extends_scope() -> None:
    contract = {"source_path": "/packages/billing-core/"}

    assert scope_guard.in_scope("packages/billing-core/api.py", "billing", PathsConfig(), contract)
    assert not scope_guard.in_scope("packages/other/api.py", "billing", PathsConfig(), contract)


def test_relative_path(tmp_path: Path) -> None:
    assert scope_guard.relative_path(str(tmp_path / "src" / "a.py"), tmp_path) == "src/a.py"
    assert scope_guard.relative_path("src/a.py", tmp_path) == "src/a.py"
    assert scope_guard.relative_path(str(tmp_path.parent / "elsewhere.py"), tmp_path) is None


def test_out_of_scope_write_warns_and_dispatches(project_builder: ProjectBuilder, launcher) -> None:
    cdd_root = project_builder.state(BUILD_STATE)
    project_builder.config(
        """
        project_name: shop
        paths:
          source: src
        """
    )
    out = io.StringIO()

    result = scope_guard.run(
        {
            "cwd": str(project_builder.root),
            "session_id": "s-2",
            "tool_input": {"file_path": str(project_builder.root / "src" / "auth" / "login.py")},
        },
        stdout=out,
        launcher=launcher,
    )

    assert out.getvalue() == (
        '[CDD] Warning: Writing to src/auth/login.py but active module is "billing" (src/billing/)\n'
    )
    assert result is not None and result.event == "scope_warning"
    snapshot = read_snapshot(cdd_root)
    assert snapshot is not None
    assert snapshot["status"] == "RUNNING"
    assert snapshot["phase"] == "BUILD"
    assert snapshot["module"] == "billing"
    assert snapshot["project"] == "shop"
    assert snapshot["warning_file"] == "src/auth/login.py"
    assert snapshot["message"] == "Out-of-scope write: src/auth/login.py"


def test_contract_allows_write(project_builder: ProjectBuilder, launcher) -> None:
    cdd_root = project_builder.state(BUILD_STATE)
    project_builder.write({".cdd/contracts/billing.yaml": "source_path: services/billing\n"})
    out = io.StringIO()

    result = scope_guard.run(
        {"cwd": str(project_builder.root), "tool_input": {"file_path": "services/billing/api.py"}},
        stdout=out,
        launcher=launcher,
    )

    assert result is None
    assert out.getvalue() == ""
    assert read_snapshot(cdd_root) is None


@pytest.mark.parametrize(
    ("state", "tool_input"),
    [
        ("phase: foundation\n", {"file_path": "src/auth/login.py"}),
        ("phase: build_cycle\nmodules:\n  auth:\n    status: complete\n", {"file_path": "src/auth/login.py"}),
        (BUILD_STATE, {}),
        (BUILD_STATE, {"file_path": "../outside/file.py"}),
    ],
)
def test_nothing_to_check(project_builder: ProjectBuilder, launcher, state: str, tool_input: dict) -> None:
    cdd_root = project_builder.state(state)
    out = io.StringIO()

    result = scope_guard.run(
        {"cwd": str(project_builder.root), "tool_input": tool_input}, stdout=out, launcher=launcher
    )

    assert result is None
    assert out.getvalue() == ""
    assert read_snapshot(cdd_root) is None


def test_missing_input_or_project(tmp_path: Path, launcher) -> None:
    assert scope_guard.run(None, launcher=launcher) is None
    assert scope_guard.run({"cwd": str(tmp_path), "tool_input": {"file_path": "x/y.py"}}, launcher=launcher) is None
