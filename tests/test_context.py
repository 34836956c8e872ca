"""Tests for invocation context and logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

from cdd_hooks.context import HookContext, hook_cwd
from cdd_hooks.logging import configure_logging, get_logger
from tests._fixtures.project_builder import ProjectBuilder


def test_hook_cwd_prefers_workspace_then_cwd(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)

    assert hook_cwd({"workspace": {"current_dir": "/a"}, "cwd": "/b"}) == "/a"
    assert hook_cwd({"workspace": {}, "cwd": "/b"}) == "/b"
    assert hook_cwd({}) == str(tmp_path)


def test_context_from_input_resolves_project(project_builder: ProjectBuilder) -> None:
    project_builder.state("phase: planning\n")
    project_builder.config("project_name: shop\n")

    context = HookContext.from_input({"cwd": str(project_builder.root), "session_id": "s-1"}, environ={})

    assert context.cdd_root == project_builder.cdd_root
    assert context.project_name == "shop"
    assert context.session_id == "s-1"
    assert context.debug is False
    assert context.debug_log is None


def test_project_name_defaults_to_directory(project_builder: ProjectBuilder) -> None:
    project_builder.state("phase: planning\n")

    context = HookContext.from_input({"cwd": str(project_builder.root)}, environ={})

    assert context.project_name == "demo"


def test_debug_from_environment_or_config(project_builder: ProjectBuilder) -> None:
    project_builder.state("phase: planning\n")
    cwd = {"cwd": str(project_builder.root)}

    assert HookContext.from_input(cwd, environ={"CDD_DEBUG": "1"}).debug is True
    assert HookContext.from_input(cwd, environ={"CDD_DEBUG": "true"}).debug is False

    project_builder.config("debug: true\n")
    context = HookContext.from_input(cwd, environ={})
    assert context.debug is True
    assert context.debug_log == project_builder.cdd_root / "debug.log"


def test_debug_needs_a_project(tmp_path: Path) -> None:
    context = HookContext.from_input({"cwd": str(tmp_path)}, environ={"CDD_DEBUG": "1"})

    assert context.cdd_root is None
    assert context.debug_log is None


def test_configure_logging_writes_debug_file(tmp_path: Path) -> None:
    debug_log = tmp_path / ".cdd" / "debug.log"

    configure_logging(debug_log=debug_log)
    get_logger("tests").debug("hello from tests")
    configure_logging()

    assert "[cdd_hooks.tests] DEBUG hello from tests" in debug_log.read_text(encoding="utf-8")


def test_configure_logging_is_quiet_by_default() -> None:
    logger = configure_logging()

    assert logger.level == logging.WARNING
    assert all(isinstance(handler, logging.NullHandler) for handler in logger.handlers)
