"""Tests for the `.cdd/` document readers."""

from __future__ import annotations

from pathlib import Path

from cdd_hooks.stores import find_cdd_root, read_config_document, read_contract, read_state_document
from tests._fixtures.project_builder import ProjectBuilder


def test_find_cdd_root_requires_state_document(project_builder: ProjectBuilder) -> None:
    (project_builder.root / ".cdd").mkdir()
    assert find_cdd_root(project_builder.root) is None

    project_builder.state("phase: planning\n")
    assert find_cdd_root(project_builder.root) == project_builder.cdd_root
    assert find_cdd_root(str(project_builder.root)) == project_builder.cdd_root


def test_find_cdd_root_outside_project(tmp_path: Path) -> None:
    assert find_cdd_root(tmp_path) is None
    assert find_cdd_root(None) is None


def test_read_documents(project_builder: ProjectBuilder) -> None:
    cdd_root = project_builder.state(
        """
        phase: build_cycle
        modules:
          auth:
            status: complete
        """
    )
    project_builder.config("project_name: shop\n")
    project_builder.write(
        {
            ".cdd/contracts/auth.yaml": """
            module: auth
            scope:
              owns: [src/auth/]
            """
        }
    )

    assert read_state_document(cdd_root) == {
        "phase": "build_cycle",
        "modules": {"auth": {"status": "complete"}},
    }
    assert read_config_document(cdd_root) == {"project_name": "shop"}
    assert read_contract(cdd_root, "auth") == {"module": "auth", "scope": {"owns": ["src/auth/"]}}


def test_missing_documents_return_none(tmp_path: Path) -> None:
    assert read_state_document(tmp_path) is None
    assert read_config_document(tmp_path) is None
    assert read_contract(tmp_path, "billing") is None
