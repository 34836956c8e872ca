from __future__ import annotations

from pathlib import Path
from typing import Any, List, Tuple

import pytest

from cdd_hooks.config import NotifierConfig
from tests._fixtures.project_builder import ProjectBuilder


@pytest.fixture
def project_builder(tmp_path: Path) -> ProjectBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


class RecordingLauncher:
    """Launcher double that records what would have been spawned."""

    def __init__(self, *, succeed: bool = True) -> None:
        self.calls: List[Tuple[NotifierConfig, str]] = []
        self.succeed = succeed

    def launch(self, notifier: NotifierConfig, payload_json: str) -> bool:
        self.calls.append((notifier, payload_json))
        return self.succeed


@pytest.fixture
def launcher() -> RecordingLauncher:
    return RecordingLauncher()


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Any:
    monkeypatch.delenv("CDD_DEBUG", raising=False)
    monkeypatch.delenv("CDD_TELEGRAM_BOT_TOKEN", raising=False)
    monkeypatch.delenv("CDD_TELEGRAM_CHAT_ID", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    yield
