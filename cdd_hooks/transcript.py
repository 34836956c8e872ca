"""Last-assistant-message excerpts from host session transcripts (JSON lines)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Optional

from .formatting import EXCERPT_LIMIT, truncate
from .logging import get_logger

_logger = get_logger("transcript")


def default_projects_dir() -> Path:
    return Path.home() / ".claude" / "projects"


def find_transcript_path(
    session_id: str | None,
    transcript_path: str | None = None,
    *,
    projects_dir: Path | None = None,
) -> Optional[Path]:
    """Locate the transcript for ``session_id``.

    An explicit ``transcript_path`` from the hook input wins. Otherwise the
    project folders are scanned for a ``.jsonl`` whose name contains the
    session id, falling back to the most recently modified transcript.
    """
    if transcript_path:
        candidate = Path(transcript_path).expanduser()
        if candidate.is_file():
            return candidate
    if not session_id:
        return None

    projects_dir = projects_dir or default_projects_dir()
    newest: Optional[Path] = None
    newest_mtime = -1.0
    try:
        project_dirs = sorted(p for p in projects_dir.iterdir() if p.is_dir())
    except OSError:
        return None

    for project_dir in project_dirs:
        try:
            files = sorted(project_dir.glob("*.jsonl"))
        except OSError:
            continue
        for path in files:
            if session_id in path.name:
                return path
            try:
                mtime = path.stat().st_mtime
            except OSError:
                continue
            if mtime > newest_mtime:
                newest, newest_mtime = path, mtime
    return newest


def last_assistant_message(path: Path | None, *, limit: int = EXCERPT_LIMIT) -> Optional[str]:
    """Return the text of the last assistant entry, truncated to ``limit`` characters."""
    if path is None:
        return None
    try:
        lines = path.read_text(encoding="utf-8", errors="replace").strip().splitlines()
    except OSError as exc:
        _logger.debug("Unable to read transcript %s: %s", path, exc)
        return None

    for line in reversed(lines):
        try:
            entry = json.loads(line)
        except ValueError:
            continue
        text = _assistant_text(entry)
        if text:
            return truncate(text, limit)
    return None


def _assistant_text(entry: Any) -> Optional[str]:
    if not isinstance(entry, dict):
        return None
    # Newer transcripts nest the chat message under "message".
    message = entry.get("message") if isinstance(entry.get("message"), dict) else entry
    if message.get("role") != "assistant":
        return None
    content = message.get("content")
    if isinstance(content, str):
        return content or None
    if isinstance(content, list):
        for block in content:
            if _is_text_block(block):
                return block["text"]
    return None


def _is_text_block(block: Any) -> bool:
    return (
        isinstance(block, Mapping)
        and block.get("type") == "text"
        and isinstance(block.get("text"), str)
        and bool(block["text"])
    )


__all__ = ["default_projects_dir", "find_transcript_path", "last_assistant_message"]
