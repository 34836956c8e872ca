"""Shared text helpers: truncation, Markdown escaping and Jinja2 message templates."""

from __future__ import annotations

import re
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Optional

from jinja2 import Environment, FileSystemLoader

ELLIPSIS = "..."
MESSAGE_LIMIT = 300
EXCERPT_LIMIT = 500

TEMPLATES_DIR = Path(__file__).with_name("templates")

_MARKDOWN_SPECIAL = re.compile(r"([_*\[\]()~`>#+\-=|{}.!\\])")


def truncate(text: str, limit: int) -> str:
    """Cut ``text`` to ``limit`` characters and append an ellipsis; shorter text is returned as-is."""
    if limit < 0:
        raise ValueError("limit must be non-negative")
    if len(text) <= limit:
        return text
    return text[:limit] + ELLIPSIS


def escape_markdown(text: Any) -> str:
    """Escape Telegram MarkdownV2 control characters."""
    return _MARKDOWN_SPECIAL.sub(r"\\\1", str(text))


def render_template(name: str, **context: Any) -> str:
    return _environment().get_template(name).render(**context).rstrip("\n")


@lru_cache(maxsize=1)
def _environment() -> Environment:
    environment = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    environment.filters["clip"] = lambda value, limit=MESSAGE_LIMIT: truncate(str(value), limit)
    environment.filters["md"] = escape_markdown
    return environment


def format_summary(payload: Mapping[str, Any]) -> str:
    """Multi-line human summary used for the ``{{message}}`` placeholder."""
    return render_template(
        "summary.txt.j2",
        project=project_label(payload),
        status=payload.get("status") or payload.get("event") or "unknown",
        detail=_progress_detail(payload),
        last_response=_text(payload.get("last_response")),
        limit=MESSAGE_LIMIT,
    )


def project_label(payload: Mapping[str, Any]) -> str:
    return str(payload.get("project") or payload.get("cwd") or "unknown")


def local_time(timestamp: Any) -> Optional[str]:
    """Render an ISO timestamp as ``HH:MM AM`` in local time."""
    if not isinstance(timestamp, str) or not timestamp:
        return None
    try:
        moment = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return None
    return moment.astimezone().strftime("%I:%M %p")


def _progress_detail(payload: Mapping[str, Any]) -> str:
    parts = []
    if payload.get("phase"):
        parts.append(str(payload["phase"]))
    if payload.get("module"):
        parts.append(f"Module: {payload['module']}")
    if parts and payload.get("modules_complete"):
        parts.append(f"({payload['modules_complete']})")
    return " | ".join(parts)


def _text(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return value if isinstance(value, str) else str(value)


__all__ = [
    "ELLIPSIS",
    "EXCERPT_LIMIT",
    "MESSAGE_LIMIT",
    "escape_markdown",
    "format_summary",
    "local_time",
    "project_label",
    "render_template",
    "truncate",
]
