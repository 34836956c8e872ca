"""Webhook notifier: POST the event to any URL that accepts JSON.

Configuration comes from ``notifier_config`` in the payload::

    notifications:
      enabled: true
      notifiers:
        - type: webhook
          url: "https://hooks.slack.com/services/T000/B000/xxx"
          events: [stopped, needs_input]
        - type: webhook
          url: "https://example.com/hook"
          events: all
          body_template: '{"text": "{{message}}", "phase": "{{phase}}"}'

Without ``body_template`` the event payload is posted as-is.
"""

from __future__ import annotations

import json
import re
import sys
from typing import IO, Any, List, Mapping, Optional

from ..formatting import format_summary
from ..logging import get_logger
from .base import Sender, event_data, notifier_config, post_json, prepare_logging, read_payload

_PLACEHOLDER_RE = re.compile(r"\{\{(\w+(?:\.\w+)*)\}\}")
_MISSING = object()

logger = get_logger("notifiers.webhook")


def expand_template(template: str, data: Mapping[str, Any]) -> str:
    """Replace ``{{field}}`` and ``{{a.b}}`` placeholders with values from ``data``.

    ``{{message}}`` expands to the human-readable summary. Missing paths become
    empty strings; mappings and lists are inserted as JSON.
    """

    def _replace(match: "re.Match[str]") -> str:
        key = match.group(1)
        if key == "message":
            return format_summary(data)
        value = _lookup(data, key.split("."))
        if value is _MISSING:
            return ""
        if isinstance(value, (dict, list)) or value is None or isinstance(value, bool):
            return json.dumps(value)
        return str(value)

    return _PLACEHOLDER_RE.sub(_replace, template)


def build_body(config: Mapping[str, Any], payload: Mapping[str, Any]) -> Any:
    """Request body for ``payload`` according to the notifier configuration."""
    template = config.get("body_template")
    if not isinstance(template, str) or not template:
        return event_data(payload)

    try:
        structure = json.loads(template)
    except ValueError:
        structure = _MISSING
    if structure is not _MISSING:
        # Expanding inside parsed strings keeps quotes and newlines JSON-safe.
        return _expand_structure(structure, payload)

    expanded = expand_template(template, payload)
    try:
        return json.loads(expanded)
    except ValueError:
        return expanded


def main(
    argv: Optional[List[str]] = None,
    *,
    stream: IO[Any] | None = None,
    sender: Sender = post_json,
) -> int:
    payload = read_payload(stream)
    if payload is None:
        return 0
    try:
        prepare_logging(payload)
        config = notifier_config(payload)
        url = config.get("url")
        if not isinstance(url, str) or not url:
            logger.debug("Webhook notifier has no url; nothing to send")
            return 0
        status = sender(url, build_body(config, payload))
        logger.debug("Webhook %s responded with %s", url, status)
    except Exception:
        logger.exception("Webhook notifier failed")
    return 0


def _expand_structure(value: Any, payload: Mapping[str, Any]) -> Any:
    if isinstance(value, str):
        return expand_template(value, payload)
    if isinstance(value, list):
        return [_expand_structure(item, payload) for item in value]
    if isinstance(value, dict):
        return {key: _expand_structure(item, payload) for key, item in value.items()}
    return value


def _lookup(data: Any, path: List[str]) -> Any:
    current = data
    for part in path:
        if not isinstance(current, dict) or part not in current:
            return _MISSING
        current = current[part]
    return current


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
