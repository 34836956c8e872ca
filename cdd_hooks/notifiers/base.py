"""Plumbing shared by notifier processes: payload intake, logging and HTTP delivery."""

from __future__ import annotations

import json
from pathlib import Path
from typing import IO, Any, Callable, Dict, Mapping, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

from ..context import HookContext
from ..io import NOTIFIER_INPUT_TIMEOUT, read_json_input
from ..logging import get_logger
from ..notify.dispatcher import NOTIFIER_CONFIG_KEY, ROOT_REFERENCE_KEY

HTTP_TIMEOUT = 10.0

Sender = Callable[[str, Any], Optional[int]]

_logger = get_logger("notifiers")


def read_payload(
    stream: IO[Any] | None = None, *, timeout: float = NOTIFIER_INPUT_TIMEOUT
) -> Optional[Dict[str, Any]]:
    """Read the single JSON payload handed over by the dispatcher."""
    return read_json_input(stream, timeout=timeout)


def prepare_logging(
    payload: Mapping[str, Any], *, environ: Mapping[str, str] | None = None
) -> HookContext:
    """Resolve debug mode from the payload's project back-reference and configure logging."""
    root = payload.get(ROOT_REFERENCE_KEY)
    cdd_root = Path(root) if isinstance(root, str) and root else None
    context = HookContext.for_root(cdd_root, environ=environ)
    context.configure_logging()
    return context


def notifier_config(payload: Mapping[str, Any]) -> Dict[str, Any]:
    config = payload.get(NOTIFIER_CONFIG_KEY)
    return config if isinstance(config, dict) else {}


def event_data(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """The payload without the dispatcher's delivery fields."""
    return {
        key: value
        for key, value in payload.items()
        if key not in {NOTIFIER_CONFIG_KEY, ROOT_REFERENCE_KEY}
    }


def post_json(url: str, body: Any, *, timeout: float = HTTP_TIMEOUT) -> Optional[int]:
    """POST ``body`` once. Strings are sent verbatim, anything else as JSON.

    Returns the HTTP status, or None when no response was received.
    """
    if urlparse(url).scheme not in {"http", "https"}:
        _logger.debug("Refusing to POST to non-HTTP URL %r", url)
        return None
    raw = body if isinstance(body, str) else json.dumps(body)
    request = Request(
        url,
        data=raw.encode("utf-8"),
        headers={"Content-Type": "application/json"},
        method="POST",
    )
    try:
        with urlopen(request, timeout=timeout) as response:  # type: ignore[arg-type]
            response.read()
            return int(response.status)
    except HTTPError as exc:
        _logger.debug("POST %s returned %s", url, exc.code)
        return int(exc.code)
    except (URLError, OSError, ValueError) as exc:
        _logger.debug("POST %s failed: %s", url, exc)
        return None


__all__ = [
    "HTTP_TIMEOUT",
    "Sender",
    "event_data",
    "notifier_config",
    "post_json",
    "prepare_logging",
    "read_payload",
]
