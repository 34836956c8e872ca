"""Telegram notifier: formatted MarkdownV2 message through the Bot API.

Credentials are read from the environment so they stay out of
`.cdd/config.yaml`:

- ``CDD_TELEGRAM_BOT_TOKEN``: bot token from @BotFather
- ``CDD_TELEGRAM_CHAT_ID``: chat or group to post to

The notifier exits quietly when either is missing.
"""

from __future__ import annotations

import os
import sys
from typing import IO, Any, Dict, List, Mapping, Optional

from ..formatting import MESSAGE_LIMIT, local_time, project_label, render_template
from ..logging import get_logger
from .base import Sender, post_json, prepare_logging, read_payload

TOKEN_ENV = "CDD_TELEGRAM_BOT_TOKEN"
CHAT_ID_ENV = "CDD_TELEGRAM_CHAT_ID"
API_URL = "https://api.telegram.org/bot{token}/sendMessage"

EVENT_EMOJI: Dict[str, str] = {
    "stopped": "\U0001F534",
    "needs_input": "\U0001F7E1",
    "needs_permission": "\U0001F7E0",
    "session_started": "\U0001F7E2",
    "scope_warning": "\u26a0\ufe0f",
    "running": "\U0001F535",
}
DEFAULT_EMOJI = "\u2139\ufe0f"

logger = get_logger("notifiers.telegram")


def format_message(payload: Mapping[str, Any]) -> str:
    event = str(payload.get("event") or "unknown")
    return render_template(
        "telegram.md.j2",
        emoji=EVENT_EMOJI.get(event, DEFAULT_EMOJI),
        project=project_label(payload),
        status=payload.get("status") or event.upper(),
        phase=payload.get("phase"),
        module=payload.get("module"),
        modules_complete=payload.get("modules_complete"),
        last_response=payload.get("last_response") or None,
        time=local_time(payload.get("updated_at")),
        limit=MESSAGE_LIMIT,
    )


def main(
    argv: Optional[List[str]] = None,
    *,
    stream: IO[Any] | None = None,
    sender: Sender = post_json,
    environ: Mapping[str, str] | None = None,
) -> int:
    environ = os.environ if environ is None else environ
    token = environ.get(TOKEN_ENV)
    chat_id = environ.get(CHAT_ID_ENV)
    if not token or not chat_id:
        return 0

    payload = read_payload(stream)
    if payload is None:
        return 0
    try:
        prepare_logging(payload, environ=environ)
        logger.debug("Sending %s to chat %s", payload.get("event"), chat_id)
        body = {"chat_id": chat_id, "text": format_message(payload), "parse_mode": "MarkdownV2"}
        status = sender(API_URL.format(token=token), body)
        logger.debug("Telegram responded with %s", status)
    except Exception:
        logger.exception("Telegram notifier failed")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
