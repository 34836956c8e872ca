"""Bounded-wait JSON input from the host tool."""

from __future__ import annotations

import codecs
import json
import os
import sys
import threading
from typing import IO, Any, Dict, Iterator, List, Optional

from .logging import get_logger

HOOK_INPUT_TIMEOUT = 3.0
NOTIFIER_INPUT_TIMEOUT = 5.0

_CHUNK_SIZE = 65536

_logger = get_logger("io")


def read_json_input(
    stream: IO[Any] | None = None, *, timeout: float = HOOK_INPUT_TIMEOUT
) -> Optional[Dict[str, Any]]:
    """Read one JSON object from ``stream`` within ``timeout`` seconds.

    Returns as soon as the collected text parses, or when the stream ends.
    Returns None when nothing usable arrived in time. The reader thread is a
    daemon, so a stream that never closes does not keep the process alive.
    """
    stream = stream if stream is not None else sys.stdin
    if stream is None:
        return None

    chunks: List[str] = []
    ready = threading.Event()

    def _worker() -> None:
        try:
            for chunk in _iter_chunks(stream):
                chunks.append(chunk)
                if _decode("".join(chunks)) is not None:
                    break
        except (OSError, ValueError) as exc:
            _logger.debug("Input stream failed: %s", exc)
        finally:
            ready.set()

    thread = threading.Thread(target=_worker, name="cdd-input-reader", daemon=True)
    thread.start()
    if not ready.wait(timeout):
        _logger.debug("No complete input within %.1fs", timeout)
    return _decode("".join(list(chunks)))


def _iter_chunks(stream: IO[Any]) -> Iterator[str]:
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    fileno = _fileno(stream)
    while True:
        if fileno is not None:
            # os.read returns whatever is available instead of waiting for a full buffer.
            data = os.read(fileno, _CHUNK_SIZE)
        else:
            data = stream.read(_CHUNK_SIZE)
        if not data:
            tail = decoder.decode(b"", final=True)
            if tail:
                yield tail
            return
        yield decoder.decode(data) if isinstance(data, bytes) else data


def _fileno(stream: IO[Any]) -> Optional[int]:
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


def _decode(text: str) -> Optional[Dict[str, Any]]:
    if not text.strip():
        return None
    try:
        value = json.loads(text)
    except json.JSONDecodeError:
        return None
    return value if isinstance(value, dict) else None


__all__ = ["HOOK_INPUT_TIMEOUT", "NOTIFIER_INPUT_TIMEOUT", "read_json_input"]
