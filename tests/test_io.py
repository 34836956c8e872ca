"""Tests for bounded JSON input."""

from __future__ import annotations

import io
import os
import time

from cdd_hooks.io import read_json_input


def test_reads_json_object() -> None:
    stream = io.StringIO('{"session_id": "abc", "cwd": "/tmp"}')

    assert read_json_input(stream, timeout=1.0) == {"session_id": "abc", "cwd": "/tmp"}


def test_empty_or_invalid_input_returns_none() -> None:
    assert read_json_input(io.StringIO(""), timeout=1.0) is None
    assert read_json_input(io.StringIO("not json"), timeout=1.0) is None
    assert read_json_input(io.StringIO("[1, 2]"), timeout=1.0) is None


def test_returns_once_object_is_complete_even_if_stream_stays_open() -> None:
    read_fd, write_fd = os.pipe()
    try:
        os.write(write_fd, b'{"type": "idle_prompt"}')
        with os.fdopen(read_fd, "rb", closefd=False) as stream:
            started = time.monotonic()
            result = read_json_input(stream, timeout=5.0)
            elapsed = time.monotonic() - started
    finally:
        os.close(write_fd)
        os.close(read_fd)

    assert result == {"type": "idle_prompt"}
    assert elapsed < 4.0


def test_gives_up_after_timeout_when_nothing_arrives() -> None:
    read_fd, write_fd = os.pipe()
    try:
        with os.fdopen(read_fd, "rb", closefd=False) as stream:
            started = time.monotonic()
            result = read_json_input(stream, timeout=0.2)
            elapsed = time.monotonic() - started
    finally:
        os.close(write_fd)

    assert result is None
    assert elapsed < 2.0


def test_handles_multibyte_text_split_across_reads() -> None:
    stream = io.BytesIO('{"message": "café ✓"}'.encode("utf-8"))

    assert read_json_input(stream, timeout=1.0) == {"message": "café ✓"}
