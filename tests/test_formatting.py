"""Tests for message formatting helpers."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from cdd_hooks.formatting import _environment, escape_markdown, format_summary, local_time, truncate


def test_truncate_leaves_text_at_limit_untouched() -> None:
    text = "x" * 300

    assert truncate(text, 300) == text
    assert truncate(text + "y", 300) == text + "..."
    assert truncate("", 0) == ""


def test_truncate_rejects_negative_limit() -> None:
    with pytest.raises(ValueError):
        truncate("abc", -1)


def test_escape_markdown_escapes_reserved_characters() -> None:
    assert escape_markdown("a_b*c[d](e)~`>#+-=|{}.!") == (
        "a\\_b\\*c\\[d\\]\\(e\\)\\~\\`\\>\\#\\+\\-\\=\\|\\{\\}\\.\\!"
    )
    assert escape_markdown("1/2") == "1/2"


def test_format_summary_full_payload() -> None:
    summary = format_summary(
        {
            "project": "shop",
            "status": "STOPPED",
            "phase": "BUILD",
            "module": "billing",
            "modules_complete": "2/5",
            "last_response": "All tests pass.",
        }
    )

    assert summary == (
        "CDD | shop\n"
        "Status: STOPPED\n"
        "BUILD | Module: billing | (2/5)\n"
        'Last: "All tests pass."'
    )


def test_format_summary_minimal_payload() -> None:
    assert format_summary({"cwd": "/work/app", "event": "running"}) == (
        "CDD | /work/app\nStatus: running"
    )


def test_format_summary_truncates_last_response() -> None:
    summary = format_summary({"project": "p", "status": "S", "last_response": "z" * 301})

    assert summary.endswith('"' + "z" * 300 + '..."')


def test_local_time_formats_timestamps() -> None:
    stamp = datetime(2024, 5, 1, 15, 4, tzinfo=timezone.utc)
    expected = stamp.astimezone().strftime("%I:%M %p")

    assert local_time("2024-05-01T15:04:00.000Z") == expected
    assert local_time("yesterday") is None
    assert local_time(None) is None


def test_template_environment_is_built_once() -> None:
    format_summary({"project": "a", "status": "S"})
    format_summary({"project": "b", "status": "S"})

    assert _environment() is _environment()
    assert _environment.cache_info().currsize == 1
