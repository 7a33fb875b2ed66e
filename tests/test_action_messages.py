"""Tests for user-facing error, warning and summary copy."""

from __future__ import annotations

from speedreader.action_messages import (
    build_actionable_error,
    build_actionable_warning,
    build_next_step_hint,
    build_session_summary,
)


def test_actionable_error_with_reason():
    message = build_actionable_error(
        "open notes.txt", why="the file does not exist", next_step="check the path"
    )
    assert message.splitlines() == [
        "Could not open notes.txt.",
        "Why: the file does not exist.",
        "Next step: check the path.",
    ]


def test_actionable_warning_without_reason():
    message = build_actionable_warning("Keyring unavailable", next_step="set a token!")
    assert message.splitlines() == ["Keyring unavailable.", "Next step: set a token!"]


def test_next_step_keeps_existing_punctuation():
    assert build_next_step_hint("Try again?") == "Next step: Try again?"


def test_session_summary_singular_and_thousands():
    summary = build_session_summary(articles=1, words=1234, total_articles=10, total_words=56789)
    assert summary.splitlines() == [
        "Session: 1 article, 1,234 words read.",
        "Lifetime: 10 articles, 56,789 words read.",
    ]
