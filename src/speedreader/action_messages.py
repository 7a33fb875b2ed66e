"""User-facing copy builders for errors, warnings and the exit summary."""

from __future__ import annotations


def _ensure_sentence(text: str) -> str:
    """Return text with terminal sentence punctuation."""
    cleaned = text.strip()
    if not cleaned:
        return ""
    if cleaned.endswith((".", "!", "?")):
        return cleaned
    return f"{cleaned}."


def build_next_step_hint(next_step: str) -> str:
    """Build a canonical next-step guidance line."""
    return f"Next step: {_ensure_sentence(next_step)}"


def build_actionable_error(
    action: str,
    *,
    next_step: str,
    why: str | None = None,
) -> str:
    """Build a 2-3 line actionable error message."""
    lines = [f"Could not {action.strip()}."]
    if why:
        lines.append(f"Why: {_ensure_sentence(why)}")
    lines.append(build_next_step_hint(next_step))
    return "\n".join(lines)


def build_actionable_warning(
    message: str,
    *,
    next_step: str,
    why: str | None = None,
) -> str:
    """Build a 2-3 line actionable warning message."""
    lines = [_ensure_sentence(message)]
    if why:
        lines.append(f"Why: {_ensure_sentence(why)}")
    lines.append(build_next_step_hint(next_step))
    return "\n".join(lines)


def build_session_summary(
    *,
    articles: int,
    words: int,
    total_articles: int,
    total_words: int,
) -> str:
    """Build the reading summary printed after the UI exits."""
    article_label = "article" if articles == 1 else "articles"
    return "\n".join(
        [
            f"Session: {articles} {article_label}, {words:,} words read.",
            f"Lifetime: {total_articles} articles, {total_words:,} words read.",
        ]
    )


__all__ = [
    "build_actionable_error",
    "build_actionable_warning",
    "build_next_step_hint",
    "build_session_summary",
]
