"""Word pacing: eye-guide pivot placement and per-word display time."""

from __future__ import annotations

from speedreader.models import MIN_WPM

SENTENCE_END = (".", "!", "?")
CLAUSE_END = (",", ";")

SENTENCE_PAUSE = 2.0
CLAUSE_PAUSE = 1.5
LONG_WORD_FACTOR = 1.5  # More than 12 characters
MEDIUM_WORD_FACTOR = 1.2  # 9 to 12 characters

# (max length, pivot index); anything longer pivots on index 4
_PIVOT_TABLE = ((1, 0), (5, 1), (9, 2), (13, 3))
_LONG_WORD_PIVOT = 4


def pivot_index(length: int) -> int:
    """Return the eye-guide pivot index for a word of ``length`` characters.

    The result is clamped to the last valid index, so a 3-character word
    never pivots past its final character.
    """
    if length <= 0:
        return 0
    pivot = _LONG_WORD_PIVOT
    for max_length, index in _PIVOT_TABLE:
        if length <= max_length:
            pivot = index
            break
    return min(pivot, length - 1)


def split_word(word: str) -> tuple[str, str, str]:
    """Split a word into (lead, pivot, trail) around its pivot character.

    >>> split_word("reading")
    ('re', 'a', 'ding')
    >>> split_word("")
    ('', '', '')
    """
    if not word:
        return "", "", ""
    index = pivot_index(len(word))
    return word[:index], word[index], word[index + 1 :]


def word_delay(word: str, wpm: int, ramp: bool = False) -> float:
    """Return how long ``word`` stays on screen, in seconds.

    The base delay is one minute divided by ``wpm``. With ``ramp`` enabled,
    long words are held longer. Trailing punctuation adds a pause on top;
    sentence punctuation wins over clause punctuation.
    """
    delay = 60.0 / max(1, wpm)

    if ramp:
        length = len(word)
        if length > 12:
            delay *= LONG_WORD_FACTOR
        elif length > 8:
            delay *= MEDIUM_WORD_FACTOR

    if word.endswith(SENTENCE_END):
        delay *= SENTENCE_PAUSE
    elif word.endswith(CLAUSE_END):
        delay *= CLAUSE_PAUSE
    return delay


def adjust_wpm(wpm: int, step: int) -> int:
    """Return ``wpm`` moved by ``step``, never below the minimum speed."""
    return max(MIN_WPM, wpm + step)


def seconds_remaining(words_left: int, wpm: int) -> int:
    """Estimate whole seconds left to read ``words_left`` words at ``wpm``."""
    if words_left <= 0:
        return 0
    return int(words_left / max(1, wpm) * 60)


def to_full_width(text: str) -> str:
    """Map ASCII to full-width forms for the large-glyph display."""
    chars: list[str] = []
    for ch in text:
        if ch == " ":
            chars.append("　")  # Ideographic space
        elif "!" <= ch <= "~":
            chars.append(chr(ord(ch) + 0xFEE0))
        else:
            chars.append(ch)
    return "".join(chars)


__all__ = [
    "CLAUSE_END",
    "SENTENCE_END",
    "adjust_wpm",
    "pivot_index",
    "seconds_remaining",
    "split_word",
    "to_full_width",
    "word_delay",
]
