"""Small text and time helpers."""

import time

_WHITESPACE = " \t\n\r"


def split_words(text: str, delim: str = " ") -> list[str]:
    """Split ``text`` on ``delim``, dropping empty pieces."""
    return [word for word in text.split(delim) if word]


def rstrip_whitespace(text: str) -> str:
    """Remove trailing spaces, tabs, carriage returns and newlines."""
    return text.rstrip(_WHITESPACE)


def now_microseconds() -> int:
    """Current wall-clock time in microseconds."""
    return time.time_ns() // 1000