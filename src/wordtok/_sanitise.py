"""
Utilities for normalizing input text and rendering symbols for display.
"""

import unicodedata

import regex as re

_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Lowercase, collapse whitespace runs to one space and trim."""
    return _WHITESPACE.sub(" ", text.lower()).strip()


def split_words(text: str) -> list[str]:
    """Lowercase and split on whitespace, dropping empty words."""
    return [w for w in _WHITESPACE.split(text.lower()) if w]


def _escape_ctrl_chars(s: str) -> str:
    """Replace all Unicode control characters with their escape sequences."""
    cleaned = []
    for c in s:
        # control category codes vary: Cc, Cf, Cn etc.
        # so check via first character
        if unicodedata.category(c)[0] != "C":
            cleaned.append(c)
        else:
            cleaned.append(f"\\u{ord(c):04x}")
    return "".join(cleaned)


def render_symbol(s: str) -> str:
    """Escape control characters so a symbol prints on one line."""
    return _escape_ctrl_chars(s)
