"""Shared helpers for word normalization."""

from __future__ import annotations

import re
import unicodedata

WORD_RE = re.compile(r"[^A-Z]")


def strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def clean_word(text: str) -> str:
    """Return a normalized uppercase ASCII representation of ``text``."""

    if not text:
        return ""
    return WORD_RE.sub("", strip_accents(text).upper())


def is_plain_word(text: str) -> bool:
    """True when ``text`` is a single run of letters (no hyphens, apostrophes or spaces)."""

    stripped = text.strip()
    return bool(stripped) and stripped.isalpha()


__all__ = ["clean_word", "is_plain_word", "strip_accents"]
