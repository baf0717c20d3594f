"""Shared helpers for vocabulary term normalization."""

from __future__ import annotations

import re
import unicodedata

# Letters that NFKD does not decompose into an ASCII base letter.
SPECIAL_FOLDS = {
    "ß": "ss",
    "æ": "ae",
    "Æ": "AE",
    "ø": "o",
    "Ø": "O",
    "œ": "oe",
    "Œ": "OE",
    "ł": "l",
    "Ł": "L",
    "đ": "d",
    "Đ": "D",
}

TERM_RE = re.compile(r"[^A-Za-z]")


def clean_term(text: str) -> str:
    """Return a normalized uppercase ASCII representation of ``text``.

    Accents are folded onto their base letter (``"mañana" -> "MANANA"``),
    everything that is not a letter (spaces, hyphens, apostrophes, digits)
    is dropped.
    """

    if not text:
        return ""
    transformed = []
    for char in text:
        if char in SPECIAL_FOLDS:
            transformed.append(SPECIAL_FOLDS[char])
            continue
        decomposed = unicodedata.normalize("NFKD", char)
        transformed.append("".join(c for c in decomposed if not unicodedata.combining(c)))
    ascii_term = TERM_RE.sub("", "".join(transformed))
    return ascii_term.upper()


__all__ = ["clean_term", "SPECIAL_FOLDS"]
