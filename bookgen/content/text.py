"""Text normalization shared by the scorer and the verifiers."""

from __future__ import annotations

import math
import re
from typing import List

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")

TITLE_STOP_WORDS = frozenset({"the", "and", "for", "are", "but", "not", "you", "all"})

KEYWORD_STOP_WORDS = frozenset(
    """
    the a an and or but in on at to for of with by this that these those i you he she it we
    they me him her us them my your his its our their what which who when where why how than
    then now here there be been being have has had do does did will would should may might must
    can could about into through during before after above below from up down out off over under
    """.split()
)

MIN_KEYWORD_LENGTH = 4


def normalize_text(text: str) -> str:
    """Lowercase and drop everything except ASCII letters, digits, and whitespace."""
    return _NON_ALNUM.sub("", text.lower())


def significant_words(text: str, *, stop_words: frozenset[str] = frozenset()) -> List[str]:
    """Words of at least four characters from ``normalize_text(text)``, in order."""
    return [
        word
        for word in _WHITESPACE.split(normalize_text(text))
        if len(word) >= MIN_KEYWORD_LENGTH and word not in stop_words
    ]


def extract_keywords(text: str) -> List[str]:
    """Unique lowercase keywords (first-seen order) with common stop words removed."""
    words = _WHITESPACE.split(_NON_WORD.sub(" ", text.lower()))
    keywords = [word for word in words if len(word) >= MIN_KEYWORD_LENGTH and word not in KEYWORD_STOP_WORDS]
    return list(dict.fromkeys(keywords))


def slugify(text: str) -> str:
    return _WHITESPACE.sub("-", text.strip().lower())


def round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; scores round .5 upward.
    return int(math.floor(value + 0.5))


__all__ = [
    "KEYWORD_STOP_WORDS",
    "MIN_KEYWORD_LENGTH",
    "TITLE_STOP_WORDS",
    "extract_keywords",
    "normalize_text",
    "round_half_up",
    "significant_words",
    "slugify",
]
