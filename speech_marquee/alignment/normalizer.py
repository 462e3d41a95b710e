"""Token normalization utilities for alignment."""
from __future__ import annotations

import re
from typing import List

_NON_LETTERS = re.compile(r"[^A-Z]+")
_WHITESPACE = re.compile(r"\s+")


def normalize(word: str) -> str:
    """Normalize a word for comparison.

    Upper-cases and strips every character outside A-Z. The result is only
    ever used for matching; display always uses the token's own text.

    Args:
        word: The word to normalize

    Returns:
        Comparison key, possibly empty (e.g. for "--" or "42")
    """
    return _NON_LETTERS.sub("", word.upper())


def split_words(text: str) -> List[str]:
    """Split text on runs of whitespace, dropping empty pieces."""
    return [w for w in _WHITESPACE.split(text.strip()) if w]


def spoken_keys(transcript: str) -> List[str]:
    """Turn a recognizer transcript into normalized spoken tokens.

    Words that normalize to nothing (numbers, stray punctuation) are dropped.
    """
    keys = []
    for word in split_words(transcript):
        key = normalize(word)
        if key:
            keys.append(key)
    return keys
