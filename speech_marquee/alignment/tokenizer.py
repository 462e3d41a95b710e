"""Reference phrase tokenization for alignment."""
from __future__ import annotations

from typing import List

from speech_marquee.models.reference_token import ReferenceToken, UPCOMING
from .normalizer import normalize, split_words


def tokenize(phrase: str) -> List[ReferenceToken]:
    """Tokenize a reference phrase into display tokens.

    Example: "I am not a replicant." -> I / AM / NOT / A / REPLICANT.

    Every whitespace-delimited word becomes one token, even when it has no
    letters to match on; such a token is passed together with the words
    around it once they match.

    Args:
        phrase: The reference phrase

    Returns:
        Tokens, all "upcoming". Empty for a blank phrase.
    """
    tokens = []
    for word in split_words(phrase or ""):
        tokens.append(ReferenceToken(text=word.upper(), raw=word, key=normalize(word), state=UPCOMING))
    return tokens
