"""Data model for reference tokens and the alignment state that owns them."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

# Token states
UPCOMING = "upcoming"
IN_PROGRESS = "in-progress"
RECOGNIZED = "recognized"

TOKEN_STATES = (UPCOMING, IN_PROGRESS, RECOGNIZED)


@dataclass
class ReferenceToken:
    """One word of the reference phrase.

    Attributes:
        text: Upper-cased display text (punctuation kept)
        raw: The word exactly as written in the phrase
        key: Comparison key (letters A-Z only)
        state: "upcoming" | "in-progress" | "recognized"
    """
    text: str
    raw: str
    key: str
    state: str = UPCOMING


@dataclass
class AlignmentState:
    """Classification of the current phrase.

    Invariant: 0 <= recognized_count <= cursor <= len(tokens).
    """
    tokens: List[ReferenceToken] = field(default_factory=list)
    cursor: int = 0
    recognized_count: int = 0

    @property
    def complete(self) -> bool:
        return self.recognized_count >= len(self.tokens)
