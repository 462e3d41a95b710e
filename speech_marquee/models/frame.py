"""Per-tick output handed to the rendering surface."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class Frame:
    """Everything a renderer needs to draw one tick.

    Attributes:
        offset: Horizontal scroll offset to apply to the word strip
        states: (token_index, state) pairs in phrase order
        words: Display text of each token
        cursor: Index of the read head
        recognized_count: Gapless count of recognized tokens
        phrase_index: Active index in the phrase queue
        running: Whether a session is running
        degraded: True when no recognizer is available (display only)
    """
    offset: float = 0.0
    states: Tuple[Tuple[int, str], ...] = field(default_factory=tuple)
    words: Tuple[str, ...] = field(default_factory=tuple)
    cursor: int = 0
    recognized_count: int = 0
    phrase_index: int = 0
    running: bool = False
    degraded: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "offset": self.offset,
            "words": [
                {"index": i, "text": text, "state": state}
                for (i, state), text in zip(self.states, self.words)
            ],
            "cursor": self.cursor,
            "recognized_count": self.recognized_count,
            "phrase_index": self.phrase_index,
            "running": self.running,
            "degraded": self.degraded,
        }
