"""Reference geometry for a single-line word strip.

Real renderers measure their own glyphs; this one assumes fixed-width
characters, which is enough for terminals, tests and the JSON control
surface.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

from speech_marquee.models.frame import Frame

CONTAINER_WIDTH = 800.0
CHAR_WIDTH = 14.0
WORD_GAP = 14.0


class MonospaceLayout:
    """Lays words out left to right and answers anchor queries."""

    def __init__(
        self,
        container_width: float = CONTAINER_WIDTH,
        char_width: float = CHAR_WIDTH,
        word_gap: float = WORD_GAP,
    ) -> None:
        self.container_width = container_width
        self.char_width = char_width
        self.word_gap = word_gap
        self.centers: List[float] = []
        self.last_frame: Optional[Frame] = None

    def set_words(self, words: Sequence[str]) -> None:
        self.centers = []
        x = 0.0
        for word in words:
            width = len(word) * self.char_width
            self.centers.append(x + width / 2.0)
            x += width + self.word_gap

    def anchor_center(self, index: int) -> Optional[float]:
        """Geometric centre of word ``index``, clamped to the strip."""
        if not self.centers:
            return None
        index = max(0, min(index, len(self.centers) - 1))
        return self.centers[index]

    def present(self, frame: Frame) -> None:
        self.last_frame = frame
