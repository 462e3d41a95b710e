"""Ordered reference phrases with a wrap-around active index."""
from __future__ import annotations

from typing import List, Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from .firmware import Firmware


class PhraseQueue:
    """Holds the reference phrases and which one is being read.

    An empty queue has a single implicit blank phrase, which the session
    treats as immediately complete.
    """

    def __init__(self, phrases: Optional[Sequence[str]] = None, active_index: int = 0) -> None:
        self.phrases: List[str] = list(phrases or [])
        self.active_index = active_index % len(self.phrases) if self.phrases else 0

    @classmethod
    def from_firmware(cls, firmware: "Firmware") -> "PhraseQueue":
        return cls([q.text for q in firmware.questions])

    def __len__(self) -> int:
        return len(self.phrases)

    def current(self) -> str:
        if not self.phrases:
            return ""
        return self.phrases[self.active_index]

    def advance(self) -> str:
        """Move to the next phrase, wrapping to the first past the end."""
        if self.phrases:
            self.active_index = (self.active_index + 1) % len(self.phrases)
        return self.current()

    def retreat(self) -> str:
        """Move to the previous phrase, wrapping to the last before the first."""
        if self.phrases:
            self.active_index = (self.active_index - 1) % len(self.phrases)
        return self.current()

    def replace(self, phrases: Sequence[str]) -> str:
        """Swap in a new phrase list and restart from the first phrase."""
        self.phrases = list(phrases)
        self.active_index = 0
        return self.current()
