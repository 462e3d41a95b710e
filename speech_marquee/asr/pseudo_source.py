"""Canned hypotheses, replayed one at a time."""
from __future__ import annotations

from typing import List, Optional, Sequence

from speech_marquee.errors import RecognitionTransientError
from speech_marquee.models.hypothesis_event import HypothesisEvent
from .base import EndCallback, ErrorCallback, EventCallback, HypothesisSource

PSEUDO_HYPOTHESES = [
    HypothesisEvent("you", False),
    HypothesisEvent("you are in a", False),
    HypothesisEvent("you are in a desert", True),
    HypothesisEvent("walking", False),
    HypothesisEvent("walking along in the sand", True),
    HypothesisEvent("when all of a sud", False),
    HypothesisEvent("when all of a sudden you look down", True),
]


class ScriptedHypothesisSource(HypothesisSource):
    """Emits the next canned event each time ``pump`` is called.

    When the script runs out the source reports end-of-stream once. A
    restarted source replays from the beginning.
    """

    def __init__(self, events: Optional[Sequence[HypothesisEvent]] = None) -> None:
        super().__init__()
        self.events: List[HypothesisEvent] = list(PSEUDO_HYPOTHESES if events is None else events)
        self.position = 0
        self.starts = 0

    def start(self, on_event: EventCallback, on_end: EndCallback, on_error: ErrorCallback) -> None:
        if self.active:
            raise RecognitionTransientError("Scripted source already started")
        self._bind(on_event, on_end, on_error)
        self.position = 0
        self.starts += 1

    def stop(self) -> None:
        self._unbind()

    def pump(self) -> bool:
        """Emit one event. Returns False once nothing is left to emit."""
        if not self.active:
            return False
        if self.position >= len(self.events):
            on_end = self._on_end
            self._unbind()
            on_end()
            return False
        event = self.events[self.position]
        self.position += 1
        self._on_event(event)
        return True
