"""Hypotheses pushed in from outside, e.g. a browser recognizer via HTTP."""
from __future__ import annotations

from typing import Any, Dict, Union

from speech_marquee.errors import RecognitionTransientError
from .base import EndCallback, ErrorCallback, EventCallback, HypothesisSource, parse_hypothesis


class PushHypothesisSource(HypothesisSource):
    """Forwards submitted payloads while started; drops them otherwise."""

    def start(self, on_event: EventCallback, on_end: EndCallback, on_error: ErrorCallback) -> None:
        if self.active:
            raise RecognitionTransientError("Push source already started")
        self._bind(on_event, on_end, on_error)

    def stop(self) -> None:
        self._unbind()

    def submit(self, payload: Union[str, bytes, Dict[str, Any]]) -> bool:
        """Deliver one payload. Returns False when the source is not started.

        Raises:
            MalformedEvent: If the payload cannot be parsed
        """
        event = parse_hypothesis(payload)
        on_event = self._on_event
        if on_event is None:
            return False
        on_event(event)
        return True

    def error(self, message: str) -> None:
        if self._on_error is not None:
            self._on_error(message)

    def end(self) -> None:
        """The remote recognizer stopped on its own."""
        on_end = self._on_end
        self._unbind()
        if on_end is not None:
            on_end()
