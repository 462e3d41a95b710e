"""Hypothesis source interface and wire payload parsing."""
from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from speech_marquee.errors import MalformedEvent
from speech_marquee.models.hypothesis_event import HypothesisEvent

EventCallback = Callable[[HypothesisEvent], None]
EndCallback = Callable[[], None]
ErrorCallback = Callable[[str], None]


class HypothesisPayload(BaseModel):
    """Wire form of a hypothesis: ``{"transcript": ..., "isFinal": ...}``.

    ``is_final`` is accepted as well as ``isFinal``.
    """
    model_config = ConfigDict(populate_by_name=True)

    transcript: str
    is_final: bool = Field(False, alias="isFinal")


def parse_hypothesis(data: Union[str, bytes, Dict[str, Any]]) -> HypothesisEvent:
    """Validate a JSON line or decoded dict into a HypothesisEvent.

    Raises:
        MalformedEvent: If the payload is not JSON or lacks a string transcript
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except ValueError as e:
            raise MalformedEvent(f"Hypothesis is not JSON: {e}") from e
    if not isinstance(data, dict):
        raise MalformedEvent(f"Hypothesis payload must be an object, got {type(data).__name__}")
    try:
        payload = HypothesisPayload.model_validate(data)
    except ValidationError as e:
        raise MalformedEvent(f"Unparseable hypothesis: {e}") from e
    return HypothesisEvent(transcript=payload.transcript, is_final=payload.is_final)


class HypothesisSource(ABC):
    """A recognizer emitting partial and final transcript events.

    ``start`` registers the callbacks and begins delivery; ``stop`` halts it.
    ``on_end`` fires when the stream finishes on its own, ``on_error`` with
    a message for problems that do not end the stream by themselves.
    """

    def __init__(self) -> None:
        self._on_event: Optional[EventCallback] = None
        self._on_end: Optional[EndCallback] = None
        self._on_error: Optional[ErrorCallback] = None

    @property
    def active(self) -> bool:
        return self._on_event is not None

    @abstractmethod
    def start(self, on_event: EventCallback, on_end: EndCallback, on_error: ErrorCallback) -> None:
        ...

    @abstractmethod
    def stop(self) -> None:
        ...

    def _bind(self, on_event: EventCallback, on_end: EndCallback, on_error: ErrorCallback) -> None:
        self._on_event = on_event
        self._on_end = on_end
        self._on_error = on_error

    def _unbind(self) -> None:
        self._on_event = None
        self._on_end = None
        self._on_error = None
