"""Recognizer output as consumed by the alignment engine."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class HypothesisEvent:
    """The most recent recognizer utterance.

    Attributes:
        transcript: Flat transcript text, partial or settled
        is_final: True once the recognizer will no longer revise it
    """
    transcript: str
    is_final: bool = False
