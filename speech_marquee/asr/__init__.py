"""Hypothesis sources feeding the alignment engine."""
from .base import HypothesisPayload, HypothesisSource, parse_hypothesis
from .pseudo_source import PSEUDO_HYPOTHESES, ScriptedHypothesisSource
from .push_source import PushHypothesisSource
from .streaming_source import ASR_STREAM_URL, StreamingHypothesisSource

__all__ = [
    "HypothesisPayload",
    "HypothesisSource",
    "parse_hypothesis",
    "PSEUDO_HYPOTHESES",
    "ScriptedHypothesisSource",
    "PushHypothesisSource",
    "ASR_STREAM_URL",
    "StreamingHypothesisSource",
]
