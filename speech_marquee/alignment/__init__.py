"""Alignment of live recognizer output to the reference phrase."""
from .engine import AlignmentEngine, AlignmentResult
from .normalizer import normalize, spoken_keys
from .tokenizer import tokenize

__all__ = ["AlignmentEngine", "AlignmentResult", "normalize", "spoken_keys", "tokenize"]
