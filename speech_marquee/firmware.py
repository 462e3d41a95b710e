"""Firmware (question set) loading and utterance classification.

A firmware document looks like::

    {
      "profile": "W3SSB",
      "manufacturer": "TYRELL CORPORATION",
      "questions": [
        {"text": "...", "expectedReply": "...", "weight": 0.25, "class": "EMPATHY"}
      ]
    }
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import FirmwareError

DEFAULT_FIRMWARE_PATH = Path(__file__).resolve().parent / "data" / "default_firmware.json"
FIRMWARE_PATH = os.getenv("MARQUEE_FIRMWARE_PATH", str(DEFAULT_FIRMWARE_PATH))

UNCLASSIFIED = "unclassified"

# How much of a question / reply an utterance must contain to count as a hit
QUESTION_PREFIX_CHARS = 20
REPLY_PREFIX_CHARS = 10


class Question(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    expected_reply: str = Field("", alias="expectedReply")
    weight: float = 0.0
    question_class: str = Field(UNCLASSIFIED, alias="class")


class Firmware(BaseModel):
    profile: str
    manufacturer: str = ""
    questions: List[Question] = Field(default_factory=list)


def parse_firmware(document: Union[str, bytes, Dict[str, Any]]) -> Firmware:
    """Validate a firmware document given as JSON text or an already-decoded dict.

    Raises:
        FirmwareError: If the document is not valid JSON or misses required fields
    """
    try:
        if isinstance(document, (str, bytes)):
            return Firmware.model_validate_json(document)
        return Firmware.model_validate(document)
    except ValidationError as e:
        raise FirmwareError(f"Invalid firmware document: {e}") from e


def load_firmware(path: Union[str, Path]) -> Firmware:
    """Load and validate a firmware file."""
    path = Path(path)
    if not path.exists():
        raise FirmwareError(f"Firmware file not found: {path}")
    return parse_firmware(path.read_text(encoding="utf-8"))


def load_default_firmware() -> Firmware:
    return load_firmware(FIRMWARE_PATH)


def classify_utterance(firmware: Firmware, text: str) -> str:
    """Return the class of the first question the utterance belongs to.

    Matching is case-insensitive. A question matches when its text contains
    the utterance or the utterance contains the start of the question; the
    expected reply is tried the same way after that.
    """
    lower = text.strip().lower()
    if not lower:
        return UNCLASSIFIED
    for question in firmware.questions:
        q = question.text.lower()
        r = question.expected_reply.lower()
        if lower in q or q[:QUESTION_PREFIX_CHARS] in lower:
            return question.question_class
        if r and (lower in r or r[:REPLY_PREFIX_CHARS] in lower):
            return question.question_class
    return UNCLASSIFIED


def firmware_summary(firmware: Firmware) -> Dict[str, Any]:
    """Plain-dict view for the control surface."""
    return json.loads(firmware.model_dump_json(by_alias=True))
