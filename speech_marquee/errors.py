"""Error types for the marquee.

None of these abort a session. Recognition errors degrade the display,
malformed events are dropped, and firmware errors leave the previous
question set in place.
"""
from __future__ import annotations


class MarqueeError(Exception):
    """Base class for marquee errors."""


class RecognitionUnavailable(MarqueeError, RuntimeError):
    """The hypothesis source could not be constructed."""


class RecognitionTransientError(MarqueeError, RuntimeError):
    """The hypothesis source failed mid-stream or could not start."""


class MalformedEvent(MarqueeError, ValueError):
    """A hypothesis payload could not be parsed."""


class FirmwareError(MarqueeError, ValueError):
    """A firmware document could not be parsed."""
