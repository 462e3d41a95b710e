"""Speech marquee: live read-along highlighting with a head-tracking scroll.

A reference phrase is shown as a strip of words. Recognizer hypotheses are
aligned against it word by word, and the strip scrolls to keep the word
being spoken in view.
"""

__version__ = "0.1.0"

from .alignment import AlignmentEngine, normalize, tokenize
from .broadcaster import StateBroadcaster
from .event_log import EventLog
from .firmware import Firmware, classify_utterance, load_default_firmware, load_firmware
from .phrase_queue import PhraseQueue
from .scroll import MonospaceLayout, ScrollController
from .session import SessionController, SessionLoop

__all__ = [
    "AlignmentEngine",
    "normalize",
    "tokenize",
    "StateBroadcaster",
    "EventLog",
    "Firmware",
    "classify_utterance",
    "load_default_firmware",
    "load_firmware",
    "PhraseQueue",
    "MonospaceLayout",
    "ScrollController",
    "SessionController",
    "SessionLoop",
]
