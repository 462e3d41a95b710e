"""Session control and event serialization."""
from .controller import SessionController
from .loop import SessionLoop
from .rules import COMPLETION_SETTLE_DELAY, MIN_RESTART_INTERVAL, RESTART_DELAY, TICK_INTERVAL

__all__ = [
    "SessionController",
    "SessionLoop",
    "COMPLETION_SETTLE_DELAY",
    "MIN_RESTART_INTERVAL",
    "RESTART_DELAY",
    "TICK_INTERVAL",
]
