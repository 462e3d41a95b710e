"""Session timing rules (seconds)."""
from __future__ import annotations

# Presentation refresh interval (~60 fps)
TICK_INTERVAL = 1.0 / 60.0

# How long the last word of a completed phrase stays visible before the next loads
COMPLETION_SETTLE_DELAY = 1.5

# Delay before restarting a recognizer that ended on its own
RESTART_DELAY = 0.1

# Minimum spacing between two recognizer starts, so a source that dies
# immediately cannot spin
MIN_RESTART_INTERVAL = 1.0
