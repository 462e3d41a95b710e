"""Scroll speed schedule and manual-hold tuning.

Speeds are in pixels per tick.
"""
from __future__ import annotations

# Speed while the offset is close to its target
BASE_SPEED = 10.0

# Speed while the offset lags far behind (2.5x base)
CATCH_UP_SPEED = 25.0

# Distance above which catch-up speed applies
CATCH_UP_DISTANCE = 100.0

# Distance above which the mid speed (MID_SPEED_FACTOR x base) applies
NEAR_DISTANCE = 30.0
MID_SPEED_FACTOR = 1.5

# Within this distance the offset snaps onto the target
SNAP_DISTANCE = 0.5

# Manual hold: extra speed gained per held tick, and its ceiling
HOLD_ACCEL_STEP = 0.5
HOLD_ACCEL_MAX = 30.0
