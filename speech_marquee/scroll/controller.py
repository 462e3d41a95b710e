"""Head-anchored viewport scrolling with manual hold override."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .rules import (
    BASE_SPEED,
    CATCH_UP_DISTANCE,
    CATCH_UP_SPEED,
    HOLD_ACCEL_MAX,
    HOLD_ACCEL_STEP,
    MID_SPEED_FACTOR,
    NEAR_DISTANCE,
    SNAP_DISTANCE,
)


@dataclass
class ScrollState:
    current_offset: float = 0.0
    target_offset: float = 0.0
    manual_direction: int = 0  # -1 | 0 | +1
    hold_duration: int = 0  # ticks


class ScrollController:
    """Moves the presented offset toward the read head, one tick at a time.

    With no hold active the offset chases ``container_center - anchor_center``
    at a speed that grows with the distance still to cover. While a
    directional hold is active the offset is driven directly, accelerating
    the longer the hold lasts, and the target is pinned to the offset so
    that releasing the hold never causes a jump.
    """

    def __init__(
        self,
        base_speed: float = BASE_SPEED,
        catch_up_speed: float = CATCH_UP_SPEED,
        catch_up_distance: float = CATCH_UP_DISTANCE,
        near_distance: float = NEAR_DISTANCE,
        mid_speed_factor: float = MID_SPEED_FACTOR,
        snap_distance: float = SNAP_DISTANCE,
        hold_accel_step: float = HOLD_ACCEL_STEP,
        hold_accel_max: float = HOLD_ACCEL_MAX,
    ) -> None:
        self.base_speed = base_speed
        self.catch_up_speed = catch_up_speed
        self.catch_up_distance = catch_up_distance
        self.near_distance = near_distance
        self.mid_speed_factor = mid_speed_factor
        self.snap_distance = snap_distance
        self.hold_accel_step = hold_accel_step
        self.hold_accel_max = hold_accel_max
        self.state = ScrollState()

    @property
    def offset(self) -> float:
        return self.state.current_offset

    @property
    def holding(self) -> bool:
        return self.state.manual_direction != 0

    @property
    def hold_accel(self) -> float:
        return min(self.hold_accel_step * self.state.hold_duration, self.hold_accel_max)

    def reset(self, offset: float = 0.0) -> None:
        """Jump straight to ``offset`` and drop any hold (new phrase)."""
        self.state = ScrollState(current_offset=offset, target_offset=offset)

    def hold_start(self, direction: int) -> None:
        if direction not in (-1, 1):
            raise ValueError(f"hold direction must be -1 or 1, got {direction!r}")
        if direction != self.state.manual_direction:
            self.state.hold_duration = 0
        self.state.manual_direction = direction
        self.state.target_offset = self.state.current_offset

    def hold_end(self) -> None:
        self.state.manual_direction = 0
        self.state.hold_duration = 0
        self.state.target_offset = self.state.current_offset

    def target_for(self, anchor_center: float, container_width: float) -> float:
        return container_width / 2.0 - anchor_center

    def speed_for(self, distance: float) -> float:
        """Speed schedule for automatic pursuit."""
        if distance > self.catch_up_distance:
            return self.catch_up_speed
        if distance > self.near_distance:
            return self.base_speed * self.mid_speed_factor
        return self.base_speed

    def tick(self, anchor_center: Optional[float] = None, container_width: Optional[float] = None) -> float:
        """Advance one tick and return the offset to present.

        Args:
            anchor_center: Centre of the read-head token in strip coordinates,
                or None to keep the current target
            container_width: Visible width of the marquee

        Returns:
            The new current offset
        """
        state = self.state
        if state.manual_direction:
            state.current_offset += state.manual_direction * (self.base_speed + self.hold_accel)
            state.target_offset = state.current_offset
            state.hold_duration += 1
            return state.current_offset

        if anchor_center is not None and container_width is not None:
            state.target_offset = self.target_for(anchor_center, container_width)

        delta = state.target_offset - state.current_offset
        distance = abs(delta)
        if distance <= self.snap_distance:
            state.current_offset = state.target_offset
            return state.current_offset

        step = min(self.speed_for(distance), distance)
        state.current_offset += step if delta > 0 else -step
        return state.current_offset
