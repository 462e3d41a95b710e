"""In-process publish/subscribe for session state and log lines."""
from __future__ import annotations

import warnings
from typing import Any, Callable, Dict, List, Optional

Subscriber = Callable[[Dict[str, Any]], None]


class StateBroadcaster:
    """Delivers ``{"type": kind, ...}`` messages to every subscriber."""

    def __init__(self) -> None:
        self._subscribers: List[Subscriber] = []

    def subscribe(self, fn: Subscriber) -> Callable[[], None]:
        self._subscribers.append(fn)

        def unsubscribe() -> None:
            if fn in self._subscribers:
                self._subscribers.remove(fn)

        return unsubscribe

    def publish(self, kind: str, payload: Optional[Dict[str, Any]] = None) -> None:
        message = {"type": kind}
        message.update(payload or {})
        for fn in list(self._subscribers):
            try:
                fn(message)
            except Exception as e:
                warnings.warn(f"Subscriber failed on {kind!r} message: {e}")
