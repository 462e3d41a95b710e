"""Operator event log: a bounded buffer of timestamped lines."""
from __future__ import annotations

import datetime
from collections import deque
from typing import Callable, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .broadcaster import StateBroadcaster

LOG_LIMIT = 500


class EventLog:
    """Keeps the most recent ``limit`` lines, oldest dropped first.

    Lines look like ``[14:03:22] PHRASE LOADED: 0``. Each line is also
    printed when ``echo`` is set and published as a ``"log"`` message.
    """

    def __init__(
        self,
        limit: int = LOG_LIMIT,
        echo: bool = False,
        broadcaster: Optional["StateBroadcaster"] = None,
        now: Optional[Callable[[], datetime.datetime]] = None,
    ) -> None:
        self.limit = limit
        self.echo = echo
        self.broadcaster = broadcaster
        self._now = now or datetime.datetime.now
        self._lines: deque = deque(maxlen=limit)

    def log(self, message: str) -> str:
        line = f"[{self._now().strftime('%H:%M:%S')}] {message}"
        self._lines.append(line)
        if self.echo:
            print(line)
        if self.broadcaster is not None:
            self.broadcaster.publish("log", {"line": line})
        return line

    def lines(self) -> List[str]:
        return list(self._lines)

    def __len__(self) -> int:
        return len(self._lines)
