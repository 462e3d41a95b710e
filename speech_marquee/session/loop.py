"""Serializes recognizer events and presentation ticks onto one worker thread."""
from __future__ import annotations

import queue
import threading
import traceback
from typing import Callable, Optional

from .rules import TICK_INTERVAL

_STOP = object()


class SessionLoop:
    """Single consumer for everything that touches session state.

    Recognizer threads and HTTP handlers ``post`` callables; a ticker thread
    posts ``session.tick`` at a fixed rate. The worker runs one item at a
    time, so the engine and scroll controller never run concurrently with
    themselves. A failing item is reported and the loop keeps going.
    """

    def __init__(self, session, tick_interval: float = TICK_INTERVAL) -> None:
        self.session = session
        self.tick_interval = tick_interval
        self._queue: "queue.Queue" = queue.Queue()
        self._halt = threading.Event()
        self._worker: Optional[threading.Thread] = None
        self._ticker: Optional[threading.Thread] = None
        session.dispatch = self.post

    @property
    def running(self) -> bool:
        return self._worker is not None and self._worker.is_alive()

    def post(self, fn: Callable[[], None]) -> None:
        self._queue.put(fn)

    def call(self, fn: Callable[[], object], timeout: Optional[float] = None):
        """Run ``fn`` on the worker and wait for its result."""
        if not self.running:
            return fn()
        done = threading.Event()
        box = {}

        def run() -> None:
            try:
                box["result"] = fn()
            except Exception as e:
                box["error"] = e
            finally:
                done.set()

        self.post(run)
        if not done.wait(timeout):
            raise TimeoutError("Session loop did not answer in time")
        if "error" in box:
            raise box["error"]
        return box.get("result")

    def start(self) -> None:
        if self.running:
            return
        self._halt.clear()
        self._worker = threading.Thread(target=self._run_worker, daemon=True)
        self._ticker = threading.Thread(target=self._run_ticker, daemon=True)
        self._worker.start()
        self._ticker.start()

    def stop(self, timeout: Optional[float] = 2.0) -> None:
        """Stop ticking, stop the session, drain and join the worker."""
        self._halt.set()
        if self._ticker is not None:
            self._ticker.join(timeout)
        if not self.running:
            self.session.stop()
            self._worker = None
            self._ticker = None
            return
        self.post(self.session.stop)
        self.post(_STOP)
        if self._worker is not None:
            self._worker.join(timeout)
        self._worker = None
        self._ticker = None

    def _run_worker(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                break
            try:
                item()
            except Exception:
                traceback.print_exc()

    def _run_ticker(self) -> None:
        while not self._halt.wait(self.tick_interval):
            self.post(self.session.tick)
