"""Session control: run/stop, recognizer lifecycle, phrase completion."""
from __future__ import annotations

import time
import warnings
from typing import Callable, Optional

from speech_marquee.alignment import AlignmentEngine, tokenize
from speech_marquee.broadcaster import StateBroadcaster
from speech_marquee.errors import RecognitionTransientError, RecognitionUnavailable
from speech_marquee.event_log import EventLog
from speech_marquee.models.frame import Frame
from speech_marquee.models.hypothesis_event import HypothesisEvent
from speech_marquee.models.reference_token import UPCOMING
from speech_marquee.phrase_queue import PhraseQueue
from speech_marquee.scroll import MonospaceLayout, ScrollController
from speech_marquee.asr.base import HypothesisSource
from .rules import COMPLETION_SETTLE_DELAY, MIN_RESTART_INTERVAL, RESTART_DELAY

SourceFactory = Callable[[], HypothesisSource]
Dispatch = Callable[[Callable[[], None]], None]


def _call_now(fn: Callable[[], None]) -> None:
    fn()


class SessionController:
    """Wires the phrase queue, alignment engine and scroll controller together.

    All methods are meant to run on one logical thread (see SessionLoop).
    Recognizer callbacks go through ``dispatch`` and carry the generation
    they were started under; anything from an earlier generation (a stop
    happened since) is dropped when it is processed.

    Args:
        queue: Reference phrases
        layout: Renderer geometry; must provide ``set_words``,
            ``anchor_center(i)`` and ``container_width``, may provide
            ``present(frame)``
        source_factory: Builds the recognizer; may raise
            RecognitionUnavailable, in which case the session runs display-only
        run_signal: Polled every tick; the session follows its value
        classify: Optional utterance classifier for the event log
        clock: Monotonic seconds
    """

    def __init__(
        self,
        queue: PhraseQueue,
        layout=None,
        source_factory: Optional[SourceFactory] = None,
        run_signal: Optional[Callable[[], bool]] = None,
        broadcaster: Optional[StateBroadcaster] = None,
        event_log: Optional[EventLog] = None,
        classify: Optional[Callable[[str], str]] = None,
        scroll: Optional[ScrollController] = None,
        clock: Callable[[], float] = time.monotonic,
        settle_delay: float = COMPLETION_SETTLE_DELAY,
        restart_delay: float = RESTART_DELAY,
        min_restart_interval: float = MIN_RESTART_INTERVAL,
        dispatch: Optional[Dispatch] = None,
    ) -> None:
        self.queue = queue
        self.layout = layout or MonospaceLayout()
        self.source_factory = source_factory
        self.run_signal = run_signal
        self.broadcaster = broadcaster or StateBroadcaster()
        self.event_log = event_log or EventLog(broadcaster=self.broadcaster)
        self.classify = classify
        self.scroll = scroll or ScrollController()
        self.clock = clock
        self.settle_delay = settle_delay
        self.restart_delay = restart_delay
        self.min_restart_interval = min_restart_interval
        self.dispatch: Dispatch = dispatch or _call_now

        self.engine = AlignmentEngine()
        self.source: Optional[HypothesisSource] = None
        self.running = False
        self.degraded = False
        self.generation = 0
        self.completions = 0
        self._advance_at: Optional[float] = None
        self._restart_at: Optional[float] = None
        self._last_start: Optional[float] = None
        self.frame = Frame()

        self._load_current()

    # ------------------------------------------------------------------
    # Run / stop
    # ------------------------------------------------------------------
    def start(self) -> None:
        if self.running:
            return
        self.running = True
        self.generation += 1
        self._restart_at = None
        self._start_source()
        self.broadcaster.publish("state", {"running": True, "degraded": self.degraded})

    def stop(self) -> None:
        """Halt recognition now; events already in flight become stale."""
        if not self.running:
            return
        self.running = False
        self.generation += 1
        self._restart_at = None
        if self.source is not None and self.source.active:
            self.source.stop()
            self.event_log.log("SPEECH RECOGNITION STOPPED")
        if self.scroll.holding:
            self.scroll.hold_end()
        self.broadcaster.publish("state", {"running": False, "degraded": self.degraded})

    def set_running(self, running: bool) -> None:
        if running:
            self.start()
        else:
            self.stop()

    def _start_source(self) -> None:
        if self.source is None:
            if self.source_factory is None:
                self._degrade("NO SPEECH RECOGNIZER CONFIGURED")
                return
            try:
                self.source = self.source_factory()
            except RecognitionUnavailable as e:
                warnings.warn(f"Speech recognition unavailable: {e}")
                self._degrade("SPEECH RECOGNITION NOT SUPPORTED")
                return
        self.degraded = False

        generation = self.generation
        self._last_start = self.clock()
        try:
            self.source.start(
                on_event=self._guard(generation, self.on_hypothesis),
                on_end=self._guard(generation, self.on_source_end),
                on_error=self._guard(generation, self.on_source_error),
            )
        except RecognitionTransientError as e:
            warnings.warn(f"Speech recognition failed to start: {e}")
            self.event_log.log(f"SPEECH START FAILED: {e}")
            self._schedule_restart()
            return
        self.event_log.log("SPEECH RECOGNITION STARTED")

    def _degrade(self, message: str) -> None:
        if not self.degraded:
            self.event_log.log(message)
        self.degraded = True

    def _guard(self, generation: int, handler: Callable[..., None]) -> Callable[..., None]:
        def deliver(*args) -> None:
            def run() -> None:
                if generation == self.generation and self.running:
                    handler(*args)

            self.dispatch(run)

        return deliver

    # ------------------------------------------------------------------
    # Recognizer callbacks
    # ------------------------------------------------------------------
    def on_hypothesis(self, event: HypothesisEvent) -> None:
        if not self.running:
            return
        if not event.transcript or not event.transcript.strip():
            return
        if event.is_final and self.classify is not None:
            text = event.transcript.strip()
            self.event_log.log(f'SR: "{text}"  [{self.classify(text)}]')

        result = self.engine.on_hypothesis(event)
        if result.forced:
            self.event_log.log(f"FORCED ADVANCE: {result.forced} WORD(S)")
        if result.completed:
            self._phrase_complete()

    def on_source_end(self) -> None:
        if not self.running:
            return
        self._schedule_restart()

    def on_source_error(self, message: str) -> None:
        warnings.warn(f"Speech recognition error: {message}")
        self.event_log.log(f"SPEECH ERROR: {message}")

    def _schedule_restart(self) -> None:
        now = self.clock()
        restart_at = now + self.restart_delay
        if self._last_start is not None:
            restart_at = max(restart_at, self._last_start + self.min_restart_interval)
        self._restart_at = restart_at
        self.event_log.log(f"SPEECH RESTART SCHEDULED IN {restart_at - now:.2f}s")

    # ------------------------------------------------------------------
    # Phrases
    # ------------------------------------------------------------------
    def _phrase_complete(self) -> None:
        if self._advance_at is not None:
            return
        self.completions += 1
        self._advance_at = self.clock() + self.settle_delay
        self.event_log.log(f"PHRASE COMPLETE: {self.queue.active_index}")
        self.broadcaster.publish(
            "phrase_complete",
            {"phrase_index": self.queue.active_index, "phrase": self.queue.current()},
        )

    def _load_current(self) -> None:
        phrase = self.queue.current()
        tokens = tokenize(phrase)
        self.engine.load(tokens)
        self._advance_at = None
        self.layout.set_words([t.text for t in tokens])
        anchor = self.layout.anchor_center(self.engine.cursor)
        if anchor is None:
            self.scroll.reset(0.0)
        else:
            self.scroll.reset(self.scroll.target_for(anchor, self.layout.container_width))
        self.event_log.log(f"PHRASE LOADED: {self.queue.active_index}")
        self.broadcaster.publish(
            "phrase_loaded",
            {"phrase_index": self.queue.active_index, "phrase": phrase},
        )
        if self.engine.complete:
            # Blank phrase: nothing to read.
            self._phrase_complete()

    def next_phrase(self) -> None:
        self.queue.advance()
        self._load_current()

    def previous_phrase(self) -> None:
        self.queue.retreat()
        self._load_current()

    def replace_phrases(self, phrases) -> None:
        self.queue.replace(phrases)
        self._load_current()

    # ------------------------------------------------------------------
    # Manual input
    # ------------------------------------------------------------------
    def hold_start(self, direction: int) -> None:
        self.scroll.hold_start(direction)

    def hold_end(self) -> None:
        self.scroll.hold_end()

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------
    def tick(self) -> Frame:
        """One presentation tick: follow the run signal, fire due timers, scroll."""
        if self.run_signal is not None:
            self.set_running(bool(self.run_signal()))

        if self.running:
            now = self.clock()
            if self._restart_at is not None and now >= self._restart_at:
                self._restart_at = None
                self._start_source()
            if self._advance_at is not None and now >= self._advance_at:
                self.next_phrase()

        anchor = self.layout.anchor_center(self.engine.cursor)
        if self.running or self.scroll.holding:
            self.scroll.tick(anchor, self.layout.container_width)

        self.frame = self._build_frame()
        present = getattr(self.layout, "present", None)
        if present is not None:
            present(self.frame)
        return self.frame

    def _build_frame(self) -> Frame:
        tokens = self.engine.tokens
        if self.degraded:
            states = tuple((i, UPCOMING) for i in range(len(tokens)))
        else:
            states = tuple(self.engine.states())
        return Frame(
            offset=self.scroll.offset,
            states=states,
            words=tuple(t.text for t in tokens),
            cursor=self.engine.cursor,
            recognized_count=self.engine.recognized_count,
            phrase_index=self.queue.active_index,
            running=self.running,
            degraded=self.degraded,
        )
