"""Session controller: completion, restarts, stale events, degraded mode."""
import warnings

import pytest

from speech_marquee.asr import PushHypothesisSource, ScriptedHypothesisSource
from speech_marquee.errors import RecognitionTransientError, RecognitionUnavailable
from speech_marquee.models.hypothesis_event import HypothesisEvent
from speech_marquee.models.reference_token import IN_PROGRESS, RECOGNIZED, UPCOMING
from speech_marquee.phrase_queue import PhraseQueue
from speech_marquee.scroll import MonospaceLayout
from speech_marquee.session import SessionController

PHRASES = ["I AM NOT A REPLICANT", "MORE HUMAN THAN HUMAN"]


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def make_session(source=None, **kwargs):
    clock = FakeClock()
    source = source or PushHypothesisSource()
    session = SessionController(
        PhraseQueue(PHRASES),
        layout=MonospaceLayout(),
        source_factory=lambda: source,
        clock=clock,
        settle_delay=1.5,
        restart_delay=0.1,
        min_restart_interval=1.0,
        **kwargs
    )
    return session, source, clock


def test_start_and_align():
    session, source, _ = make_session()
    session.start()
    source.submit({"transcript": "i am", "isFinal": True})

    frame = session.tick()
    assert frame.recognized_count == 2
    assert frame.cursor == 2
    assert frame.states[2] == (2, IN_PROGRESS)
    assert frame.running


def test_events_ignored_when_stopped():
    session, source, _ = make_session()
    assert source.submit({"transcript": "i am", "isFinal": True}) is False
    assert session.engine.recognized_count == 0


def test_phrase_complete_advances_once_after_delay():
    session, source, clock = make_session()
    seen = []
    session.broadcaster.subscribe(lambda m: seen.append(m) if m["type"] == "phrase_complete" else None)
    session.start()

    source.submit({"transcript": "i am not a replicant", "isFinal": True})
    source.submit({"transcript": "i am not a replicant", "isFinal": True})
    session.tick()
    assert session.queue.active_index == 0

    clock.now += 1.0
    source.submit({"transcript": "replicant", "isFinal": True})
    session.tick()
    assert session.queue.active_index == 0

    clock.now += 0.6
    session.tick()
    session.tick()
    assert session.queue.active_index == 1
    assert session.completions == 1
    assert len(seen) == 1
    assert session.engine.recognized_count == 0
    assert [s for _, s in session.frame.states][0] == IN_PROGRESS


def test_restart_on_end_respects_minimum_interval():
    source = ScriptedHypothesisSource([HypothesisEvent("i", False)])
    session, _, clock = make_session(source=source)
    session.start()
    assert source.starts == 1

    source.pump()
    source.pump()  # end of stream
    assert not source.active

    clock.now += 0.2
    session.tick()
    assert source.starts == 1

    clock.now += 1.0
    session.tick()
    assert source.starts == 2
    assert source.active


def test_stop_drops_stale_events():
    queued = []
    session, source, _ = make_session(dispatch=queued.append)
    session.start()
    source.submit({"transcript": "i am", "isFinal": True})

    session.stop()
    session.start()
    for run in queued:
        run()

    assert session.engine.recognized_count == 0


def test_stop_halts_source():
    session, source, _ = make_session()
    session.start()
    assert source.active
    session.stop()
    assert not source.active
    assert not session.running


def test_run_signal_drives_session():
    flag = {"run": False}
    session, source, _ = make_session(run_signal=lambda: flag["run"])

    session.tick()
    assert not session.running

    flag["run"] = True
    session.tick()
    assert session.running
    assert source.active

    flag["run"] = False
    session.tick()
    assert not session.running
    assert not source.active


def test_unavailable_recognizer_runs_display_only():
    def factory():
        raise RecognitionUnavailable("no microphone")

    session = SessionController(PhraseQueue(PHRASES), source_factory=factory, clock=FakeClock())
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        session.start()
    frame = session.tick()

    assert session.running
    assert frame.degraded
    assert frame.words == ("I", "AM", "NOT", "A", "REPLICANT")
    assert all(state == UPCOMING for _, state in frame.states)
    assert any("unavailable" in str(w.message) for w in caught)


def test_start_failure_schedules_restart():
    class FlakySource(PushHypothesisSource):
        failures = 1

        def start(self, on_event, on_end, on_error):
            if self.failures:
                self.failures -= 1
                raise RecognitionTransientError("device busy")
            super().start(on_event, on_end, on_error)

    source = FlakySource()
    session, _, clock = make_session(source=source)
    with pytest.warns(UserWarning):
        session.start()
    assert not source.active

    clock.now += 1.0
    session.tick()
    assert source.active


def test_source_error_is_logged_not_fatal():
    session, source, _ = make_session()
    session.start()
    with pytest.warns(UserWarning, match="network"):
        source.error("network")
    assert session.running
    assert any("SPEECH ERROR: network" in line for line in session.event_log.lines())


def test_blank_phrase_is_skipped():
    clock = FakeClock()
    session = SessionController(
        PhraseQueue(["", "HELLO"]),
        source_factory=PushHypothesisSource,
        clock=clock,
        settle_delay=1.5,
    )
    session.start()
    assert session.completions == 1

    clock.now += 2.0
    session.tick()
    assert session.queue.current() == "HELLO"


def test_manual_phrase_navigation_wraps():
    session, _, _ = make_session()
    session.previous_phrase()
    assert session.queue.active_index == 1
    session.next_phrase()
    assert session.queue.active_index == 0
    assert session.engine.tokens[0].text == "I"


def test_hold_overrides_tracking_and_releases_smoothly():
    session, source, _ = make_session()
    session.start()
    session.tick()
    start = session.scroll.offset

    session.hold_start(1)
    for _ in range(3):
        session.tick()
    assert session.scroll.offset > start

    held = session.scroll.offset
    session.hold_end()
    assert session.scroll.state.target_offset == held


def test_final_utterances_are_classified():
    session, source, _ = make_session(classify=lambda text: "CONTROL")
    session.start()
    source.submit({"transcript": "i am", "isFinal": True})
    source.submit({"transcript": "not", "isFinal": False})

    sr_lines = [line for line in session.event_log.lines() if "SR:" in line]
    assert len(sr_lines) == 1
    assert sr_lines[0].endswith('SR: "i am"  [CONTROL]')


def test_frame_reaches_renderer():
    session, source, _ = make_session()
    session.start()
    source.submit({"transcript": "i", "isFinal": True})
    frame = session.tick()
    assert session.layout.last_frame is frame
    assert frame.states[0] == (0, RECOGNIZED)
