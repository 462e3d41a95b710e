import os
import sys
import threading

from flask import Flask, jsonify, request

# Ensure project root is in path for imports
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from speech_marquee.asr import PushHypothesisSource, StreamingHypothesisSource
from speech_marquee.errors import FirmwareError, MalformedEvent, RecognitionUnavailable
from speech_marquee.firmware import (
    FIRMWARE_PATH,
    classify_utterance,
    firmware_summary,
    load_firmware,
    parse_firmware,
)
from speech_marquee.phrase_queue import PhraseQueue
from speech_marquee.session import SessionController, SessionLoop

MARQUEE_SOURCE = os.getenv("MARQUEE_SOURCE", "push")
MARQUEE_HOST = os.getenv("MARQUEE_HOST", "0.0.0.0")
MARQUEE_PORT = int(os.getenv("MARQUEE_PORT", "5000"))


def create_app(session, loop=None, run_flag=None, push_source=None, firmware=None):
    """Build the control surface around an existing session.

    Args:
        session: SessionController to drive
        loop: SessionLoop; when given, every action runs on its worker
        run_flag: threading.Event the session observes as its run signal.
            Without one, run/stop call the session directly.
        push_source: PushHypothesisSource fed by /api/hypothesis
        firmware: Firmware currently loaded, for classification and /api/firmware
    """
    app = Flask(__name__)
    app.config["MARQUEE"] = {"firmware": firmware}

    def on_session(fn):
        if loop is not None:
            return loop.call(fn, timeout=2.0)
        return fn()

    # ========================================================================
    # ROUTES - STATE
    # ========================================================================
    @app.route('/api/state', methods=['GET'])
    def state():
        """Latest frame: offset, word states, read head."""
        frame = session.frame
        body = frame.to_dict()
        body["phrase"] = session.queue.current()
        return jsonify(body)

    @app.route('/api/log', methods=['GET'])
    def log():
        return jsonify({"lines": session.event_log.lines()})

    # ========================================================================
    # ROUTES - RUN / STOP
    # ========================================================================
    @app.route('/api/run', methods=['POST'])
    def run():
        if run_flag is not None:
            run_flag.set()
        else:
            on_session(session.start)
        return jsonify({"running": True})

    @app.route('/api/stop', methods=['POST'])
    def stop():
        if run_flag is not None:
            run_flag.clear()
        on_session(session.stop)
        return jsonify({"running": False})

    # ========================================================================
    # ROUTES - MANUAL INPUT
    # ========================================================================
    @app.route('/api/hold', methods=['POST'])
    def hold():
        data = request.get_json(silent=True) or {}
        direction = data.get("direction")
        if direction not in (-1, 1):
            return jsonify({"error": "direction must be -1 or 1"}), 400
        on_session(lambda: session.hold_start(direction))
        return jsonify({"holding": direction})

    @app.route('/api/release', methods=['POST'])
    def release():
        on_session(session.hold_end)
        return jsonify({"holding": 0})

    @app.route('/api/phrase/next', methods=['POST'])
    def next_phrase():
        on_session(session.next_phrase)
        return jsonify({"phrase_index": session.queue.active_index, "phrase": session.queue.current()})

    @app.route('/api/phrase/previous', methods=['POST'])
    def previous_phrase():
        on_session(session.previous_phrase)
        return jsonify({"phrase_index": session.queue.active_index, "phrase": session.queue.current()})

    # ========================================================================
    # ROUTES - RECOGNIZER BRIDGE
    # ========================================================================
    @app.route('/api/hypothesis', methods=['POST'])
    def hypothesis():
        """Accept one {transcript, isFinal} event from a browser recognizer."""
        if push_source is None:
            return jsonify({"error": "No push recognizer configured"}), 404
        data = request.get_json(silent=True)
        if data is None:
            return jsonify({"error": "No hypothesis provided"}), 400
        try:
            accepted = push_source.submit(data)
        except MalformedEvent as e:
            return jsonify({"error": str(e)}), 400
        return jsonify({"accepted": accepted})

    @app.route('/api/hypothesis/end', methods=['POST'])
    def hypothesis_end():
        if push_source is None:
            return jsonify({"error": "No push recognizer configured"}), 404
        push_source.end()
        return jsonify({"ended": True})

    # ========================================================================
    # ROUTES - FIRMWARE
    # ========================================================================
    @app.route('/api/firmware', methods=['GET'])
    def get_firmware():
        current = app.config["MARQUEE"]["firmware"]
        if current is None:
            return jsonify({"error": "No firmware loaded"}), 404
        return jsonify(firmware_summary(current))

    @app.route('/api/firmware', methods=['POST'])
    def put_firmware():
        data = request.get_json(silent=True)
        if data is None:
            return jsonify({"error": "No firmware provided"}), 400
        try:
            new_firmware = parse_firmware(data)
        except FirmwareError as e:
            session.event_log.log(f"FIRMWARE PARSE ERROR: {e}")
            return jsonify({"error": str(e)}), 400

        def apply():
            app.config["MARQUEE"]["firmware"] = new_firmware
            session.classify = lambda text: classify_utterance(new_firmware, text)
            session.replace_phrases([q.text for q in new_firmware.questions])
            session.event_log.log(f"ROM MODULE UPDATED -> {new_firmware.profile}")

        on_session(apply)
        return jsonify({"profile": new_firmware.profile, "questions": len(new_firmware.questions)})

    return app


def build_source_factory(kind, push_source=None):
    """Recognizer factory for MARQUEE_SOURCE ("push", "stream" or "none")."""
    if kind == "push":
        return lambda: push_source
    if kind == "stream":
        return StreamingHypothesisSource

    def unavailable():
        raise RecognitionUnavailable(f"No speech recognizer for MARQUEE_SOURCE={kind!r}")

    return unavailable


def build_default_app():
    """Wire a complete marquee from the environment."""
    try:
        firmware = load_firmware(FIRMWARE_PATH)
    except FirmwareError as e:
        print(f"FIRMWARE LOAD ERROR: {e}")
        firmware = None

    queue = PhraseQueue.from_firmware(firmware) if firmware is not None else PhraseQueue()
    push_source = PushHypothesisSource() if MARQUEE_SOURCE == "push" else None
    run_flag = threading.Event()
    classify = (lambda text: classify_utterance(firmware, text)) if firmware is not None else None

    session = SessionController(
        queue,
        source_factory=build_source_factory(MARQUEE_SOURCE, push_source),
        run_signal=run_flag.is_set,
        classify=classify,
    )
    session.event_log.echo = True
    if firmware is not None:
        session.event_log.log(f"DEFAULT FIRMWARE LOADED: {firmware.profile}")

    loop = SessionLoop(session)
    app = create_app(session, loop=loop, run_flag=run_flag, push_source=push_source, firmware=firmware)
    return app, loop


if __name__ == '__main__':
    app, loop = build_default_app()
    loop.start()
    try:
        app.run(debug=False, host=MARQUEE_HOST, port=MARQUEE_PORT)
    finally:
        loop.stop()
