"""Replay canned hypotheses through a marquee session and print each step."""
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).parent.absolute()
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from speech_marquee.asr import ScriptedHypothesisSource
from speech_marquee.firmware import classify_utterance, load_default_firmware
from speech_marquee.models.reference_token import IN_PROGRESS, RECOGNIZED
from speech_marquee.phrase_queue import PhraseQueue
from speech_marquee.session import SessionController

# Ticks between canned events (a quarter second at 60 fps)
TICKS_PER_EVENT = 15

MARKS = {RECOGNIZED: "+", IN_PROGRESS: "*"}


def render(frame):
    words = []
    for (_, state), text in zip(frame.states, frame.words):
        words.append(f"{MARKS.get(state, '')}{text}")
    return f"{frame.offset:8.1f} | " + " ".join(words)


def run_demo():
    firmware = load_default_firmware()
    source = ScriptedHypothesisSource()
    session = SessionController(
        PhraseQueue.from_firmware(firmware),
        source_factory=lambda: source,
        classify=lambda text: classify_utterance(firmware, text),
    )
    session.event_log.echo = True

    print("=== Speech Marquee Demo ===\n")
    print(f"Profile: {firmware.profile}")
    print(f"Phrase: {session.queue.current()}\n")

    session.start()
    while source.active:
        source.pump()
        for _ in range(TICKS_PER_EVENT):
            frame = session.tick()
        print(render(frame))

    print(f"\nPhrases completed: {session.completions}")


if __name__ == "__main__":
    run_demo()
