"""Alignment engine behaviour on partial and final hypotheses."""
from speech_marquee.alignment import AlignmentEngine, tokenize
from speech_marquee.models.hypothesis_event import HypothesisEvent
from speech_marquee.models.reference_token import IN_PROGRESS, RECOGNIZED, UPCOMING

PHRASE = "I AM NOT A REPLICANT"


def make_engine(phrase=PHRASE):
    return AlignmentEngine(tokenize(phrase))


def states(engine):
    return [state for _, state in engine.states()]


def assert_single_head(engine):
    in_progress = [i for i, s in engine.states() if s == IN_PROGRESS]
    if engine.recognized_count < len(engine.tokens):
        assert in_progress == [engine.cursor]
    else:
        assert in_progress == []
    assert 0 <= engine.recognized_count <= engine.cursor <= len(engine.tokens)


def test_load_puts_head_on_first_word():
    engine = make_engine()
    assert states(engine) == [IN_PROGRESS, UPCOMING, UPCOMING, UPCOMING, UPCOMING]
    assert engine.cursor == 0
    assert engine.recognized_count == 0


def test_partial_moves_head_without_recognizing():
    engine = make_engine()
    result = engine.on_hypothesis(HypothesisEvent("i am", False))

    assert result.recognized_count == 0
    assert result.cursor == 2
    assert states(engine) == [UPCOMING, UPCOMING, IN_PROGRESS, UPCOMING, UPCOMING]
    assert not result.completed


def test_final_recognizes_matched_words():
    engine = make_engine()
    result = engine.on_hypothesis(HypothesisEvent("i am", True))

    assert result.recognized_count == 2
    assert result.cursor == 2
    assert states(engine) == [RECOGNIZED, RECOGNIZED, IN_PROGRESS, UPCOMING, UPCOMING]


def test_final_with_unmatched_first_word_changes_nothing():
    engine = make_engine()
    engine.on_hypothesis(HypothesisEvent("i am", True))
    result = engine.on_hypothesis(HypothesisEvent("i am definitely not", True))

    # "I" does not match "NOT" and nothing matched yet, so the walk stops.
    assert result.recognized_count == 2
    assert result.cursor == 2
    assert result.forced == 0
    assert states(engine) == [RECOGNIZED, RECOGNIZED, IN_PROGRESS, UPCOMING, UPCOMING]


def test_forced_advance_after_a_match_on_final():
    engine = make_engine()
    engine.on_hypothesis(HypothesisEvent("i am", True))
    result = engine.on_hypothesis(HypothesisEvent("not definitely a", True))

    # NOT matches; DEFINITELY is forced through as A; A is forced through as REPLICANT.
    assert result.forced == 2
    assert result.recognized_count == 5
    assert result.completed
    assert states(engine) == [RECOGNIZED] * 5


def test_no_forced_advance_on_partial():
    engine = make_engine()
    result = engine.on_hypothesis(HypothesisEvent("i um am", False))

    assert result.forced == 0
    assert result.cursor == 1
    assert result.recognized_count == 0


def test_prefix_keeps_head_on_word():
    engine = make_engine()
    engine.on_hypothesis(HypothesisEvent("i am not a", True))
    result = engine.on_hypothesis(HypothesisEvent("repli", False))

    assert result.cursor == 4
    assert engine.tokens[4].state == IN_PROGRESS

    result = engine.on_hypothesis(HypothesisEvent("replicant", True))
    assert result.completed
    assert engine.cursor == 5


def test_single_letter_is_not_a_prefix():
    engine = make_engine("REPLICANT")
    result = engine.on_hypothesis(HypothesisEvent("r", True))
    assert result.recognized_count == 0
    assert result.cursor == 0


def test_repeated_partial_is_idempotent():
    once = make_engine()
    twice = make_engine()
    event = HypothesisEvent("i am no", False)

    once.on_hypothesis(event)
    twice.on_hypothesis(event)
    twice.on_hypothesis(event)

    assert states(once) == states(twice)
    assert once.cursor == twice.cursor
    assert once.recognized_count == twice.recognized_count


def test_recognized_count_never_decreases():
    engine = make_engine()
    events = [
        HypothesisEvent("i", False),
        HypothesisEvent("i am", True),
        HypothesisEvent("static noise", True),
        HypothesisEvent("", True),
        HypothesisEvent("not", False),
        HypothesisEvent("banana", False),
        HypothesisEvent("not a", True),
    ]
    previous = 0
    for event in events:
        engine.on_hypothesis(event)
        assert engine.recognized_count >= previous
        assert_single_head(engine)
        previous = engine.recognized_count
    assert engine.recognized_count == 4


def test_empty_and_symbol_only_transcripts_are_no_ops():
    engine = make_engine()
    before = states(engine)
    for transcript in ("", "   ", "... 42 !!"):
        result = engine.on_hypothesis(HypothesisEvent(transcript, True))
        assert result.cursor == 0
        assert not result.completed
    assert states(engine) == before


def test_completion_reported_once():
    engine = make_engine("HELLO THERE")
    first = engine.on_hypothesis(HypothesisEvent("hello there", True))
    second = engine.on_hypothesis(HypothesisEvent("hello there", True))

    assert first.completed
    assert not second.completed
    assert engine.cursor == 2
    assert_single_head(engine)


def test_partial_covering_whole_phrase_keeps_head_on_last_word():
    engine = make_engine("HELLO THERE")
    result = engine.on_hypothesis(HypothesisEvent("hello there", False))

    assert result.cursor == 1
    assert not result.completed
    assert_single_head(engine)


def test_empty_phrase_is_complete():
    engine = make_engine("")
    assert engine.complete
    assert engine.cursor == 0
    assert engine.states() == []


def test_punctuation_only_word_follows_its_neighbours():
    engine = make_engine("WAIT - NOW")
    result = engine.on_hypothesis(HypothesisEvent("wait now", True))

    assert result.completed
    assert states(engine) == [RECOGNIZED] * 3


def test_matching_ignores_case_and_punctuation():
    engine = make_engine("Don't move, Deckard.")
    result = engine.on_hypothesis(HypothesisEvent("DONT move deckard", True))
    assert result.completed


def test_noise_does_not_pass_leading_punctuation_word():
    engine = make_engine("- WAIT NOW")
    result = engine.on_hypothesis(HypothesisEvent("banana", True))

    assert result.recognized_count == 0
    assert result.cursor == 0
    assert states(engine) == [IN_PROGRESS, UPCOMING, UPCOMING]


def test_leading_punctuation_word_passes_with_next_match():
    engine = make_engine("- WAIT NOW")
    result = engine.on_hypothesis(HypothesisEvent("wait", True))

    assert result.recognized_count == 2
    assert result.cursor == 2
    assert_single_head(engine)


def test_trailing_punctuation_word_completes_phrase():
    engine = make_engine("WAIT NOW -")
    result = engine.on_hypothesis(HypothesisEvent("wait now", True))
    assert result.completed
