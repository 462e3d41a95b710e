"""Streaming alignment of recognizer hypotheses against a reference phrase."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from speech_marquee.models.hypothesis_event import HypothesisEvent
from speech_marquee.models.reference_token import (
    AlignmentState,
    ReferenceToken,
    IN_PROGRESS,
    RECOGNIZED,
    UPCOMING,
)
from .normalizer import spoken_keys


@dataclass(frozen=True)
class AlignmentResult:
    """Outcome of one hypothesis event.

    Attributes:
        cursor: Index of the read head after the event
        recognized_count: Gapless recognized prefix length after the event
        completed: True only for the event that finished the phrase
        forced: Number of tokens recognized by forced advance
    """
    cursor: int
    recognized_count: int
    completed: bool = False
    forced: int = 0


class AlignmentEngine:
    """Classifies each reference token as upcoming, in progress or recognized.

    Hypotheses are walked forward from the first unrecognized token. Exact
    matches on a final event confirm tokens; on a partial event they only
    move the read head. A final event that stops matching after at least one
    token matched forces the remaining spoken words through as recognized,
    so recognizer noise cannot stall the phrase. Recognized tokens are never
    reopened.
    """

    def __init__(self, tokens: Optional[Sequence[ReferenceToken]] = None) -> None:
        self.state = AlignmentState()
        self.load(tokens or [])

    @property
    def tokens(self) -> List[ReferenceToken]:
        return self.state.tokens

    @property
    def cursor(self) -> int:
        return self.state.cursor

    @property
    def recognized_count(self) -> int:
        return self.state.recognized_count

    @property
    def complete(self) -> bool:
        return self.state.complete

    def load(self, tokens: Sequence[ReferenceToken]) -> None:
        """Replace the phrase and reset all classification."""
        self.state = AlignmentState(tokens=list(tokens), cursor=0, recognized_count=0)
        for token in self.state.tokens:
            token.state = UPCOMING
        self._reassign(0)

    def on_hypothesis(self, event: HypothesisEvent) -> AlignmentResult:
        """Apply one hypothesis event.

        Args:
            event: Partial or final recognizer output

        Returns:
            AlignmentResult describing the new read head
        """
        state = self.state
        spoken = spoken_keys(event.transcript or "")
        if not spoken or state.complete:
            return AlignmentResult(state.cursor, state.recognized_count)

        tokens = state.tokens
        match_index = state.recognized_count
        spoken_index = 0
        matched = 0
        forced = 0

        while match_index < len(tokens):
            token = tokens[match_index]
            if not token.key:
                # Nothing to say for this token: it passes only once this
                # event has matched, or when the next word matches now.
                if matched == 0 and not self._next_word_matches(match_index, spoken, spoken_index):
                    break
                self._confirm(match_index, event.is_final)
                match_index += 1
                continue
            if spoken_index >= len(spoken):
                break

            word = spoken[spoken_index]
            if word == token.key:
                self._confirm(match_index, event.is_final)
                match_index += 1
                spoken_index += 1
                matched += 1
            elif len(word) > 1 and token.key.startswith(word):
                # Tentative; a later event may complete the word.
                token.state = IN_PROGRESS
                spoken_index += 1
            elif event.is_final and matched > 0:
                self._confirm(match_index, True)
                match_index += 1
                spoken_index += 1
                forced += 1
            else:
                break

        self._reassign(match_index)
        return AlignmentResult(
            cursor=state.cursor,
            recognized_count=state.recognized_count,
            completed=state.complete,
            forced=forced,
        )

    def states(self) -> List[Tuple[int, str]]:
        """Return (index, state) pairs for every token."""
        return [(i, token.state) for i, token in enumerate(self.state.tokens)]

    def _next_word_matches(self, index: int, spoken: Sequence[str], spoken_index: int) -> bool:
        """True if the first lettered token after ``index`` equals the next spoken word."""
        if spoken_index >= len(spoken):
            return False
        for token in self.state.tokens[index:]:
            if token.key:
                return token.key == spoken[spoken_index]
        return False

    def _confirm(self, index: int, final: bool) -> None:
        if final:
            self.state.tokens[index].state = RECOGNIZED
            self.state.recognized_count = index + 1
        else:
            self.state.tokens[index].state = IN_PROGRESS

    def _reassign(self, walk_end: int) -> None:
        """Reset everything past the recognized prefix and place the read head.

        Exactly one token is in progress while the phrase is incomplete; the
        head never sits before the recognized prefix or past the last token.
        """
        state = self.state
        tokens = state.tokens
        for token in tokens[state.recognized_count:]:
            if token.state != RECOGNIZED:
                token.state = UPCOMING

        if state.complete:
            state.cursor = len(tokens)
            return

        head = min(max(walk_end, state.recognized_count), len(tokens) - 1)
        tokens[head].state = IN_PROGRESS
        state.cursor = head
