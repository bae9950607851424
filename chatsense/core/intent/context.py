"""Conversation-context refinement for chatsense.

Short replies to a bot question become follow-ups, and sentences that
closely restate an earlier user turn become clarifications. Only the last
few turns of the caller's history are considered; the history is never
modified or retained.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import textdistance

from .patterns import RuleMatch
from .taxonomy import ConversationTurn, IntentConfidence, IntentLabel

logger = logging.getLogger(__name__)

MORE_INFO_PROMPT = "Would you like to know more"

# Bigrams counted as a multiset
_BIGRAM_DICE = textdistance.Sorensen(qval=2, as_set=False)


def text_similarity(a: str, b: str) -> float:
    """Sorensen-Dice similarity of character bigrams, in [0, 1].

    Whitespace is ignored. 1.0 for identical strings, 0.0 when the strings
    share no bigram or either is shorter than two characters.
    """
    first = "".join(a.split())
    second = "".join(b.split())
    if first == second:
        return 1.0
    if len(first) < 2 or len(second) < 2:
        return 0.0
    return _BIGRAM_DICE.similarity(first, second)


@dataclass
class ContextConfig:
    """Thresholds for context refinement.

    Attributes:
        history_window: Number of most recent turns considered
        followup_max_length: Sentences shorter than this can be follow-ups
        clarification_threshold: Similarity above which a turn is restated
    """

    history_window: int = 3
    followup_max_length: int = 15
    clarification_threshold: float = 0.5


class ContextRefiner:
    """Override rule-based intents using recent conversation turns."""

    def __init__(self, config: ContextConfig | None = None) -> None:
        self.config = config or ContextConfig()

    def recent_turns(self, history: Any) -> list[ConversationTurn]:
        """Return the well-formed turns among the last `history_window` entries."""
        if not isinstance(history, Sequence) or isinstance(history, str) or not history:
            return []

        window = max(self.config.history_window, 0)
        recent = list(history[-window:]) if window else []
        turns = []
        for entry in recent:
            turn = ConversationTurn.coerce(entry)
            if turn is None:
                logger.warning(f"Skipping malformed conversation turn: {entry!r}")
                continue
            turns.append(turn)
        return turns

    def refine(self, match: RuleMatch, sentence: str, history: Any) -> RuleMatch:
        """Apply follow-up then clarification overrides.

        Args:
            match: Rule-based classification of the sentence
            sentence: Trimmed, lowercased sentence
            history: Caller's conversation history (oldest first)

        Returns:
            The same match, with intent and confidence overridden if a
            context condition holds
        """
        turns = self.recent_turns(history)
        if not turns:
            return match

        if self._is_follow_up(sentence, turns):
            logger.debug(f"Follow-up override for {sentence!r}")
            match.intent = IntentLabel.FOLLOW_UP.value
            match.confidence = IntentConfidence.CONTEXTUAL

        # Runs second so a clarification wins over a follow-up
        if self._is_clarification(sentence, turns):
            logger.debug(f"Clarification override for {sentence!r}")
            match.intent = IntentLabel.CLARIFICATION.value
            match.confidence = IntentConfidence.CONTEXTUAL

        return match

    def _is_follow_up(self, sentence: str, turns: list[ConversationTurn]) -> bool:
        if len(sentence) >= self.config.followup_max_length:
            return False
        return any(
            turn.sender == "bot" and ("?" in turn.text or MORE_INFO_PROMPT in turn.text)
            for turn in turns
        )

    def _is_clarification(self, sentence: str, turns: list[ConversationTurn]) -> bool:
        return any(
            turn.sender == "user"
            and text_similarity(turn.text.lower(), sentence) > self.config.clarification_threshold
            for turn in turns
        )
