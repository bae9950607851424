"""Sentence feature extraction for chatsense intent analysis.

This module handles the lexical side of analysis: turning a sentence into
normalized keywords and detecting sentence type (question, command,
suggestion) and modifier words.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

from ..vocabulary import STOP_WORDS
from .taxonomy import SentenceFeatures

_PUNCTUATION = re.compile(r"[^\w\s]")

MIN_KEYWORD_LENGTH = 3


def normalize_tokens(text: Any, stop_words: Iterable[str] = STOP_WORDS) -> list[str]:
    """Split text into lowercase content tokens.

    Punctuation becomes whitespace, stop-words and tokens shorter than
    three characters are dropped, and duplicates are removed keeping the
    first occurrence.

    Args:
        text: Raw text (anything that is not a string yields no tokens)
        stop_words: Words to drop

    Returns:
        List of unique tokens
    """
    if not isinstance(text, str) or not text:
        return []

    stop = stop_words if isinstance(stop_words, (set, frozenset)) else frozenset(stop_words)
    words = _PUNCTUATION.sub(" ", text.lower()).split()
    return list(
        dict.fromkeys(w for w in words if w not in stop and len(w) >= MIN_KEYWORD_LENGTH)
    )


class SentenceFeatureExtractor:
    """Extract sentence-type flags, modifiers and keywords."""

    QUESTION = re.compile(
        r"\?$|\b(what|who|when|where|why|how|can|could|would|is|are|will|do|does|did)\b",
        re.IGNORECASE,
    )
    COMMAND = re.compile(
        r"\b(show|tell|give|find|search|get|list|display|provide|help)\b",
        re.IGNORECASE,
    )
    SUGGESTION = re.compile(
        r"\b(maybe|perhaps|possibly|suggest|recommendation|might|may)\b",
        re.IGNORECASE,
    )

    # One match per class at most, collected in this order
    MODIFIER_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
        (
            "intensity",
            re.compile(r"\b(very|really|extremely|slightly|somewhat|quite|rather)\b", re.IGNORECASE),
        ),
        (
            "quantifier",
            re.compile(r"\b(all|many|several|few|some|any|most|each|every|no)\b", re.IGNORECASE),
        ),
        (
            "manner",
            re.compile(
                r"\b(quickly|slowly|carefully|easily|hard|well|badly|fast)\b", re.IGNORECASE
            ),
        ),
        (
            "comparative",
            re.compile(r"\b(more|less|better|worse|best|worst|least|most)\b", re.IGNORECASE),
        ),
        (
            "ordinal",
            re.compile(
                r"\b(first|second|third|fourth|fifth|last|next|previous)\b", re.IGNORECASE
            ),
        ),
    )

    def __init__(self, stop_words: Iterable[str] = STOP_WORDS) -> None:
        """Initialize the extractor.

        Args:
            stop_words: Words excluded from keywords
        """
        self._stop_words = frozenset(stop_words)

    def extract(self, sentence: str) -> SentenceFeatures:
        """Extract features from a trimmed, lowercased sentence.

        Args:
            sentence: Normalized sentence text

        Returns:
            SentenceFeatures for the sentence
        """
        is_question = bool(self.QUESTION.search(sentence))
        # Questions take precedence over commands
        is_command = bool(self.COMMAND.search(sentence)) and not is_question
        is_suggestion = bool(self.SUGGESTION.search(sentence))

        modifiers: list[str] = []
        for _, pattern in self.MODIFIER_PATTERNS:
            match = pattern.search(sentence)
            if match:
                modifiers.append(match.group(0))

        return SentenceFeatures(
            is_question=is_question,
            is_command=is_command,
            is_suggestion=is_suggestion,
            modifiers=modifiers,
            keywords=normalize_tokens(sentence, self._stop_words),
        )


# Module-level instance for convenience
_extractor = SentenceFeatureExtractor()


def extract_features(sentence: str) -> SentenceFeatures:
    """Extract features using the default extractor.

    Args:
        sentence: Normalized sentence text

    Returns:
        SentenceFeatures for the sentence
    """
    return _extractor.extract(sentence)
