"""Main intent analysis orchestrator for chatsense.

This module runs the analysis pipeline for one sentence:
1. Synonym canonicalization (optional pre-pass)
2. Sentence feature extraction (type flags, modifiers, keywords)
3. Ordered rule scoring (intent label + base confidence)
4. Context refinement from recent conversation turns

The analyzer holds only read-only configuration, so one instance can be
shared between callers and threads.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..synonyms import SynonymCanonicalizer
from ..vocabulary import DEFAULT_VOCABULARY, Vocabulary
from .context import ContextConfig, ContextRefiner
from .features import SentenceFeatureExtractor
from .patterns import IntentPatternMatcher
from .taxonomy import IntentResult

if TYPE_CHECKING:
    from ...config import AppConfig

logger = logging.getLogger(__name__)

# Security: Maximum input length to bound regex work per call
MAX_INPUT_LENGTH = 10_000


class IntentAnalyzer:
    """Sentence intent analyzer.

    Attributes:
        vocabulary: Lexical tables (stop-words, synonyms)
        canonicalize: Whether to rewrite synonyms before analysis
        feature_extractor: Sentence-type and keyword extraction
        pattern_matcher: Ordered intent rules
        context_refiner: Follow-up / clarification overrides
    """

    def __init__(
        self,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
        context_config: ContextConfig | None = None,
        canonicalize: bool = False,
    ) -> None:
        """Initialize the analyzer.

        Args:
            vocabulary: Lexical tables to use
            context_config: Thresholds for context refinement
            canonicalize: Rewrite synonyms to canonical terms first
        """
        self.vocabulary = vocabulary
        self.canonicalize = canonicalize
        self.feature_extractor = SentenceFeatureExtractor(vocabulary.stop_words)
        self.pattern_matcher = IntentPatternMatcher()
        self.context_refiner = ContextRefiner(context_config)
        self._canonicalizer = SynonymCanonicalizer(vocabulary.synonyms)

    def analyze(self, sentence: Any, conversation_history: Any = None) -> IntentResult:
        """Analyze one sentence.

        Args:
            sentence: The user's sentence
            conversation_history: Recent ConversationTurn objects or
                {sender, text} dicts, oldest first (read only)

        Returns:
            IntentResult; intent "unknown" with zero confidence for
            non-string or blank input
        """
        if not isinstance(sentence, str) or not sentence.strip():
            return IntentResult.unknown(sentence)

        text = sentence.strip()
        if len(text) > MAX_INPUT_LENGTH:
            logger.warning(f"Input truncated from {len(text)} to {MAX_INPUT_LENGTH} chars")
            text = text[:MAX_INPUT_LENGTH]

        if self.canonicalize:
            text = self._canonicalizer.canonicalize(text)
        normalized = text.lower()

        features = self.feature_extractor.extract(normalized)
        match = self.pattern_matcher.match(normalized, features)
        logger.debug(f"Rule match for {normalized!r}: {match.intent} ({match.matched_pattern})")

        if conversation_history:
            match = self.context_refiner.refine(match, normalized, conversation_history)

        return IntentResult(
            intent=match.intent,
            confidence=match.confidence,
            keywords=features.keywords,
            actionable=match.actionable,
            modifiers=features.modifiers,
            is_question=features.is_question,
            is_command=features.is_command,
            is_suggestion=features.is_suggestion,
            original_sentence=sentence,
            matched_pattern=match.matched_pattern,
        )


def create_analyzer(
    config: "AppConfig | None" = None,
    vocabulary: Vocabulary | None = None,
) -> IntentAnalyzer:
    """Factory function to create an IntentAnalyzer from settings.

    Args:
        config: Application settings (thresholds, canonicalization flag)
        vocabulary: Lexical tables; loaded from config.vocabulary_path when
            omitted and a path is configured

    Returns:
        Configured IntentAnalyzer instance
    """
    if config is None:
        return IntentAnalyzer(vocabulary=vocabulary or DEFAULT_VOCABULARY)

    if vocabulary is None:
        vocabulary = config.load_vocabulary()

    return IntentAnalyzer(
        vocabulary=vocabulary,
        context_config=ContextConfig(
            history_window=config.history_window,
            followup_max_length=config.followup_max_length,
            clarification_threshold=config.clarification_threshold,
        ),
        canonicalize=config.canonicalize,
    )


_default_analyzer = IntentAnalyzer()


def analyze_sentence_intent(sentence: Any, conversation_history: Any = None) -> IntentResult:
    """Analyze a sentence with the default analyzer.

    Args:
        sentence: The user's sentence
        conversation_history: Recent turns, oldest first

    Returns:
        IntentResult for the sentence
    """
    return _default_analyzer.analyze(sentence, conversation_history)
