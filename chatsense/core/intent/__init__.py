"""Intent analysis for chatsense support chat.

This module classifies short user sentences: sentence type (question,
command, suggestion), keywords, modifiers, and a single intent label with a
confidence score.

The analysis pipeline has four stages:
1. Synonym canonicalization (optional) - rewrite phrasings to canonical terms
2. Feature extraction - type flags, modifiers, normalized keywords
3. Rule scoring - ordered regex rules, first match wins
4. Context refinement - follow-up / clarification from recent turns

Example usage:
    ```python
    from chatsense.core.intent import IntentLabel, analyze_sentence_intent

    result = analyze_sentence_intent("how to reset a ticket")
    assert result.intent == IntentLabel.INSTRUCTION
    assert result.confidence == 0.8

    history = [{"sender": "bot", "text": "Do you want more details?"}]
    result = analyze_sentence_intent("yes", history)
    assert result.intent == IntentLabel.FOLLOW_UP
    ```
"""

from .analyzer import (
    MAX_INPUT_LENGTH,
    IntentAnalyzer,
    analyze_sentence_intent,
    create_analyzer,
)
from .context import (
    ContextConfig,
    ContextRefiner,
    text_similarity,
)
from .features import (
    SentenceFeatureExtractor,
    extract_features,
    normalize_tokens,
)
from .patterns import (
    INTENT_RULES,
    IntentPatternMatcher,
    IntentRule,
    RuleMatch,
)
from .taxonomy import (
    ConversationTurn,
    IntentConfidence,
    IntentLabel,
    IntentResult,
    SentenceFeatures,
)

__all__ = [
    # Main analyzer
    "IntentAnalyzer",
    "analyze_sentence_intent",
    "create_analyzer",
    "MAX_INPUT_LENGTH",
    # Rule scoring
    "IntentPatternMatcher",
    "IntentRule",
    "RuleMatch",
    "INTENT_RULES",
    # Context
    "ContextConfig",
    "ContextRefiner",
    "text_similarity",
    # Features
    "SentenceFeatureExtractor",
    "extract_features",
    "normalize_tokens",
    # Taxonomy
    "ConversationTurn",
    "IntentConfidence",
    "IntentLabel",
    "IntentResult",
    "SentenceFeatures",
]
