"""Core components for chatsense."""

from __future__ import annotations

from .disambiguation import (
    EXACT_MATCH_BOOST,
    KeywordAmbiguityResolver,
    KeywordMatch,
    RankedMatch,
    Resolution,
    find_category_for_keyword,
    resolve_keyword_ambiguity,
)
from .grouping import group_related_keywords
from .intent import (
    ConversationTurn,
    IntentAnalyzer,
    IntentConfidence,
    IntentLabel,
    IntentResult,
    analyze_sentence_intent,
    create_analyzer,
    normalize_tokens,
)
from .matching import find_keyword_matches
from .synonyms import SynonymCanonicalizer, map_synonyms_to_canonical
from .vocabulary import (
    DEFAULT_VOCABULARY,
    Vocabulary,
    VocabularyError,
    load_category_index,
)

__all__ = [
    # Intent analysis
    "ConversationTurn",
    "IntentAnalyzer",
    "IntentConfidence",
    "IntentLabel",
    "IntentResult",
    "analyze_sentence_intent",
    "create_analyzer",
    "normalize_tokens",
    # Disambiguation
    "EXACT_MATCH_BOOST",
    "KeywordAmbiguityResolver",
    "KeywordMatch",
    "RankedMatch",
    "Resolution",
    "find_category_for_keyword",
    "find_keyword_matches",
    "resolve_keyword_ambiguity",
    # Grouping / synonyms
    "SynonymCanonicalizer",
    "group_related_keywords",
    "map_synonyms_to_canonical",
    # Vocabulary
    "DEFAULT_VOCABULARY",
    "Vocabulary",
    "VocabularyError",
    "load_category_index",
]
