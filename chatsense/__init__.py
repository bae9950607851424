"""chatsense: rule-based intent analysis and keyword disambiguation for support chat."""

from .core import (
    analyze_sentence_intent,
    find_keyword_matches,
    group_related_keywords,
    map_synonyms_to_canonical,
    resolve_keyword_ambiguity,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "analyze_sentence_intent",
    "find_keyword_matches",
    "group_related_keywords",
    "map_synonyms_to_canonical",
    "resolve_keyword_ambiguity",
]
