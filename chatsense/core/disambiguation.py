"""Keyword ambiguity resolution for chatsense.

When fuzzy keyword matching returns several candidates that belong to
different categories, the resolver picks one, in strict order:

1. A single candidate wins outright.
2. A single exact match (keyword literally present in the input, after
   dropping matches contained in a longer exact match) wins with a +0.2
   confidence boost. The boost is not clamped and can exceed 1.0.
3. Otherwise candidates are ranked by static priority, then similarity.

The winning keyword is mapped to its category with an exact lookup in the
caller's category index; "default" is the fallback.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .vocabulary import DEFAULT_CATEGORY, DEFAULT_PRIORITY, KEYWORD_PRIORITIES

logger = logging.getLogger(__name__)

EXACT_MATCH_BOOST = 0.2


@dataclass(frozen=True)
class KeywordMatch:
    """A candidate keyword from fuzzy matching.

    Attributes:
        keyword: Matched keyword text
        similarity: Match score 0.0-1.0
    """

    keyword: str
    similarity: float

    @classmethod
    def coerce(cls, value: Any) -> "KeywordMatch | None":
        """Build a match from a KeywordMatch or a {keyword, similarity} mapping.

        Returns:
            KeywordMatch, or None if the value is malformed
        """
        if isinstance(value, cls):
            keyword, similarity = value.keyword, value.similarity
        elif isinstance(value, Mapping):
            keyword, similarity = value.get("keyword"), value.get("similarity")
        else:
            return None
        if not isinstance(keyword, str) or not keyword:
            return None
        if isinstance(similarity, bool) or not isinstance(similarity, (int, float)):
            return None
        return cls(keyword=keyword, similarity=float(similarity))


@dataclass(frozen=True)
class RankedMatch:
    """A candidate with the static priority it was ranked by."""

    keyword: str
    similarity: float
    priority: int


@dataclass
class Resolution:
    """Outcome of ambiguity resolution.

    Attributes:
        keyword: Winning keyword, None if nothing resolved
        category: Category owning the keyword, "default" if none
        confidence: Similarity of the winner (boosted for exact matches)
        all_matches: Every candidate in ranked order, when ranking was needed
    """

    keyword: str | None
    category: str = DEFAULT_CATEGORY
    confidence: float = 0.0
    all_matches: list[RankedMatch] | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "keyword": self.keyword,
            "category": self.category,
            "confidence": self.confidence,
        }
        if self.all_matches is not None:
            data["all_matches"] = [
                {"keyword": m.keyword, "similarity": m.similarity, "priority": m.priority}
                for m in self.all_matches
            ]
        return data


def find_category_for_keyword(keyword: Any, data_categories: Any) -> str:
    """Find the first category whose keyword list contains keyword exactly.

    Categories are scanned in the index's own order, skipping "default".
    A category without a usable keyword list is treated as empty.

    Args:
        keyword: Keyword to look up
        data_categories: Category name -> {"keywords": [...]}

    Returns:
        Category name, or "default"
    """
    if not keyword or not isinstance(data_categories, Mapping):
        return DEFAULT_CATEGORY

    for category, entry in data_categories.items():
        if category == DEFAULT_CATEGORY:
            continue
        keywords = entry.get("keywords") if isinstance(entry, Mapping) else None
        if isinstance(keywords, (list, tuple)) and keyword in keywords:
            return category

    return DEFAULT_CATEGORY


def _occurrences(text: str, needle: str) -> list[tuple[int, int]]:
    spans = []
    start = text.find(needle)
    while start != -1:
        spans.append((start, start + len(needle)))
        start = text.find(needle, start + 1)
    return spans


class KeywordAmbiguityResolver:
    """Pick one keyword (and its category) out of overlapping candidates."""

    def __init__(self, priorities: Mapping[str, int] = KEYWORD_PRIORITIES) -> None:
        """Initialize the resolver.

        Args:
            priorities: Phrase -> static weight; specific phrases should
                weigh more than the generic words inside them
        """
        self._priorities = tuple((key.lower(), weight) for key, weight in priorities.items())

    def priority_for(self, keyword: str) -> int:
        """Highest weight of any table phrase overlapping keyword either way."""
        lowered = keyword.lower()
        priority = DEFAULT_PRIORITY
        for key, weight in self._priorities:
            if key in lowered or lowered in key:
                priority = max(priority, weight)
        return priority

    def exact_matches(self, user_input: str, matches: list[KeywordMatch]) -> list[KeywordMatch]:
        """Candidates literally present in the input.

        A candidate whose every occurrence sits inside an occurrence of a
        longer exact candidate is dropped, so "upload" yields to
        "upload retail" when the input says "upload retail".
        """
        text = user_input.lower()
        spans = {
            m.keyword: _occurrences(text, m.keyword.lower())
            for m in matches
            if m.keyword.lower() in text
        }
        exact = [m for m in matches if m.keyword in spans]

        def covered(span: tuple[int, int], keyword: str) -> bool:
            return any(
                len(other) > len(keyword)
                and any(s <= span[0] and span[1] <= e for s, e in others)
                for other, others in spans.items()
            )

        return [m for m in exact if not all(covered(span, m.keyword) for span in spans[m.keyword])]

    def resolve(self, user_input: Any, matched_keywords: Any, data_categories: Any) -> Resolution:
        """Resolve overlapping keyword matches to one keyword and category.

        Args:
            user_input: Raw user text
            matched_keywords: KeywordMatch objects or {keyword, similarity} dicts
            data_categories: Category name -> {"keywords": [...]}

        Returns:
            Resolution; keyword None and category "default" when unresolved
        """
        if not isinstance(user_input, str) or not user_input:
            return Resolution(keyword=None)
        if not isinstance(matched_keywords, (list, tuple)):
            return Resolution(keyword=None)

        matches = []
        for entry in matched_keywords:
            match = KeywordMatch.coerce(entry)
            if match is None:
                logger.warning(f"Skipping malformed keyword match: {entry!r}")
                continue
            matches.append(match)

        if not matches:
            return Resolution(keyword=None)

        if len(matches) == 1:
            only = matches[0]
            return Resolution(
                keyword=only.keyword,
                category=find_category_for_keyword(only.keyword, data_categories),
                confidence=only.similarity,
            )

        exact = self.exact_matches(user_input, matches)
        if len(exact) == 1:
            winner = exact[0]
            logger.debug(f"Exact match '{winner.keyword}' resolves {len(matches)} candidates")
            return Resolution(
                keyword=winner.keyword,
                category=find_category_for_keyword(winner.keyword, data_categories),
                confidence=winner.similarity + EXACT_MATCH_BOOST,
            )

        # sorted() is stable, so full ties keep input order
        ranked = sorted(
            (RankedMatch(m.keyword, m.similarity, self.priority_for(m.keyword)) for m in matches),
            key=lambda m: (m.priority, m.similarity),
            reverse=True,
        )
        top = ranked[0]
        logger.debug(f"Ranked '{top.keyword}' first (priority {top.priority})")
        return Resolution(
            keyword=top.keyword,
            category=find_category_for_keyword(top.keyword, data_categories),
            confidence=top.similarity,
            all_matches=ranked,
        )


_default_resolver = KeywordAmbiguityResolver()


def resolve_keyword_ambiguity(
    user_input: Any,
    matched_keywords: Any,
    data_categories: Any,
    priorities: Mapping[str, int] | None = None,
) -> Resolution:
    """Resolve keyword ambiguity with the default (or a given) priority table.

    Args:
        user_input: Raw user text
        matched_keywords: KeywordMatch objects or {keyword, similarity} dicts
        data_categories: Category name -> {"keywords": [...]}
        priorities: Optional replacement priority table

    Returns:
        Resolution for the input
    """
    resolver = _default_resolver if priorities is None else KeywordAmbiguityResolver(priorities)
    return resolver.resolve(user_input, matched_keywords, data_categories)
