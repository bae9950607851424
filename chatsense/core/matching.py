"""Fuzzy keyword matching against a category index.

Produces the `KeywordMatch` candidates that the ambiguity resolver chooses
between. Scores come from rapidfuzz's token-set ratio, so a keyword whose
words all appear in the input scores 1.0 regardless of surrounding text,
and small typos still score high.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from rapidfuzz import fuzz

from .disambiguation import KeywordMatch
from .vocabulary import DEFAULT_CATEGORY

logger = logging.getLogger(__name__)

DEFAULT_MATCH_THRESHOLD = 0.6

_NON_WORD = re.compile(r"[^\w\s]")


def _clean(text: str) -> str:
    return " ".join(_NON_WORD.sub(" ", text.lower()).split())


def find_keyword_matches(
    user_input: Any,
    data_categories: Any,
    threshold: float = DEFAULT_MATCH_THRESHOLD,
    limit: int | None = None,
) -> list[KeywordMatch]:
    """Score every category keyword against the input.

    Args:
        user_input: Raw user text
        data_categories: Category name -> {"keywords": [...]}
        threshold: Minimum similarity (0.0-1.0) to keep a keyword
        limit: Keep at most this many matches

    Returns:
        Matches sorted by similarity, highest first; each keyword appears once
    """
    if not isinstance(user_input, str) or not isinstance(data_categories, Mapping):
        return []
    text = _clean(user_input)
    if not text:
        return []

    best: dict[str, float] = {}
    for category, entry in data_categories.items():
        if category == DEFAULT_CATEGORY:
            continue
        keywords = entry.get("keywords") if isinstance(entry, Mapping) else None
        if not isinstance(keywords, (list, tuple)):
            continue
        for keyword in keywords:
            if not isinstance(keyword, str) or not keyword.strip():
                continue
            score = fuzz.token_set_ratio(_clean(keyword), text) / 100.0
            if score >= threshold and score > best.get(keyword, -1.0):
                best[keyword] = score

    matches = sorted(
        (KeywordMatch(keyword=k, similarity=s) for k, s in best.items()),
        key=lambda m: m.similarity,
        reverse=True,
    )
    logger.debug(f"{len(matches)} keyword matches at threshold {threshold}")
    return matches[:limit] if limit is not None else matches
