"""Topical grouping of keywords for chatsense."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .vocabulary import KEYWORD_GROUPS, OTHER_GROUP

KeywordGroups = Iterable[tuple[str, Iterable[str]]]


def group_related_keywords(
    keywords: Any, groups: KeywordGroups = KEYWORD_GROUPS
) -> dict[str, list[str]]:
    """Bucket keywords by topic.

    Each keyword goes to the first group with a term it contains
    (case-insensitive), or to "other". Only non-empty buckets are returned,
    and keywords keep their input order within a bucket.

    Args:
        keywords: List of keyword strings
        groups: Ordered (bucket, terms) pairs

    Returns:
        Mapping of bucket name to keywords
    """
    if not isinstance(keywords, (list, tuple)) or not keywords:
        return {}

    table = [(name, [term.lower() for term in terms]) for name, terms in groups]
    grouped: dict[str, list[str]] = {}

    for keyword in keywords:
        if not isinstance(keyword, str):
            continue
        lowered = keyword.lower()
        bucket = next(
            (name for name, terms in table if any(term in lowered for term in terms)),
            OTHER_GROUP,
        )
        grouped.setdefault(bucket, []).append(keyword)

    return grouped
