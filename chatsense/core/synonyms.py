"""Synonym canonicalization for chatsense.

Rewrites synonymous phrasings to one canonical term before keyword lookup,
e.g. "what is the due date for this workflow" becomes
"what is the deadline for this process".

Pairs are applied in declared order and each pass works on the output of
the previous one, so a table entry can rewrite text produced by an earlier
entry. Tables are therefore ordered sequences, never sets.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any

from .vocabulary import DEFAULT_SYNONYMS

logger = logging.getLogger(__name__)

SynonymPairs = Iterable[tuple[str, str]]


def _is_pair(entry: Any) -> bool:
    # Strings are sequences too, so "xy" must not pass as ("x", "y")
    return (
        isinstance(entry, (tuple, list))
        and len(entry) == 2
        and isinstance(entry[0], str)
        and bool(entry[0])
        and isinstance(entry[1], str)
    )


class SynonymCanonicalizer:
    """Whole-word, case-insensitive synonym rewriting.

    Attributes:
        pairs: Ordered (synonym, canonical) pairs
    """

    def __init__(self, synonyms: SynonymPairs | Mapping[str, str] = DEFAULT_SYNONYMS) -> None:
        items = synonyms.items() if isinstance(synonyms, Mapping) else synonyms
        pairs = []
        for entry in items:
            if not _is_pair(entry):
                logger.warning(f"Skipping malformed synonym entry: {entry!r}")
                continue
            pairs.append((entry[0], entry[1]))
        self.pairs: tuple[tuple[str, str], ...] = tuple(pairs)
        # Synonyms are literal text, not regex
        self._compiled = tuple(
            (re.compile(rf"\b{re.escape(synonym)}\b", re.IGNORECASE), canonical)
            for synonym, canonical in self.pairs
        )

    def canonicalize(self, text: Any) -> str:
        """Rewrite every synonym in text to its canonical term.

        Args:
            text: Free text (anything that is not a string yields "")

        Returns:
            Lowercased text with synonyms replaced
        """
        if not isinstance(text, str) or not text:
            return ""

        processed = text.lower()
        for pattern, canonical in self._compiled:
            processed = pattern.sub(lambda _m, c=canonical: c, processed)
        return processed


_default_canonicalizer = SynonymCanonicalizer()


def map_synonyms_to_canonical(
    text: Any, synonym_map: SynonymPairs | Mapping[str, str] | None = None
) -> str:
    """Replace synonyms in text with their canonical keywords.

    Args:
        text: User input
        synonym_map: Ordered synonym table; the built-in table when None

    Returns:
        Lowercased text with synonyms replaced
    """
    if synonym_map is None:
        return _default_canonicalizer.canonicalize(text)
    try:
        canonicalizer = SynonymCanonicalizer(synonym_map)
    except (TypeError, ValueError) as e:
        logger.warning(f"Malformed synonym table, leaving input unchanged: {e}")
        return text.lower() if isinstance(text, str) else ""
    return canonicalizer.canonicalize(text)
