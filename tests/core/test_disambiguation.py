"""Tests for chatsense keyword ambiguity resolution.

Tests cover:
- Category lookup (exact equality, order, default exclusion, malformed entries)
- Resolver steps (single match, exact match boost, priority ranking)
- Degraded input handling
"""

from __future__ import annotations

import pytest

from chatsense.core.disambiguation import (
    EXACT_MATCH_BOOST,
    KeywordAmbiguityResolver,
    KeywordMatch,
    RankedMatch,
    Resolution,
    find_category_for_keyword,
    resolve_keyword_ambiguity,
)

CATEGORIES = {
    "default": {"keywords": ["upload retail", "help"]},
    "general": {"keywords": ["help", "upload"]},
    "retail": {"keywords": ["upload retail", "retail coding"]},
    "deadlines": {"keywords": ["market deadline", "deadline"]},
    "tickets": {"keywords": ["ticket", "client"]},
    "pairing": {"keywords": ["bookend pairing", "qc rotation"]},
}

# ============================================================================
# Category Lookup Tests
# ============================================================================


class TestFindCategoryForKeyword:
    """Tests for keyword -> category lookup."""

    def test_finds_category(self) -> None:
        assert find_category_for_keyword("market deadline", CATEGORIES) == "deadlines"

    def test_default_category_skipped(self) -> None:
        """'default' is never searched, even if it lists the keyword first."""
        assert find_category_for_keyword("upload retail", CATEGORIES) == "retail"

    def test_first_category_in_order_wins(self) -> None:
        """Shared keywords resolve to the earliest category."""
        categories = {
            "first": {"keywords": ["shared"]},
            "second": {"keywords": ["shared"]},
        }
        assert find_category_for_keyword("shared", categories) == "first"

    def test_exact_equality_only(self) -> None:
        """No fuzzy, partial or case-insensitive matching."""
        assert find_category_for_keyword("Upload", CATEGORIES) == "default"
        assert find_category_for_keyword("market", CATEGORIES) == "default"

    def test_unknown_keyword(self) -> None:
        assert find_category_for_keyword("nothing", CATEGORIES) == "default"

    def test_malformed_categories_treated_as_empty(self) -> None:
        """Categories without a keyword list are skipped."""
        categories = {
            "missing": {},
            "wrong_type": {"keywords": "ticket"},
            "not_a_mapping": ["ticket"],
            "good": {"keywords": ["ticket"]},
        }
        assert find_category_for_keyword("ticket", categories) == "good"

    @pytest.mark.parametrize(
        ("keyword", "categories"),
        [(None, CATEGORIES), ("", CATEGORIES), ("ticket", None), ("ticket", ["tickets"])],
    )
    def test_invalid_input(self, keyword: object, categories: object) -> None:
        assert find_category_for_keyword(keyword, categories) == "default"


# ============================================================================
# Resolver Tests
# ============================================================================


class TestKeywordAmbiguityResolver:
    """Tests for the resolution steps."""

    @pytest.fixture
    def resolver(self) -> KeywordAmbiguityResolver:
        return KeywordAmbiguityResolver()

    # --- Step 1: single match ---

    def test_single_match_returned_directly(self, resolver: KeywordAmbiguityResolver) -> None:
        """One candidate wins without a boost, even if absent from the input."""
        result = resolver.resolve("anything", [KeywordMatch("ticket", 0.42)], CATEGORIES)
        assert result.keyword == "ticket"
        assert result.category == "tickets"
        assert result.confidence == 0.42
        assert result.all_matches is None

    # --- Step 2: exact matches ---

    def test_longer_exact_match_wins(self, resolver: KeywordAmbiguityResolver) -> None:
        """'upload retail' beats the higher-similarity 'upload' it contains."""
        matches = [
            {"keyword": "upload", "similarity": 0.6},
            {"keyword": "upload retail", "similarity": 0.5},
        ]
        result = resolver.resolve("I need help with upload retail steps", matches, CATEGORIES)
        assert result.keyword == "upload retail"
        assert result.category == "retail"
        assert result.confidence == pytest.approx(0.5 + EXACT_MATCH_BOOST)
        assert result.all_matches is None

    def test_single_exact_match_boosted(self, resolver: KeywordAmbiguityResolver) -> None:
        """The only literal match wins over a higher-similarity candidate."""
        matches = [KeywordMatch("deadline", 0.9), KeywordMatch("ticket", 0.6)]
        result = resolver.resolve("Where is my TICKET", matches, CATEGORIES)
        assert result.keyword == "ticket"
        assert result.confidence == pytest.approx(0.8)

    def test_exact_match_boost_is_not_clamped(self, resolver: KeywordAmbiguityResolver) -> None:
        """Known edge case: the +0.2 boost can push confidence above 1."""
        matches = [KeywordMatch("bookend pairing", 0.95), KeywordMatch("qc rotation", 0.4)]
        result = resolver.resolve("show bookend pairing", matches, CATEGORIES)
        assert result.keyword == "bookend pairing"
        assert result.confidence == pytest.approx(1.15)
        assert result.confidence > 1.0

    def test_standalone_occurrence_keeps_short_match(
        self, resolver: KeywordAmbiguityResolver
    ) -> None:
        """A keyword that also appears on its own is not subsumed."""
        matches = [KeywordMatch("upload", 0.6), KeywordMatch("upload retail", 0.5)]
        text = "upload files, then upload retail"
        exact = resolver.exact_matches(text, matches)
        assert [m.keyword for m in exact] == ["upload", "upload retail"]

        # Two exact matches fall through to priority ranking
        result = resolver.resolve(text, matches, CATEGORIES)
        assert result.all_matches is not None
        assert result.keyword == "upload"

    # --- Steps 3-5: priority ranking ---

    def test_priority_beats_similarity(self, resolver: KeywordAmbiguityResolver) -> None:
        """A higher static priority outranks a higher similarity."""
        matches = [KeywordMatch("help", 0.9), KeywordMatch("retail coding", 0.6)]
        result = resolver.resolve("tell me about retial codng", matches, CATEGORIES)
        assert result.keyword == "retail coding"
        assert result.category == "retail"
        assert result.confidence == 0.6
        assert [m.keyword for m in result.all_matches] == ["retail coding", "help"]
        assert [m.priority for m in result.all_matches] == [9, 3]

    def test_similarity_breaks_priority_ties(self, resolver: KeywordAmbiguityResolver) -> None:
        matches = [KeywordMatch("ticket", 0.7), KeywordMatch("client", 0.8)]
        result = resolver.resolve("something vague", matches, CATEGORIES)
        assert result.keyword == "client"
        assert result.confidence == 0.8

    def test_multiple_exact_matches_ranked(self, resolver: KeywordAmbiguityResolver) -> None:
        """Several unrelated exact matches are ranked, not boosted."""
        matches = [KeywordMatch("ticket", 0.7), KeywordMatch("client", 0.8)]
        result = resolver.resolve("ticket and client", matches, CATEGORIES)
        assert result.keyword == "client"
        assert result.confidence == 0.8
        assert len(result.all_matches) == 2

    def test_full_ties_keep_input_order(self, resolver: KeywordAmbiguityResolver) -> None:
        matches = [KeywordMatch("alpha", 0.5), KeywordMatch("beta", 0.5)]
        result = resolver.resolve("gamma", matches, CATEGORIES)
        assert result.keyword == "alpha"
        assert result.category == "default"

    def test_priority_is_bidirectional(self, resolver: KeywordAmbiguityResolver) -> None:
        """Table phrases inside the keyword and keywords inside phrases both count."""
        assert resolver.priority_for("retail uploads today") == 9
        assert resolver.priority_for("qc") == 7
        assert resolver.priority_for("Upload Retail") == 10
        assert resolver.priority_for("zebra") == 1

    def test_custom_priorities(self) -> None:
        resolver = KeywordAmbiguityResolver({"client": 20})
        matches = [KeywordMatch("ticket", 0.9), KeywordMatch("client", 0.1)]
        assert resolver.resolve("vague", matches, CATEGORIES).keyword == "client"


# ============================================================================
# Degraded Input Tests
# ============================================================================


class TestResolveKeywordAmbiguityFunction:
    """Tests for the module-level function and invalid input."""

    def test_function_works(self) -> None:
        matches = [
            {"keyword": "upload", "similarity": 0.6},
            {"keyword": "upload retail", "similarity": 0.5},
        ]
        result = resolve_keyword_ambiguity(
            "I need help with upload retail steps", matches, CATEGORIES
        )
        assert result.keyword == "upload retail"

    def test_priorities_argument(self) -> None:
        matches = [KeywordMatch("ticket", 0.9), KeywordMatch("client", 0.1)]
        result = resolve_keyword_ambiguity("vague", matches, CATEGORIES, priorities={"client": 20})
        assert result.keyword == "client"

    @pytest.mark.parametrize(
        ("user_input", "matches"),
        [
            (None, [KeywordMatch("ticket", 0.5)]),
            ("", [KeywordMatch("ticket", 0.5)]),
            (42, [KeywordMatch("ticket", 0.5)]),
            ("ticket", []),
            ("ticket", None),
            ("ticket", "ticket"),
            ("ticket", [{"keyword": "", "similarity": 0.5}, {"similarity": 0.5}, None]),
            ("ticket", [{"keyword": "ticket", "similarity": "high"}]),
        ],
    )
    def test_invalid_input_defaults(self, user_input: object, matches: object) -> None:
        result = resolve_keyword_ambiguity(user_input, matches, CATEGORIES)
        assert result == Resolution(keyword=None, category="default", confidence=0)

    def test_malformed_entries_skipped(self) -> None:
        """Well-formed entries still resolve when others are malformed."""
        matches = [None, {"keyword": "ticket", "similarity": 0.5}]
        result = resolve_keyword_ambiguity("vague", matches, CATEGORIES)
        assert result.keyword == "ticket"
        assert result.category == "tickets"

    def test_missing_categories(self) -> None:
        result = resolve_keyword_ambiguity("ticket", [KeywordMatch("ticket", 0.5)], None)
        assert result.keyword == "ticket"
        assert result.category == "default"

    def test_to_dict_without_ranking(self) -> None:
        """all_matches is left out when no ranking happened."""
        resolution = Resolution(keyword="ticket", category="tickets", confidence=0.5)
        assert resolution.to_dict() == {"keyword": "ticket", "category": "tickets", "confidence": 0.5}

    def test_to_dict(self) -> None:
        resolution = Resolution(
            keyword="client",
            category="tickets",
            confidence=0.8,
            all_matches=[RankedMatch("client", 0.8, 5)],
        )
        assert resolution.to_dict() == {
            "keyword": "client",
            "category": "tickets",
            "confidence": 0.8,
            "all_matches": [{"keyword": "client", "similarity": 0.8, "priority": 5}],
        }
