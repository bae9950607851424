"""Tests for chatsense synonym canonicalization."""

from __future__ import annotations

import pytest

from chatsense.core.synonyms import SynonymCanonicalizer, map_synonyms_to_canonical
from chatsense.core.vocabulary import DEFAULT_SYNONYMS


class TestMapSynonymsToCanonical:
    """Tests for the default table and module-level function."""

    def test_default_table(self) -> None:
        result = map_synonyms_to_canonical("What is the due date for this Workflow?")
        assert result == "what is the deadline for this process?"

    def test_multi_word_synonym(self) -> None:
        assert map_synonyms_to_canonical("Retail Coding help") == "retail uploads help"

    def test_whole_words_only(self) -> None:
        """Synonyms inside longer words are left alone."""
        assert map_synonyms_to_canonical("schedules and rulesets") == "schedules and rulesets"

    def test_all_occurrences_replaced(self) -> None:
        assert map_synonyms_to_canonical("steps, then more steps") == "process, then more process"

    def test_output_is_lowercase(self) -> None:
        assert map_synonyms_to_canonical("UPLOAD NOW") == "upload now"

    @pytest.mark.parametrize(
        "text",
        [
            "What is the due date for this Workflow?",
            "upload retail guidelines",
            "client ticket restrictions and timing",
            "nothing to rewrite here",
        ],
    )
    def test_idempotent(self, text: str) -> None:
        once = map_synonyms_to_canonical(text)
        assert map_synonyms_to_canonical(once) == once

    @pytest.mark.parametrize("value", [None, "", 42, ["steps"]])
    def test_invalid_input(self, value: object) -> None:
        assert map_synonyms_to_canonical(value) == ""

    def test_custom_table(self) -> None:
        assert map_synonyms_to_canonical("Fix the bug", {"bug": "issue"}) == "fix the issue"

    def test_custom_table_replaces_default(self) -> None:
        """The default table is not applied when a table is given."""
        assert map_synonyms_to_canonical("workflow", {"bug": "issue"}) == "workflow"

    def test_malformed_entries(self) -> None:
        """Entries that are not (synonym, canonical) pairs are skipped."""
        assert map_synonyms_to_canonical("Fix It", [("only-one",)]) == "fix it"

    def test_two_character_strings_are_not_pairs(self) -> None:
        assert map_synonyms_to_canonical("x marks", ["xy"]) == "x marks"

    def test_non_iterable_table(self) -> None:
        """A table that cannot be iterated leaves the text lowercased."""
        assert map_synonyms_to_canonical("Fix It", 42) == "fix it"

    def test_table_not_mutated(self) -> None:
        table = {"bug": "issue", "defect": "issue"}
        snapshot = dict(table)
        map_synonyms_to_canonical("bug defect", table)
        assert table == snapshot


class TestSynonymCanonicalizer:
    """Tests for ordering and literal matching."""

    def test_default_pairs(self) -> None:
        assert SynonymCanonicalizer().pairs == DEFAULT_SYNONYMS

    def test_later_pairs_see_earlier_rewrites(self) -> None:
        chained = SynonymCanonicalizer([("alpha", "beta"), ("beta", "gamma")])
        assert chained.canonicalize("alpha") == "gamma"

    def test_order_matters(self) -> None:
        reversed_order = SynonymCanonicalizer([("beta", "gamma"), ("alpha", "beta")])
        assert reversed_order.canonicalize("alpha") == "beta"

    def test_synonyms_are_literal(self) -> None:
        """Regex characters in a synonym match only themselves."""
        canonicalizer = SynonymCanonicalizer([("e.g", "for example")])
        assert canonicalizer.canonicalize("use e.g this") == "use for example this"
        assert canonicalizer.canonicalize("use exg this") == "use exg this"

    def test_canonical_is_literal(self) -> None:
        """Backslashes in the canonical term are not group references."""
        canonicalizer = SynonymCanonicalizer([("path", r"c:\new")])
        assert canonicalizer.canonicalize("path") == r"c:\new"

    def test_invalid_pairs_skipped(self) -> None:
        canonicalizer = SynonymCanonicalizer(
            [("", "x"), (None, "y"), "ab", ("a", "b", "c"), ["ok", "fine"]]
        )
        assert canonicalizer.pairs == (("ok", "fine"),)
