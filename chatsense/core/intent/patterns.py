"""Ordered pattern rules for chatsense intent scoring.

Rules are evaluated top to bottom and the first rule whose regex matches
wins, supplying both the intent label and its confidence. Nothing is
additive: an earlier rule always beats a later one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .taxonomy import IntentConfidence, IntentLabel, SentenceFeatures


@dataclass(frozen=True)
class IntentRule:
    """A single (pattern, intent, confidence) rule.

    Attributes:
        pattern: Regex searched in the normalized sentence
        intent: Intent label assigned when the pattern matches
        confidence: Fixed confidence for this rule
    """

    pattern: str
    intent: IntentLabel
    confidence: float


@dataclass
class RuleMatch:
    """Result of rule evaluation.

    Attributes:
        intent: Intent label
        confidence: Confidence score 0.0-1.0
        actionable: Whether the sentence asks for action
        matched_pattern: Pattern of the winning rule, None for the default
    """

    intent: str
    confidence: float
    actionable: bool = False
    matched_pattern: str | None = None


# Precedence is list order
INTENT_RULES: tuple[IntentRule, ...] = (
    IntentRule(
        r"\b(how to|steps|process|procedure|guide|tutorial)\b",
        IntentLabel.INSTRUCTION,
        IntentConfidence.STANDARD,
    ),
    IntentRule(
        r"\b(what is|what are|definition|meaning|explain|describe)\b",
        IntentLabel.DEFINITION,
        IntentConfidence.STANDARD,
    ),
    IntentRule(
        r"\b(compare|difference|versus|vs|similarities|better)\b",
        IntentLabel.COMPARISON,
        IntentConfidence.STANDARD,
    ),
    IntentRule(
        r"\b(example|sample|instance|case|illustration)\b",
        IntentLabel.EXAMPLE,
        IntentConfidence.STANDARD,
    ),
    IntentRule(
        r"\b(help|assist|support|guidance|advice)\b",
        IntentLabel.HELP,
        IntentConfidence.HIGH,
    ),
    IntentRule(
        r"\b(problem|issue|error|trouble|not working|fix|solve|resolution)\b",
        IntentLabel.TROUBLESHOOTING,
        IntentConfidence.HIGH,
    ),
    IntentRule(
        r"\b(ticket|client|upload|process|deadline|time|schedule)\b",
        IntentLabel.WORKFLOW,
        IntentConfidence.STANDARD,
    ),
)

ACTION_VERBS = re.compile(r"\b(show|find|get|give|tell|help|need)\b", re.IGNORECASE)

ACTIONABLE_INTENTS: frozenset[str] = frozenset(
    {IntentLabel.HELP.value, IntentLabel.TROUBLESHOOTING.value}
)


class IntentPatternMatcher:
    """First-match-wins regex intent classification."""

    def __init__(self, rules: tuple[IntentRule, ...] = INTENT_RULES) -> None:
        """Initialize the matcher with compiled regexes.

        Args:
            rules: Ordered rules, earliest wins
        """
        self._compiled: tuple[tuple[re.Pattern[str], IntentRule], ...] = tuple(
            (re.compile(rule.pattern, re.IGNORECASE), rule) for rule in rules
        )

    def match(self, sentence: str, features: SentenceFeatures) -> RuleMatch:
        """Classify a normalized sentence.

        Args:
            sentence: Trimmed, lowercased sentence
            features: Features already extracted from the sentence

        Returns:
            RuleMatch for the first matching rule, or the information default
        """
        result = RuleMatch(
            intent=IntentLabel.INFORMATION.value,
            confidence=IntentConfidence.FALLBACK,
        )
        for pattern, rule in self._compiled:
            if pattern.search(sentence):
                result = RuleMatch(
                    intent=rule.intent.value,
                    confidence=rule.confidence,
                    matched_pattern=rule.pattern,
                )
                break

        result.actionable = (
            features.is_command
            or bool(ACTION_VERBS.search(sentence))
            or result.intent in ACTIONABLE_INTENTS
        )
        return result
