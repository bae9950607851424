"""Intent taxonomy and confidence levels for chatsense.

This module defines the intent labels, the fixed confidence values the rules
assign, and the result types produced by the analysis pipeline.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Literal


class IntentLabel(str, Enum):
    """Intent labels a sentence can be classified as."""

    INSTRUCTION = "instruction"  # How-to, steps, procedures
    DEFINITION = "definition"  # What is X, explain X
    COMPARISON = "comparison"  # X versus Y
    EXAMPLE = "example"  # Show a sample of X
    HELP = "help"  # Asking for assistance
    TROUBLESHOOTING = "troubleshooting"  # Something is broken
    WORKFLOW = "workflow"  # Tickets, uploads, deadlines
    INFORMATION = "information"  # No rule matched
    FOLLOW_UP = "follow-up"  # Short reply to a bot question
    CLARIFICATION = "clarification"  # Restates an earlier user turn
    UNKNOWN = "unknown"  # Invalid input


class IntentConfidence:
    """Fixed confidence values assigned by the classifier.

    Confidence is a heuristic certainty, not a calibrated probability:
    - HIGH (0.9): help and troubleshooting vocabulary
    - STANDARD (0.8): the remaining pattern rules
    - CONTEXTUAL (0.7): follow-up and clarification overrides
    - FALLBACK (0.5): no rule matched
    - NONE (0.0): invalid input
    """

    HIGH = 0.9
    STANDARD = 0.8
    CONTEXTUAL = 0.7
    FALLBACK = 0.5
    NONE = 0.0


Sender = Literal["user", "bot"]


@dataclass(frozen=True)
class ConversationTurn:
    """One message of the conversation history supplied by the caller.

    Attributes:
        sender: Who sent the message ("user" or "bot")
        text: Message text
    """

    sender: Sender
    text: str

    @classmethod
    def coerce(cls, value: Any) -> "ConversationTurn | None":
        """Build a turn from a ConversationTurn or a {sender, text} mapping.

        Returns:
            ConversationTurn, or None if the value is malformed
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            sender = value.get("sender")
            text = value.get("text")
            if isinstance(sender, str) and isinstance(text, str):
                return cls(sender=sender, text=text)  # type: ignore[arg-type]
        return None


@dataclass
class SentenceFeatures:
    """Surface features extracted from a normalized sentence.

    Attributes:
        is_question: Ends with "?" or contains a question word
        is_command: Contains an imperative verb and is not a question
        is_suggestion: Contains hedging vocabulary
        modifiers: First match per modifier class, in class order
        keywords: Normalized content tokens
    """

    is_question: bool = False
    is_command: bool = False
    is_suggestion: bool = False
    modifiers: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)


@dataclass
class IntentResult:
    """Result of sentence intent analysis.

    Attributes:
        intent: Intent label (see IntentLabel)
        confidence: Confidence score 0.0-1.0
        keywords: Normalized keywords, deduplicated (order not significant)
        actionable: Whether the sentence asks for something to be done
        modifiers: Modifier words found, in modifier class order
        is_question: Sentence is a question
        is_command: Sentence is a command (never true for questions)
        is_suggestion: Sentence contains suggestion vocabulary
        original_sentence: The sentence as supplied by the caller
        matched_pattern: Pattern of the rule that fired (for debugging)
    """

    intent: str
    confidence: float
    keywords: list[str] = field(default_factory=list)
    actionable: bool = False
    modifiers: list[str] = field(default_factory=list)
    is_question: bool = False
    is_command: bool = False
    is_suggestion: bool = False
    original_sentence: str = ""
    matched_pattern: str | None = None

    @classmethod
    def unknown(cls, sentence: Any = None) -> "IntentResult":
        """Create the result returned for invalid input.

        Args:
            sentence: The rejected input (kept only if it is a string)

        Returns:
            IntentResult with UNKNOWN intent and zero confidence
        """
        return cls(
            intent=IntentLabel.UNKNOWN.value,
            confidence=IntentConfidence.NONE,
            original_sentence=sentence if isinstance(sentence, str) else "",
        )

    def is_fallback(self) -> bool:
        """Check if no rule or context override applied."""
        return self.intent in (IntentLabel.INFORMATION.value, IntentLabel.UNKNOWN.value)

    def is_contextual(self) -> bool:
        """Check if the intent came from conversation history."""
        return self.intent in (IntentLabel.FOLLOW_UP.value, IntentLabel.CLARIFICATION.value)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary."""
        return asdict(self)
