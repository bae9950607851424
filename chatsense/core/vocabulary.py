"""
Vocabulary - Static lexical tables for chatsense.

Holds the read-only tables the classifier walks at call time:
- STOP_WORDS: tokens dropped by the lexical normalizer
- DEFAULT_SYNONYMS: ordered (synonym, canonical) pairs for canonicalization
- KEYWORD_PRIORITIES: static weights used by the ambiguity resolver
- KEYWORD_GROUPS: ordered topical buckets used by the keyword grouper

The tables are bundled into a frozen `Vocabulary` model that is built once
(`DEFAULT_VOCABULARY`) and passed into components explicitly. A replacement
vocabulary can be loaded from YAML:

    stop_words: [the, and, ...]
    synonyms:
      - [procedure, process]
      - [due date, deadline]
    priorities:
      upload retail: 10
      upload: 5
    keyword_groups:
      upload: [upload, retail]

Category indexes (category name -> {keywords: [...]}) are loaded from YAML
with `load_category_index`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

logger = logging.getLogger(__name__)


# ============================================================================
# Default Tables
# ============================================================================

STOP_WORDS: frozenset[str] = frozenset(
    {
        "a", "an", "the", "and", "or", "but", "is", "are", "was", "were",
        "be", "been", "being", "have", "has", "had", "do", "does", "did",
        "to", "from", "in", "out", "on", "off", "over", "under", "again",
        "further", "then", "once", "here", "there", "when", "where", "why",
        "how", "all", "any", "both", "each", "few", "more", "most", "other",
        "some", "such", "no", "nor", "not", "only", "own", "same", "so",
        "than", "too", "very", "i", "me", "my", "myself", "we", "our", "ours",
    }
)

# Applied top to bottom; later pairs see text rewritten by earlier ones
DEFAULT_SYNONYMS: tuple[tuple[str, str], ...] = (
    # Process
    ("procedure", "process"),
    ("workflow", "process"),
    ("steps", "process"),
    ("methodology", "process"),
    # Upload
    ("upload retail", "retail uploads"),
    ("retail coding", "retail uploads"),
    ("retail upload", "retail uploads"),
    # Deadline
    ("timing", "deadline"),
    ("schedule", "deadline"),
    ("due date", "deadline"),
    ("time limit", "deadline"),
    # Ticket
    ("client number", "ticket"),
    ("ticket number", "ticket"),
    ("client ticket", "ticket"),
    # Instructions
    ("guidelines", "instructions"),
    ("rules", "instructions"),
    ("requirements", "instructions"),
    ("restrictions", "special instructions"),
)

KEYWORD_PRIORITIES: Mapping[str, int] = MappingProxyType(
    {
        # Specific multi-word phrases
        "upload retail": 10,
        "retail coding": 9,
        "retail uploads": 9,
        "bookend pairing": 8,
        "market deadline": 8,
        "process details": 8,
        "qc rotation": 7,
        "special instructions": 7,
        # General terms
        "upload": 5,
        "retail": 5,
        "process": 5,
        "deadline": 5,
        "ticket": 5,
        "client": 5,
        # Very general terms
        "help": 3,
        "show": 3,
        "list": 3,
        "information": 2,
        "details": 2,
    }
)

DEFAULT_PRIORITY = 1

# First matching bucket wins, so order matters
KEYWORD_GROUPS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("process", ("process", "workflow", "procedure", "steps", "details")),
    ("upload", ("upload", "retail", "coding", "bookend", "pairing")),
    ("ticket", ("ticket", "client", "number", "details")),
    ("deadline", ("deadline", "timing", "schedule", "market", "time zone")),
    ("instruction", ("instruction", "special", "restricted", "rules")),
    ("roe", ("roe", "order", "type")),
)

OTHER_GROUP = "other"
DEFAULT_CATEGORY = "default"


class VocabularyError(ValueError):
    """Raised when a vocabulary or category index file cannot be used."""


# ============================================================================
# Vocabulary Model
# ============================================================================


def _as_pairs(value: Any) -> Any:
    """Accept either a mapping or a sequence of 2-item sequences."""
    if isinstance(value, Mapping):
        return [(k, v) for k, v in value.items()]
    return value


class Vocabulary(BaseModel):
    """Immutable bundle of the lexical tables used by the classifier.

    Attributes:
        stop_words: Tokens removed during normalization
        synonyms: Ordered (synonym, canonical) pairs
        priorities: Phrase -> static priority weight
        keyword_groups: Ordered (bucket, terms) pairs
    """

    model_config = ConfigDict(frozen=True)

    stop_words: frozenset[str] = Field(default=STOP_WORDS)
    synonyms: tuple[tuple[str, str], ...] = Field(default=DEFAULT_SYNONYMS)
    priorities: Mapping[str, int] = Field(default_factory=lambda: KEYWORD_PRIORITIES)
    keyword_groups: tuple[tuple[str, tuple[str, ...]], ...] = Field(default=KEYWORD_GROUPS)

    @field_validator("stop_words", mode="before")
    @classmethod
    def lowercase_stop_words(cls, v: Any) -> Any:
        """Stop-words are compared against lowercased tokens."""
        if isinstance(v, (list, tuple, set, frozenset)):
            return frozenset(str(word).lower() for word in v)
        return v

    @field_validator("synonyms", "keyword_groups", mode="before")
    @classmethod
    def mapping_to_pairs(cls, v: Any) -> Any:
        return _as_pairs(v)

    @field_validator("priorities", mode="after")
    @classmethod
    def read_only_priorities(cls, v: Mapping[str, int]) -> Mapping[str, int]:
        return MappingProxyType(dict(v))

    @classmethod
    def load(cls, path: Path) -> "Vocabulary":
        """Load a vocabulary from a YAML file.

        Sections missing from the file keep their built-in defaults.

        Args:
            path: Path to the YAML file

        Returns:
            Vocabulary built from the file

        Raises:
            VocabularyError: If the file is unreadable or malformed
        """
        data = _read_yaml(path)
        if data is None:
            logger.warning(f"Vocabulary file {path} is empty, using defaults")
            return cls()
        if not isinstance(data, Mapping):
            raise VocabularyError(f"{path}: expected a mapping at the top level")

        known = {"stop_words", "synonyms", "priorities", "keyword_groups"}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown vocabulary sections in {path}: {sorted(unknown)}")

        try:
            return cls(**{key: data[key] for key in known if key in data})
        except ValidationError as e:
            raise VocabularyError(f"{path}: invalid vocabulary: {e}") from e

    def to_yaml_data(self) -> dict[str, Any]:
        """Convert to plain data suitable for YAML dumping."""
        return {
            "stop_words": sorted(self.stop_words),
            "synonyms": [list(pair) for pair in self.synonyms],
            "priorities": dict(self.priorities),
            "keyword_groups": {name: list(terms) for name, terms in self.keyword_groups},
        }


DEFAULT_VOCABULARY = Vocabulary()


# ============================================================================
# Category Index Loading
# ============================================================================


def load_category_index(path: Path) -> dict[str, dict[str, list[str]]]:
    """Load a category index from YAML.

    Each top-level key is a category name. Its value is either a mapping with
    a ``keywords`` list (other keys such as ``responses`` are dropped) or a
    bare list of keywords. Categories without a usable keyword list load with
    an empty one.

    Args:
        path: Path to the YAML file

    Returns:
        Category index in file order

    Raises:
        VocabularyError: If the file is unreadable or not a mapping
    """
    data = _read_yaml(path)
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise VocabularyError(f"{path}: expected a mapping of categories")

    index: dict[str, dict[str, list[str]]] = {}
    for name, entry in data.items():
        raw = entry.get("keywords") if isinstance(entry, Mapping) else entry
        if isinstance(raw, (list, tuple)):
            keywords = [str(k) for k in raw if isinstance(k, str)]
        else:
            if raw is not None:
                logger.warning(f"Category '{name}' has malformed keywords, treating as empty")
            keywords = []
        index[str(name)] = {"keywords": keywords}

    logger.debug(f"Loaded {len(index)} categories from {path}")
    return index


def _read_yaml(path: Path) -> Any:
    yaml = YAML(typ="safe")
    try:
        with Path(path).open(encoding="utf-8") as f:
            return yaml.load(f)
    except OSError as e:
        raise VocabularyError(f"Cannot read {path}: {e}") from e
    except YAMLError as e:
        raise VocabularyError(f"Invalid YAML in {path}: {e}") from e


__all__ = [
    "DEFAULT_CATEGORY",
    "DEFAULT_PRIORITY",
    "DEFAULT_SYNONYMS",
    "DEFAULT_VOCABULARY",
    "KEYWORD_GROUPS",
    "KEYWORD_PRIORITIES",
    "OTHER_GROUP",
    "STOP_WORDS",
    "Vocabulary",
    "VocabularyError",
    "load_category_index",
]
