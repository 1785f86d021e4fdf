# doc_redaction/engine/catalog.py

"""Pattern catalog: ordered (category, matcher, marker) entries.

Matchers are presidio PatternRecognizers built from patterns.yaml. They run
on regex alone, so no NLP model is loaded.
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from presidio_analyzer import Pattern, PatternRecognizer

from doc_redaction.core.definitions import RedactionCategory
from doc_redaction.core.exceptions import ConfigurationError
from doc_redaction.core.loader import PatternLoader

logger = logging.getLogger(__name__)

CATALOG_REGEX_FLAGS = re.ASCII | re.IGNORECASE


class CategoryRecognizer(PatternRecognizer):
    """Regex recognizer for one redaction category.

    Patterns run ASCII-only: \\b, \\d and \\w ignore non-ASCII letters and
    digits, and matching is case-insensitive.
    """

    def __init__(self, category: RedactionCategory, patterns: List[Pattern]):
        super().__init__(
            supported_entity=category.value,
            name=f"{category.value.title()}_Recognizer",
            patterns=patterns,
            global_regex_flags=CATALOG_REGEX_FLAGS,
        )


@dataclass(frozen=True)
class CatalogEntry:
    """One category with its matcher and marker text."""

    category: RedactionCategory
    recognizer: CategoryRecognizer

    @property
    def marker(self) -> str:
        return self.category.marker

    def find_all(self, text: str) -> List[str]:
        """Returns every matched substring of text, in document order."""
        if not text:
            return []
        results = self.recognizer.analyze(
            text=text, entities=[self.category.value], nlp_artifacts=None
        )
        results = sorted(results, key=lambda r: (r.start, r.end))
        return [text[r.start : r.end] for r in results]


class PatternCatalog:
    """Ordered set of catalog entries consumed by the engine."""

    def __init__(self, entries: List[CatalogEntry]):
        seen = [e.category for e in entries]
        missing = [c.value for c in RedactionCategory if c not in seen]
        if missing:
            raise ConfigurationError(f"Pattern catalog has no entry for: {missing}")
        if len(set(seen)) != len(seen):
            raise ConfigurationError("Pattern catalog lists a category twice")
        self._entries = list(entries)

    @classmethod
    def from_definitions(cls, definitions: List[Dict]) -> "PatternCatalog":
        """Builds a catalog from loader pattern dictionaries.

        Categories keep the order in which they first appear; several
        patterns for one category share a single recognizer.
        """
        grouped: Dict[RedactionCategory, List[Pattern]] = {}
        for definition in definitions:
            category = RedactionCategory(definition["category"])
            grouped.setdefault(category, []).append(
                Pattern(
                    name=definition["name"],
                    regex=definition["regex"],
                    score=float(definition.get("score", 1.0)),
                )
            )

        entries = [
            CatalogEntry(category=category, recognizer=CategoryRecognizer(category, patterns))
            for category, patterns in grouped.items()
        ]
        logger.debug(
            "Pattern catalog built",
            extra={"categories": [e.category.value for e in entries]},
        )
        return cls(entries)

    @classmethod
    def default(cls, loader: Optional[PatternLoader] = None) -> "PatternCatalog":
        """Builds the catalog declared in the packaged patterns.yaml."""
        loader = loader or PatternLoader.get_instance()
        return cls.from_definitions(loader.get_patterns())

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def categories(self) -> List[RedactionCategory]:
        return [e.category for e in self._entries]

    def markers(self) -> List[str]:
        return [e.marker for e in self._entries]
