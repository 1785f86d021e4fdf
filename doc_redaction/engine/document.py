# doc_redaction/engine/document.py

"""Document access interface consumed by the redaction engine.

A DocumentSession is a request batch against a host document. Reads return
committed state only; writes are queued and become visible after flush().
Every component taking part in a run must route through the same session,
one awaited call at a time.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional

from doc_redaction.core.definitions import Alignment, ChangeTrackingMode, InsertLocation
from doc_redaction.core.exceptions import HostError


@dataclass(frozen=True)
class ParagraphStyle:
    """Character and paragraph formatting for an inserted paragraph."""

    bold: bool = False
    size: Optional[float] = None
    color: Optional[str] = None
    alignment: Alignment = Alignment.LEFT


@dataclass(frozen=True)
class OccurrenceHandle:
    """Opaque reference to one located instance of a search string.

    Attributes:
        generation: Host state generation the handle was located in
        ref: Host-specific location data
    """

    generation: int
    ref: Any


class SearchResults:
    """Occurrences of a queued literal search, resolved by the next flush."""

    def __init__(self, text: str, case_sensitive: bool, whole_word: bool) -> None:
        self.text = text
        self.case_sensitive = case_sensitive
        self.whole_word = whole_word
        self._items: Optional[List[OccurrenceHandle]] = None

    @property
    def loaded(self) -> bool:
        return self._items is not None

    @property
    def items(self) -> List[OccurrenceHandle]:
        if self._items is None:
            raise HostError("Search results read before flush")
        return list(self._items)

    def resolve(self, items: List[OccurrenceHandle]) -> None:
        """Called by the host when the batch containing the search commits."""
        self._items = list(items)

    def __len__(self) -> int:
        return len(self.items)

    def __repr__(self) -> str:
        state = len(self._items) if self._items is not None else "pending"
        return f"<SearchResults length={len(self.text)} items={state}>"


class DocumentSession(ABC):
    """Batched, flush-synchronised access to one host document."""

    async def wait_until_ready(self) -> None:
        """Returns once the host can accept requests."""
        return None

    @abstractmethod
    async def get_full_text(self) -> str:
        """Returns the committed plain text of the whole document."""

    @abstractmethod
    def capability_available(self, name: str, min_version: str) -> bool:
        """Reports whether the host API surface includes a feature set."""

    @abstractmethod
    def set_change_tracking_mode(self, mode: ChangeTrackingMode) -> None:
        """Queues a change of the document-wide tracking mode."""

    @abstractmethod
    async def get_change_tracking_mode(self) -> ChangeTrackingMode:
        """Returns the committed tracking mode."""

    @abstractmethod
    def insert_header_paragraph(self, text: str, style: ParagraphStyle) -> None:
        """Queues a paragraph at the start of the primary page header.

        Raises:
            HostCapabilityError: If the host has no structured headers.
        """

    @abstractmethod
    def insert_body_paragraph(
        self,
        text: str,
        style: ParagraphStyle,
        location: InsertLocation,
        *,
        trailing_break: bool = False,
    ) -> None:
        """Queues a paragraph in the main body, optionally followed by a line break."""

    @abstractmethod
    def search_literal(
        self, text: str, *, case_sensitive: bool = False, whole_word: bool = False
    ) -> SearchResults:
        """Queues a literal search; the results resolve on the next flush."""

    @abstractmethod
    def replace_occurrence(self, handle: OccurrenceHandle, new_text: str) -> None:
        """Queues replacement of one located occurrence."""

    @abstractmethod
    async def flush(self) -> None:
        """Commits every queued request in order.

        Raises:
            HostError: If any queued request fails. Requests queued before
                the failing one stay committed.
        """
