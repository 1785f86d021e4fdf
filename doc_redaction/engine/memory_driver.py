# doc_redaction/engine/memory_driver.py

"""In-memory document host implementing the document access interface."""

import asyncio
import hashlib
import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from doc_redaction.core.definitions import ChangeTrackingMode, InsertLocation
from doc_redaction.core.exceptions import HostCapabilityError, HostError
from doc_redaction.engine.document import (
    DocumentSession,
    OccurrenceHandle,
    ParagraphStyle,
    SearchResults,
)

logger = logging.getLogger(__name__)

DEFAULT_API_NAME = "DocumentApi"
PARAGRAPH_MARK = "\n"
LINE_BREAK = "\n"


def _version_tuple(version: str) -> Tuple[int, ...]:
    try:
        return tuple(int(part) for part in version.split("."))
    except ValueError as e:
        raise HostError(f"Invalid API version '{version}'") from e


@dataclass(frozen=True)
class Paragraph:
    text: str
    style: ParagraphStyle


@dataclass(frozen=True)
class TrackedChange:
    """One recorded revision.

    Attributes:
        kind: "insertion" or "deletion"
        text: Inserted or removed text
        location: "header" or "body"
    """

    kind: str
    text: str
    location: str = "body"


@dataclass(frozen=True)
class _Replacement:
    handle: OccurrenceHandle
    new_text: str


class InMemoryDocument(DocumentSession):
    """Plain-text document with a primary header and tracked revisions.

    Queued requests are applied in order by flush(). Consecutive
    replacements are committed together, right to left, so handles located
    by one search stay valid for the whole group.
    """

    def __init__(
        self,
        body: str = "",
        *,
        header: Optional[List[str]] = None,
        api_version: str = "1.5",
        capabilities: Optional[Set[str]] = None,
        supports_headers: bool = True,
        tracking_locked: bool = False,
        ready: bool = True,
    ) -> None:
        self._body = body
        self._header: List[Paragraph] = [
            Paragraph(text=t, style=ParagraphStyle()) for t in (header or [])
        ]
        self._mode = ChangeTrackingMode.OFF
        self._revisions: List[TrackedChange] = []
        self._generation = 0
        self._pending: List[object] = []
        self._ready = asyncio.Event()
        if ready:
            self._ready.set()

        self.api_version = api_version
        self.capabilities = (
            set(capabilities) if capabilities is not None else {DEFAULT_API_NAME}
        )
        self.supports_headers = supports_headers
        self.tracking_locked = tracking_locked
        self.flush_count = 0

    # ------------------------------------------------------------------
    # Readiness
    # ------------------------------------------------------------------

    @property
    def ready(self) -> bool:
        return self._ready.is_set()

    def mark_ready(self) -> None:
        self._ready.set()

    async def wait_until_ready(self) -> None:
        await self._ready.wait()

    # ------------------------------------------------------------------
    # Committed state
    # ------------------------------------------------------------------

    @property
    def text(self) -> str:
        """Committed full text: header paragraphs, then the body."""
        parts = [p.text for p in self._header] + [self._body]
        return PARAGRAPH_MARK.join(parts)

    @property
    def body_text(self) -> str:
        return self._body

    @property
    def header_paragraphs(self) -> List[Paragraph]:
        return list(self._header)

    @property
    def revisions(self) -> List[TrackedChange]:
        return list(self._revisions)

    @property
    def change_tracking_mode(self) -> ChangeTrackingMode:
        return self._mode

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def checksum(self) -> str:
        """Digest of everything a run could change."""
        digest = hashlib.sha256()
        digest.update(self.text.encode("utf-8"))
        digest.update(self._mode.value.encode("utf-8"))
        digest.update(str(len(self._revisions)).encode("utf-8"))
        return digest.hexdigest()

    # ------------------------------------------------------------------
    # DocumentSession
    # ------------------------------------------------------------------

    async def get_full_text(self) -> str:
        return self.text

    def capability_available(self, name: str, min_version: str) -> bool:
        if name not in self.capabilities:
            return False
        return _version_tuple(self.api_version) >= _version_tuple(min_version)

    def set_change_tracking_mode(self, mode: ChangeTrackingMode) -> None:
        self._pending.append(lambda: self._apply_mode(mode))

    async def get_change_tracking_mode(self) -> ChangeTrackingMode:
        return self._mode

    def insert_header_paragraph(self, text: str, style: ParagraphStyle) -> None:
        if not self.supports_headers:
            raise HostCapabilityError("Primary header is not available on this host")
        self._pending.append(lambda: self._apply_header_insert(text, style))

    def insert_body_paragraph(
        self,
        text: str,
        style: ParagraphStyle,
        location: InsertLocation,
        *,
        trailing_break: bool = False,
    ) -> None:
        self._pending.append(
            lambda: self._apply_body_insert(text, location, trailing_break)
        )

    def search_literal(
        self, text: str, *, case_sensitive: bool = False, whole_word: bool = False
    ) -> SearchResults:
        if not text:
            raise HostError("Search text cannot be empty")
        results = SearchResults(text, case_sensitive, whole_word)
        self._pending.append(lambda: self._apply_search(results))
        return results

    def replace_occurrence(self, handle: OccurrenceHandle, new_text: str) -> None:
        self._pending.append(_Replacement(handle=handle, new_text=new_text))

    async def flush(self) -> None:
        pending, self._pending = self._pending, []
        self.flush_count += 1

        group: List[_Replacement] = []
        for request in pending:
            if isinstance(request, _Replacement):
                group.append(request)
                continue
            if group:
                self._apply_replacements(group)
                group = []
            request()
        if group:
            self._apply_replacements(group)

    # ------------------------------------------------------------------
    # Request application
    # ------------------------------------------------------------------

    @property
    def _tracking(self) -> bool:
        return self._mode != ChangeTrackingMode.OFF

    def _apply_mode(self, mode: ChangeTrackingMode) -> None:
        if self.tracking_locked:
            logger.debug("Tracking mode change ignored by locked document")
            return
        self._mode = mode

    def _apply_header_insert(self, text: str, style: ParagraphStyle) -> None:
        self._header.insert(0, Paragraph(text=text, style=style))
        if self._tracking:
            self._revisions.append(TrackedChange("insertion", text, "header"))
        self._generation += 1

    def _apply_body_insert(
        self, text: str, location: InsertLocation, trailing_break: bool
    ) -> None:
        inserted = text + (LINE_BREAK if trailing_break else "")
        if location == InsertLocation.START:
            self._body = inserted + PARAGRAPH_MARK + self._body
        else:
            self._body = self._body + PARAGRAPH_MARK + inserted
        if self._tracking:
            self._revisions.append(TrackedChange("insertion", inserted, "body"))
        self._generation += 1

    def _apply_search(self, results: SearchResults) -> None:
        pattern = re.escape(results.text)
        if results.whole_word:
            pattern = rf"(?<!\w){pattern}(?!\w)"
        flags = 0 if results.case_sensitive else re.IGNORECASE
        results.resolve(
            [
                OccurrenceHandle(generation=self._generation, ref=m.span())
                for m in re.finditer(pattern, self._body, flags)
            ]
        )

    def _apply_replacements(self, group: List[_Replacement]) -> None:
        for replacement in group:
            if replacement.handle.generation != self._generation:
                raise HostError("Occurrence handle is stale; search again after flush")

        ordered = sorted(group, key=lambda r: r.handle.ref[0], reverse=True)
        for later, earlier in zip(ordered, ordered[1:]):
            if earlier.handle.ref[1] > later.handle.ref[0]:
                raise HostError("Overlapping occurrences cannot be replaced together")

        body = self._body
        changes: List[TrackedChange] = []
        for replacement in ordered:
            start, end = replacement.handle.ref
            removed = body[start:end]
            body = body[:start] + replacement.new_text + body[end:]
            if self._tracking:
                # Recorded left to right once the group is applied.
                changes.append(TrackedChange("insertion", replacement.new_text))
                changes.append(TrackedChange("deletion", removed))

        self._body = body
        self._revisions.extend(reversed(changes))
        self._generation += 1
