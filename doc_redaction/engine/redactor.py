# doc_redaction/engine/redactor.py

"""Redaction engine: guard, tracking, header, then per-category replacement."""

import logging
from typing import List, Optional, Tuple

from doc_redaction.core.definitions import (
    ChangeTrackingMode,
    HEADER_MARKER,
    InsertLocation,
    Alignment,
)
from doc_redaction.core.domain import (
    CategoryOutcome,
    HeaderOutcome,
    RedactionResult,
    TrackingOutcome,
)
from doc_redaction.core.exceptions import AlreadyRedactedError, NothingFoundError
from doc_redaction.engine.catalog import CatalogEntry, PatternCatalog
from doc_redaction.engine.document import DocumentSession, ParagraphStyle

logger = logging.getLogger(__name__)

DEFAULT_HEADER_STYLE = ParagraphStyle(
    bold=True, size=16, color="#DC2626", alignment=Alignment.CENTERED
)
DEFAULT_TRACKING_API = ("DocumentApi", "1.5")


class DocumentRedactionEngine:
    """Redacts sensitive data from a live document through a DocumentSession.

    Matching runs once per category against a text snapshot to learn which
    literal strings are sensitive; replacement then goes through the host's
    own search so every tracked deletion/insertion pair lands on the right
    range. All requests are issued sequentially on one session.
    """

    def __init__(
        self,
        document: DocumentSession,
        catalog: Optional[PatternCatalog] = None,
        *,
        header_marker: str = HEADER_MARKER,
        header_style: ParagraphStyle = DEFAULT_HEADER_STYLE,
        tracking_api: Tuple[str, str] = DEFAULT_TRACKING_API,
    ) -> None:
        """Initialize the engine.

        Args:
            document: Batch context for the document being redacted
            catalog: Ordered pattern catalog, packaged default when omitted
            header_marker: Confidentiality marking text
            header_style: Formatting of the confidentiality paragraph
            tracking_api: (API set name, minimum version) needed for tracking
        """
        self._document = document
        self._catalog = catalog or PatternCatalog.default()
        self._header_marker = header_marker
        self._header_style = header_style
        self._tracking_api = tracking_api

    @property
    def catalog(self) -> PatternCatalog:
        return self._catalog

    async def redact(self) -> RedactionResult:
        """Runs one redaction pass over the document.

        Returns:
            Frozen RedactionResult with total > 0

        Raises:
            AlreadyRedactedError: Every marker and the header are already
                present. The document is left untouched.
            NothingFoundError: No category matched. Tracking and header
                changes made during the run are not rolled back.
        """
        result = RedactionResult()

        text = await self._document.get_full_text()
        if self.is_already_redacted(text):
            logger.info(
                "Document already redacted, no changes made",
                extra={"text_length": len(text)},
            )
            raise AlreadyRedactedError()

        tracking = await self._enable_tracking()
        result.record(tracking)
        result.tracking_enabled = tracking.enabled

        header = await self._ensure_header(text)
        result.record(header)
        result.header_added = header.present

        # Header insertion changes what a full-text read returns.
        text = await self._document.get_full_text()
        logger.debug("Document text refreshed", extra={"text_length": len(text)})

        for entry in self._catalog:
            outcome = await self.scan_and_replace(entry)
            result.record(outcome)
            result.counts[entry.category] = outcome.count

        if result.total == 0:
            logger.warning(
                "No sensitive information found",
                extra={
                    "tracking_enabled": result.tracking_enabled,
                    "header_added": result.header_added,
                },
            )
            raise NothingFoundError()

        logger.info("Redaction completed", extra=result.to_dict())
        return result.freeze()

    def is_already_redacted(self, text: str) -> bool:
        """True when text holds every category marker and the header marker."""
        has_markers = all(marker in text for marker in self._catalog.markers())
        return has_markers and self._header_marker in text

    async def _enable_tracking(self) -> TrackingOutcome:
        api_name, min_version = self._tracking_api
        try:
            if not self._document.capability_available(api_name, min_version):
                logger.warning(
                    "Change tracking not supported by host",
                    extra={"api": api_name, "min_version": min_version},
                )
                return TrackingOutcome(step="tracking", supported=False)

            self._document.set_change_tracking_mode(ChangeTrackingMode.TRACK_ALL)
            await self._document.flush()

            mode = await self._document.get_change_tracking_mode()
            enabled = mode == ChangeTrackingMode.TRACK_ALL
            if not enabled:
                logger.warning(
                    "Host did not confirm change tracking",
                    extra={"mode": getattr(mode, "value", str(mode))},
                )
            return TrackingOutcome(step="tracking", supported=True, enabled=enabled)

        except Exception as e:
            logger.error("Could not enable change tracking", exc_info=True)
            return TrackingOutcome(step="tracking", ok=False, error=str(e))

    async def _ensure_header(self, text: str) -> HeaderOutcome:
        if self._header_marker in text:
            return HeaderOutcome(step="header", present=True, placement="existing")

        try:
            self._document.insert_header_paragraph(
                self._header_marker, self._header_style
            )
            await self._document.flush()
            return HeaderOutcome(step="header", present=True, placement="header")
        except Exception as e:
            logger.warning(
                "Header API not available, using body fallback", exc_info=True
            )
            header_error = str(e)

        try:
            self._document.insert_body_paragraph(
                self._header_marker,
                self._header_style,
                InsertLocation.START,
                trailing_break=True,
            )
            await self._document.flush()
            return HeaderOutcome(
                step="header", present=True, placement="body", error=header_error
            )
        except Exception as e:
            logger.error("Could not add confidentiality header", exc_info=True)
            return HeaderOutcome(
                step="header", ok=False, error=f"{header_error}; fallback: {e}"
            )

    async def scan_and_replace(self, entry: CatalogEntry) -> CategoryOutcome:
        """Replaces every occurrence of every match for one category.

        Args:
            entry: Catalog entry supplying the matcher and marker

        Returns:
            CategoryOutcome with the number of occurrences replaced. On a
            host error the count accumulated so far is kept and the error
            is recorded.
        """
        count = 0
        distinct: List[str] = []

        try:
            text = await self._document.get_full_text()
            matches = entry.find_all(text)
            if not matches:
                return CategoryOutcome(step="scan", category=entry.category)

            # Identical literals are searched once; the search finds them all.
            distinct = list(dict.fromkeys(matches))

            for literal in distinct:
                found = self._document.search_literal(
                    literal, case_sensitive=False, whole_word=False
                )
                await self._document.flush()

                occurrences = found.items
                for handle in occurrences:
                    self._document.replace_occurrence(handle, entry.marker)
                await self._document.flush()
                count += len(occurrences)

        except Exception as e:
            logger.error(
                "Error during find and replace",
                exc_info=True,
                extra={"category": entry.category.value, "replaced": count},
            )
            return CategoryOutcome(
                step="scan",
                ok=False,
                error=str(e),
                category=entry.category,
                count=count,
                distinct_matches=len(distinct),
            )

        logger.debug(
            "Category redacted",
            extra={
                "category": entry.category.value,
                "replaced": count,
                "distinct_matches": len(distinct),
            },
        )
        return CategoryOutcome(
            step="scan",
            category=entry.category,
            count=count,
            distinct_matches=len(distinct),
        )
