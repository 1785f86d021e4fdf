# doc_redaction/service/pipeline.py

"""Caller-facing redaction service: startup, entry points and reporting."""

import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Optional

from doc_redaction.service.config import settings
from doc_redaction.engine.catalog import PatternCatalog
from doc_redaction.engine.document import DocumentSession
from doc_redaction.engine.memory_driver import InMemoryDocument
from doc_redaction.engine.redactor import DocumentRedactionEngine
from doc_redaction.core.domain import RedactionResult
from doc_redaction.core.exceptions import (
    AlreadyRedactedError,
    ConfigurationError,
    InitializationError,
    NothingFoundError,
)

logger = logging.getLogger(__name__)


class RedactionService:
    """Holds the pattern catalog shared by every engine instance.

    The catalog is built once, on first use, behind a lock.
    """

    _catalog: Optional[PatternCatalog] = None
    _lock = threading.Lock()

    @classmethod
    def get_catalog(cls) -> PatternCatalog:
        """Returns the shared pattern catalog.

        Raises:
            ConfigurationError: If patterns.yaml is missing or invalid
            InitializationError: If the recognizers cannot be built
        """
        if cls._catalog is None:
            with cls._lock:
                # Double-checked locking pattern
                if cls._catalog is None:
                    try:
                        logger.info("Building pattern catalog")
                        cls._catalog = PatternCatalog.default()
                        logger.info(
                            "Pattern catalog ready",
                            extra={"categories": len(cls._catalog)},
                        )
                    except ConfigurationError:
                        logger.error("Pattern catalog is misconfigured", exc_info=True)
                        raise
                    except Exception as e:
                        logger.error("Failed to build pattern catalog", exc_info=True)
                        raise InitializationError(
                            "Pattern catalog initialization failed"
                        ) from e

        return cls._catalog


async def host_ready(
    document: DocumentSession, timeout: Optional[float] = None
) -> DocumentSession:
    """Waits for the document host to accept requests.

    Args:
        document: Session for the host document
        timeout: Seconds to wait, defaults to settings.host_ready_timeout

    Raises:
        InitializationError: If the host is not ready in time
    """
    timeout = timeout if timeout is not None else settings.host_ready_timeout
    try:
        await asyncio.wait_for(document.wait_until_ready(), timeout)
    except asyncio.TimeoutError as e:
        logger.error("Document host not ready", extra={"timeout": timeout})
        raise InitializationError(
            f"Document host was not ready after {timeout} seconds"
        ) from e
    return document


def initialize_engine(
    document: DocumentSession, catalog: Optional[PatternCatalog] = None
) -> DocumentRedactionEngine:
    """Builds an engine bound to a ready document using current settings."""
    return DocumentRedactionEngine(
        document,
        catalog or RedactionService.get_catalog(),
        header_marker=settings.header_marker,
        header_style=settings.header_style(),
        tracking_api=(settings.tracking_api_name, settings.tracking_min_version),
    )


async def redact_document(document: DocumentSession) -> RedactionResult:
    """Main entry point: wait for the host, then run one redaction.

    Raises:
        AlreadyRedactedError: The document already carries every marker
        NothingFoundError: Nothing matched any category
        InitializationError: The host or the catalog could not be set up
    """
    await host_ready(document)
    engine = initialize_engine(document)

    logger.info("Starting redaction request")
    return await engine.redact()


@dataclass
class RedactionReport:
    """Outcome of a synchronous redaction of plain text.

    Attributes:
        document: The document after the run
        result: Populated on success
        error: Human-readable message on failure
    """

    document: InMemoryDocument
    result: Optional[RedactionResult] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.result is not None

    @property
    def text(self) -> str:
        return self.document.text


def run_redaction(text: str, *, supports_headers: bool = True) -> RedactionReport:
    """Redacts plain text through an in-memory document.

    Args:
        text: Document body
        supports_headers: Whether the simulated host offers page headers

    Returns:
        RedactionReport holding either the result or the error message.
    """
    document = InMemoryDocument(text, supports_headers=supports_headers)

    try:
        result = asyncio.run(redact_document(document))
        return RedactionReport(document=document, result=result)

    except (AlreadyRedactedError, NothingFoundError) as e:
        logger.info(
            "Redaction refused",
            extra={"reason": type(e).__name__, "text_length": len(text)},
        )
        return RedactionReport(document=document, error=str(e))

    except (InitializationError, ConfigurationError) as e:
        logger.error(
            f"Known error during redaction: {type(e).__name__}",
            exc_info=True,
            extra={"text_length": len(text)},
        )
        return RedactionReport(
            document=document,
            error="The redaction service encountered a processing error.",
        )

    except Exception:
        # Catch-all for unexpected bugs
        logger.error(
            "Unexpected critical error in redaction pipeline",
            exc_info=True,
            extra={"text_length": len(text)},
        )
        return RedactionReport(
            document=document, error="An unexpected system error occurred."
        )
