"""Shared fixtures for the redaction tests."""

import pytest

from doc_redaction.engine.catalog import PatternCatalog
from doc_redaction.engine.memory_driver import InMemoryDocument
from doc_redaction.engine.redactor import DocumentRedactionEngine

SAMPLE_TEXT = "Contact me at jane.doe@example.com or 555-123-4567. SSN: 123-45-6789."


@pytest.fixture(scope="session")
def catalog() -> PatternCatalog:
    return PatternCatalog.default()


@pytest.fixture
def make_engine(catalog):
    """Factory binding an engine to a document with the packaged catalog."""

    def _make(document, **kwargs) -> DocumentRedactionEngine:
        return DocumentRedactionEngine(document, catalog, **kwargs)

    return _make


@pytest.fixture
def sample_document() -> InMemoryDocument:
    return InMemoryDocument(SAMPLE_TEXT)
