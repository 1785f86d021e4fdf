"""Tests for the service layer, settings and logging."""

import asyncio
import json
import logging

import pytest
from pydantic import ValidationError

from doc_redaction.core.definitions import Alignment
from doc_redaction.core.exceptions import (
    AlreadyRedactedError,
    InitializationError,
    NOTHING_FOUND_MESSAGE,
)
from doc_redaction.engine.memory_driver import InMemoryDocument
from doc_redaction.logging_config import StructuredFormatter
from doc_redaction.service.config import Settings
from doc_redaction.service.pipeline import (
    RedactionService,
    host_ready,
    initialize_engine,
    redact_document,
    run_redaction,
)

SAMPLE_TEXT = "Contact me at jane.doe@example.com or 555-123-4567. SSN: 123-45-6789."


# ── Startup ──────────────────────────────────────────────────────────

class TestStartup:
    @pytest.mark.asyncio
    async def test_host_ready_times_out(self) -> None:
        document = InMemoryDocument("x", ready=False)
        with pytest.raises(InitializationError):
            await host_ready(document, timeout=0.05)

    @pytest.mark.asyncio
    async def test_host_ready_waits(self) -> None:
        document = InMemoryDocument("x", ready=False)

        async def later():
            await asyncio.sleep(0.02)
            document.mark_ready()

        task = asyncio.create_task(later())
        assert await host_ready(document, timeout=1.0) is document
        await task

    def test_catalog_is_shared(self) -> None:
        assert RedactionService.get_catalog() is RedactionService.get_catalog()

    def test_engine_uses_shared_catalog(self) -> None:
        engine = initialize_engine(InMemoryDocument("x"))
        assert engine.catalog is RedactionService.get_catalog()


# ── Entry points ─────────────────────────────────────────────────────

class TestRedactDocument:
    @pytest.mark.asyncio
    async def test_success(self) -> None:
        document = InMemoryDocument(SAMPLE_TEXT)
        result = await redact_document(document)
        assert result.to_dict() == {
            "email_count": 1,
            "phone_count": 1,
            "ssn_count": 1,
            "total": 3,
            "tracking_enabled": True,
            "header_added": True,
        }

    @pytest.mark.asyncio
    async def test_twice(self) -> None:
        document = InMemoryDocument(SAMPLE_TEXT)
        await redact_document(document)
        with pytest.raises(AlreadyRedactedError):
            await redact_document(document)


def test_run_redaction_success():
    report = run_redaction(SAMPLE_TEXT)

    assert report.ok
    assert report.error is None
    assert report.result.total == 3
    assert "[EMAIL REDACTED]" in report.text
    assert "jane.doe@example.com" not in report.text


def test_run_redaction_nothing_found():
    report = run_redaction("Just a plain sentence.")

    assert not report.ok
    assert report.error == NOTHING_FOUND_MESSAGE


def test_run_redaction_already_redacted():
    report = run_redaction(
        "CONFIDENTIAL DOCUMENT [EMAIL REDACTED] [PHONE REDACTED] [SSN REDACTED]"
    )
    assert report.error == "Document has already been redacted."


def test_run_redaction_without_headers():
    report = run_redaction(SAMPLE_TEXT, supports_headers=False)

    assert report.ok
    assert report.document.body_text.startswith("CONFIDENTIAL DOCUMENT\n")


# ── Settings ─────────────────────────────────────────────────────────

def test_settings_defaults():
    s = Settings(_env_file=None)
    assert s.header_marker == "CONFIDENTIAL DOCUMENT"
    style = s.header_style()
    assert style.bold is True
    assert style.size == 16
    assert style.color == "#DC2626"
    assert style.alignment == Alignment.CENTERED


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("DOC_REDACTION_HEADER_MARKER", "INTERNAL ONLY")
    monkeypatch.setenv("DOC_REDACTION_HEADER_FONT_COLOR", "#00ff00")
    monkeypatch.setenv("DOC_REDACTION_TRACKING_MIN_VERSION", "1.4")

    s = Settings(_env_file=None)
    assert s.header_marker == "INTERNAL ONLY"
    assert s.header_font_color == "#00FF00"
    assert s.tracking_min_version == "1.4"


@pytest.mark.parametrize(
    "field,value",
    [
        ("header_marker", "   "),
        ("header_font_color", "red"),
        ("tracking_min_version", "one.five"),
        ("header_font_size", 0),
    ],
)
def test_settings_validation(field, value):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{field: value})


# ── Logging ──────────────────────────────────────────────────────────

def test_structured_formatter_includes_extra():
    logger = logging.getLogger("doc_redaction.test")
    record = logger.makeRecord(
        logger.name,
        logging.INFO,
        __file__,
        1,
        "Redaction completed",
        None,
        None,
        extra={"total": 3, "category": "EMAIL"},
    )

    data = json.loads(StructuredFormatter().format(record))
    assert data["message"] == "Redaction completed"
    assert data["level"] == "INFO"
    assert data["total"] == 3
    assert data["category"] == "EMAIL"
