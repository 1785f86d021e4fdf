"""Tests for the in-memory document host."""

import asyncio

import pytest

from doc_redaction.core.definitions import ChangeTrackingMode, InsertLocation
from doc_redaction.core.exceptions import HostCapabilityError, HostError
from doc_redaction.engine.document import ParagraphStyle
from doc_redaction.engine.memory_driver import InMemoryDocument


class TestFlushDiscipline:
    @pytest.mark.asyncio
    async def test_writes_invisible_until_flush(self) -> None:
        document = InMemoryDocument("hello world")
        document.insert_body_paragraph("TOP", ParagraphStyle(), InsertLocation.START)
        document.set_change_tracking_mode(ChangeTrackingMode.TRACK_ALL)

        assert await document.get_full_text() == "hello world"
        assert await document.get_change_tracking_mode() == ChangeTrackingMode.OFF

        await document.flush()

        assert await document.get_full_text() == "TOP\nhello world"
        assert await document.get_change_tracking_mode() == ChangeTrackingMode.TRACK_ALL

    @pytest.mark.asyncio
    async def test_search_results_resolve_on_flush(self) -> None:
        document = InMemoryDocument("Ab ab AB")
        results = document.search_literal("ab")

        assert not results.loaded
        with pytest.raises(HostError):
            results.items

        await document.flush()
        assert len(results) == 3

    @pytest.mark.asyncio
    async def test_case_sensitive_and_whole_word(self) -> None:
        document = InMemoryDocument("cat Cat concat")
        sensitive = document.search_literal("cat", case_sensitive=True)
        whole = document.search_literal("cat", whole_word=True)
        await document.flush()

        assert len(sensitive) == 2
        assert len(whole) == 2

    @pytest.mark.asyncio
    async def test_replacements_in_one_flush(self) -> None:
        document = InMemoryDocument("x1 x1 x1")
        results = document.search_literal("x1")
        await document.flush()

        for handle in results.items:
            document.replace_occurrence(handle, "[LONGER MARKER]")
        await document.flush()

        assert document.body_text == "[LONGER MARKER] [LONGER MARKER] [LONGER MARKER]"

    @pytest.mark.asyncio
    async def test_stale_handle(self) -> None:
        document = InMemoryDocument("secret here")
        results = document.search_literal("secret")
        await document.flush()

        document.insert_body_paragraph("TOP", ParagraphStyle(), InsertLocation.START)
        await document.flush()

        document.replace_occurrence(results.items[0], "X")
        with pytest.raises(HostError, match="stale"):
            await document.flush()
        assert document.body_text == "TOP\nsecret here"

    @pytest.mark.asyncio
    async def test_failed_flush_drops_remaining_requests(self) -> None:
        document = InMemoryDocument("secret")
        results = document.search_literal("secret")
        await document.flush()
        document.insert_body_paragraph("TOP", ParagraphStyle(), InsertLocation.END)
        await document.flush()

        document.replace_occurrence(results.items[0], "X")
        document.set_change_tracking_mode(ChangeTrackingMode.TRACK_ALL)
        with pytest.raises(HostError):
            await document.flush()

        assert document.pending_count == 0
        assert document.change_tracking_mode == ChangeTrackingMode.OFF

    def test_empty_search_rejected(self) -> None:
        with pytest.raises(HostError):
            InMemoryDocument("text").search_literal("")


class TestHostFeatures:
    def test_capability_versions(self) -> None:
        document = InMemoryDocument(api_version="1.10")

        assert document.capability_available("DocumentApi", "1.5")
        assert document.capability_available("DocumentApi", "1.10")
        assert not document.capability_available("DocumentApi", "1.11")
        assert not document.capability_available("OtherApi", "1.0")

    def test_headers_unsupported(self) -> None:
        document = InMemoryDocument(supports_headers=False)
        with pytest.raises(HostCapabilityError):
            document.insert_header_paragraph("H", ParagraphStyle())

    @pytest.mark.asyncio
    async def test_full_text_includes_header(self) -> None:
        document = InMemoryDocument("body", header=["existing"])
        document.insert_header_paragraph("new", ParagraphStyle(bold=True))
        await document.flush()

        assert await document.get_full_text() == "new\nexisting\nbody"

    @pytest.mark.asyncio
    async def test_trailing_break(self) -> None:
        document = InMemoryDocument("body")
        document.insert_body_paragraph(
            "TOP", ParagraphStyle(), InsertLocation.START, trailing_break=True
        )
        await document.flush()
        assert document.body_text == "TOP\n\nbody"

    @pytest.mark.asyncio
    async def test_revisions_only_while_tracking(self) -> None:
        document = InMemoryDocument("a b")
        first = document.search_literal("a")
        await document.flush()
        document.replace_occurrence(first.items[0], "A")
        await document.flush()
        assert document.revisions == []

        document.set_change_tracking_mode(ChangeTrackingMode.TRACK_ALL)
        second = document.search_literal("b")
        await document.flush()
        document.replace_occurrence(second.items[0], "B")
        await document.flush()

        assert [(r.kind, r.text) for r in document.revisions] == [
            ("deletion", "b"),
            ("insertion", "B"),
        ]

    @pytest.mark.asyncio
    async def test_wait_until_ready(self) -> None:
        document = InMemoryDocument(ready=False)
        document.mark_ready()
        await document.wait_until_ready()

    def test_checksum_tracks_mode(self) -> None:
        document = InMemoryDocument("same")
        other = InMemoryDocument("same")
        assert document.checksum() == other.checksum()
        other._mode = ChangeTrackingMode.TRACK_ALL
        assert document.checksum() != other.checksum()


class TestReadiness:
    @pytest.mark.asyncio
    async def test_waiter_wakes_on_mark_ready(self) -> None:
        document = InMemoryDocument(ready=False)
        waiter = asyncio.create_task(document.wait_until_ready())

        await asyncio.sleep(0)
        assert not waiter.done()
        assert document.ready is False

        document.mark_ready()
        await asyncio.wait_for(waiter, timeout=1.0)
        assert document.ready is True

    def test_tracking_modes(self) -> None:
        assert [m.value for m in ChangeTrackingMode] == ["off", "trackAll"]
