"""Tests for media text extraction and re-extraction."""

from io import BytesIO

import pytest
from docx import Document

from clarity.core.errors import NotFoundError, StorageError
from clarity.core.media_text import (
    classify_file_type,
    decode_text,
    extract_media_text,
    reextract_media_asset,
)
from tests.fakes.fake_stores import FakeBinaryStore, FakeMediaStore
from tests.fixtures_records import make_media

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def _docx_bytes(*paragraphs: str) -> bytes:
    doc = Document()
    for text in paragraphs:
        doc.add_paragraph(text)
    buffer = BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


@pytest.mark.parametrize(
    "mime_type,expected",
    [
        ("video/mp4", "video"),
        ("audio/mpeg", "audio"),
        ("image/png", "image"),
        ("application/pdf", "pdf"),
        ("text/plain", "document"),
        (DOCX_MIME, "document"),
        ("application/vnd.ms-excel", "other"),
        ("application/zip", "other"),
    ],
)
def test_classify_file_type(mime_type, expected):
    assert classify_file_type(mime_type) == expected


def test_decode_text_handles_bom_and_latin1():
    assert decode_text(b"\xef\xbb\xbfhello") == "hello"
    assert decode_text("café".encode("utf-8")) == "café"
    assert decode_text("café".encode("latin-1")) == "café"


def test_extract_plain_text_and_json():
    assert extract_media_text("notes.txt", "text/plain", b"Agenda") == "Agenda"
    assert extract_media_text("data.json", "application/json", b'{"a": 1}') == '{"a": 1}'


def test_extract_docx_paragraphs():
    raw = _docx_bytes("First paragraph", "", "Second paragraph")

    text = extract_media_text("brief.docx", DOCX_MIME, raw)

    assert text == "First paragraph\nSecond paragraph"


def test_corrupt_docx_yields_none():
    assert extract_media_text("broken.docx", DOCX_MIME, b"not a zip") is None


@pytest.mark.parametrize("mime_type", ["image/png", "application/pdf", "video/mp4"])
def test_binary_types_yield_none(mime_type):
    assert extract_media_text("file.bin", mime_type, b"\x00\x01") is None


class TestReextract:
    @pytest.mark.asyncio
    async def test_reextract_updates_text(self):
        asset = make_media("Notes", file_path="acme/notes.txt", original_filename="notes.txt")
        media_store = FakeMediaStore([asset])
        binary_store = FakeBinaryStore({"acme/notes.txt": b"Renewal agenda"})

        has_text = await reextract_media_asset(asset.id, binary_store, media_store)

        assert has_text is True
        assert media_store.updates == [(asset.id, "Renewal agenda")]

    @pytest.mark.asyncio
    async def test_reextract_unknown_media(self):
        with pytest.raises(NotFoundError):
            await reextract_media_asset("missing", FakeBinaryStore(), FakeMediaStore())

    @pytest.mark.asyncio
    async def test_reextract_missing_file(self):
        asset = make_media()
        media_store = FakeMediaStore([asset])

        with pytest.raises(NotFoundError, match="Stored file is missing"):
            await reextract_media_asset(asset.id, FakeBinaryStore(), media_store)

        assert media_store.updates == []

    @pytest.mark.asyncio
    async def test_reextract_storage_failure(self):
        with pytest.raises(StorageError):
            await reextract_media_asset("m1", FakeBinaryStore(), FakeMediaStore(fail=True))
