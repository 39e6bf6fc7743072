import base64

import fitz
import pytest
from pydantic import ValidationError

from medo.core.config import settings
from medo.core.errors import InvalidInput
from medo.schemas.common import MediaReference
from medo.services.file_service import (
    AUDIO_TYPES,
    DOCUMENT_TYPES,
    images_to_pdf,
    validate_media,
)


# ── MediaReference ───────────────────────────────────────────────────────────

def test_mime_type_is_read_from_the_uri(png_bytes):
    encoded = base64.b64encode(png_bytes).decode()
    media = MediaReference(url=f"data:image/PNG;base64,{encoded}")
    assert media.mime_type == "image/png"
    assert media.data == png_bytes


def test_explicit_mime_type_must_match_the_uri(png_bytes):
    encoded = base64.b64encode(png_bytes).decode()
    with pytest.raises(ValidationError):
        MediaReference(url=f"data:image/png;base64,{encoded}", mime_type="application/pdf")


@pytest.mark.parametrize("url", [
    "https://example.com/photo.png",
    "data:image/png,not-base64-marked",
    "data:image/png;base64,@@@not base64@@@",
    "data:image/png;base64,",
    "data:;base64,aGVsbG8=",
])
def test_malformed_data_uris_are_rejected(url):
    with pytest.raises(ValidationError):
        MediaReference(url=url)


def test_matches_accepts_classes_and_exact_types(png_media, pdf_media):
    assert png_media.matches("image/")
    assert pdf_media.matches(*DOCUMENT_TYPES)
    assert not pdf_media.matches("image/")
    assert not png_media.matches(*AUDIO_TYPES)


# ── validate_media ───────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_document_types_accept_images_and_pdfs(png_media, pdf_media):
    assert await validate_media(png_media, DOCUMENT_TYPES) is png_media
    assert await validate_media(pdf_media, DOCUMENT_TYPES) is pdf_media


@pytest.mark.asyncio
async def test_audio_is_not_a_document(wav_media):
    with pytest.raises(InvalidInput, match="Unsupported file type"):
        await validate_media(wav_media, DOCUMENT_TYPES)


@pytest.mark.asyncio
async def test_oversized_file_is_rejected(png_media, monkeypatch):
    monkeypatch.setattr(settings, "MAX_FILE_SIZE_MB", 0)
    with pytest.raises(InvalidInput, match="too large"):
        await validate_media(png_media, DOCUMENT_TYPES)


@pytest.mark.asyncio
async def test_pdf_without_magic_bytes_is_rejected():
    fake = MediaReference.from_bytes(b"this is plain text, not a pdf", "application/pdf")
    with pytest.raises(InvalidInput, match="magic bytes"):
        await validate_media(fake, DOCUMENT_TYPES)


@pytest.mark.asyncio
async def test_pdf_over_the_page_limit_is_rejected(pdf_media, monkeypatch):
    monkeypatch.setattr(settings, "MAX_PDF_PAGES", 0)
    with pytest.raises(InvalidInput, match="pages"):
        await validate_media(pdf_media, DOCUMENT_TYPES)


@pytest.mark.asyncio
async def test_tiny_image_is_rejected(tiny_png_media):
    with pytest.raises(InvalidInput, match="too small"):
        await validate_media(tiny_png_media, DOCUMENT_TYPES)


@pytest.mark.asyncio
async def test_undecodable_image_is_rejected():
    broken = MediaReference.from_bytes(b"\x89PNG garbage", "image/png")
    with pytest.raises(InvalidInput, match="decoded"):
        await validate_media(broken, DOCUMENT_TYPES)


# ── images_to_pdf ────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_images_become_one_page_each(png_media):
    document = await images_to_pdf("notes", [png_media, png_media])

    assert document.name == "notes.pdf"
    assert document.page_count == 2

    prefix = "data:application/pdf;base64,"
    assert document.pdf_data_uri.startswith(prefix)
    pdf = base64.b64decode(document.pdf_data_uri[len(prefix):])
    with fitz.open(stream=pdf, filetype="pdf") as doc:
        assert doc.page_count == 2


@pytest.mark.asyncio
async def test_pdf_extension_is_not_doubled(png_media):
    document = await images_to_pdf("Chapter 3.pdf", [png_media])
    assert document.name == "Chapter 3.pdf"


@pytest.mark.asyncio
async def test_only_images_can_be_converted(png_media, pdf_media):
    with pytest.raises(InvalidInput):
        await images_to_pdf("mixed", [png_media, pdf_media])
