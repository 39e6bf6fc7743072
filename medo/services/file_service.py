import io
import base64
import logging
import asyncio
from typing import List, Sequence, Tuple

import fitz  # PyMuPDF
from PIL import Image, UnidentifiedImageError

from medo.core.config import settings
from medo.core.errors import InvalidInput
from medo.schemas.common import MediaReference
from medo.schemas.tools import PdfDocument

logger = logging.getLogger(__name__)

# ── Accepted media classes ───────────────────────────────────────────────────
IMAGE = "image/"
PDF = "application/pdf"
AUDIO = "audio/"

DOCUMENT_TYPES = (IMAGE, PDF)
AUDIO_TYPES = (AUDIO,)

PDF_MAGIC = b"%PDF"
MIN_IMAGE_SIDE = 50

# Pillow has no decoder for these without plugins; Gemini reads them fine.
_UNCHECKED_IMAGES = {"image/heic", "image/heif"}


async def validate_media(media: MediaReference, accepted: Sequence[str]) -> MediaReference:
    """
    Check an inline file before it is sent to the model:
    1. MIME type must belong to one of the `accepted` classes
    2. Decoded size must not exceed MAX_FILE_SIZE_MB
    3. PDFs must carry the %PDF magic bytes, open, and stay under MAX_PDF_PAGES
    4. Images must decode and be large enough to hold readable content
    Raises InvalidInput on any violation.
    """
    if not media.matches(*accepted):
        raise InvalidInput(
            f"Unsupported file type '{media.mime_type}'. "
            f"Accepted: {', '.join(a + '*' if a.endswith('/') else a for a in accepted)}."
        )

    max_bytes = settings.MAX_FILE_SIZE_MB * 1024 * 1024
    if len(media.data) > max_bytes:
        raise InvalidInput(
            f"File too large ({len(media.data) / (1024 * 1024):.1f} MB). "
            f"Maximum is {settings.MAX_FILE_SIZE_MB} MB."
        )

    if media.mime_type == PDF:
        await asyncio.to_thread(_check_pdf, media.data)
    elif media.mime_type.startswith(IMAGE) and media.mime_type not in _UNCHECKED_IMAGES:
        await asyncio.to_thread(_check_image, media.data)

    return media


def _check_pdf(content: bytes) -> None:
    if not content[:4].startswith(PDF_MAGIC):
        raise InvalidInput("File does not appear to be a valid PDF (invalid magic bytes).")

    try:
        with fitz.open(stream=content, filetype="pdf") as doc:
            page_count = doc.page_count
    except Exception as e:
        raise InvalidInput("PDF could not be opened.", detail=str(e)) from e

    if page_count == 0:
        raise InvalidInput("PDF has no pages.")
    if page_count > settings.MAX_PDF_PAGES:
        raise InvalidInput(f"PDF too large (>{settings.MAX_PDF_PAGES} pages).")


def _check_image(content: bytes) -> None:
    try:
        with Image.open(io.BytesIO(content)) as image:
            w, h = image.size
    except (UnidentifiedImageError, OSError) as e:
        raise InvalidInput("Image could not be decoded.", detail=str(e)) from e

    if w < MIN_IMAGE_SIDE or h < MIN_IMAGE_SIDE:
        raise InvalidInput("Image too small to contain readable content.")


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# IMAGES → PDF
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

async def images_to_pdf(name: str, images: List[MediaReference]) -> PdfDocument:
    """
    Combine images into one A4 PDF: one image per page, scaled to fit
    and centered, in the order given.
    """
    if not images:
        raise InvalidInput("Select at least one image.")
    for media in images:
        if not media.matches(IMAGE):
            raise InvalidInput(f"Only images can be converted to PDF. Got: '{media.mime_type}'")

    file_name = name.strip()
    if file_name.lower().endswith(".pdf"):
        file_name = file_name[:-4]
    file_name = f"{file_name}.pdf"

    pdf_bytes, page_count = await asyncio.to_thread(_build_pdf, [m.data for m in images])
    logger.info(f"[PDF] ✓ {file_name} — {page_count} pages")

    encoded = base64.b64encode(pdf_bytes).decode("ascii")
    return PdfDocument(
        name=file_name,
        page_count=page_count,
        pdf_data_uri=f"data:application/pdf;base64,{encoded}",
    )


def _build_pdf(images: List[bytes]) -> Tuple[bytes, int]:
    a4 = fitz.paper_rect("a4")
    with fitz.open() as doc:
        for data in images:
            page = doc.new_page(width=a4.width, height=a4.height)
            page.insert_image(page.rect, stream=_to_jpeg(data), keep_proportion=True)
        return doc.tobytes(), doc.page_count


def _to_jpeg(content: bytes) -> bytes:
    """Decode any Pillow-readable image and re-encode it as RGB JPEG."""
    try:
        with Image.open(io.BytesIO(content)) as image:
            rgb = image.convert("RGB")
    except (UnidentifiedImageError, OSError) as e:
        raise InvalidInput("Image could not be decoded.", detail=str(e)) from e

    out = io.BytesIO()
    rgb.save(out, format="JPEG", quality=90)
    return out.getvalue()
