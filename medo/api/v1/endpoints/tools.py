from fastapi import APIRouter

from medo.schemas.tools import ImagesToPdfRequest, PdfDocument
from medo.services.file_service import images_to_pdf

router = APIRouter(prefix="/tools", tags=["Tools"])


@router.post("/images-to-pdf", response_model=PdfDocument)
async def convert_images_to_pdf(request: ImagesToPdfRequest):
    """Combine images into one PDF, one image per page."""
    return await images_to_pdf(request.name, request.images)
