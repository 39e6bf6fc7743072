from typing import List

from pydantic import BaseModel, Field

from medo.schemas.common import MediaReference, NonBlankStr


class ImagesToPdfRequest(BaseModel):
    """Combine images into one PDF, one image per page."""
    name: NonBlankStr = Field(..., description="File name without the .pdf extension")
    images: List[MediaReference] = Field(..., min_length=1)


class PdfDocument(BaseModel):
    name: str
    page_count: int
    pdf_data_uri: str = Field(..., description="'data:application/pdf;base64,<encoded_data>'")
