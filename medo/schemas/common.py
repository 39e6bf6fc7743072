"""
Medo — Shared Schemas
======================
Building blocks used by every flow: inline media references, chat turns,
and the JSON envelopes the API answers with.
"""

from __future__ import annotations

import base64
import binascii
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import AfterValidator, BaseModel, Field, PrivateAttr, model_validator


def _not_blank(v: str) -> str:
    if not v.strip():
        raise ValueError("must not be empty")
    return v


# Non-empty after trimming; the original text is kept as given.
NonBlankStr = Annotated[str, AfterValidator(_not_blank)]


# ── Media ────────────────────────────────────────────────────────────────────

class MediaReference(BaseModel):
    """
    A self-contained file: `data:<mime>;base64,<payload>`.
    `mime_type` may be omitted, in which case it is read from the URI.
    """
    url: str = Field(..., description="Data URI: 'data:<mimetype>;base64,<encoded_data>'")
    mime_type: Optional[str] = Field(default=None, description="e.g. 'image/png', 'application/pdf', 'audio/webm'")

    _data: bytes = PrivateAttr(default=b"")

    @model_validator(mode="after")
    def decode_data_uri(self) -> MediaReference:
        header, sep, payload = self.url.partition(",")
        if not sep or not header.startswith("data:") or not header.endswith(";base64"):
            raise ValueError("url must be a base64 data URI ('data:<mime>;base64,<payload>')")

        uri_mime = header[len("data:"):].split(";", 1)[0].strip().lower()
        if "/" not in uri_mime:
            raise ValueError(f"data URI has no valid MIME type: '{uri_mime}'")

        if self.mime_type is None:
            self.mime_type = uri_mime
        elif self.mime_type.strip().lower() != uri_mime:
            raise ValueError(
                f"mime_type '{self.mime_type}' does not match the data URI ('{uri_mime}')"
            )
        else:
            self.mime_type = uri_mime

        try:
            data = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"data URI payload is not valid base64: {e}")
        if not data:
            raise ValueError("data URI payload is empty")

        self._data = data
        return self

    @property
    def data(self) -> bytes:
        """Decoded payload bytes."""
        return self._data

    def matches(self, *accepted: str) -> bool:
        """True if the MIME type is one of `accepted` ('image/' entries match the whole class)."""
        return any(
            self.mime_type == a or (a.endswith("/") and self.mime_type.startswith(a))
            for a in accepted
        )

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> MediaReference:
        encoded = base64.b64encode(data).decode("ascii")
        return cls(url=f"data:{mime_type};base64,{encoded}")


# ── Chat History ─────────────────────────────────────────────────────────────

class ChatRole(str, Enum):
    user = "user"
    model = "model"


class ChatTurn(BaseModel):
    """One prior message in an assistant conversation."""
    role: ChatRole
    text: NonBlankStr


# ── Envelopes ────────────────────────────────────────────────────────────────

class ProcessingMeta(BaseModel):
    """Metadata about the processing run."""
    processing_time: str = Field(..., description="e.g. '3.2s'")


class FlowEnvelope(BaseModel):
    """Success envelope for the tagged /flows endpoint."""
    status: str = "success"
    kind: str
    meta: ProcessingMeta
    data: Any


class ErrorResponse(BaseModel):
    """
    Standard error envelope.
    Every failure leaving the API has this shape.
    """
    status: str = "error"
    message: str
    detail: Optional[str] = None
