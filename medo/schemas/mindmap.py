from __future__ import annotations
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Literal, Optional

from medo.schemas.common import MediaReference, NonBlankStr


# ── Request ──────────────────────────────────────────────────────────────────

class GenerateMindMapRequest(BaseModel):
    """Request body for mind map generation. Text, a file, or both."""
    kind: Literal["generate_mind_map"] = "generate_mind_map"
    text: Optional[str] = Field(default=None, description="Educational text to structure as a mind map")
    file: Optional[MediaReference] = Field(default=None, description="An image or PDF to use as context")

    @field_validator("text")
    @classmethod
    def blank_text_is_absent(cls, v: Optional[str]) -> Optional[str]:
        return v if v and v.strip() else None

    @model_validator(mode="after")
    def require_content(self):
        if self.text is None and self.file is None:
            raise ValueError("Provide text, a file, or both.")
        return self


# ── Response ─────────────────────────────────────────────────────────────────

class SubPoint(BaseModel):
    id: str = ""
    text: NonBlankStr = Field(..., description="A sub-point related to the main idea")


class MainIdea(BaseModel):
    id: str = ""
    text: NonBlankStr = Field(..., description="A main idea branching from the title")
    sub_points: List[SubPoint] = Field(..., description="Key details of the main idea")


class MindMap(BaseModel):
    """Two-level mind map: title → main ideas → sub-points."""
    title: NonBlankStr = Field(..., description="The central subject")
    main_ideas: List[MainIdea] = Field(..., min_length=1)
