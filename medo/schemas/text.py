from pydantic import BaseModel, Field
from typing import List, Literal, Optional

from medo.schemas.common import ChatTurn, MediaReference, NonBlankStr


# ── Assistant ────────────────────────────────────────────────────────────────

class AssistantRequest(BaseModel):
    """One user message to the assistant, with optional attachment and history."""
    kind: Literal["assistant"] = "assistant"
    prompt: NonBlankStr = Field(..., description="The user's latest message")
    file: Optional[MediaReference] = Field(default=None, description="An optional image or PDF")
    history: List[ChatTurn] = Field(default_factory=list, description="Earlier turns, oldest first")


class AssistantReply(BaseModel):
    response: str


# ── Summarization ────────────────────────────────────────────────────────────

class SummarizeRequest(BaseModel):
    kind: Literal["summarize"] = "summarize"
    text: NonBlankStr = Field(..., description="The source text to summarize")
    language: NonBlankStr = Field(default="ar", description="Language of the source text, e.g. 'ar', 'en'")


class Summary(BaseModel):
    summary: NonBlankStr = Field(..., description="Concise summary in the source language")
