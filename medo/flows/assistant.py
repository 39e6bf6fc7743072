"""
Conversational assistant: one user message (optionally with an image or PDF
and earlier turns) → one free-text Arabic reply.
"""

import logging

from medo.core.errors import MalformedModelOutput
from medo.flows.common import ModelEngine, check_text_length, parse_request
from medo.schemas.text import AssistantReply, AssistantRequest
from medo.services.file_service import DOCUMENT_TYPES, validate_media
from medo.services.prompt_builder import build_assistant_prompt

logger = logging.getLogger(__name__)


async def ask_assistant(request, engine: ModelEngine) -> AssistantReply:
    request = parse_request(AssistantRequest, request)
    check_text_length(request.prompt)
    if request.file is not None:
        await validate_media(request.file, DOCUMENT_TYPES)

    logger.info(
        f"[ASSISTANT] Starting: {len(request.history)} prior turns, "
        f"file={request.file.mime_type if request.file else 'none'}"
    )
    text = await engine.generate(build_assistant_prompt(request))
    if not text.strip():
        raise MalformedModelOutput("No response from AI.")

    logger.info(f"[ASSISTANT] ✓ Reply ready ({len(text)} chars)")
    return AssistantReply(response=text.strip())
