import logging

from medo.core.errors import MalformedModelOutput
from medo.flows.common import ModelEngine, parse_request
from medo.schemas.speech import TranscribeRequest, Transcript
from medo.services.file_service import AUDIO_TYPES, validate_media
from medo.services.prompt_builder import build_transcribe_prompt

logger = logging.getLogger(__name__)


async def transcribe_audio(request, engine: ModelEngine) -> Transcript:
    """Audio recording → transcript. One blocking call, no partial results."""
    request = parse_request(TranscribeRequest, request)
    await validate_media(request.audio, AUDIO_TYPES)

    logger.info(f"[TRANSCRIBE] Starting: {request.audio.mime_type}, {len(request.audio.data)} bytes")
    text = await engine.generate(build_transcribe_prompt(request))
    if not text.strip():
        raise MalformedModelOutput("AI returned an empty transcript.")

    logger.info(f"[TRANSCRIBE] ✓ {len(text)} chars")
    return Transcript(text=text.strip())
