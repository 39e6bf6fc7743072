import time
import asyncio
import logging
from typing import Any, Awaitable, Dict, TypeVar

from fastapi import APIRouter, Body, Depends

from medo.api.v1.deps import get_engine
from medo.core.config import settings
from medo.core.errors import DeadlineExceeded
from medo.flows.assistant import ask_assistant
from medo.flows.common import ModelEngine
from medo.flows.essay import correct_essay
from medo.flows.mind_map import generate_mind_map
from medo.flows.questions import generate_questions
from medo.flows.registry import parse_flow_request, run_flow
from medo.flows.speech import synthesize_speech
from medo.flows.summarize import summarize_text
from medo.flows.transcribe import transcribe_audio
from medo.schemas.common import FlowEnvelope, ProcessingMeta
from medo.schemas.mindmap import GenerateMindMapRequest, MindMap
from medo.schemas.quiz import CorrectEssayRequest, Correction, GenerateQuestionsRequest, QuestionSet
from medo.schemas.speech import SpeechAudio, SynthesizeSpeechRequest, TranscribeRequest, Transcript
from medo.schemas.text import AssistantReply, AssistantRequest, SummarizeRequest, Summary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/flows", tags=["Flows"])

T = TypeVar("T")


async def _with_deadline(call: Awaitable[T]) -> T:
    """The flows set no timeout of their own; the API puts one around each call."""
    try:
        return await asyncio.wait_for(call, timeout=settings.AI_TIMEOUT_SECONDS)
    except asyncio.TimeoutError as e:
        raise DeadlineExceeded(
            f"AI processing timed out after {settings.AI_TIMEOUT_SECONDS}s.",
            detail="Try a shorter text or a smaller file.",
        ) from e


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# 1. ASSISTANT
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@router.post("/assistant", response_model=AssistantReply)
async def assistant(request: AssistantRequest, engine: ModelEngine = Depends(get_engine)):
    """Chat with the assistant, optionally about an image or PDF."""
    return await _with_deadline(ask_assistant(request, engine))


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# 2. SPEECH
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@router.post("/transcribe", response_model=Transcript)
async def transcribe(request: TranscribeRequest, engine: ModelEngine = Depends(get_engine)):
    """Transcribe an audio recording."""
    return await _with_deadline(transcribe_audio(request, engine))


@router.post("/speech", response_model=SpeechAudio)
async def speech(request: SynthesizeSpeechRequest, engine: ModelEngine = Depends(get_engine)):
    """Read text aloud with one of the prebuilt voices."""
    return await _with_deadline(synthesize_speech(request, engine))


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# 3. STUDY TOOLS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@router.post("/summarize", response_model=Summary)
async def summarize(request: SummarizeRequest, engine: ModelEngine = Depends(get_engine)):
    """Summarize text in its own language."""
    return await _with_deadline(summarize_text(request, engine))


@router.post("/mind-map", response_model=MindMap)
async def mind_map(request: GenerateMindMapRequest, engine: ModelEngine = Depends(get_engine)):
    """Generate a mind map from text and/or an image/PDF."""
    return await _with_deadline(generate_mind_map(request, engine))


@router.post("/questions", response_model=QuestionSet)
async def questions(request: GenerateQuestionsRequest, engine: ModelEngine = Depends(get_engine)):
    """Generate multiple-choice or essay questions."""
    return await _with_deadline(generate_questions(request, engine))


@router.post("/correct-essay", response_model=Correction)
async def essay(request: CorrectEssayRequest, engine: ModelEngine = Depends(get_engine)):
    """Grade an essay answer against the ideal answer."""
    return await _with_deadline(correct_essay(request, engine))


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# 4. TAGGED DISPATCH
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@router.post("", response_model=FlowEnvelope)
async def run(payload: Dict[str, Any] = Body(...), engine: ModelEngine = Depends(get_engine)):
    """Run any flow; the body's `kind` picks which one."""
    start = time.perf_counter()
    request = parse_flow_request(payload)
    result = await _with_deadline(run_flow(request, engine))
    elapsed = time.perf_counter() - start

    logger.info(f"[FLOWS] ✓ {request.kind} — {elapsed:.1f}s")
    return FlowEnvelope(
        kind=request.kind,
        meta=ProcessingMeta(processing_time=f"{elapsed:.1f}s"),
        data=result.model_dump(mode="json"),
    )
