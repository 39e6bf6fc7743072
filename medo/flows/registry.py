"""
The FlowRequest tagged union and its dispatcher.

A request names its flow in `kind`; `run_flow` validates it against the
matching variant and hands it to that flow.
"""

from typing import Annotated, Any, Awaitable, Callable, Dict, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from medo.core.errors import InvalidInput, describe_validation_error
from medo.flows.assistant import ask_assistant
from medo.flows.common import ModelEngine
from medo.flows.essay import correct_essay
from medo.flows.mind_map import generate_mind_map
from medo.flows.questions import generate_questions
from medo.flows.speech import synthesize_speech
from medo.flows.summarize import summarize_text
from medo.flows.transcribe import transcribe_audio
from medo.schemas.mindmap import GenerateMindMapRequest, MindMap
from medo.schemas.quiz import CorrectEssayRequest, Correction, GenerateQuestionsRequest, QuestionSet
from medo.schemas.speech import SpeechAudio, SynthesizeSpeechRequest, TranscribeRequest, Transcript
from medo.schemas.text import AssistantReply, AssistantRequest, SummarizeRequest, Summary

FlowRequest = Annotated[
    Union[
        AssistantRequest,
        TranscribeRequest,
        SummarizeRequest,
        SynthesizeSpeechRequest,
        GenerateMindMapRequest,
        GenerateQuestionsRequest,
        CorrectEssayRequest,
    ],
    Field(discriminator="kind"),
]

FlowResponse = Union[
    AssistantReply,
    Transcript,
    Summary,
    SpeechAudio,
    MindMap,
    QuestionSet,
    Correction,
]

FLOWS: Dict[str, Callable[[Any, ModelEngine], Awaitable[BaseModel]]] = {
    "assistant": ask_assistant,
    "transcribe": transcribe_audio,
    "summarize": summarize_text,
    "synthesize_speech": synthesize_speech,
    "generate_mind_map": generate_mind_map,
    "generate_questions": generate_questions,
    "correct_essay": correct_essay,
}

_request_adapter: TypeAdapter = TypeAdapter(FlowRequest)


def parse_flow_request(payload: Any) -> BaseModel:
    if isinstance(payload, BaseModel) and getattr(payload, "kind", None) in FLOWS:
        return payload
    try:
        return _request_adapter.validate_python(payload)
    except ValidationError as e:
        raise InvalidInput(describe_validation_error(e), detail=str(e)) from e


async def run_flow(payload: Any, engine: ModelEngine) -> BaseModel:
    request = parse_flow_request(payload)
    return await FLOWS[request.kind](request, engine)
