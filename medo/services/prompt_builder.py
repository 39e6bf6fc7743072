"""
Medo — Prompt Builder
======================
Turns a validated flow request into a `Prompt`: an ordered tuple of typed
segments plus generation settings.

Segment order is the same for every flow:
  media (at most one) → instruction text → the user's literal text
Instructions and user text always travel in separate segments.
Flows that return JSON set `response_schema`; the engine switches the model
into schema-constrained output for them.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Type, Union

from pydantic import BaseModel

from medo.schemas.common import ChatTurn, MediaReference
from medo.schemas.mindmap import GenerateMindMapRequest, MindMap
from medo.schemas.quiz import (
    CorrectEssayRequest,
    Correction,
    GenerateQuestionsRequest,
    QuestionSet,
    QuestionType,
)
from medo.schemas.speech import TranscribeRequest
from medo.schemas.text import AssistantRequest, SummarizeRequest, Summary


# ── Segments ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TextSegment:
    text: str


@dataclass(frozen=True)
class MediaSegment:
    mime_type: str
    data: bytes

    @classmethod
    def from_reference(cls, media: MediaReference) -> "MediaSegment":
        return cls(mime_type=media.mime_type, data=media.data)


Segment = Union[TextSegment, MediaSegment]


@dataclass(frozen=True)
class Prompt:
    segments: Tuple[Segment, ...]
    system_instruction: Optional[str] = None
    history: Tuple[ChatTurn, ...] = ()
    temperature: Optional[float] = None
    response_schema: Optional[Type[BaseModel]] = None

    @property
    def wants_json(self) -> bool:
        return self.response_schema is not None


def _segments(media: Optional[MediaReference], *texts: Optional[str]) -> Tuple[Segment, ...]:
    parts: list = []
    if media is not None:
        parts.append(MediaSegment.from_reference(media))
    parts.extend(TextSegment(t) for t in texts if t)
    return tuple(parts)


# ── Temperatures ─────────────────────────────────────────────────────────────
TRANSCRIBE_TEMPERATURE = 0.0
SUMMARIZE_TEMPERATURE = 0.2
MIND_MAP_TEMPERATURE = 0.4
QUESTIONS_TEMPERATURE = 0.3
CORRECT_ESSAY_TEMPERATURE = 0.0


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# INSTRUCTIONS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

ASSISTANT_SYSTEM_PROMPT = (
    "You are Medo.Ai, a helpful and versatile AI assistant.\n"
    "Your capabilities include:\n"
    "- Explaining the content of images and PDF documents.\n"
    "- Solving complex questions in accounting, mathematics, and other sciences.\n"
    "- Correcting and refactoring code, providing explanations.\n"
    "- Answering questions based on the content of provided files.\n\n"
    "Engage in a friendly and helpful conversation. Your responses should be in Arabic."
)

TRANSCRIBE_INSTRUCTION = (
    "Transcribe this audio file verbatim, in the language that is spoken. "
    "Return only the transcript."
)

SUMMARIZE_INSTRUCTION = (
    "You are an expert in text summarization. Provide a concise summary of the text below.\n"
    "The summary MUST be in the same language as the source text, which is '{language}'.\n"
    "Respond with a JSON object with a single field 'summary'.\n\n"
    "Source Text:"
)

MIND_MAP_INSTRUCTION = (
    "You are an expert in structuring information and creating mind maps.\n"
    "Based on the provided context (text and/or a file), generate a mind map.\n\n"
    "- Identify the core subject and use it as the 'title'.\n"
    "- Extract the most important high-level concepts as 'main_ideas' (at least one).\n"
    "- For each main idea, extract key details or related points as 'sub_points'.\n"
    "- Write every label in the same language as the context.\n\n"
    "Respond with a JSON object matching the schema: "
    "{title, main_ideas: [{text, sub_points: [{text}]}]}."
)

QUESTIONS_INSTRUCTION = (
    "You are an expert educator and exam creator. Generate questions based ONLY on the "
    "provided context (text and/or file content).\n\n"
    "Instructions:\n"
    "1. {language_rule}\n"
    "2. Generate exactly {count} '{question_type}' questions of '{difficulty}' difficulty.\n"
    "3. {type_rule}\n"
    "4. Every question has: 'question', 'options', 'correct_answer', 'explanation', "
    "and 'type' set to '{question_type}'.\n"
    "5. Respond with a JSON object: {{\"questions\": [...]}}."
)

_MULTIPLE_CHOICE_RULE = (
    "For multiple-choice questions: provide exactly 4 distinct options; 'correct_answer' "
    "must be copied exactly from one of the options; 'explanation' says why it is correct."
)
_ESSAY_RULE = (
    "For essay questions: 'options' is an empty list; 'correct_answer' is a comprehensive "
    "ideal answer; 'explanation' outlines the key points the ideal answer should cover."
)

CORRECT_ESSAY_INSTRUCTION = (
    "You are an expert AI teacher. Evaluate a user's answer to an essay question.\n\n"
    "Instructions:\n"
    "1. Compare the User's Answer to the Ideal Answer for the given Question.\n"
    "2. Decide whether the user's answer is substantially correct. It does not have to match "
    "word for word, but it must capture the main points of the ideal answer. "
    "Set 'is_correct' accordingly.\n"
    "3. Write clear, constructive 'feedback'. If correct, praise the answer and say briefly why "
    "it is good. If incorrect or incomplete, gently point out what is missing or wrong and guide "
    "the user toward the ideal answer.\n"
    "4. The user is interacting in Arabic. All feedback MUST be in ARABIC.\n"
    "5. Respond with a JSON object: {\"is_correct\": boolean, \"feedback\": string}."
)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BUILDERS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def build_assistant_prompt(request: AssistantRequest) -> Prompt:
    return Prompt(
        segments=_segments(request.file, request.prompt),
        system_instruction=ASSISTANT_SYSTEM_PROMPT,
        history=tuple(request.history),
    )


def build_transcribe_prompt(request: TranscribeRequest) -> Prompt:
    return Prompt(
        segments=_segments(request.audio, TRANSCRIBE_INSTRUCTION),
        temperature=TRANSCRIBE_TEMPERATURE,
    )


def build_summarize_prompt(request: SummarizeRequest) -> Prompt:
    return Prompt(
        segments=_segments(
            None,
            SUMMARIZE_INSTRUCTION.format(language=request.language),
            request.text,
        ),
        temperature=SUMMARIZE_TEMPERATURE,
        response_schema=Summary,
    )


def build_mind_map_prompt(request: GenerateMindMapRequest) -> Prompt:
    return Prompt(
        segments=_segments(
            request.file,
            MIND_MAP_INSTRUCTION,
            f"Context:\n{request.text}" if request.text else None,
        ),
        temperature=MIND_MAP_TEMPERATURE,
        response_schema=MindMap,
    )


def build_questions_prompt(request: GenerateQuestionsRequest) -> Prompt:
    if request.language:
        language_rule = f"Write all questions, options, answers and explanations in '{request.language}'."
    else:
        language_rule = (
            "Detect the language of the context and write all questions, options, answers "
            "and explanations in that same language."
        )
    type_rule = (
        _MULTIPLE_CHOICE_RULE
        if request.question_type is QuestionType.multiple_choice
        else _ESSAY_RULE
    )
    instruction = QUESTIONS_INSTRUCTION.format(
        language_rule=language_rule,
        count=request.count,
        question_type=request.question_type.value,
        difficulty=request.difficulty.value,
        type_rule=type_rule,
    )
    return Prompt(
        segments=_segments(
            request.file,
            instruction,
            f"Source Text:\n{request.text}" if request.text else None,
        ),
        temperature=QUESTIONS_TEMPERATURE,
        response_schema=QuestionSet,
    )


def build_correct_essay_prompt(request: CorrectEssayRequest) -> Prompt:
    return Prompt(
        segments=_segments(
            None,
            CORRECT_ESSAY_INSTRUCTION,
            f"Question:\n{request.question}",
            f"Ideal Answer:\n{request.ideal_answer}",
            f"User's Answer to Evaluate:\n{request.user_answer}",
        ),
        temperature=CORRECT_ESSAY_TEMPERATURE,
        response_schema=Correction,
    )
