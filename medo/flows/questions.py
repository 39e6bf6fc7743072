import logging

from medo.core.errors import MalformedModelOutput
from medo.flows.common import ModelEngine, check_text_length, parse_request
from medo.schemas.quiz import GenerateQuestionsRequest, QuestionSet
from medo.services.file_service import DOCUMENT_TYPES, validate_media
from medo.services.json_recovery import parse_model_output
from medo.services.prompt_builder import build_questions_prompt

logger = logging.getLogger(__name__)


async def generate_questions(request, engine: ModelEngine) -> QuestionSet:
    """
    Generate `count` questions of one type from text and/or an image/PDF.

    Every question must satisfy its type's shape (4 options + matching answer
    for multiple-choice, no options for essay) and be of the requested type.
    Fewer than `count` questions is accepted with a warning; none is an error;
    extras are dropped.
    """
    request = parse_request(GenerateQuestionsRequest, request)
    check_text_length(request.text)
    if request.file is not None:
        await validate_media(request.file, DOCUMENT_TYPES)

    logger.info(
        f"[QUESTIONS] Starting: {request.count} {request.question_type.value} questions, "
        f"difficulty={request.difficulty.value}"
    )
    raw = await engine.generate(build_questions_prompt(request))
    questions = parse_model_output(QuestionSet, raw).questions

    if not questions:
        raise MalformedModelOutput("AI returned no questions.")

    wrong_type = [i for i, q in enumerate(questions, start=1) if q.type is not request.question_type]
    if wrong_type:
        raise MalformedModelOutput(
            f"AI returned questions of the wrong type (expected '{request.question_type.value}').",
            detail=f"question numbers: {wrong_type}",
        )

    if len(questions) > request.count:
        logger.warning(f"[QUESTIONS] Got {len(questions)} questions, keeping the first {request.count}")
        questions = questions[:request.count]
    elif len(questions) < request.count:
        logger.warning(f"[QUESTIONS] Got only {len(questions)} of {request.count} requested questions")

    logger.info(f"[QUESTIONS] ✓ Generated {len(questions)} questions")
    return QuestionSet(questions=questions)
