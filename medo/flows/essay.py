import logging

from medo.flows.common import ModelEngine, check_text_length, parse_request
from medo.schemas.quiz import CorrectEssayRequest, Correction
from medo.services.json_recovery import parse_model_output
from medo.services.prompt_builder import build_correct_essay_prompt

logger = logging.getLogger(__name__)


async def correct_essay(request, engine: ModelEngine) -> Correction:
    """Holistic grading of a free-text answer against the ideal answer."""
    request = parse_request(CorrectEssayRequest, request)
    for text in (request.question, request.ideal_answer, request.user_answer):
        check_text_length(text)

    logger.info("[ESSAY] Grading answer...")
    raw = await engine.generate(build_correct_essay_prompt(request))
    correction = parse_model_output(Correction, raw)

    logger.info(f"[ESSAY] ✓ is_correct={correction.is_correct}")
    return correction
