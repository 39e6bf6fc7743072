import logging

from medo.flows.common import ModelEngine, check_text_length, parse_request
from medo.schemas.text import SummarizeRequest, Summary
from medo.services.json_recovery import parse_model_output
from medo.services.prompt_builder import build_summarize_prompt

logger = logging.getLogger(__name__)


async def summarize_text(request, engine: ModelEngine) -> Summary:
    """Concise summary, in the language of the source text."""
    request = parse_request(SummarizeRequest, request)
    check_text_length(request.text)

    logger.info(f"[SUMMARIZE] Starting: {len(request.text)} chars, language={request.language}")
    raw = await engine.generate(build_summarize_prompt(request))
    summary = parse_model_output(Summary, raw)

    logger.info(f"[SUMMARIZE] ✓ {len(summary.summary)} chars")
    return summary
