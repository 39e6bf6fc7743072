import logging

from medo.flows.common import ModelEngine, check_text_length, parse_request
from medo.schemas.mindmap import GenerateMindMapRequest, MainIdea, MindMap, SubPoint
from medo.services.file_service import DOCUMENT_TYPES, validate_media
from medo.services.json_recovery import parse_model_output
from medo.services.prompt_builder import build_mind_map_prompt

logger = logging.getLogger(__name__)


def assign_ids(mind_map: MindMap) -> MindMap:
    """Replace whatever ids the model sent with unique kebab-case ones ('idea-2', 'idea-2-1')."""
    return MindMap(
        title=mind_map.title,
        main_ideas=[
            MainIdea(
                id=f"idea-{i}",
                text=idea.text,
                sub_points=[
                    SubPoint(id=f"idea-{i}-{j}", text=point.text)
                    for j, point in enumerate(idea.sub_points, start=1)
                ],
            )
            for i, idea in enumerate(mind_map.main_ideas, start=1)
        ],
    )


async def generate_mind_map(request, engine: ModelEngine) -> MindMap:
    """Text and/or an image/PDF → title, main ideas, sub-points."""
    request = parse_request(GenerateMindMapRequest, request)
    check_text_length(request.text)
    if request.file is not None:
        await validate_media(request.file, DOCUMENT_TYPES)

    logger.info("[MINDMAP] Starting generation...")
    raw = await engine.generate(build_mind_map_prompt(request))
    mind_map = assign_ids(parse_model_output(MindMap, raw))

    logger.info(
        f"[MINDMAP] ✓ '{mind_map.title}' — {len(mind_map.main_ideas)} main ideas, "
        f"{sum(len(i.sub_points) for i in mind_map.main_ideas)} sub-points"
    )
    return mind_map
