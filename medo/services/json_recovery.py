"""
Medo — JSON Recovery
=====================
Turns raw model text into validated pydantic objects:
  1. Clean JSON is parsed as-is
  2. Otherwise strip markdown code fences (```json ... ```), then pick the
     largest object / array embedded in the surrounding prose that decodes
  3. Validate against the flow's output model
Any failure is a MalformedModelOutput; nothing is repaired or defaulted.
"""

import json
import re
import logging
from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from medo.core.errors import MalformedModelOutput

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_FENCE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?\s*```", re.DOTALL)
_OPENER = re.compile(r"[{\[]")
_decoder = json.JSONDecoder()


def _embedded_values(text: str):
    """Yield (value, span length) for each top-level JSON object / array that decodes."""
    pos = 0
    while True:
        match = _OPENER.search(text, pos)
        if match is None:
            return
        try:
            value, end = _decoder.raw_decode(text, match.start())
        except json.JSONDecodeError:
            pos = match.start() + 1
            continue
        yield value, end - match.start()
        pos = end


def extract_json(raw_text: str) -> Any:
    """Recover the JSON value from model text that may be wrapped in prose or fences."""
    if not raw_text or not raw_text.strip():
        raise MalformedModelOutput("Empty AI response received")

    cleaned = raw_text.strip()

    if cleaned.startswith(("{", "[")):
        try:
            return json.loads(cleaned)
        except json.JSONDecodeError:
            pass

    # Strategy 1: Remove ```json ... ``` wrapper
    fence_match = _FENCE.search(cleaned)
    if fence_match:
        cleaned = fence_match.group(1).strip()

    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        error = e

    # Strategy 2: Largest { ... } / [ ... ] block that decodes; "[5]" in prose loses to the payload
    candidates = list(_embedded_values(cleaned))
    if candidates:
        return max(candidates, key=lambda c: c[1])[0]

    logger.error(f"[NORMALIZER] JSON parse failed. Raw (first 500 chars): {raw_text[:500]}")
    raise MalformedModelOutput("AI returned invalid JSON.", detail=str(error)) from error


def parse_model_output(model_cls: Type[ModelT], raw_text: str) -> ModelT:
    """extract_json + schema validation against `model_cls`."""
    data = extract_json(raw_text)
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        logger.error(
            f"[NORMALIZER] ✗ {model_cls.__name__} schema violation "
            f"({e.error_count()} error(s)). Raw (first 500 chars): {raw_text[:500]}"
        )
        raise MalformedModelOutput(
            f"AI output does not match the {model_cls.__name__} schema.",
            detail=str(e),
        ) from e
