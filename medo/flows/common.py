"""
Shared plumbing for every flow: request parsing and the engine interface.
"""

from typing import Any, Optional, Protocol, Type, TypeVar

from pydantic import BaseModel, ValidationError

from medo.core.config import settings
from medo.core.errors import InvalidInput, describe_validation_error
from medo.services.prompt_builder import Prompt

RequestT = TypeVar("RequestT", bound=BaseModel)


class ModelEngine(Protocol):
    """What a flow needs from the hosted model. GeminiEngine is the real one."""

    async def generate(self, prompt: Prompt) -> str: ...

    async def synthesize(self, text: str, voice: str) -> Optional[bytes]: ...


def parse_request(model_cls: Type[RequestT], request: Any) -> RequestT:
    """Accept a request model or a plain mapping; anything invalid is InvalidInput."""
    if isinstance(request, model_cls):
        return request
    try:
        return model_cls.model_validate(request)
    except ValidationError as e:
        raise InvalidInput(describe_validation_error(e), detail=str(e)) from e


def check_text_length(text: Optional[str]) -> None:
    if text and len(text) > settings.MAX_TEXT_CHARS:
        raise InvalidInput(
            f"Text too long ({len(text)} characters). Maximum is {settings.MAX_TEXT_CHARS}."
        )
