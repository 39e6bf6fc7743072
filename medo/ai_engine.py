"""
Medo — AI Engine
=================
The one place that talks to the hosted model (Gemini via google-genai):
  1. Text / vision generation, free text or schema-constrained JSON
  2. Speech synthesis with a prebuilt voice (raw PCM out)

Flows receive an engine instance instead of reaching for a module-level
client. Every SDK failure leaves this module as ModelCallFailed; nothing is
retried here.
"""

import asyncio
import logging
from typing import Any, List, Optional

from google import genai
from google.genai import types

from medo.core.config import Settings, settings
from medo.core.errors import ModelCallFailed
from medo.services.prompt_builder import MediaSegment, Prompt

logger = logging.getLogger(__name__)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# PROMPT → SDK TYPES
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def build_contents(prompt: Prompt) -> List[types.Content]:
    """History turns (oldest first), then one user turn holding the prompt's segments."""
    contents = [
        types.Content(role=turn.role.value, parts=[types.Part.from_text(text=turn.text)])
        for turn in prompt.history
    ]
    parts = []
    for segment in prompt.segments:
        if isinstance(segment, MediaSegment):
            parts.append(types.Part.from_bytes(data=segment.data, mime_type=segment.mime_type))
        else:
            parts.append(types.Part.from_text(text=segment.text))
    contents.append(types.Content(role="user", parts=parts))
    return contents


def build_config(prompt: Prompt) -> types.GenerateContentConfig:
    config: dict = {}
    if prompt.system_instruction:
        config["system_instruction"] = prompt.system_instruction
    if prompt.temperature is not None:
        config["temperature"] = prompt.temperature
    if prompt.wants_json:
        config["response_mime_type"] = "application/json"
        config["response_schema"] = prompt.response_schema
    return types.GenerateContentConfig(**config)


def build_speech_config(voice: str) -> types.GenerateContentConfig:
    return types.GenerateContentConfig(
        response_modalities=["AUDIO"],
        speech_config=types.SpeechConfig(
            voice_config=types.VoiceConfig(
                prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice),
            ),
        ),
    )


def _inline_audio(response: Any) -> Optional[bytes]:
    """First inline data payload of the first candidate, or None."""
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            blob = getattr(part, "inline_data", None)
            if blob is not None and blob.data:
                return blob.data
    return None


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ENGINE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class GeminiEngine:
    """Thin async wrapper over a google-genai client."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gemini-2.5-flash",
        tts_model: str = "gemini-2.5-flash-preview-tts",
        client: Optional[Any] = None,
    ):
        self.model = model
        self.tts_model = tts_model
        if client is not None:
            self._client = client
        elif api_key:
            self._client = genai.Client(api_key=api_key)
            logger.info(f"[ENGINE] ✓ Gemini client ready ({model}, tts: {tts_model})")
        else:
            self._client = None
            logger.warning("[ENGINE] ✗ Google API key missing")

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "GeminiEngine":
        return cls(
            api_key=config.GOOGLE_API_KEY,
            model=config.GEMINI_MODEL,
            tts_model=config.GEMINI_TTS_MODEL,
        )

    def _require_client(self):
        if self._client is None:
            raise ModelCallFailed("Google API Key missing")
        return self._client

    async def generate(self, prompt: Prompt) -> str:
        """Run one generation and return the raw response text ('' if the model sent none)."""
        client = self._require_client()
        mode = "json" if prompt.wants_json else "text"
        logger.info(f"[ENGINE] Calling Gemini ({self.model}, {mode})...")
        try:
            response = await asyncio.to_thread(
                client.models.generate_content,
                model=self.model,
                contents=build_contents(prompt),
                config=build_config(prompt),
            )
        except Exception as e:
            logger.warning(f"[ENGINE] ✗ Gemini call failed: {str(e)[:200]}")
            raise ModelCallFailed("Gemini call failed.", detail=str(e)) from e

        logger.info("[ENGINE] ✓ Gemini call succeeded")
        return response.text or ""

    async def synthesize(self, text: str, voice: str) -> Optional[bytes]:
        """Text → raw 16-bit PCM (mono, 24 kHz), or None if no audio came back."""
        client = self._require_client()
        logger.info(f"[ENGINE] Calling Gemini TTS ({self.tts_model}, voice={voice})...")
        try:
            response = await asyncio.to_thread(
                client.models.generate_content,
                model=self.tts_model,
                contents=text,
                config=build_speech_config(voice),
            )
        except Exception as e:
            logger.warning(f"[ENGINE] ✗ Gemini TTS call failed: {str(e)[:200]}")
            raise ModelCallFailed("Gemini speech call failed.", detail=str(e)) from e

        logger.info("[ENGINE] ✓ Gemini TTS call succeeded")
        return _inline_audio(response)
