from pydantic import BaseModel, Field
from typing import Literal
from enum import Enum

from medo.schemas.common import MediaReference, NonBlankStr


class Voice(str, Enum):
    """Prebuilt Gemini TTS voices offered to users."""
    algenib = "Algenib"
    achernar = "Achernar"
    spica = "Spica"
    hadar = "Hadar"
    arcturus = "Arcturus"


# ── Speech → Text ────────────────────────────────────────────────────────────

class TranscribeRequest(BaseModel):
    kind: Literal["transcribe"] = "transcribe"
    audio: MediaReference = Field(..., description="The recording as an audio/* data URI")


class Transcript(BaseModel):
    text: str


# ── Text → Speech ────────────────────────────────────────────────────────────

class SynthesizeSpeechRequest(BaseModel):
    kind: Literal["synthesize_speech"] = "synthesize_speech"
    text: NonBlankStr
    voice: Voice = Voice.algenib


class SpeechAudio(BaseModel):
    audio_data_uri: str = Field(..., description="WAV audio: 'data:audio/wav;base64,<encoded_data>'")
