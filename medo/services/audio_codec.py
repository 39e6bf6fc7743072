"""
Wraps the raw PCM returned by the speech model in a WAV container.

Gemini TTS answers with headerless 16-bit little-endian PCM, mono, 24 kHz;
browsers cannot play that directly.
"""

import io
import wave
import base64
from typing import Optional

from medo.core.errors import NoAudioProduced

SAMPLE_RATE = 24000
CHANNELS = 1
SAMPLE_WIDTH = 2  # bytes → 16-bit


def pcm_to_wav(
    pcm: Optional[bytes],
    channels: int = CHANNELS,
    rate: int = SAMPLE_RATE,
    sample_width: int = SAMPLE_WIDTH,
) -> bytes:
    """Return a complete RIFF/WAVE file holding `pcm` unchanged."""
    if not pcm:
        raise NoAudioProduced("No audio media returned from the model.")

    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as writer:
        writer.setnchannels(channels)
        writer.setsampwidth(sample_width)
        writer.setframerate(rate)
        writer.writeframes(pcm)
    return buffer.getvalue()


def wav_data_uri(pcm: Optional[bytes]) -> str:
    encoded = base64.b64encode(pcm_to_wav(pcm)).decode("ascii")
    return f"data:audio/wav;base64,{encoded}"
