import logging

from medo.flows.common import ModelEngine, check_text_length, parse_request
from medo.schemas.speech import SpeechAudio, SynthesizeSpeechRequest
from medo.services.audio_codec import wav_data_uri

logger = logging.getLogger(__name__)


async def synthesize_speech(request, engine: ModelEngine) -> SpeechAudio:
    """
    Text → playable WAV data URI.
    The model returns headerless PCM; it is always wrapped before leaving
    this function, and no audio at all raises NoAudioProduced.
    """
    request = parse_request(SynthesizeSpeechRequest, request)
    check_text_length(request.text)

    logger.info(f"[SPEECH] Starting: {len(request.text)} chars, voice={request.voice.value}")
    pcm = await engine.synthesize(request.text, request.voice.value)
    audio_data_uri = wav_data_uri(pcm)

    logger.info(f"[SPEECH] ✓ {len(pcm)} PCM bytes wrapped as WAV")
    return SpeechAudio(audio_data_uri=audio_data_uri)
