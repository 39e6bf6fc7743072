from types import SimpleNamespace

import pytest

from medo.ai_engine import GeminiEngine, build_contents
from medo.core.errors import ModelCallFailed
from medo.schemas.common import ChatRole, ChatTurn
from medo.schemas.quiz import QuestionSet
from medo.services.prompt_builder import MediaSegment, Prompt, TextSegment


class FakeModels:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


def _engine(models: FakeModels) -> GeminiEngine:
    return GeminiEngine(client=SimpleNamespace(models=models), model="test-model", tts_model="test-tts")


@pytest.mark.asyncio
async def test_generate_sends_history_then_one_user_turn(png_bytes):
    models = FakeModels(response=SimpleNamespace(text='{"questions": []}'))
    prompt = Prompt(
        segments=(MediaSegment("image/png", png_bytes), TextSegment("instruction"), TextSegment("source")),
        system_instruction="be brief",
        history=(ChatTurn(role=ChatRole.user, text="hi"), ChatTurn(role=ChatRole.model, text="hello")),
        temperature=0.3,
        response_schema=QuestionSet,
    )

    assert await _engine(models).generate(prompt) == '{"questions": []}'

    call = models.calls[0]
    assert call["model"] == "test-model"
    contents = call["contents"]
    assert [c.role for c in contents] == ["user", "model", "user"]
    parts = contents[-1].parts
    assert parts[0].inline_data.mime_type == "image/png"
    assert parts[0].inline_data.data == png_bytes
    assert [p.text for p in parts[1:]] == ["instruction", "source"]

    config = call["config"]
    assert config.system_instruction == "be brief"
    assert config.temperature == 0.3
    assert config.response_mime_type == "application/json"
    assert config.response_schema is not None


@pytest.mark.asyncio
async def test_free_text_prompt_has_no_json_mode():
    models = FakeModels(response=SimpleNamespace(text="مرحبا"))
    await _engine(models).generate(Prompt(segments=(TextSegment("hi"),)))

    config = models.calls[0]["config"]
    assert config.response_mime_type is None
    assert config.response_schema is None


@pytest.mark.asyncio
async def test_missing_text_becomes_empty_string():
    models = FakeModels(response=SimpleNamespace(text=None))
    assert await _engine(models).generate(Prompt(segments=(TextSegment("hi"),))) == ""


@pytest.mark.asyncio
async def test_sdk_errors_become_model_call_failed():
    models = FakeModels(error=ConnectionError("quota exceeded"))
    with pytest.raises(ModelCallFailed) as exc_info:
        await _engine(models).generate(Prompt(segments=(TextSegment("hi"),)))
    assert "quota exceeded" in exc_info.value.detail


@pytest.mark.asyncio
async def test_missing_api_key_fails_without_calling_out():
    engine = GeminiEngine(api_key=None)
    with pytest.raises(ModelCallFailed, match="API Key missing"):
        await engine.generate(Prompt(segments=(TextSegment("hi"),)))
    with pytest.raises(ModelCallFailed):
        await engine.synthesize("hi", "Algenib")


@pytest.mark.asyncio
async def test_synthesize_returns_inline_pcm():
    blob = SimpleNamespace(data=b"\x01\x02\x03\x04")
    response = SimpleNamespace(
        candidates=[SimpleNamespace(content=SimpleNamespace(parts=[SimpleNamespace(inline_data=blob)]))]
    )
    models = FakeModels(response=response)

    assert await _engine(models).synthesize("اقرأ هذا", "Spica") == b"\x01\x02\x03\x04"

    call = models.calls[0]
    assert call["model"] == "test-tts"
    assert call["contents"] == "اقرأ هذا"
    assert call["config"].speech_config.voice_config.prebuilt_voice_config.voice_name == "Spica"


@pytest.mark.asyncio
async def test_synthesize_without_audio_returns_none():
    models = FakeModels(response=SimpleNamespace(candidates=[]))
    assert await _engine(models).synthesize("hi", "Algenib") is None


def test_contents_without_history_is_a_single_user_turn():
    contents = build_contents(Prompt(segments=(TextSegment("hi"),)))
    assert len(contents) == 1
    assert contents[0].role == "user"
