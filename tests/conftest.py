"""
Pytest configuration and fixtures
"""
import io
import wave
import uuid

import fitz  # PyMuPDF
import pytest
from PIL import Image

from medo.schemas.common import MediaReference


# ── Fake model engine ────────────────────────────────────────────────────────

class FakeEngine:
    """Stands in for GeminiEngine: records every call, answers from `replies` / `audio`."""

    def __init__(self):
        self.replies = []
        self.audio = None
        self.error = None
        self.prompts = []
        self.speech_calls = []

    @property
    def calls(self) -> int:
        return len(self.prompts) + len(self.speech_calls)

    async def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.replies.pop(0)

    async def synthesize(self, text, voice):
        self.speech_calls.append((text, voice))
        if self.error is not None:
            raise self.error
        return self.audio


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


# ── Media ────────────────────────────────────────────────────────────────────

def _png(width: int, height: int) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), "white").save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return _png(120, 80)


@pytest.fixture
def png_media(png_bytes) -> MediaReference:
    return MediaReference.from_bytes(png_bytes, "image/png")


@pytest.fixture
def tiny_png_media() -> MediaReference:
    return MediaReference.from_bytes(_png(10, 10), "image/png")


@pytest.fixture
def pdf_bytes() -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Photosynthesis turns light energy into chemical energy.")
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def pdf_media(pdf_bytes) -> MediaReference:
    return MediaReference.from_bytes(pdf_bytes, "application/pdf")


@pytest.fixture
def wav_media() -> MediaReference:
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as writer:
        writer.setnchannels(1)
        writer.setsampwidth(2)
        writer.setframerate(16000)
        writer.writeframes(b"\x00\x01" * 1600)
    return MediaReference.from_bytes(buffer.getvalue(), "audio/wav")


# ── Fake Firestore ───────────────────────────────────────────────────────────

class _Snapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data
        self.exists = data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class _DocumentRef:
    def __init__(self, documents, path, doc_id):
        self._documents = documents
        self._path = path
        self.id = doc_id

    def collection(self, name):
        return _CollectionRef(self._documents, f"{self._path}/{name}")

    def set(self, data, merge=False):
        current = self._documents.get(self._path) if merge else None
        self._documents[self._path] = {**(current or {}), **data}

    def get(self):
        return _Snapshot(self.id, self._documents.get(self._path))

    def delete(self):
        self._documents.pop(self._path, None)


class _CollectionRef:
    def __init__(self, documents, path):
        self._documents = documents
        self._path = path

    def document(self, doc_id=None):
        doc_id = doc_id or uuid.uuid4().hex[:20]
        return _DocumentRef(self._documents, f"{self._path}/{doc_id}", doc_id)

    def stream(self):
        prefix = self._path + "/"
        for path, data in list(self._documents.items()):
            rest = path[len(prefix):]
            if path.startswith(prefix) and "/" not in rest:
                yield _Snapshot(rest, data)


class FakeFirestore:
    """Dict-backed subset of google.cloud.firestore.Client: collection/document/set/get/stream/delete."""

    def __init__(self):
        self.documents = {}

    def collection(self, name):
        return _CollectionRef(self.documents, name)


@pytest.fixture
def firestore_client() -> FakeFirestore:
    return FakeFirestore()
