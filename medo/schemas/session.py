"""
Saved sessions — generated artifacts a user has named and kept.
Stored per user in Firestore under users/{user_id}/{collection}/{session_id}.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Type

from pydantic import BaseModel, Field

from medo.schemas.common import NonBlankStr
from medo.schemas.mindmap import MindMap
from medo.schemas.quiz import QuestionSet


class SessionKind(str, Enum):
    mind_maps = "mind-maps"
    questions = "questions"

    @property
    def collection(self) -> str:
        return _COLLECTIONS[self]

    @property
    def payload_model(self) -> Type[BaseModel]:
        return _PAYLOADS[self]


_COLLECTIONS = {
    SessionKind.mind_maps: "mindMapSessions",
    SessionKind.questions: "questionSessions",
}

_PAYLOADS = {
    SessionKind.mind_maps: MindMap,
    SessionKind.questions: QuestionSet,
}


class SaveSessionRequest(BaseModel):
    name: NonBlankStr = Field(..., description="Display name, e.g. the mind map title")
    data: Dict[str, Any] = Field(..., description="A MindMap or QuestionSet, matching the session kind")


class SavedSession(BaseModel):
    id: str
    name: str
    kind: SessionKind
    data: Dict[str, Any]
    updated_at: datetime
