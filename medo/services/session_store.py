"""
Saved sessions in Firestore.

Layout: users/{user_id}/{mindMapSessions|questionSessions}/{session_id}
Each document: {id, name, kind, data, updated_at}. Saving an existing id
merges over it.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from google.cloud import firestore
from pydantic import ValidationError

from medo.core.errors import InvalidInput, SessionNotFound, describe_validation_error
from medo.schemas.session import SavedSession, SessionKind

logger = logging.getLogger(__name__)


class SessionStore:
    """CRUD over a user's saved sessions. The Firestore client is injected."""

    def __init__(self, client: firestore.Client):
        self._db = client

    def _collection(self, user_id: str, kind: SessionKind):
        if not user_id or not user_id.strip() or "/" in user_id:
            raise InvalidInput("A valid user id is required.")
        return self._db.collection("users").document(user_id).collection(kind.collection)

    async def save_session(
        self,
        user_id: str,
        kind: SessionKind,
        name: str,
        data: Dict[str, Any],
        session_id: Optional[str] = None,
    ) -> SavedSession:
        if not name or not name.strip():
            raise InvalidInput("Session name is required.")
        try:
            payload = kind.payload_model.model_validate(data)
        except ValidationError as e:
            raise InvalidInput(describe_validation_error(e), detail=str(e)) from e

        collection = self._collection(user_id, kind)
        ref = collection.document(session_id) if session_id else collection.document()
        record = {
            "id": ref.id,
            "name": name.strip(),
            "kind": kind.value,
            "data": payload.model_dump(mode="json"),
            "updated_at": datetime.now(timezone.utc),
        }
        await asyncio.to_thread(ref.set, record, merge=True)
        logger.info(f"[SESSIONS] ✓ Saved {kind.value} session '{record['name']}' ({ref.id})")
        return SavedSession(**record)

    async def list_sessions(self, user_id: str, kind: SessionKind) -> List[SavedSession]:
        """All of a user's sessions of one kind, most recently saved first."""
        collection = self._collection(user_id, kind)
        snapshots = await asyncio.to_thread(lambda: list(collection.stream()))
        sessions = [SavedSession(**snap.to_dict()) for snap in snapshots]
        sessions.sort(key=lambda s: s.updated_at, reverse=True)
        return sessions

    async def get_session(self, user_id: str, kind: SessionKind, session_id: str) -> SavedSession:
        ref = self._collection(user_id, kind).document(session_id)
        snap = await asyncio.to_thread(ref.get)
        if not snap.exists:
            raise SessionNotFound(f"Session '{session_id}' not found.")
        return SavedSession(**snap.to_dict())

    async def delete_session(self, user_id: str, kind: SessionKind, session_id: str) -> None:
        ref = self._collection(user_id, kind).document(session_id)
        await asyncio.to_thread(ref.delete)
        logger.info(f"[SESSIONS] ✓ Deleted {kind.value} session {session_id}")
