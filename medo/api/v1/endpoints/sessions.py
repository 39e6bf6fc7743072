from typing import List

from fastapi import APIRouter, Depends, Response

from medo.api.v1.deps import get_session_store
from medo.schemas.session import SavedSession, SaveSessionRequest, SessionKind
from medo.services.session_store import SessionStore

router = APIRouter(prefix="/users/{user_id}/sessions/{kind}", tags=["Sessions"])


@router.get("", response_model=List[SavedSession])
async def list_sessions(user_id: str, kind: SessionKind, store: SessionStore = Depends(get_session_store)):
    return await store.list_sessions(user_id, kind)


@router.post("", response_model=SavedSession, status_code=201)
async def create_session(
    user_id: str,
    kind: SessionKind,
    body: SaveSessionRequest,
    store: SessionStore = Depends(get_session_store),
):
    return await store.save_session(user_id, kind, body.name, body.data)


@router.get("/{session_id}", response_model=SavedSession)
async def get_session(
    user_id: str,
    kind: SessionKind,
    session_id: str,
    store: SessionStore = Depends(get_session_store),
):
    return await store.get_session(user_id, kind, session_id)


@router.put("/{session_id}", response_model=SavedSession)
async def update_session(
    user_id: str,
    kind: SessionKind,
    session_id: str,
    body: SaveSessionRequest,
    store: SessionStore = Depends(get_session_store),
):
    return await store.save_session(user_id, kind, body.name, body.data, session_id=session_id)


@router.delete("/{session_id}", status_code=204)
async def delete_session(
    user_id: str,
    kind: SessionKind,
    session_id: str,
    store: SessionStore = Depends(get_session_store),
):
    await store.delete_session(user_id, kind, session_id)
    return Response(status_code=204)
