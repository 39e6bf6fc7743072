from fastapi import HTTPException, Request

from medo.flows.common import ModelEngine
from medo.services.session_store import SessionStore


def get_engine(request: Request) -> ModelEngine:
    return request.app.state.engine


def get_session_store(request: Request) -> SessionStore:
    store = getattr(request.app.state, "session_store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Saved sessions are not configured (FIRESTORE_PROJECT).")
    return store
