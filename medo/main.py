"""
Medo.Ai — Educational Assistant API
====================================
FastAPI entry point.
  • One engine (Gemini) and one session store (Firestore) per process,
    built in the lifespan and handed to endpoints by dependency injection
  • Every flow under /api/v1/flows, saved sessions under /api/v1/users/...
  • Flow errors map to status codes; everything else returns a JSON envelope
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from google.cloud import firestore
from starlette.exceptions import HTTPException as StarletteHTTPException

from medo.ai_engine import GeminiEngine
from medo.api.v1.endpoints import flows, sessions, tools
from medo.core.config import settings
from medo.core.errors import FlowError
from medo.schemas.common import ErrorResponse
from medo.services.session_store import SessionStore

# ── Logging ──────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
)
logger = logging.getLogger(__name__)


def _build_session_store() -> Optional[SessionStore]:
    if not settings.FIRESTORE_PROJECT:
        logger.warning("[INIT] ✗ FIRESTORE_PROJECT not set — saved sessions disabled")
        return None
    store = SessionStore(firestore.Client(project=settings.FIRESTORE_PROJECT))
    logger.info(f"[INIT] ✓ Firestore ready ({settings.FIRESTORE_PROJECT})")
    return store


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.engine = GeminiEngine.from_settings(settings)
    app.state.session_store = _build_session_store()
    yield


# ── App ──────────────────────────────────────────────────────────────────────
app = FastAPI(
    title="Medo.Ai — Educational Assistant API",
    description=(
        "Arabic educational assistant.\n"
        "Chat, transcription, speech, summaries, mind maps, questions and essay grading."
    ),
    version="1.0.0",
    lifespan=lifespan,
    responses={
        400: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    },
)


# ── Exception Handlers ───────────────────────────────────────────────────────
@app.exception_handler(FlowError)
async def flow_error_handler(request: Request, exc: FlowError):
    logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    body = ErrorResponse(message=exc.message, detail=exc.detail)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(p) for p in first.get("loc", ()))
    body = ErrorResponse(
        message=f"{location}: {first.get('msg', 'invalid request')}",
        detail=str(exc.errors()),
    )
    return JSONResponse(status_code=400, content=body.model_dump())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    body = ErrorResponse(message=str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all: every unhandled exception returns a clean JSON envelope."""
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    body = ErrorResponse(
        message="An internal server error occurred.",
        detail=str(exc),
    )
    return JSONResponse(status_code=500, content=body.model_dump())


# ── CORS ─────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Health Check ─────────────────────────────────────────────────────────────
@app.get("/", tags=["System"])
async def health_check():
    return {
        "status": "operational",
        "service": "Medo.Ai Educational Assistant",
        "version": app.version,
        "model": settings.GEMINI_MODEL,
    }


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(flows.router, prefix="/api/v1")
app.include_router(sessions.router, prefix="/api/v1")
app.include_router(tools.router, prefix="/api/v1")
