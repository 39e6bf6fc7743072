from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── Gemini ────────────────────────────────────────────────────────────────
    GOOGLE_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_TTS_MODEL: str = "gemini-2.5-flash-preview-tts"

    # ── Firestore (saved sessions) ────────────────────────────────────────────
    FIRESTORE_PROJECT: Optional[str] = None

    # ── Limits ────────────────────────────────────────────────────────────────
    MAX_FILE_SIZE_MB: int = 20
    MAX_PDF_PAGES: int = 200
    MAX_TEXT_CHARS: int = 100_000
    AI_TIMEOUT_SECONDS: int = 300  # deadline the HTTP layer puts around a flow

    # ── Core ──────────────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of {allowed}, got '{v}'")
        return v.upper()

    CORS_ORIGINS: List[str] = [
        "http://localhost:9002",
        "http://localhost:3000",
    ]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
