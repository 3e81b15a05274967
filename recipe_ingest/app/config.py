from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_THINKING_BUDGET: Optional[int] = 0
    MODEL_MAX_OUTPUT_TOKENS: int = 2000
    MODEL_TIMEOUT_SECONDS: float = 60.0
    EMBED_TIMEOUT_SECONDS: float = 10.0
    WEBPAGE_TIMEOUT_SECONDS: float = 15.0
    WEBPAGE_MAX_CHARS: int = 10_000
    APP_ENV: str = "local"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"
    FRONTEND_CORS_ORIGINS: list[str] = Field(default_factory=lambda: ["*"])


settings = Settings()
