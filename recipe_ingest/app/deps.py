# recipe_ingest/app/deps.py (process-wide singletons exposed as dependencies)

from __future__ import annotations

import threading

from fastapi import Depends

from recipe_ingest.app.config import settings
from recipe_ingest.app.infra.store.base import RecipeStore
from recipe_ingest.app.infra.store.memory import InMemoryRecipeStore
from recipe_ingest.services.gemini_client import GeminiClient
from recipe_ingest.services.ingest import IngestService

# One store per process
_store: RecipeStore = InMemoryRecipeStore()
_model_client: GeminiClient | None = None
_model_client_lock = threading.Lock()


def get_recipe_store() -> RecipeStore:
    return _store


def get_model_client() -> GeminiClient:
    global _model_client
    with _model_client_lock:
        if _model_client is None:
            _model_client = GeminiClient(
                api_key=settings.GEMINI_API_KEY,
                model_name=settings.GEMINI_MODEL,
                timeout_seconds=settings.MODEL_TIMEOUT_SECONDS,
                thinking_budget=settings.GEMINI_THINKING_BUDGET,
            )
        return _model_client


def get_ingest_service(
    store: RecipeStore = Depends(get_recipe_store),
    model_client: GeminiClient = Depends(get_model_client),
) -> IngestService:
    return IngestService(
        store,
        model_client,
        embed_timeout=settings.EMBED_TIMEOUT_SECONDS,
        webpage_timeout=settings.WEBPAGE_TIMEOUT_SECONDS,
        webpage_max_chars=settings.WEBPAGE_MAX_CHARS,
        max_output_tokens=settings.MODEL_MAX_OUTPUT_TOKENS,
    )
