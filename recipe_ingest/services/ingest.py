from __future__ import annotations

import logging
from dataclasses import replace

import httpx

from recipe_ingest.app.domain.models import Recipe, RecipeSource, SourceOrigin, utc_now
from recipe_ingest.app.infra.store.base import RecipeStore
from recipe_ingest.services import generative, structured
from recipe_ingest.services.fetcher import (
    EMBED_TIMEOUT_SECONDS,
    WEBPAGE_MAX_CHARS,
    WEBPAGE_TIMEOUT_SECONDS,
    fetch_social_embed,
    fetch_web_page,
    load_image,
)
from recipe_ingest.services.generative import MAX_OUTPUT_TOKENS, ModelClient
from recipe_ingest.services.types import SourceDocument, SourceReference

logger = logging.getLogger(__name__)

HINT_LABELS = {
    RecipeSource.TIKTOK: "TikTok caption",
    RecipeSource.INSTAGRAM: "Instagram caption",
    RecipeSource.WEBSITE: "recipe web page text",
    RecipeSource.IMAGE_SCAN: "photo of a recipe",
}


class IngestService:
    """
    Runs one source reference through the normalization pipeline.

    Responsibilities:
    - Fetch and classify the source document
    - Pick structured coercion or generative extraction
    - Stamp identity and ownership, then append to the store
    """

    def __init__(
        self,
        store: RecipeStore,
        model_client: ModelClient,
        *,
        http_client: httpx.Client | None = None,
        embed_timeout: float = EMBED_TIMEOUT_SECONDS,
        webpage_timeout: float = WEBPAGE_TIMEOUT_SECONDS,
        webpage_max_chars: int = WEBPAGE_MAX_CHARS,
        max_output_tokens: int = MAX_OUTPUT_TOKENS,
    ):
        self._store = store
        self._model_client = model_client
        self._http_client = http_client
        self.embed_timeout = embed_timeout
        self.webpage_timeout = webpage_timeout
        self.webpage_max_chars = webpage_max_chars
        self.max_output_tokens = max_output_tokens

    def fetch(self, reference: SourceReference) -> SourceDocument:
        origin = reference.source.origin
        if origin is SourceOrigin.SOCIAL_EMBED:
            return fetch_social_embed(
                reference.url,
                reference.source,
                client=self._http_client,
                timeout=self.embed_timeout,
            )
        if origin is SourceOrigin.WEB_PAGE:
            return fetch_web_page(
                reference.url,
                client=self._http_client,
                timeout=self.webpage_timeout,
                max_chars=self.webpage_max_chars,
            )
        return load_image(reference.image, reference.media_type)

    def extract(self, document: SourceDocument, reference: SourceReference) -> Recipe:
        if document.has_structured_data:
            recipe = structured.coerce(document.embedded_structured_data, reference.url)
            if not recipe.thumbnail_url and document.thumbnail_url:
                recipe.thumbnail_url = document.thumbnail_url
            return recipe

        return generative.extract(
            document,
            HINT_LABELS[reference.source],
            self._model_client,
            source_url=reference.url,
            max_output_tokens=self.max_output_tokens,
        )

    def ingest(self, reference: SourceReference, owner_id: str) -> Recipe:
        document = self.fetch(reference)
        extracted = self.extract(document, reference)

        recipe = replace(
            extracted,
            owner_id=owner_id,
            source=reference.source,
            source_url=reference.url,
            created_at=utc_now(),
        )
        self._store.append(recipe)

        logger.info(
            "ingest.saved source=%s owner=%s recipe=%s structured=%s",
            reference.source.value,
            owner_id,
            recipe.id,
            document.has_structured_data,
        )
        return recipe

    def preview(self, text: str, source: RecipeSource = RecipeSource.TIKTOK) -> Recipe:
        """Run the generative extractor on raw caption text without saving."""
        document = SourceDocument(origin=SourceOrigin.SOCIAL_EMBED, raw_text=text)
        recipe = generative.extract(
            document,
            HINT_LABELS[source],
            self._model_client,
            max_output_tokens=self.max_output_tokens,
        )
        recipe.source = source
        return recipe

    def list_recipes(self, owner_id: str) -> list[Recipe]:
        return self._store.list_by_owner(owner_id)

    def set_favorite(self, owner_id: str, recipe_id: str, favorite: bool) -> Recipe | None:
        return self._store.set_favorite(owner_id, recipe_id, favorite)
