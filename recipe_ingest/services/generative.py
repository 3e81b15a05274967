from __future__ import annotations

import logging
from typing import Any, Protocol

from recipe_ingest.app.domain.models import Recipe, SourceOrigin
from recipe_ingest.services.coercion import (
    coerce_servings,
    coerce_string,
    coerce_string_list,
    coerce_title,
    flatten_ingredients,
    flatten_instructions,
    format_duration,
)
from recipe_ingest.services.errors import FetchError
from recipe_ingest.services.prompt import build_extraction_prompt
from recipe_ingest.services.sanitize import parse_model_output
from recipe_ingest.services.types import SourceDocument

logger = logging.getLogger(__name__)

MAX_OUTPUT_TOKENS = 2000


class ModelClient(Protocol):
    def generate(
        self,
        prompt: str,
        *,
        image: bytes | None = None,
        mime_type: str | None = None,
        max_output_tokens: int = MAX_OUTPUT_TOKENS,
    ) -> str:
        ...


def recipe_from_model_output(data: dict[str, Any]) -> Recipe:
    return Recipe(
        title=coerce_title(data.get("title")),
        description=coerce_string(data.get("description")),
        prep_time=format_duration(data.get("prepTime")),
        cook_time=format_duration(data.get("cookTime")),
        total_time=format_duration(data.get("totalTime")),
        servings=coerce_servings(data.get("servings")),
        difficulty=coerce_string(data.get("difficulty")),
        ingredients=flatten_ingredients(data.get("ingredients")),
        instructions=flatten_instructions(data.get("instructions")),
        tags=coerce_string_list(data.get("tags")),
        notes=coerce_string(data.get("notes")),
    )


def _invoke_model(
    document: SourceDocument,
    hint_label: str,
    model_client: ModelClient,
    max_output_tokens: int,
) -> str:
    if document.origin is SourceOrigin.IMAGE:
        if not document.raw_binary:
            raise FetchError(document.origin, "Image document has no image data.")
        return model_client.generate(
            build_extraction_prompt(hint_label),
            image=document.raw_binary,
            mime_type=document.media_type,
            max_output_tokens=max_output_tokens,
        )

    text = (document.raw_text or "").strip()
    if not text:
        raise FetchError(document.origin, "Source contained no text to extract.")

    return model_client.generate(
        build_extraction_prompt(hint_label, text),
        max_output_tokens=max_output_tokens,
    )


def extract(
    document: SourceDocument,
    hint_label: str,
    model_client: ModelClient,
    *,
    source_url: str = "",
    max_output_tokens: int = MAX_OUTPUT_TOKENS,
) -> Recipe:
    """
    Interpret an unstructured document with the generative model.

    Only overall JSON validity is trusted; each field is coerced on its own,
    and the URLs always come from the request, never from the model.
    """
    output = _invoke_model(document, hint_label, model_client, max_output_tokens)
    data = parse_model_output(output)

    recipe = recipe_from_model_output(data)
    recipe.source_url = source_url
    recipe.thumbnail_url = document.thumbnail_url or ""

    logger.info(
        "generative.ok origin=%s title=%r ingredients=%d steps=%d",
        document.origin.value,
        recipe.title,
        len(recipe.ingredients),
        len(recipe.instructions),
    )
    return recipe
