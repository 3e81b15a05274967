from __future__ import annotations

import logging
from typing import Any

from recipe_ingest.app.domain.models import Recipe, RecipeSource
from recipe_ingest.services.coercion import (
    coerce_image_url,
    coerce_servings,
    coerce_string,
    coerce_string_list,
    coerce_title,
    flatten_ingredients,
    flatten_instructions,
    format_duration,
)

logger = logging.getLogger(__name__)


def coerce(structured_data: Any, source_url: str) -> Recipe:
    """
    Map a schema.org Recipe record onto the canonical schema.

    Never raises: a missing or malformed field falls back to its default.
    """
    data = structured_data if isinstance(structured_data, dict) else {}
    if not isinstance(structured_data, dict):
        logger.warning("structured.not_an_object type=%s", type(structured_data).__name__)

    return Recipe(
        title=coerce_title(data.get("name")),
        description=coerce_string(data.get("description")),
        prep_time=format_duration(data.get("prepTime")),
        cook_time=format_duration(data.get("cookTime")),
        total_time=format_duration(data.get("totalTime")),
        servings=coerce_servings(data.get("recipeYield")),
        ingredients=flatten_ingredients(data.get("recipeIngredient")),
        instructions=flatten_instructions(data.get("recipeInstructions")),
        tags=coerce_string_list(data.get("recipeCategory")),
        notes=coerce_string(data.get("notes")),
        source=RecipeSource.WEBSITE,
        source_url=source_url,
        thumbnail_url=coerce_image_url(data.get("image")),
    )
