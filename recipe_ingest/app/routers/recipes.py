from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from recipe_ingest.app.deps import get_recipe_store
from recipe_ingest.app.infra.store.base import RecipeStore
from recipe_ingest.app.schemas.ingest import ErrorDetail, RecipeListResponse, RecipeResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/recipes", tags=["recipes"])


@router.get("/{user_id}", response_model=RecipeListResponse)
def list_recipes(
    user_id: str,
    store: RecipeStore = Depends(get_recipe_store),
) -> RecipeListResponse:
    recipes = store.list_by_owner(user_id)
    return RecipeListResponse(recipes=[RecipeResponse.from_recipe(recipe) for recipe in recipes])


def _update_favorite_status(
    store: RecipeStore,
    user_id: str,
    recipe_id: str,
    favorite: bool,
) -> RecipeResponse:
    updated = store.set_favorite(user_id, recipe_id, favorite)
    if updated is None:
        logger.info("favorite.not_found recipe=%s user=%s", recipe_id, user_id)
        raise HTTPException(
            status_code=404,
            detail=ErrorDetail(kind="not_found", message="Recipe not found").model_dump(),
        )
    return RecipeResponse.from_recipe(updated)


@router.post("/{user_id}/{recipe_id}/favorite", response_model=RecipeResponse)
def favorite_recipe(
    user_id: str,
    recipe_id: str,
    store: RecipeStore = Depends(get_recipe_store),
) -> RecipeResponse:
    return _update_favorite_status(store, user_id, recipe_id, True)


@router.delete("/{user_id}/{recipe_id}/favorite", response_model=RecipeResponse)
def unfavorite_recipe(
    user_id: str,
    recipe_id: str,
    store: RecipeStore = Depends(get_recipe_store),
) -> RecipeResponse:
    return _update_favorite_status(store, user_id, recipe_id, False)
