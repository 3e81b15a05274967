from __future__ import annotations

import logging
import threading
from collections import defaultdict
from dataclasses import replace
from typing import Optional

from recipe_ingest.app.domain.models import Recipe
from recipe_ingest.app.infra.store.base import RecipeStore

logger = logging.getLogger(__name__)


class InMemoryRecipeStore(RecipeStore):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_owner: dict[str, list[Recipe]] = defaultdict(list)

    def append(self, recipe: Recipe) -> None:
        with self._lock:
            self._by_owner[recipe.owner_id].append(recipe)
        logger.debug("store.append owner=%s recipe=%s", recipe.owner_id, recipe.id)

    def list_by_owner(self, owner_id: str) -> list[Recipe]:
        with self._lock:
            return list(self._by_owner.get(owner_id, []))

    def set_favorite(self, owner_id: str, recipe_id: str, favorite: bool) -> Optional[Recipe]:
        with self._lock:
            recipes = self._by_owner.get(owner_id, [])
            for index, recipe in enumerate(recipes):
                if recipe.id == recipe_id:
                    updated = replace(recipe, favorite=favorite)
                    recipes[index] = updated
                    return updated
        return None
