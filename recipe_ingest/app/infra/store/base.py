# recipe_ingest/app/infra/store/base.py
"""
Abstract base class for recipe persistence.
This interface allows swapping the in-memory store for a real database.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from recipe_ingest.app.domain.models import Recipe


class RecipeStore(ABC):
    """
    Append-only recipe persistence keyed by owner.

    Implementations:
    - InMemoryRecipeStore: process-local, lock-guarded lists
    """

    @abstractmethod
    def append(self, recipe: Recipe) -> None:
        """
        Persist a fully assembled recipe.

        The recipe already carries its id, owner and creation timestamp;
        the store assigns no identity.
        """
        pass

    @abstractmethod
    def list_by_owner(self, owner_id: str) -> list[Recipe]:
        """
        Return the owner's recipes in insertion order.
        """
        pass

    @abstractmethod
    def set_favorite(self, owner_id: str, recipe_id: str, favorite: bool) -> Optional[Recipe]:
        """
        Flip the favorite flag of one of the owner's recipes.

        Returns:
            The updated recipe, or None when the owner has no such recipe
        """
        pass
