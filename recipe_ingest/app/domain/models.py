# recipe_ingest/app/domain/models.py
"""
Domain models for the recipe normalization pipeline.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

DEFAULT_TITLE = "Untitled Recipe"


class SourceOrigin(str, Enum):
    """How a source document is retrieved."""
    SOCIAL_EMBED = "SocialEmbed"
    WEB_PAGE = "WebPage"
    IMAGE = "Image"


class RecipeSource(str, Enum):
    """Platform or medium a recipe was imported from."""
    TIKTOK = "TikTok"
    INSTAGRAM = "Instagram"
    WEBSITE = "Website"
    IMAGE_SCAN = "ImageScan"

    @property
    def origin(self) -> SourceOrigin:
        if self in (RecipeSource.TIKTOK, RecipeSource.INSTAGRAM):
            return SourceOrigin.SOCIAL_EMBED
        if self is RecipeSource.WEBSITE:
            return SourceOrigin.WEB_PAGE
        return SourceOrigin.IMAGE


def new_recipe_id() -> str:
    return uuid4().hex


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Recipe:
    """
    Canonical recipe record.
    Every field carries a typed default so consumers never branch on presence.
    """
    id: str = field(default_factory=new_recipe_id)
    owner_id: str = ""
    title: str = DEFAULT_TITLE
    description: str = ""
    prep_time: str = ""
    cook_time: str = ""
    total_time: str = ""
    servings: str = ""
    difficulty: str = ""
    ingredients: list[str] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    notes: str = ""
    source: RecipeSource = RecipeSource.WEBSITE
    source_url: str = ""
    thumbnail_url: str = ""
    created_at: datetime = field(default_factory=utc_now)
    favorite: bool = False
