from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, Field

from recipe_ingest.app.domain.models import Recipe


class RecipeResponse(BaseModel):
    id: str
    ownerId: str
    title: str
    description: str = ""
    prepTime: str = ""
    cookTime: str = ""
    totalTime: str = ""
    servings: str = ""
    difficulty: str = ""
    ingredients: list[str] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    notes: str = ""
    source: Literal["TikTok", "Instagram", "Website", "ImageScan"]
    sourceUrl: str = ""
    thumbnailUrl: str = ""
    createdAt: datetime
    favorite: bool = False

    @classmethod
    def from_recipe(cls, recipe: Recipe) -> "RecipeResponse":
        return cls(
            id=recipe.id,
            ownerId=recipe.owner_id,
            title=recipe.title,
            description=recipe.description,
            prepTime=recipe.prep_time,
            cookTime=recipe.cook_time,
            totalTime=recipe.total_time,
            servings=recipe.servings,
            difficulty=recipe.difficulty,
            ingredients=list(recipe.ingredients),
            instructions=list(recipe.instructions),
            tags=list(recipe.tags),
            notes=recipe.notes,
            source=recipe.source.value,
            sourceUrl=recipe.source_url,
            thumbnailUrl=recipe.thumbnail_url,
            createdAt=recipe.created_at,
            favorite=recipe.favorite,
        )


class IngestRequest(BaseModel):
    url: str = Field(
        min_length=1,
        validation_alias=AliasChoices("url", "tiktokUrl", "instagramUrl", "websiteUrl"),
    )
    userId: str = Field(min_length=1)


class ImageIngestRequest(BaseModel):
    image: str = Field(min_length=1, description="Data URI or bare base64 image payload")
    mediaType: Optional[str] = None
    userId: str = Field(min_length=1)


class PreviewRequest(BaseModel):
    caption: str
    source: Literal["TikTok", "Instagram"] = "TikTok"


class IngestResponse(BaseModel):
    success: bool = True
    recipe: RecipeResponse
    message: Optional[str] = None


class RecipeListResponse(BaseModel):
    success: bool = True
    recipes: list[RecipeResponse] = Field(default_factory=list)


class ErrorDetail(BaseModel):
    kind: str
    message: str
