from __future__ import annotations

from datetime import datetime

import pytest

from recipe_ingest.app.domain.models import (
    DEFAULT_TITLE,
    Recipe,
    RecipeSource,
    SourceOrigin,
)
from recipe_ingest.services.types import SourceDocument, SourceReference


class TestRecipeSource:
    def test_values(self) -> None:
        assert RecipeSource.TIKTOK.value == "TikTok"
        assert RecipeSource.INSTAGRAM.value == "Instagram"
        assert RecipeSource.WEBSITE.value == "Website"
        assert RecipeSource.IMAGE_SCAN.value == "ImageScan"

    def test_is_string_enum(self) -> None:
        assert isinstance(RecipeSource.TIKTOK, str)
        assert RecipeSource("Instagram") is RecipeSource.INSTAGRAM

    @pytest.mark.parametrize(
        "source, origin",
        [
            (RecipeSource.TIKTOK, SourceOrigin.SOCIAL_EMBED),
            (RecipeSource.INSTAGRAM, SourceOrigin.SOCIAL_EMBED),
            (RecipeSource.WEBSITE, SourceOrigin.WEB_PAGE),
            (RecipeSource.IMAGE_SCAN, SourceOrigin.IMAGE),
        ],
    )
    def test_origin(self, source: RecipeSource, origin: SourceOrigin) -> None:
        assert source.origin is origin


class TestRecipe:
    def test_defaults_are_fully_populated(self) -> None:
        recipe = Recipe()

        assert recipe.title == DEFAULT_TITLE == "Untitled Recipe"
        assert recipe.description == ""
        assert recipe.prep_time == ""
        assert recipe.cook_time == ""
        assert recipe.total_time == ""
        assert recipe.servings == ""
        assert recipe.difficulty == ""
        assert recipe.ingredients == []
        assert recipe.instructions == []
        assert recipe.tags == []
        assert recipe.notes == ""
        assert recipe.source_url == ""
        assert recipe.thumbnail_url == ""
        assert recipe.favorite is False
        assert isinstance(recipe.created_at, datetime)
        assert recipe.created_at.tzinfo is not None

    def test_ids_are_unique(self) -> None:
        ids = {Recipe().id for _ in range(200)}
        assert len(ids) == 200

    def test_lists_are_not_shared(self) -> None:
        first = Recipe()
        second = Recipe()
        first.ingredients.append("1 egg")
        assert second.ingredients == []


class TestSourceReference:
    def test_from_url_strips_whitespace(self) -> None:
        reference = SourceReference.from_url(RecipeSource.WEBSITE, "  https://example.com/r  ")
        assert reference.url == "https://example.com/r"
        assert reference.image is None

    def test_from_image(self) -> None:
        reference = SourceReference.from_image("aGVsbG8=", "image/png")
        assert reference.source is RecipeSource.IMAGE_SCAN
        assert reference.url == ""
        assert reference.media_type == "image/png"


class TestSourceDocument:
    def test_structured_flag(self) -> None:
        plain = SourceDocument(origin=SourceOrigin.WEB_PAGE, raw_text="text")
        marked = SourceDocument(origin=SourceOrigin.WEB_PAGE, embedded_structured_data={"@type": "Recipe"})
        assert plain.has_structured_data is False
        assert marked.has_structured_data is True

    def test_is_immutable(self) -> None:
        document = SourceDocument(origin=SourceOrigin.SOCIAL_EMBED, raw_text="caption")
        with pytest.raises(AttributeError):
            document.raw_text = "changed"  # type: ignore[misc]
