from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from recipe_ingest.app.domain.models import RecipeSource, SourceOrigin


@dataclass(frozen=True)
class SourceReference:
    source: RecipeSource
    url: str = ""
    image: Optional[Union[str, bytes]] = None
    media_type: Optional[str] = None

    @classmethod
    def from_url(cls, source: RecipeSource, url: str) -> "SourceReference":
        return cls(source=source, url=url.strip())

    @classmethod
    def from_image(cls, image: Union[str, bytes], media_type: Optional[str] = None) -> "SourceReference":
        return cls(source=RecipeSource.IMAGE_SCAN, image=image, media_type=media_type)


@dataclass(frozen=True)
class SourceDocument:
    origin: SourceOrigin
    raw_text: Optional[str] = None
    raw_binary: Optional[bytes] = None
    media_type: Optional[str] = None
    embedded_structured_data: Optional[dict[str, Any]] = None
    thumbnail_url: Optional[str] = None
    author: Optional[str] = None

    @property
    def has_structured_data(self) -> bool:
        return self.embedded_structured_data is not None
