from __future__ import annotations

import base64
import binascii
import json
import logging
import re
from typing import Any, Iterator, Optional, Union

import httpx
from bs4 import BeautifulSoup

from recipe_ingest.app.domain.models import RecipeSource, SourceOrigin
from recipe_ingest.services.errors import FetchError, InvalidURLError, NetworkTimeoutError
from recipe_ingest.services.ids import matches_platform
from recipe_ingest.services.types import SourceDocument

logger = logging.getLogger(__name__)

EMBED_TIMEOUT_SECONDS = 10.0
WEBPAGE_TIMEOUT_SECONDS = 15.0
WEBPAGE_MAX_CHARS = 10_000

OEMBED_ENDPOINTS = {
    RecipeSource.TIKTOK: "https://www.tiktok.com/oembed",
    RecipeSource.INSTAGRAM: "https://api.instagram.com/oembed",
}
EMBED_HEADERS = {"User-Agent": "Mozilla/5.0 (compatible; RecipeBot/1.0)"}
BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

WHITESPACE_PATTERN = re.compile(r"\s+")
DATA_URI_PATTERN = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>;[^,]*)?,", re.IGNORECASE)
NON_VISIBLE_TAGS = ("script", "style", "noscript", "template", "svg", "iframe")

DEFAULT_IMAGE_MEDIA_TYPE = "image/jpeg"
SUPPORTED_IMAGE_MEDIA_TYPES = {"image/jpeg", "image/png", "image/webp", "image/gif"}
IMAGE_MEDIA_TYPE_ALIASES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
    "gif": "image/gif",
    "image/jpg": "image/jpeg",
    "image/pjpeg": "image/jpeg",
}


def _clean_string(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def _http_get(
    url: str,
    *,
    origin: SourceOrigin,
    timeout: float,
    client: httpx.Client | None = None,
    headers: dict[str, str] | None = None,
    params: dict[str, str] | None = None,
) -> httpx.Response:
    owns_client = client is None
    http = client or httpx.Client(follow_redirects=True)
    try:
        response = http.get(url, params=params, headers=headers, timeout=timeout)
        response.raise_for_status()
        return response
    except httpx.TimeoutException as error:
        raise NetworkTimeoutError(origin, url, timeout) from error
    except httpx.HTTPStatusError as error:
        raise FetchError(origin, f"HTTP {error.response.status_code} fetching {url}") from error
    except httpx.HTTPError as error:
        raise FetchError(origin, f"Request to {url} failed: {error}") from error
    finally:
        if owns_client:
            http.close()


# Social embeds

def fetch_social_embed(
    url: str,
    source: RecipeSource,
    *,
    client: httpx.Client | None = None,
    timeout: float = EMBED_TIMEOUT_SECONDS,
) -> SourceDocument:
    origin = SourceOrigin.SOCIAL_EMBED
    endpoint = OEMBED_ENDPOINTS.get(source)
    if endpoint is None:
        raise FetchError(origin, f"No embed endpoint for source {source.value}")
    if not matches_platform(url, source):
        raise InvalidURLError(origin, f"URL is not a {source.value} post: {url}")

    response = _http_get(
        endpoint,
        origin=origin,
        timeout=timeout,
        client=client,
        headers=EMBED_HEADERS,
        params={"url": url},
    )

    try:
        payload = response.json()
    except ValueError as error:
        raise FetchError(origin, f"{source.value} embed response was not valid JSON") from error

    if not isinstance(payload, dict):
        raise FetchError(origin, f"{source.value} embed response was not an object")

    caption = payload.get("title") if isinstance(payload.get("title"), str) else ""

    logger.info("fetch.embed source=%s caption_chars=%d", source.value, len(caption))
    return SourceDocument(
        origin=origin,
        raw_text=caption,
        thumbnail_url=_clean_string(payload.get("thumbnail_url")),
        author=_clean_string(payload.get("author_name")),
    )


# Web pages

def _is_ld_json(value: Optional[str]) -> bool:
    return bool(value) and value.lower().startswith("application/ld+json")


def _is_recipe_type(value: Any) -> bool:
    types = value if isinstance(value, list) else [value]
    for entry in types:
        if not isinstance(entry, str):
            continue
        # "Recipe", "schema:Recipe", "https://schema.org/Recipe"
        name = entry.rsplit("/", 1)[-1].rsplit(":", 1)[-1]
        if name.lower() == "recipe":
            return True
    return False


def _structured_candidates(data: Any) -> Iterator[dict[str, Any]]:
    items = data if isinstance(data, list) else [data]
    for item in items:
        if not isinstance(item, dict):
            continue
        yield item
        graph = item.get("@graph")
        if isinstance(graph, list):
            for node in graph:
                if isinstance(node, dict):
                    yield node


def find_structured_recipe(soup: BeautifulSoup) -> dict[str, Any] | None:
    """Return the first schema.org Recipe object embedded in the page."""
    for script in soup.find_all("script", attrs={"type": _is_ld_json}):
        raw_json = script.string or script.get_text()
        if not raw_json or not raw_json.strip():
            continue
        try:
            data = json.loads(raw_json)
        except json.JSONDecodeError:
            logger.debug("fetch.webpage skipping unparsable ld+json block")
            continue

        for candidate in _structured_candidates(data):
            if _is_recipe_type(candidate.get("@type")):
                return candidate

    return None


def _find_og_image(soup: BeautifulSoup) -> str | None:
    tag = soup.find("meta", attrs={"property": "og:image"})
    if tag is None:
        return None
    return _clean_string(tag.get("content"))


def visible_text(soup: BeautifulSoup, max_chars: int = WEBPAGE_MAX_CHARS) -> str:
    for tag in soup(NON_VISIBLE_TAGS):
        tag.decompose()
    text = WHITESPACE_PATTERN.sub(" ", soup.get_text(" ")).strip()
    return text[:max_chars]


def fetch_web_page(
    url: str,
    *,
    client: httpx.Client | None = None,
    timeout: float = WEBPAGE_TIMEOUT_SECONDS,
    max_chars: int = WEBPAGE_MAX_CHARS,
) -> SourceDocument:
    origin = SourceOrigin.WEB_PAGE
    if not matches_platform(url, RecipeSource.WEBSITE):
        raise InvalidURLError(origin, f"Not an http(s) URL: {url}")

    response = _http_get(url, origin=origin, timeout=timeout, client=client, headers=BROWSER_HEADERS)
    soup = BeautifulSoup(response.text, "html.parser")

    thumbnail_url = _find_og_image(soup)
    structured = find_structured_recipe(soup)
    if structured is not None:
        logger.info("fetch.webpage structured=yes url=%s", url)
        return SourceDocument(
            origin=origin,
            embedded_structured_data=structured,
            thumbnail_url=thumbnail_url,
        )

    text = visible_text(soup, max_chars)
    logger.info("fetch.webpage structured=no url=%s text_chars=%d", url, len(text))
    return SourceDocument(origin=origin, raw_text=text, thumbnail_url=thumbnail_url)


# Images

def normalize_image_media_type(value: Optional[str]) -> str:
    if not value:
        return DEFAULT_IMAGE_MEDIA_TYPE
    lowered = value.strip().lower()
    lowered = IMAGE_MEDIA_TYPE_ALIASES.get(lowered, lowered)
    if lowered in SUPPORTED_IMAGE_MEDIA_TYPES:
        return lowered
    return DEFAULT_IMAGE_MEDIA_TYPE


def load_image(
    image: Union[str, bytes, None],
    media_type: Optional[str] = None,
) -> SourceDocument:
    origin = SourceOrigin.IMAGE
    if not image:
        raise FetchError(origin, "Image payload is empty.")

    if isinstance(image, bytes):
        resolved_type = normalize_image_media_type(media_type)
        encoded = base64.b64encode(image).decode("ascii")
        return SourceDocument(
            origin=origin,
            raw_binary=image,
            media_type=resolved_type,
            thumbnail_url=f"data:{resolved_type};base64,{encoded}",
        )

    payload = image.strip()
    declared = media_type
    body = payload
    match = DATA_URI_PATTERN.match(payload)
    if match:
        declared = match.group("mime") or media_type
        body = payload[match.end():]

    try:
        raw = base64.b64decode(WHITESPACE_PATTERN.sub("", body), validate=True)
    except (binascii.Error, ValueError) as error:
        raise FetchError(origin, "Image payload is not valid base64.") from error
    if not raw:
        raise FetchError(origin, "Image payload is empty.")

    resolved_type = normalize_image_media_type(declared)
    thumbnail_url = payload if match else f"data:{resolved_type};base64,{body}"

    logger.info("fetch.image media_type=%s bytes=%d", resolved_type, len(raw))
    return SourceDocument(
        origin=origin,
        raw_binary=raw,
        media_type=resolved_type,
        thumbnail_url=thumbnail_url,
    )
