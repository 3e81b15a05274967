# recipe_ingest/services/ids.py
import re
from urllib.parse import urlparse

from recipe_ingest.app.domain.models import RecipeSource

# TikTok: full video links and short vm./vt. links
_TIKTOK_RE = re.compile(
    r"^https?://(?:[\w-]+\.)?tiktok\.com/", re.IGNORECASE
)

# Instagram post/reel
_IG_RE = re.compile(
    r"^https?://(?:www\.)?instagram\.com/(?:[\w.]+/)?(?:reel|reels|p|tv)/[A-Za-z0-9_-]+", re.IGNORECASE
)


def is_http_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def detect_platform(url: str) -> RecipeSource:
    """Return the recipe source a URL belongs to; anything else is a website."""
    if _TIKTOK_RE.search(url):
        return RecipeSource.TIKTOK
    if _IG_RE.search(url):
        return RecipeSource.INSTAGRAM
    return RecipeSource.WEBSITE


def matches_platform(url: str, source: RecipeSource) -> bool:
    if source is RecipeSource.WEBSITE:
        return is_http_url(url)
    return detect_platform(url) is source
