"""
Field-level normalizers shared by the structured and generative extractors.

Every helper is pure: absent, null or wrongly shaped input resolves to the
field's typed zero value instead of raising.
"""
from __future__ import annotations

import json
import re
from typing import Any

from recipe_ingest.app.domain.models import DEFAULT_TITLE

ISO_DURATION_PATTERN = re.compile(
    r"^P(?=\d|T\d)(?:(?P<days>\d+)D)?"
    r"(?:T(?=\d)(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?P<seconds>\d+(?:\.\d+)?S)?)?$",
    re.IGNORECASE,
)
TEXT_LIKE_KEYS = ("text", "name")


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_display(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        try:
            return json.dumps(value, ensure_ascii=False, sort_keys=True)
        except (TypeError, ValueError):
            return str(value)
    return str(value)


def coerce_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    if _is_number(value):
        return str(value)
    return ""


def coerce_title(value: Any) -> str:
    title = coerce_string(value).strip()
    return title or DEFAULT_TITLE


def coerce_string_list(value: Any) -> list[str]:
    """A list keeps its scalar entries in order, a single scalar is wrapped."""
    if isinstance(value, list):
        return [_to_display(item) for item in value if item is not None]
    if isinstance(value, str) or _is_number(value):
        return [str(value)]
    return []


def format_duration(value: Any) -> str:
    """
    Turn an ISO-8601 duration (PT1H30M) into "1h 30min".

    Zero or absent components are omitted. Strings that are not ISO durations,
    or that carry only seconds, are returned unchanged.
    """
    if value is None:
        return ""
    if not isinstance(value, str):
        return coerce_string(value)

    text = value.strip()
    if not text:
        return ""

    match = ISO_DURATION_PATTERN.match(text)
    if not match:
        return value

    hours = int(match.group("days") or 0) * 24 + int(match.group("hours") or 0)
    minutes = int(match.group("minutes") or 0)
    if not hours and not minutes and match.group("seconds"):
        # seconds only
        return value

    parts: list[str] = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}min")
    return " ".join(parts)


def coerce_servings(value: Any) -> str:
    if isinstance(value, list):
        return coerce_servings(value[0]) if value else ""
    return coerce_string(value)


def coerce_image_url(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return coerce_image_url(value[0]) if value else ""
    if isinstance(value, dict):
        return coerce_string(value.get("url") or value.get("contentUrl"))
    return ""


def flatten_ingredients(value: Any) -> list[str]:
    if isinstance(value, list):
        return [_to_display(item) for item in value if item is not None]
    if isinstance(value, str):
        return [value]
    return []


def _step_text(step: dict[str, Any]) -> str | None:
    for key in TEXT_LIKE_KEYS:
        candidate = step.get(key)
        if isinstance(candidate, str) and candidate.strip():
            return candidate
    return None


def _flatten_step(step: Any) -> list[str]:
    if step is None:
        return []
    if isinstance(step, str):
        return [step]
    if isinstance(step, dict):
        nested = step.get("itemListElement")
        if isinstance(nested, list):
            return [text for item in nested for text in _flatten_step(item)]
        text = _step_text(step)
        if text is not None:
            return [text]
        if any(isinstance(step.get(key), str) for key in TEXT_LIKE_KEYS):
            # blank step
            return []
        return [_to_display(step)]
    if isinstance(step, list):
        return [text for item in step for text in _flatten_step(item)]
    return [_to_display(step)]


def flatten_instructions(value: Any) -> list[str]:
    """
    Flatten recipe steps into an ordered list of strings.

    A single string is split on newlines with blank lines dropped. In a list,
    strings are kept verbatim, step objects contribute their text field,
    HowToSection objects contribute their nested steps, and any other object
    is serialized rather than dropped.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [line for line in value.splitlines() if line.strip()]
    if isinstance(value, dict):
        return _flatten_step(value)
    if isinstance(value, list):
        return [text for item in value for text in _flatten_step(item)]
    return []
