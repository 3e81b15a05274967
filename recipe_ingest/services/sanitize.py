from __future__ import annotations

import json
import re
from typing import Any

from recipe_ingest.services.errors import MalformedOutputError

CODE_FENCE_PATTERN = re.compile(r"```[A-Za-z0-9_+-]*")
SNIPPET_CHARS = 100


def strip_code_fences(text: str) -> str:
    return CODE_FENCE_PATTERN.sub("", text)


def extract_json_span(text: str) -> str:
    cleaned = strip_code_fences(text.strip()).strip()

    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise MalformedOutputError(
            "Model output did not contain a JSON object.",
            snippet=cleaned[:SNIPPET_CHARS],
        )

    return cleaned[start:end + 1]


def parse_model_output(text: str) -> dict[str, Any]:
    """
    Turn raw model text into a JSON object.

    Trims, drops code fences wherever they appear, slices from the first
    "{" to the last "}" and parses that span.
    """
    span = extract_json_span(text or "")

    try:
        data = json.loads(span)
    except json.JSONDecodeError as error:
        raise MalformedOutputError(
            f"Model output is not valid JSON: {error.msg}",
            snippet=span[:SNIPPET_CHARS],
        ) from error

    if not isinstance(data, dict):
        raise MalformedOutputError(
            "Model output JSON is not an object.",
            snippet=span[:SNIPPET_CHARS],
        )

    return data
