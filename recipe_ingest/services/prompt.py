from __future__ import annotations

import json

EXPECTED_FIELDS = (
    "title",
    "description",
    "prepTime",
    "cookTime",
    "totalTime",
    "servings",
    "difficulty",
    "ingredients",
    "instructions",
    "tags",
    "notes",
)

OUTPUT_TEMPLATE = {
    "title": "Recipe name",
    "description": "Brief description",
    "prepTime": "X min",
    "cookTime": "X min",
    "totalTime": "X min",
    "servings": "X",
    "difficulty": "Easy/Medium/Hard",
    "ingredients": ["ingredient 1", "ingredient 2"],
    "instructions": ["Step 1", "Step 2"],
    "tags": ["tag1", "tag2"],
    "notes": "Tips",
}

EXTRACTION_RULES = """Rules:
- Respond with exactly one JSON object using only the keys shown above.
- Do not wrap the JSON in markdown code fences and do not add any commentary before or after it.
- Copy ingredients and instruction steps verbatim from the source. Do not paraphrase, translate or reformat them.
- Put one ingredient per array entry and one step per array entry.
- If a field is not present in the source, use an empty string "" or an empty array []. Never invent content."""


def build_extraction_prompt(hint_label: str, text: str | None = None) -> str:
    template = json.dumps(OUTPUT_TEMPLATE, indent=2, ensure_ascii=False)

    if text is None:
        header = f"Extract a recipe from the attached {hint_label}."
    else:
        header = f"Extract a recipe from this {hint_label}."

    prompt = (
        f"{header} Return ONLY valid JSON in this exact format:\n\n"
        f"{template}\n\n"
        f"{EXTRACTION_RULES}"
    )

    if text is not None:
        prompt += f"\n\nSource:\n{text}"

    return prompt
