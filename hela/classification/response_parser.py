"""Helpers to turn generator output into a validated ItemRecord."""

import json
import re
from typing import Any

from hela.classification.models import MAX_TAGS, MIN_TAGS, ItemRecord
from hela.exceptions import ErrorCode, GenerationFailedError

_FENCE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)

REQUIRED_FIELDS = ("title", "summary", "category", "tags")


def extract_json_object(text: str) -> dict[str, Any]:
    """Return the first JSON object found in the response text.

    Markdown code fences and chatter around the object are tolerated.

    Raises:
        GenerationFailedError: If no JSON object can be decoded.
    """
    fenced = _FENCE.search(text)
    candidate = fenced.group(1) if fenced else text

    start = candidate.find("{")
    end = candidate.rfind("}")
    if start == -1 or end <= start:
        raise GenerationFailedError(
            "Response contains no JSON object",
            code=ErrorCode.GENERATION_MALFORMED,
            details={"response": text[:200]},
        )

    try:
        data = json.loads(candidate[start : end + 1])
    except json.JSONDecodeError as e:
        raise GenerationFailedError(
            f"Response is not valid JSON: {e}",
            code=ErrorCode.GENERATION_MALFORMED,
            details={"response": text[:200]},
        ) from e

    if not isinstance(data, dict):
        raise GenerationFailedError(
            "Response JSON is not an object",
            code=ErrorCode.GENERATION_MALFORMED,
        )
    return data


def parse_item_record(
    text: str,
    min_tags: int = MIN_TAGS,
    max_tags: int = MAX_TAGS,
) -> ItemRecord:
    """Parse and validate a generator response.

    Args:
        text: Raw response text.
        min_tags: Smallest accepted tag count.
        max_tags: Largest accepted tag count.

    Returns:
        The accepted record.

    Raises:
        GenerationFailedError: If the text holds no JSON object.
        RecordValidationError: If the object has the wrong shape or breaks a rule.
    """
    data = extract_json_object(text)

    missing = [name for name in REQUIRED_FIELDS if name not in data]
    if missing:
        raise GenerationFailedError(
            f"Response is missing fields: {', '.join(missing)}",
            code=ErrorCode.GENERATION_MALFORMED,
            details={"missing": missing},
        )

    attributes = data.get("attributes") or {}
    if isinstance(attributes, dict):
        # Models often emit null for unknown attributes
        data["attributes"] = {k: v for k, v in attributes.items() if v is not None}

    return ItemRecord.validated(data, min_tags=min_tags, max_tags=max_tags)
