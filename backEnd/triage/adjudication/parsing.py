"""Extraction of the JSON verdict object from classifier text."""

import json
import re
from typing import Any


CODE_BLOCK_PATTERN = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)


def extract_json_object(text: str) -> dict[str, Any]:
    """
    Find the JSON object in a classifier response.

    Accepts a bare object, an object inside a markdown code block, or an
    object surrounded by prose.

    Raises:
        ValueError: If no JSON object can be decoded
    """
    if not text or not text.strip():
        raise ValueError("Empty response from classifier")

    attempts = [text.strip()]
    attempts.extend(CODE_BLOCK_PATTERN.findall(text))
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        attempts.append(text[start:end + 1])

    for attempt in attempts:
        try:
            data = json.loads(attempt)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data

    raise ValueError("No JSON object found in classifier response")
