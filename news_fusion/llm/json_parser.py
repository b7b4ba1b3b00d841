"""Parsing of JSON documents returned as free text by a generation service."""

from __future__ import annotations

import json
from typing import Any


def parse_json_response(content: str, extract_embedded: bool = False) -> Any:
    """Parse a completion as JSON.

    Args:
        content: Raw completion text
        extract_embedded: When strict parsing fails, retry on a ```json fenced
            block or the outermost ``{...}`` span of the text

    Raises:
        json.JSONDecodeError: If no parseable JSON is found
    """
    if not content or not content.strip():
        raise json.JSONDecodeError("Empty content", content or "", 0)
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        if not extract_embedded:
            raise
    return json.loads(_extract_json_snippet(content))


def _extract_json_snippet(content: str) -> str:
    fence = _extract_fenced_json(content)
    if fence:
        return fence
    start = content.find("{")
    end = content.rfind("}")
    if start == -1 or end <= start:
        raise json.JSONDecodeError("No JSON object found", content, 0)
    return content[start : end + 1]


def _extract_fenced_json(content: str) -> str | None:
    lines = content.splitlines()
    start_idx = None
    for idx, line in enumerate(lines):
        stripped = line.strip()
        if stripped.startswith("```") and stripped[3:].strip().lower() in ("", "json"):
            start_idx = idx + 1
            break
    if start_idx is None:
        return None
    for idx in range(start_idx, len(lines)):
        if lines[idx].strip().startswith("```"):
            snippet = "\n".join(lines[start_idx:idx]).strip()
            return snippet or None
    return None
