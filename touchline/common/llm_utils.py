"""Strict parsing of structured LLM output."""

from __future__ import annotations

import json


def parse_llm_json(raw: str) -> dict:
    """Parse a JSON object from an LLM response.

    Markdown code fences around the payload are stripped; anything else
    (preamble text, trailing commentary, arrays, scalars) is rejected.

    Raises:
        ValueError: if the response is empty, not valid JSON, or not an object
    """
    if not raw or not raw.strip():
        raise ValueError("Empty LLM response")

    text = raw.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        lines = [l for l in lines if not l.strip().startswith("```")]
        text = "\n".join(lines).strip()

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Malformed JSON in LLM response: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

    return data
