"""Helpers for parsing model output."""

import json
import re


def _strip_llm_fences(raw_output: str) -> str:
    """Strip markdown code fences from LLM output.

    Handles: ```json ... ```, ``` ... ```, leading/trailing whitespace.
    """
    cleaned = raw_output.strip()

    fence_match = re.search(r"```(?:json)?\s*\n?(.*?)```", cleaned, re.DOTALL)
    if fence_match:
        return fence_match.group(1).strip()

    return cleaned


def parse_llm_json_dict(raw_output: str) -> dict:
    """
    Parse LLM output as a JSON object.

    Code fences are stripped; if prose surrounds the object, the outermost
    ``{...}`` span is used.

    Raises:
        json.JSONDecodeError: If no JSON object can be parsed
        ValueError: If the JSON is not an object
    """
    cleaned = _strip_llm_fences(raw_output)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        object_match = re.search(r"\{.*\}", cleaned, re.DOTALL)
        if not object_match:
            raise
        parsed = json.loads(object_match.group(0))

    if not isinstance(parsed, dict):
        raise ValueError("Expected a JSON object")
    return parsed
