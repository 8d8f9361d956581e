"""
JSON extraction for DeepSeek completion text.

The completion is requested in JSON mode, but models still occasionally
wrap the object in a markdown code block. Anything beyond that (prose,
truncated output, a top-level array) is rejected rather than repaired.
"""
import json
import re
from typing import Any

from .structured_logging import StructuredLogger

logger = StructuredLogger(__name__)

_CODE_BLOCK_RE = re.compile(r'^```(?:json)?\s*([\s\S]*?)\s*```$', re.IGNORECASE)


class MalformedOutputError(ValueError):
    """The model output could not be read as a JSON object."""


def strip_code_fence(text: str) -> str:
    """Remove a single surrounding ```json ... ``` fence, if present."""
    text = text.strip()
    match = _CODE_BLOCK_RE.match(text)
    if match:
        return match.group(1)
    return text


def parse_json_object(text: Any) -> dict:
    """Parse model output into a dict.

    Raises:
        MalformedOutputError: empty text, invalid JSON, or a top-level
            value that is not an object
    """
    if not isinstance(text, str) or not text.strip():
        raise MalformedOutputError("Model response is empty")

    candidate = strip_code_fence(text)
    try:
        # strict=False tolerates raw newlines inside string values
        data = json.loads(candidate, strict=False)
    except (ValueError, RecursionError) as e:
        # ValueError covers JSONDecodeError and over-long integer literals
        logger.warning("JSON parse error", error=str(e), raw_text=text[:200])
        raise MalformedOutputError(f"Model response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedOutputError(
            f"Expected a JSON object, got {type(data).__name__}"
        )
    return data
