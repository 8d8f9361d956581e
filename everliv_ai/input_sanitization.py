"""
Input sanitization for inbound analysis requests.

Lab text is only cleaned of control characters and length-capped: comparison
signs such as "< 5.2" are meaningful and must reach the model unchanged.
"""

import base64
import binascii
import re
from typing import Optional


MAX_ANALYSIS_TEXT_LENGTH = 50000
MAX_QUESTION_LENGTH = 5000
MAX_IMAGE_BYTES = 10 * 1024 * 1024

ALLOWED_UPLOAD_TYPES = frozenset({
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/webp",
    "image/gif",
})

_DATA_URL_RE = re.compile(r'^data:(?P<mime>[\w/+.-]+);base64,', re.IGNORECASE)


def sanitize_text(text: Optional[str], max_length: Optional[int] = None) -> str:
    """Strip surrounding whitespace and control characters, then truncate."""
    if not text:
        return ""

    text = _remove_control_chars(text.strip())

    if max_length and len(text) > max_length:
        text = text[:max_length]

    return text


def sanitize_analysis_text(text: str) -> str:
    return sanitize_text(text, max_length=MAX_ANALYSIS_TEXT_LENGTH)


def sanitize_question(text: Optional[str]) -> str:
    return sanitize_text(text, max_length=MAX_QUESTION_LENGTH)


def _remove_control_chars(text: str) -> str:
    """Remove control characters, keeping tabs and newlines."""
    return re.sub(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]', '', text)


def validate_image_type(content_type: str) -> bool:
    """Validate image content type."""
    return (content_type or "").lower() in ALLOWED_UPLOAD_TYPES


def split_data_url(payload: str) -> tuple[str, Optional[str]]:
    """Accept either bare base64 or a data URL.

    Returns:
        (base64 payload, MIME type from the data URL or None)
    """
    payload = payload.strip()
    match = _DATA_URL_RE.match(payload)
    if match:
        return payload[match.end():], match.group("mime").lower()
    return payload, None


def validate_base64_image(payload: str) -> str:
    """Return the payload with whitespace removed if it is decodable base64.

    Raises:
        ValueError: not base64, or larger than MAX_IMAGE_BYTES once decoded
    """
    compact = re.sub(r'\s+', '', payload)
    try:
        decoded = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError("Image data is not valid base64") from e
    if not decoded:
        raise ValueError("Image data is empty")
    if len(decoded) > MAX_IMAGE_BYTES:
        raise ValueError(f"Image exceeds {MAX_IMAGE_BYTES // (1024 * 1024)} MB")
    return compact
