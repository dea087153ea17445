"""Checks and clean-up applied before data is sent to the backend."""

import re
from typing import Any

API_KEY_PREFIX = "sm_"
MIN_API_KEY_LENGTH = 20
MAX_CONTAINER_TAG_LENGTH = 100
MAX_CONTENT_LENGTH = 100_000
MAX_METADATA_KEYS = 50
MAX_METADATA_VALUE_LENGTH = 1024

_CONTAINER_TAG = re.compile(r"^[a-zA-Z0-9_-]+$")
# C0 controls except tab, newline and carriage return, plus DEL.
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

MetadataValue = str | int | float | bool


def validate_api_key_format(key: str) -> tuple[bool, str | None]:
    """Returns (valid, reason)."""
    if not key:
        return False, "key is empty"
    if not key.startswith(API_KEY_PREFIX):
        return False, f"key should start with '{API_KEY_PREFIX}'"
    if len(key) < MIN_API_KEY_LENGTH:
        return False, "key is too short"
    if any(c.isspace() for c in key):
        return False, "key contains whitespace"
    return True, None


def validate_container_tag(tag: str) -> tuple[bool, str | None]:
    """Returns (valid, reason)."""
    if not tag:
        return False, "tag is empty"
    if len(tag) > MAX_CONTAINER_TAG_LENGTH:
        return False, f"tag exceeds {MAX_CONTAINER_TAG_LENGTH} characters"
    if not _CONTAINER_TAG.match(tag):
        return False, "tag should only contain letters, digits, '_' and '-'"
    return True, None


def sanitize_content(content: str, max_length: int = MAX_CONTENT_LENGTH) -> str:
    """Strip control characters and cap the length."""
    cleaned = _CONTROL_CHARS.sub("", content)
    return cleaned[:max_length]


def validate_content_length(
    content: str, min_length: int = 1, max_length: int = MAX_CONTENT_LENGTH
) -> tuple[bool, str | None]:
    if len(content) < min_length:
        return False, f"content shorter than {min_length} characters"
    if len(content) > max_length:
        return False, f"content longer than {max_length} characters"
    return True, None


def sanitize_metadata(meta: dict[str, Any]) -> dict[str, MetadataValue]:
    """Keep scalar values only, with string keys and bounded strings."""
    clean: dict[str, MetadataValue] = {}
    for key, value in meta.items():
        if len(clean) >= MAX_METADATA_KEYS:
            break
        if not isinstance(key, str) or not key:
            continue
        if isinstance(value, str):
            clean[key] = value[:MAX_METADATA_VALUE_LENGTH]
        elif isinstance(value, (bool, int, float)):
            clean[key] = value
    return clean
