"""Scrub access tokens from strings and JSON-like values."""

import re
from typing import Any

from pydantic import BaseModel

REDACTED = "[REDACTED]"

_ACCESS_TOKEN_QUERY = re.compile(r"([?&]access_token=)[^&\s]+")

SENSITIVE_KEYWORDS = ("token", "authorization", "secret", "password", "api_key", "apikey")


def redact_string(value: str, token: str | None = None) -> str:
    """Remove access_token query values and any literal occurrence of token."""
    if not value:
        return value
    redacted = _ACCESS_TOKEN_QUERY.sub(rf"\g<1>{REDACTED}", value)
    if not token:
        return redacted
    return redacted.replace(token, REDACTED)


def redact_value(value: Any, token: str | None = None) -> Any:
    """Return a copy of value with sensitive keys and token occurrences masked.

    Dicts, lists, strings and pydantic models are walked; anything else is
    returned unchanged.
    """
    if isinstance(value, BaseModel):
        return redact_value(value.model_dump(mode="json"), token)
    if isinstance(value, dict):
        return {
            key: REDACTED if _is_sensitive(str(key)) else redact_value(nested, token)
            for key, nested in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact_value(nested, token) for nested in value]
    if isinstance(value, str):
        return redact_string(value, token)
    return value


def _is_sensitive(key: str) -> bool:
    lower = key.lower()
    return any(keyword in lower for keyword in SENSITIVE_KEYWORDS)
