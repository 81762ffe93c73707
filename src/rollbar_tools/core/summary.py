"""Extract a one-line error message from an occurrence payload."""

from typing import Any

from rollbar_tools.core.models import ItemInstance

UNKNOWN = "unknown"

# Tried in order; integer segments index into lists.
PREFERRED_ERROR_PATHS: tuple[tuple[str | int, ...], ...] = (
    ("trace", "exception", "description"),
    ("trace", "exception", "message"),
    ("trace_chain", 0, "exception", "description"),
    ("trace_chain", 0, "exception", "message"),
    ("body", "trace_chain", 0, "exception", "description"),
    ("body", "trace_chain", 0, "exception", "message"),
    ("exception", "description"),
    ("exception", "message"),
    ("message", "body"),
    ("message",),
    ("body", "message"),
    ("body",),
)


def main_error(instance: ItemInstance | None) -> str:
    """Return the most descriptive error text found in an instance.

    The ``data`` payload is searched before ``body``.
    """
    if instance is None:
        return UNKNOWN
    for payload in (instance.data, instance.body):
        message = _from_payload(payload)
        if message:
            return message
    return UNKNOWN


def _from_payload(payload: Any) -> str:
    if payload is None:
        return ""
    for path in PREFERRED_ERROR_PATHS:
        message = _string_at_path(payload, path)
        if message:
            return message
    if isinstance(payload, str):
        return payload
    return ""


def _string_at_path(value: Any, path: tuple[str | int, ...]) -> str:
    current = value
    for segment in path:
        if isinstance(segment, int):
            if not isinstance(current, list) or segment >= len(current):
                return ""
            current = current[segment]
        elif isinstance(current, dict):
            if segment not in current:
                return ""
            current = current[segment]
        else:
            return ""
    return current if isinstance(current, str) else ""
