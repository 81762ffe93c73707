"""Client-side filtering and ordering of item listings.

Rollbar's listing endpoints take few query parameters, so the active and
recent views are narrowed after the page has been fetched.
"""

from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, NonNegativeInt, model_validator

from rollbar_tools.core.exceptions import ValidationError
from rollbar_tools.core.models import Item


def parse_filter_time(value: str | None, field: str = "since") -> datetime | None:
    """Parse a time bound given as unix seconds or an RFC 3339 timestamp.

    Raises:
        ValidationError: If the value is neither form, or has no UTC offset
    """
    if value is None or not value.strip():
        return None
    text = value.strip()
    if text.isascii() and text.isdigit():
        return datetime.fromtimestamp(int(text), tz=timezone.utc)
    if text.endswith("Z"):
        # fromisoformat() only accepts 'Z' from 3.11
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(
            f"Invalid time for --{field}: {value!r} (use unix seconds or RFC 3339)", field=field
        ) from None
    if parsed.tzinfo is None:
        raise ValidationError(f"Time for --{field} needs a UTC offset: {value!r}", field=field)
    return parsed.astimezone(timezone.utc)


class IssueFilters(BaseModel):
    """Narrowing applied to item listings.

    Empty text filters and unset bounds match everything. Bounds are inclusive.
    """

    environment: str = Field(default="", description="Environment, case-insensitive")
    status: str = Field(default="", description="Status, case-insensitive")
    since: datetime | None = Field(default=None, description="Earliest last occurrence")
    until: datetime | None = Field(default=None, description="Latest last occurrence")
    min_occurrences: NonNegativeInt | None = Field(default=None, description="Minimum total")
    max_occurrences: NonNegativeInt | None = Field(default=None, description="Maximum total")

    class Config:
        """Pydantic configuration."""

        frozen = True
        str_strip_whitespace = True

    @model_validator(mode="after")
    def _check_bounds(self) -> "IssueFilters":
        if self.since is not None and self.until is not None and self.since > self.until:
            raise ValueError("--since must be before or equal to --until")
        if (
            self.min_occurrences is not None
            and self.max_occurrences is not None
            and self.min_occurrences > self.max_occurrences
        ):
            raise ValueError("--min-occurrences must be <= --max-occurrences")
        return self

    @property
    def active(self) -> bool:
        """Whether any filter is set."""
        return bool(
            self.environment
            or self.status
            or self.since is not None
            or self.until is not None
            or self.min_occurrences is not None
            or self.max_occurrences is not None
        )

    def matches(self, item: Item) -> bool:
        """Return True if the item passes every set filter."""
        if not _text_matches(item.environment, self.environment):
            return False
        if not _text_matches(item.status, self.status):
            return False
        if self.since is not None or self.until is not None:
            # Items never seen cannot satisfy a time bound
            seen = item.last_occurrence_timestamp
            if seen is None:
                return False
            if self.since is not None and seen < int(self.since.timestamp()):
                return False
            if self.until is not None and seen > int(self.until.timestamp()):
                return False
        total = occurrence_count(item)
        if self.min_occurrences is not None and total < self.min_occurrences:
            return False
        if self.max_occurrences is not None and total > self.max_occurrences:
            return False
        return True


def _text_matches(value: str | None, wanted: str) -> bool:
    if not wanted:
        return True
    return (value or "").strip().casefold() == wanted.casefold()


def occurrence_count(item: Item) -> int:
    """Total occurrences, counting an unknown total as zero."""
    return item.total_occurrences or 0


def filter_items(items: Iterable[Item], filters: IssueFilters | None) -> list[Item]:
    """Keep the items matching filters, in their input order."""
    if filters is None or not filters.active:
        return list(items)
    return [item for item in items if filters.matches(item)]


def sort_recent(items: Iterable[Item]) -> list[Item]:
    """Order items by last occurrence, then total occurrences, newest and largest first.

    Missing values sort as zero. Ties keep their input order.
    """
    return sorted(items, key=_recency_key, reverse=True)


def _recency_key(item: Item) -> tuple[int, int]:
    return (item.last_occurrence_timestamp or 0, occurrence_count(item))


def describe(filters: IssueFilters) -> dict[str, Any]:
    """Return the set filters as a plain dict for logging."""
    return filters.model_dump(exclude_defaults=True, mode="json")
