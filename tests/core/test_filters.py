"""Tests for item filtering and recency ordering."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from rollbar_tools.core.exceptions import ValidationError
from rollbar_tools.core.filters import IssueFilters, filter_items, parse_filter_time, sort_recent
from rollbar_tools.core.models import Item


def make_item(item_id: int, **fields: object) -> Item:
    payload = {
        "id": item_id,
        "project_id": 1,
        "counter": item_id,
        "title": f"Error {item_id}",
        "status": "active",
        **fields,
    }
    return Item.model_validate(payload)


def at(seconds: int) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


class TestParseFilterTime:
    """Tests for parse_filter_time."""

    def test_unix_seconds(self) -> None:
        """Test digits are read as unix seconds in UTC."""
        assert parse_filter_time("1700000000") == at(1700000000)

    @pytest.mark.parametrize("value", ["2023-11-14T22:13:20Z", "2023-11-14T23:13:20+01:00"])
    def test_rfc3339(self, value: str) -> None:
        """Test RFC 3339 timestamps are normalized to UTC."""
        assert parse_filter_time(value) == at(1700000000)

    @pytest.mark.parametrize("value", [None, "", "  "])
    def test_empty(self, value: str | None) -> None:
        """Test an unset bound parses to None."""
        assert parse_filter_time(value) is None

    @pytest.mark.parametrize("value", ["yesterday", "-5", "2023-11-14T22:13:20"])
    def test_invalid(self, value: str) -> None:
        """Test malformed, negative and offset-less times are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            parse_filter_time(value, "until")
        assert exc_info.value.field == "until"


class TestIssueFilters:
    """Tests for IssueFilters validation and matching."""

    def test_empty_matches_everything(self) -> None:
        """Test no filters keeps every item, including sparse ones."""
        items = [make_item(1), make_item(2, environment="staging")]

        assert not IssueFilters().active
        assert filter_items(items, IssueFilters()) == items
        assert filter_items(items, None) == items

    def test_text_filters_case_insensitive(self) -> None:
        """Test environment and status compare case-insensitively after trimming."""
        items = [
            make_item(1, environment=" Production "),
            make_item(2, environment="staging"),
            make_item(3, environment="production", status="resolved"),
        ]

        kept = filter_items(items, IssueFilters(environment="PRODUCTION", status="Active"))

        assert [item.id for item in kept] == [1]

    def test_whitespace_filter_is_unset(self) -> None:
        """Test a blank text filter matches everything."""
        assert not IssueFilters(environment="  ").active

    def test_missing_timestamp_excluded_by_time_filter(self) -> None:
        """Test items never seen fail any time bound."""
        items = [make_item(1), make_item(2, last_occurrence_timestamp=1700000000)]

        kept = filter_items(items, IssueFilters(until=at(1800000000)))

        assert [item.id for item in kept] == [2]

    def test_time_bounds_inclusive(self) -> None:
        """Test items exactly on since or until are kept."""
        stamps = [99, 100, 150, 200, 201]
        items = [make_item(n, last_occurrence_timestamp=ts) for n, ts in enumerate(stamps, 1)]

        kept = filter_items(items, IssueFilters(since=at(100), until=at(200)))

        assert [item.id for item in kept] == [2, 3, 4]

    def test_occurrence_bounds_inclusive(self) -> None:
        """Test min and max occurrences are inclusive."""
        counts = [4, 5, 7, 10, 11]
        items = [make_item(n, total_occurrences=count) for n, count in enumerate(counts, 1)]

        kept = filter_items(items, IssueFilters(min_occurrences=5, max_occurrences=10))

        assert [item.id for item in kept] == [2, 3, 4]

    def test_occurrences_fallback(self) -> None:
        """Test occurrences stands in for a missing total, and no count is zero."""
        items = [make_item(1, occurrences=8), make_item(2)]

        assert [item.id for item in filter_items(items, IssueFilters(min_occurrences=1))] == [1]
        assert [item.id for item in filter_items(items, IssueFilters(max_occurrences=0))] == [2]

    def test_inverted_time_bounds_rejected(self) -> None:
        """Test since after until is rejected."""
        with pytest.raises(PydanticValidationError, match="--since must be before"):
            IssueFilters(since=at(200), until=at(100))

    def test_inverted_occurrence_bounds_rejected(self) -> None:
        """Test min above max is rejected."""
        with pytest.raises(PydanticValidationError, match="--min-occurrences must be"):
            IssueFilters(min_occurrences=3, max_occurrences=2)

    def test_negative_occurrences_rejected(self) -> None:
        """Test occurrence bounds cannot be negative."""
        with pytest.raises(PydanticValidationError):
            IssueFilters(min_occurrences=-1)


class TestSortRecent:
    """Tests for sort_recent."""

    def test_newest_first(self) -> None:
        """Test items are ordered by last occurrence, newest first."""
        items = [
            make_item(1, last_occurrence_timestamp=100),
            make_item(2),
            make_item(3, last_occurrence_timestamp=300),
        ]

        assert [item.id for item in sort_recent(items)] == [3, 1, 2]

    def test_timestamp_tie_broken_by_occurrences(self) -> None:
        """Test equal timestamps put the larger total first."""
        items = [
            make_item(1, last_occurrence_timestamp=100, total_occurrences=2),
            make_item(2, last_occurrence_timestamp=100, occurrences=9),
        ]

        assert [item.id for item in sort_recent(items)] == [2, 1]

    def test_full_tie_keeps_order(self) -> None:
        """Test items equal on both keys keep their input order."""
        items = [
            make_item(n, last_occurrence_timestamp=100, total_occurrences=1) for n in (4, 2, 9)
        ]

        assert [item.id for item in sort_recent(items)] == [4, 2, 9]
