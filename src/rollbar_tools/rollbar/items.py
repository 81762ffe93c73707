"""Item operations against the Rollbar API.

Example:
    from rollbar_tools.rollbar import RollbarItems

    with RollbarItems(project="backend") as rollbar:
        item_id = rollbar.resolve_item_id(parse_counter("1234"))
        item = rollbar.get_item(item_id)
        instance = rollbar.get_latest_instance(item_id)
"""

import logging

from rollbar_tools.core import summary
from rollbar_tools.core.filters import IssueFilters, describe, filter_items, sort_recent
from rollbar_tools.core.models import (
    IssueDetail,
    Item,
    ItemCounter,
    ItemId,
    ItemInstance,
    parse_active_items,
    parse_counter_result,
    parse_instances,
    parse_items,
)
from rollbar_tools.rollbar.base import RollbarClient

logger = logging.getLogger(__name__)


class RollbarItems(RollbarClient):
    """Read-only item, instance and report operations."""

    def resolve_item_id(self, counter: ItemCounter) -> ItemId:
        """Resolve a project counter (the '#1234' in the UI) to an item id.

        The endpoint answers with either the full item or a redirect stub
        ``{"itemId": ...}``; the item shape is tried first.
        """
        result = self._get_result(
            f"/item_by_counter/{int(counter)}",
            "item_by_counter",
            parse_counter_result,
        )
        if isinstance(result, Item):
            item_id = result.id
        else:
            item_id = result.item_id
            logger.debug("Counter %d redirected to item %d", counter, item_id)
        return ItemId(item_id)

    def get_item(self, item_id: ItemId) -> Item:
        """Get an item by its internal id."""
        return self._get_result(f"/item/{int(item_id)}/", "item", Item.model_validate)

    def get_latest_instance(self, item_id: ItemId) -> ItemInstance | None:
        """Get the most recent occurrence of an item.

        Returns:
            The instance, or None if the item has no recorded occurrences
        """
        instances = self._get_result(
            f"/item/{int(item_id)}/instances",
            "item instances",
            parse_instances,
            params={"per_page": 1},
        )
        if not instances:
            return None
        # Rollbar returns newest-first with per_page=1; the list position is only read here.
        return instances[-1]

    def list_items(self, status: str | None = None, page: int = 1) -> list[Item]:
        """List items, one page only.

        Args:
            status: Filter by status (e.g., 'active', 'resolved')
            page: Page number (1-based)
        """
        params: dict[str, str | int] = {}
        if status:
            params["status"] = status
        if page > 0:
            params["page"] = page
        return self._get_result("/items", "items", parse_items, params=params or None)

    def list_active_items(
        self, limit: int | None = None, filters: IssueFilters | None = None
    ) -> list[Item]:
        """List the top active items report.

        The report is trimmed to `limit` before filters are applied, so a
        filtered view may hold fewer than `limit` items.

        Args:
            limit: Keep at most this many items (no limit if None or <= 0)
            filters: Optional narrowing applied after the trim
        """
        items = self._get_result(
            "/reports/top_active_items", "top active items", parse_active_items
        )
        if limit and limit > 0:
            items = items[:limit]
        return self._filtered(items, filters)

    def recent(self, limit: int | None = None, filters: IssueFilters | None = None) -> list[Item]:
        """List active items from the first page, most recently seen first.

        Items are ordered by last occurrence, then by total occurrences.

        Args:
            limit: Keep at most this many items (no limit if None or <= 0)
            filters: Optional narrowing applied before sorting
        """
        items = self._filtered(self.list_items(status="active", page=1), filters)
        items = sort_recent(items)
        if limit and limit > 0:
            return items[:limit]
        return items

    def _filtered(self, items: list[Item], filters: IssueFilters | None) -> list[Item]:
        kept = filter_items(items, filters)
        if filters is not None and filters.active:
            logger.debug("Filters %s kept %d of %d items", describe(filters), len(kept), len(items))
        return kept

    def show(self, counter: ItemCounter) -> IssueDetail:
        """Resolve a counter and fetch the item with its latest occurrence.

        The main error falls back to the item title when the occurrence
        payload has no recognizable message.
        """
        item_id = self.resolve_item_id(counter)
        item = self.get_item(item_id)
        instance = self.get_latest_instance(item_id)

        main_error = summary.main_error(instance)
        if main_error == summary.UNKNOWN and item.title.strip():
            main_error = item.title

        return IssueDetail(
            item=item,
            instance=instance,
            main_error=main_error,
            item_raw=item.raw,
            instance_raw=instance.raw if instance is not None else None,
        )
