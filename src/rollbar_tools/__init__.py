"""
rollbar-tools: Read-only client for the Rollbar error-tracking API.

Resolves the item counters shown in the Rollbar UI to internal item ids and
fetches items and their latest occurrences, normalizing the several JSON
shapes Rollbar uses for the same endpoint into one model per resource.

Example Usage:
    from rollbar_tools import RollbarItems, parse_counter

    with RollbarItems(project="backend") as rollbar:
        item_id = rollbar.resolve_item_id(parse_counter("#1234"))
        item = rollbar.get_item(item_id)
        latest = rollbar.get_latest_instance(item_id)
"""

from rollbar_tools.core.exceptions import (
    AuthenticationError,
    DecodeError,
    MissingResultError,
    NotFoundError,
    RollbarError,
    ServiceError,
    StatusError,
    TransportError,
    ValidationError,
)
from rollbar_tools.core.filters import IssueFilters
from rollbar_tools.core.models import (
    IssueDetail,
    Item,
    ItemCounter,
    ItemId,
    ItemInstance,
    parse_counter,
)
from rollbar_tools.rollbar import RollbarClient, RollbarItems

__version__ = "0.1.0"

__all__ = [
    # Models
    "Item",
    "ItemInstance",
    "IssueDetail",
    "ItemCounter",
    "ItemId",
    "parse_counter",
    "IssueFilters",
    # Clients
    "RollbarClient",
    "RollbarItems",
    # Exceptions
    "RollbarError",
    "TransportError",
    "StatusError",
    "AuthenticationError",
    "NotFoundError",
    "DecodeError",
    "ServiceError",
    "MissingResultError",
    "ValidationError",
]
