"""Core models and exceptions for rollbar-tools."""

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
from rollbar_tools.core.filters import IssueFilters, filter_items, sort_recent
from rollbar_tools.core.models import (
    IssueDetail,
    Item,
    ItemCounter,
    ItemId,
    ItemInstance,
    ItemRedirect,
    parse_counter,
)

__all__ = [
    "Item",
    "ItemRedirect",
    "ItemInstance",
    "IssueDetail",
    "ItemCounter",
    "ItemId",
    "parse_counter",
    "IssueFilters",
    "filter_items",
    "sort_recent",
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
