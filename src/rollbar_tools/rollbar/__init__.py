"""Rollbar API client.

- RollbarClient: Base HTTP client with token auth and envelope decoding
- RollbarItems: Item, instance and report operations
- RollbarCredentials: Access token management

Example:
    from rollbar_tools.rollbar import RollbarItems

    with RollbarItems(project="backend") as rollbar:
        detail = rollbar.show(ItemCounter(1234))
"""

from rollbar_tools.rollbar.base import RollbarClient
from rollbar_tools.rollbar.credentials import (
    RollbarCredentials,
    delete_credentials,
    get_credentials,
    save_credentials,
    set_active_project,
)
from rollbar_tools.rollbar.items import RollbarItems

__all__ = [
    "RollbarClient",
    "RollbarItems",
    "RollbarCredentials",
    "get_credentials",
    "save_credentials",
    "delete_credentials",
    "set_active_project",
]
