"""Shared pytest fixtures for rollbar-tools tests."""

from unittest.mock import patch

import pytest

from rollbar_tools.core.models import Item, ItemInstance
from rollbar_tools.rollbar.credentials import RollbarCredentials

TOKEN = "tok_secret_1234"  # noqa: S105


@pytest.fixture
def mock_credentials():
    """Mock get_credentials so no environment or keyring is consulted."""
    with patch("rollbar_tools.rollbar.base.get_credentials") as mock:
        mock.return_value = RollbarCredentials(project="backend", access_token=TOKEN)
        yield mock


@pytest.fixture
def item_payload() -> dict:
    """A full item as returned by the Rollbar API."""
    return {
        "id": 272505123,
        "project_id": 90,
        "counter": 1234,
        "title": "KeyError: 'user_id'",
        "status": "active",
        "environment": "production",
        "level": 40,
        "last_occurrence_id": 99,
        "last_occurrence_timestamp": 1700000000,
        "total_occurrences": 17,
    }


@pytest.fixture
def sample_item(item_payload: dict) -> Item:
    """Create a sample Item for testing."""
    return Item.model_validate(item_payload)


@pytest.fixture
def sample_instance() -> ItemInstance:
    """Create a sample ItemInstance for testing."""
    return ItemInstance(
        id=99,
        timestamp=1700000000,
        data={"body": {"trace": {"exception": {"class": "KeyError", "message": "'user_id'"}}}},
    )
