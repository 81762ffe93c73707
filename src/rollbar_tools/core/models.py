"""Data models for Rollbar API resources.

Rollbar answers some endpoints with more than one JSON shape (an item or a
redirect stub, a bare list or a wrapped list). Each such endpoint has an
ordered tuple of candidate shapes; ``match_shape`` returns the first one that
validates, so richer shapes must come first.
"""

from collections.abc import Sequence
from typing import Any, NewType

from pydantic import BaseModel, Field, PositiveInt, TypeAdapter, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from rollbar_tools.core.exceptions import ValidationError

ItemCounter = NewType("ItemCounter", int)
ItemId = NewType("ItemId", int)

# Rollbar numeric levels
LEVEL_NAMES = {
    10: "debug",
    20: "info",
    30: "warning",
    40: "error",
    50: "critical",
}


def parse_counter(value: str | int) -> ItemCounter:
    """Parse a user-supplied item counter.

    Accepts an int or decimal text, optionally prefixed with '#'.

    Raises:
        ValidationError: If the value is not a positive integer
    """
    if isinstance(value, bool):
        raise ValidationError(f"Invalid item counter: {value!r}", field="counter")
    if isinstance(value, int):
        number = value
    else:
        text = str(value).strip().removeprefix("#")
        if not (text.isascii() and text.isdigit()):
            raise ValidationError(f"Invalid item counter: {value!r}", field="counter")
        number = int(text)
    if number < 1:
        raise ValidationError(f"Item counter must be positive: {value!r}", field="counter")
    return ItemCounter(number)


class Envelope(BaseModel):
    """Wire-level wrapper around every Rollbar response body."""

    err: int = Field(description="0 on success, non-zero on failure")
    result: Any = Field(default=None, description="Endpoint payload")
    message: str | None = Field(default=None, description="Service-provided error text")


class Item(BaseModel):
    """A Rollbar item (a group of occurrences of the same error)."""

    id: PositiveInt = Field(description="Internal item identifier")
    project_id: int = Field(description="Owning project identifier")
    counter: int = Field(description="Per-project human-facing number")
    title: str = Field(description="Item title")
    status: str = Field(description="Item status (e.g., 'active', 'resolved')")
    environment: str | None = Field(default=None, description="Environment label")
    level: str | None = Field(default=None, description="Severity level name")
    last_occurrence_id: int | None = Field(default=None, description="Latest occurrence id")
    last_occurrence_timestamp: int | None = Field(
        default=None, description="Latest occurrence (unix seconds)"
    )
    occurrences: int | None = Field(default=None, description="Occurrence count")
    total_occurrences: int | None = Field(default=None, description="Total occurrence count")
    raw: dict[str, Any] = Field(default_factory=dict, exclude=True, description="Raw API response")

    class Config:
        """Pydantic configuration."""

        frozen = True

    @model_validator(mode="before")
    @classmethod
    def _hydrate(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        hydrated = {**data, "raw": data}
        if data.get("total_occurrences") is None and data.get("occurrences") is not None:
            hydrated["total_occurrences"] = data["occurrences"]
        return hydrated

    @field_validator("level", mode="before")
    @classmethod
    def _level_name(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return LEVEL_NAMES.get(value, str(value))
        return value


class ItemRedirect(BaseModel):
    """Redirect stub returned by item_by_counter for moved/merged items."""

    item_id: PositiveInt = Field(alias="itemId", description="Identifier to follow")

    class Config:
        """Pydantic configuration."""

        frozen = True


class ItemInstance(BaseModel):
    """One recorded occurrence of an item."""

    id: int = Field(description="Occurrence identifier")
    timestamp: int | None = Field(default=None, description="Occurrence time (unix seconds)")
    body: Any = Field(default=None, description="Payload (older API versions)")
    data: Any = Field(default=None, description="Payload (current API versions)")
    raw: dict[str, Any] = Field(default_factory=dict, exclude=True, description="Raw API response")

    class Config:
        """Pydantic configuration."""

        frozen = True

    @model_validator(mode="before")
    @classmethod
    def _keep_raw(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {**data, "raw": data}
        return data

    @property
    def payload(self) -> Any:
        """Return whichever free-form payload field is set."""
        if self.data is not None:
            return self.data
        return self.body


class InstanceList(BaseModel):
    """Instances wrapped under a named field."""

    instances: list[ItemInstance]


class ItemList(BaseModel):
    """Items wrapped under a named field."""

    items: list[Item]


class ActiveItem(BaseModel):
    """Entry of the top active items report."""

    item: Item

    @model_validator(mode="before")
    @classmethod
    def _default_status(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("item"), dict):
            item = data["item"]
            if not item.get("status"):
                data = {**data, "item": {**item, "status": "active"}}
        return data


class IssueDetail(BaseModel):
    """An item together with its latest occurrence."""

    item: Item
    instance: ItemInstance | None = None
    main_error: str = "unknown"
    item_raw: dict[str, Any] = Field(
        default_factory=dict, description="Item as returned by the API"
    )
    instance_raw: dict[str, Any] | None = Field(
        default=None, description="Latest instance as returned by the API"
    )

    class Config:
        """Pydantic configuration."""

        frozen = True


# Candidate shapes, richest first. The order is part of the contract.
COUNTER_RESULT_SHAPES: tuple[TypeAdapter, ...] = (
    TypeAdapter(Item),
    TypeAdapter(ItemRedirect),
)
INSTANCES_SHAPES: tuple[TypeAdapter, ...] = (
    TypeAdapter(list[ItemInstance]),
    TypeAdapter(InstanceList),
)
ITEMS_SHAPES: tuple[TypeAdapter, ...] = (
    TypeAdapter(list[Item]),
    TypeAdapter(ItemList),
)
ACTIVE_ITEMS_SHAPES: tuple[TypeAdapter, ...] = (
    TypeAdapter(list[ActiveItem]),
    TypeAdapter(list[Item]),
    TypeAdapter(ItemList),
)


def match_shape(payload: Any, shapes: Sequence[TypeAdapter]) -> Any:
    """Validate payload against each shape in order and return the first match.

    Raises:
        ValueError: If no shape matches
    """
    failures: list[str] = []
    for adapter in shapes:
        try:
            return adapter.validate_python(payload)
        except PydanticValidationError as e:
            failures.append(f"{e.title}: {e.error_count()} error(s)")
    raise ValueError(f"payload matched none of the expected shapes ({'; '.join(failures)})")


def parse_counter_result(payload: Any) -> Item | ItemRedirect:
    """Decode an item_by_counter payload into an Item or an ItemRedirect."""
    return match_shape(payload, COUNTER_RESULT_SHAPES)  # type: ignore[no-any-return]


def parse_instances(payload: Any) -> list[ItemInstance]:
    """Decode an instances payload into a single ordered list."""
    matched = match_shape(payload, INSTANCES_SHAPES)
    if isinstance(matched, InstanceList):
        return matched.instances
    return list(matched)


def parse_items(payload: Any) -> list[Item]:
    """Decode an items payload into a single ordered list."""
    matched = match_shape(payload, ITEMS_SHAPES)
    if isinstance(matched, ItemList):
        return matched.items
    return list(matched)


def parse_active_items(payload: Any) -> list[Item]:
    """Decode a top active items payload into a list of items."""
    matched = match_shape(payload, ACTIVE_ITEMS_SHAPES)
    if isinstance(matched, ItemList):
        return matched.items
    return [entry.item if isinstance(entry, ActiveItem) else entry for entry in matched]
