"""Base model and shared field types for pyfleet entities.

Every entity and patch model inherits from :class:`FleetBaseModel` which
provides:

* ``alias_generator=to_camel`` so the external camelCase field names
  (``lastUpdate``, ``deviceId``, ``reviewRequired`` ...) map to
  snake_case attributes, while snake_case names are still accepted.
* ``extra="forbid"`` so unknown keys are rejected instead of silently
  injected into an entity.
* Frozen instances. Stored entities are values; every mutation produces
  a new instance.

Timestamps use :data:`FleetTimestamp`, which accepts ``datetime``
objects, ISO-8601 strings and epoch numbers (seconds **or**
milliseconds) and always yields a timezone-aware UTC ``datetime``.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Annotated, Any, TypeVar

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from pyfleet.exceptions import FleetValidationError

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000

M = TypeVar("M", bound=BaseModel)


def parse_timestamp(value: Any) -> Any:
    """Convert an epoch timestamp (seconds or milliseconds) to a UTC datetime.

    Strings and ``datetime`` objects are passed through for pydantic to
    parse; ``None`` stays ``None``.
    """
    if value is None or isinstance(value, (datetime, str)):
        return value
    if isinstance(value, bool):
        raise ValueError("timestamp must not be a boolean")
    if isinstance(value, (int, float)):
        ts = float(value)
        if ts >= _MS_THRESHOLD:
            ts /= 1000.0
        return datetime.fromtimestamp(ts, tz=UTC)
    return value


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and normalise aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


FleetTimestamp = Annotated[datetime, BeforeValidator(parse_timestamp), AfterValidator(ensure_utc)]
"""Annotated type that coerces ISO strings and epoch numbers to UTC datetimes."""


def _non_empty(value: str) -> str:
    text = value.strip()
    if not text:
        raise ValueError("must be non-empty")
    return text


EntityId = Annotated[str, AfterValidator(_non_empty)]
"""A non-empty, whitespace-stripped identifier."""


class FleetBaseModel(BaseModel):
    """Base for all pyfleet entity, patch and parameter models."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_api(self) -> dict[str, Any]:
        """Return the JSON-compatible camelCase representation."""
        return self.model_dump(mode="json", by_alias=True)


class FleetPatch(FleetBaseModel):
    """Base for partial-update models.

    Only fields explicitly provided by the caller are part of the patch;
    passing ``None`` for an optional field clears it.
    """

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


def coerce_model(model_cls: type[M], data: M | Mapping[str, Any]) -> M:
    """Validate *data* into *model_cls*, raising :class:`FleetValidationError`."""
    if isinstance(data, model_cls):
        return data
    try:
        return model_cls.model_validate(data)
    except ValidationError as exc:
        raise FleetValidationError(f"invalid {model_cls.__name__}: {exc}") from exc


def apply_patch(entity: M, patch: FleetPatch) -> M:
    """Merge *patch* into *entity* and re-validate the result."""
    merged = entity.model_dump()
    merged.update(patch.changes())
    return coerce_model(type(entity), merged)


def has_field(data: Mapping[str, Any], name: str) -> bool:
    """Whether *data* carries field *name* under its snake_case or camelCase key."""
    return name in data or to_camel(name) in data
