"""Query parameter and result page models.

Field names follow the external parameter contract exactly
(``search``, ``status``, ``type``, ``priority``, ``deviceIds``,
``dateRange``, ``sortBy``, ``sortOrder``, ``page``, ``limit``).
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from pyfleet.models._base import FleetBaseModel, FleetTimestamp

T = TypeVar("T")


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


class DateRange(FleetBaseModel):
    """Inclusive timestamp window."""

    start: FleetTimestamp
    end: FleetTimestamp

    @model_validator(mode="after")
    def _ordered(self) -> DateRange:
        if self.start > self.end:
            raise ValueError("dateRange start must not be after end")
        return self


class QueryParams(FleetBaseModel):
    """Filter, sort and pagination parameters for one query.

    Empty filter collections mean "no filtering". ``page`` and ``limit``
    only paginate when both are given.
    """

    search: str | None = None
    status: tuple[str, ...] = ()
    type: tuple[str, ...] = ()
    priority: tuple[str, ...] = ()
    device_ids: tuple[str, ...] = ()
    date_range: DateRange | None = None
    sort_by: str | None = None
    sort_order: SortOrder = SortOrder.ASC
    page: int | None = Field(default=None, ge=1)
    limit: int | None = Field(default=None, ge=1)

    @field_validator("status", "type", "priority", "device_ids", mode="before")
    @classmethod
    def _as_tuple(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str):
            return (value,)
        if isinstance(value, (set, frozenset)):
            return tuple(sorted(str(v) for v in value))
        return value

    @property
    def paginated(self) -> bool:
        return self.page is not None and self.limit is not None


class Pagination(FleetBaseModel):
    page: int
    limit: int
    total: int
    """Number of entities matching the filters (before slicing)."""
    total_pages: int


class Page(BaseModel, Generic[T]):
    """One query result.

    ``pagination`` is ``None`` when the query did not ask for a page.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    items: list[T] = Field(default_factory=list)
    pagination: Pagination | None = None

    @property
    def total(self) -> int:
        if self.pagination is not None:
            return self.pagination.total
        return len(self.items)
