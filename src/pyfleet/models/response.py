"""Response envelope returned by the simulated API."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from pyfleet.models.query import Pagination

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """``{success, data, pagination?}`` envelope.

    Failures are raised as :class:`pyfleet.exceptions.FleetApiError`, so
    ``success`` is ``True`` on every returned envelope.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        arbitrary_types_allowed=True,
    )

    success: bool = True
    data: T | None = None
    message: str | None = None
    pagination: Pagination | None = None

    def to_api(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
