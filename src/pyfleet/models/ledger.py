"""Task status ledger record."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import computed_field, model_validator

from pyfleet._constants import REVIEW_REQUIRED_STATUSES
from pyfleet.models._base import EntityId, FleetBaseModel, FleetTimestamp
from pyfleet.models.task import TaskStatus


class TaskStatusRecord(FleetBaseModel):
    """One immutable task status transition.

    ``review_required`` is derived from ``status``: failed and cancelled
    transitions need an operator review. Imported records may still carry
    ``reviewRequired``; the supplied value is ignored.
    """

    id: EntityId
    task_id: EntityId
    status: TaskStatus
    timestamp: FleetTimestamp
    operator: str | None = None
    notes: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _drop_derived(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return {k: v for k, v in data.items() if k not in ("review_required", "reviewRequired")}
        return data

    @computed_field(alias="reviewRequired")  # type: ignore[prop-decorator]
    @property
    def review_required(self) -> bool:
        return self.status.value in REVIEW_REQUIRED_STATUSES
