"""Mutation notifications.

:class:`pyfleet.state.store.FleetStore` emits one :class:`StoreEvent`
per committed mutation to every subscriber, synchronously.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class EntityKind(StrEnum):
    DEVICE = "device"
    TASK = "task"
    CAPABILITY = "capability"
    TEMPLATE = "template"
    TARGET = "target"
    TASK_STATUS = "task_status"
    MONITORING = "monitoring"
    TASK_FILTERS = "task_filters"
    NOTIFICATION = "notification"


class MutationKind(StrEnum):
    SET = "set"
    ADD = "add"
    UPDATE = "update"
    REMOVE = "remove"
    STATUS = "status"
    """Bulk status overwrite."""
    TRANSITION = "transition"
    """Audited task status change."""
    TOGGLE = "toggle"
    CLEAR = "clear"
    SELECT = "select"


class StoreEvent(BaseModel):
    """A committed store mutation."""

    model_config = ConfigDict(frozen=True)

    entity: EntityKind
    mutation: MutationKind
    ids: tuple[str, ...] = ()
    """Ids touched by the mutation (empty for whole-collection changes)."""
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
