"""Inspection task model."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from pyfleet.models._base import EntityId, FleetBaseModel, FleetPatch, FleetTimestamp
from pyfleet.models.device import GeoPoint
from pyfleet.models.target import InspectionTarget


class TaskStatus(StrEnum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class Waypoint(GeoPoint):
    """One point of a task route. Route order is the flight/drive order."""

    altitude: float | None = None
    timestamp: FleetTimestamp | None = None


class InspectionTask(FleetBaseModel):
    """An inspection job executed by one device.

    ``device_id`` is checked against the device collection when the task
    is added; later device removal leaves it dangling on purpose.
    """

    id: EntityId
    name: str
    status: TaskStatus = TaskStatus.PENDING
    device_id: EntityId
    device_name: str | None = None
    route: tuple[Waypoint, ...] = ()
    targets: tuple[InspectionTarget, ...] = ()
    created_at: FleetTimestamp
    started_at: FleetTimestamp | None = None
    completed_at: FleetTimestamp | None = None
    progress: float = Field(default=0.0, ge=0.0, le=100.0)
    priority: TaskPriority = TaskPriority.MEDIUM
    assigned_to: str | None = None

    @property
    def duration_minutes(self) -> float | None:
        """Minutes between start and completion, when both are known."""
        if self.started_at is None or self.completed_at is None:
            return None
        return (self.completed_at - self.started_at).total_seconds() / 60.0


class TaskPatch(FleetPatch):
    """Mutable, non-status subset of :class:`InspectionTask` fields.

    Status changes go through :meth:`pyfleet.state.store.FleetStore.record_transition`
    so that every change lands in the status ledger.
    """

    name: str | None = None
    device_name: str | None = None
    route: tuple[Waypoint, ...] | None = None
    targets: tuple[InspectionTarget, ...] | None = None
    started_at: FleetTimestamp | None = None
    completed_at: FleetTimestamp | None = None
    progress: float | None = Field(default=None, ge=0.0, le=100.0)
    priority: TaskPriority | None = None
    assigned_to: str | None = None


class TaskStatusChange(FleetBaseModel):
    """One entry of a bulk task status update."""

    id: EntityId
    status: TaskStatus
