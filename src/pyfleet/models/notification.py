"""Operator notification model."""

from __future__ import annotations

from enum import StrEnum

from pyfleet.models._base import EntityId, FleetBaseModel, FleetTimestamp


class NotificationType(StrEnum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SUCCESS = "success"


class Notification(FleetBaseModel):
    """A message for the operator, optionally pointing at a related entity."""

    id: EntityId
    type: NotificationType
    title: str
    message: str
    timestamp: FleetTimestamp
    read: bool = False
    action_url: str | None = None
    related_id: str | None = None
