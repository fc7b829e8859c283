"""Device template model."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from pyfleet.models._base import EntityId, FleetBaseModel, FleetPatch, FleetTimestamp
from pyfleet.models.device import DeviceType


class DeviceTemplate(FleetBaseModel):
    """Blueprint used to provision devices of one type."""

    id: EntityId
    name: str
    type: DeviceType
    default_capabilities: tuple[str, ...] = ()
    config_schema: dict[str, Any] = Field(default_factory=dict)
    created_at: FleetTimestamp


class DeviceTemplatePatch(FleetPatch):
    name: str | None = None
    type: DeviceType | None = None
    default_capabilities: tuple[str, ...] | None = None
    config_schema: dict[str, Any] | None = None
