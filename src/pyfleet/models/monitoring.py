"""Realtime monitoring sample model."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from pyfleet.models._base import EntityId, FleetBaseModel, FleetTimestamp
from pyfleet.models.device import GeoPoint


class MediaType(StrEnum):
    IMAGE = "image"
    VIDEO = "video"


class MonitoringLocation(GeoPoint):
    altitude: float | None = None


class Telemetry(FleetBaseModel):
    """Sensor readings; every field is optional."""

    battery_level: float | None = Field(default=None, ge=0.0, le=100.0)
    signal_strength: float | None = None
    temperature: float | None = None
    humidity: float | None = None
    speed: float | None = None
    heading: float | None = None


class MediaRef(FleetBaseModel):
    type: MediaType
    url: str
    thumbnail: str | None = None


class MonitoringData(FleetBaseModel):
    """A single monitoring sample reported by a device."""

    device_id: EntityId
    timestamp: FleetTimestamp
    location: MonitoringLocation
    telemetry: Telemetry = Field(default_factory=Telemetry)
    media: MediaRef | None = None
