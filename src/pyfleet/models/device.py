"""Device model."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field, field_validator

from pyfleet.models._base import EntityId, FleetBaseModel, FleetPatch, FleetTimestamp


class DeviceType(StrEnum):
    CAMERA = "camera"
    DRONE = "drone"
    ROBOT = "robot"
    SENSOR = "sensor"


class DeviceStatus(StrEnum):
    ONLINE = "online"
    OFFLINE = "offline"
    MAINTENANCE = "maintenance"


class GeoPoint(FleetBaseModel):
    """A WGS84 position in floating point degrees."""

    lat: float = Field(ge=-90.0, le=90.0)
    lng: float = Field(ge=-180.0, le=180.0)


def _unique_ids(value: tuple[str, ...]) -> tuple[str, ...]:
    # Preserve first-seen order; the collection is semantically a set.
    return tuple(dict.fromkeys(value))


class Device(FleetBaseModel):
    """A field device (camera, drone, robot or sensor)."""

    id: EntityId
    """Unique, immutable identifier."""
    name: str
    type: DeviceType
    status: DeviceStatus
    location: GeoPoint
    capabilities: tuple[str, ...] = ()
    """Ids of the capabilities this device offers."""
    last_update: FleetTimestamp
    model: str | None = None
    serial_number: str | None = None
    battery_level: float | None = Field(default=None, ge=0.0, le=100.0)
    """Battery charge in percent, when the device reports one."""

    @field_validator("capabilities")
    @classmethod
    def _dedupe_capabilities(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return _unique_ids(value)


class DevicePatch(FleetPatch):
    """Mutable subset of :class:`Device` fields. ``id`` is not patchable."""

    name: str | None = None
    type: DeviceType | None = None
    status: DeviceStatus | None = None
    location: GeoPoint | None = None
    capabilities: tuple[str, ...] | None = None
    last_update: FleetTimestamp | None = None
    model: str | None = None
    serial_number: str | None = None
    battery_level: float | None = Field(default=None, ge=0.0, le=100.0)


class DeviceStatusChange(FleetBaseModel):
    """One entry of a bulk device status update."""

    id: EntityId
    status: DeviceStatus
