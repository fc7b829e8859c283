"""Capability model."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import Field

from pyfleet.models._base import EntityId, FleetBaseModel, FleetPatch


class CapabilityType(StrEnum):
    LOGIC = "logic"
    ORCHESTRATION = "orchestration"
    VIDEO_PROCESSING = "video_processing"
    DATA_PARSING = "data_parsing"
    CONTROL = "control"
    COMMAND = "command"


class Capability(FleetBaseModel):
    """A processing or control capability a device can expose.

    ``input_schema``/``output_schema`` are free-form mappings from a key
    to a type description (e.g. ``{"stream": "video", "fps": "number"}``).
    """

    id: EntityId
    name: str
    type: CapabilityType
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=dict)
    output_schema: dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True


class CapabilityPatch(FleetPatch):
    name: str | None = None
    type: CapabilityType | None = None
    description: str | None = None
    input_schema: dict[str, Any] | None = None
    output_schema: dict[str, Any] | None = None
    is_active: bool | None = None
