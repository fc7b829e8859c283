"""Inspection target model.

Targets form a tree: an area of interest can be decomposed into child
targets (``children``), each of which may point back at its parent via
``parent_id``.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field, model_validator

from pyfleet.models._base import EntityId, FleetBaseModel, FleetPatch


class TargetType(StrEnum):
    POINT = "point"
    POLYGON = "polygon"
    LINE = "line"


Coordinate = tuple[float, ...]


def check_geometry(target_type: TargetType, coordinates: tuple[Coordinate, ...]) -> None:
    """Raise :class:`ValueError` when *coordinates* do not fit *target_type*.

    - point: exactly one coordinate
    - line: at least two coordinates
    - polygon: at least four coordinates, closed (first == last)
    """
    for coordinate in coordinates:
        if len(coordinate) < 2:
            raise ValueError(f"coordinate {coordinate!r} needs at least lng and lat")
    count = len(coordinates)
    if target_type == TargetType.POINT and count != 1:
        raise ValueError(f"point target needs exactly 1 coordinate, got {count}")
    if target_type == TargetType.LINE and count < 2:
        raise ValueError(f"line target needs at least 2 coordinates, got {count}")
    if target_type == TargetType.POLYGON:
        if count < 4:
            raise ValueError(f"polygon target needs at least 4 coordinates, got {count}")
        if coordinates[0] != coordinates[-1]:
            raise ValueError("polygon target must be closed (first coordinate == last coordinate)")


class InspectionTarget(FleetBaseModel):
    """A point, line or polygon to inspect."""

    id: EntityId
    name: str = ""
    type: TargetType
    coordinates: tuple[Coordinate, ...]
    description: str | None = None
    requirements: tuple[str, ...] = ()
    parent_id: str | None = None
    children: tuple[InspectionTarget, ...] = Field(default_factory=tuple)

    @model_validator(mode="after")
    def _validate_geometry(self) -> InspectionTarget:
        check_geometry(self.type, self.coordinates)
        return self

    def walk(self) -> list[InspectionTarget]:
        """Return this target followed by all descendants, depth first."""
        found = [self]
        for child in self.children:
            found.extend(child.walk())
        return found


class InspectionTargetPatch(FleetPatch):
    name: str | None = None
    type: TargetType | None = None
    coordinates: tuple[Coordinate, ...] | None = None
    description: str | None = None
    requirements: tuple[str, ...] | None = None
    parent_id: str | None = None
    children: tuple[InspectionTarget, ...] | None = None
