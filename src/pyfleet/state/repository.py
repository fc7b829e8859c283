"""Keyed in-memory entity collection."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from pyfleet.exceptions import FleetDuplicateIdError, FleetNotFoundError
from pyfleet.models._base import FleetPatch, apply_patch, coerce_model
from pyfleet.state.events import EntityKind

E = TypeVar("E", bound=BaseModel)


class EntityRepository(Generic[E]):
    """Mapping of entity id to entity value for one entity kind.

    Iteration order is insertion order, which keeps query results
    deterministic for a given sequence of mutations.
    """

    def __init__(self, kind: EntityKind, model: type[E]) -> None:
        self.kind = kind
        self.model = model
        self._items: dict[str, E] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._items

    def __iter__(self) -> Iterator[E]:
        return iter(list(self._items.values()))

    def values(self) -> list[E]:
        return list(self._items.values())

    def set_all(self, entities: Iterable[E | Mapping[str, Any]]) -> list[E]:
        """Replace the whole collection. Later duplicates overwrite earlier ones."""
        validated = [coerce_model(self.model, entity) for entity in entities]
        self._items = {self._id(entity): entity for entity in validated}
        return validated

    def add(self, entity: E | Mapping[str, Any]) -> E:
        validated = coerce_model(self.model, entity)
        entity_id = self._id(validated)
        if entity_id in self._items:
            raise FleetDuplicateIdError(self.kind.value, entity_id)
        self._items[entity_id] = validated
        return validated

    def get(self, entity_id: str) -> E:
        try:
            return self._items[entity_id]
        except KeyError:
            raise FleetNotFoundError(self.kind.value, entity_id) from None

    def find(self, entity_id: str) -> E | None:
        return self._items.get(entity_id)

    def update(self, entity_id: str, patch: FleetPatch) -> E:
        """Merge *patch* into the stored entity and return the merged value."""
        merged = apply_patch(self.get(entity_id), patch)
        self._items[entity_id] = merged
        return merged

    def replace(self, entity: E) -> E:
        """Store *entity* over an existing one with the same id."""
        entity_id = self._id(entity)
        if entity_id not in self._items:
            raise FleetNotFoundError(self.kind.value, entity_id)
        self._items[entity_id] = entity
        return entity

    def discard(self, entity_id: str) -> E | None:
        """Remove and return the entity, or ``None`` if it was absent."""
        return self._items.pop(entity_id, None)

    @staticmethod
    def _id(entity: BaseModel) -> str:
        return str(getattr(entity, "id"))
