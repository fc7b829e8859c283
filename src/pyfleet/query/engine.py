"""Filter, sort and paginate entity collections.

Evaluation order is fixed:

search -> status -> type -> priority -> deviceIds -> dateRange -> sort -> paginate

so pagination always applies to the fully filtered and sorted result and
``total`` is the post-filter count.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from pyfleet.exceptions import FleetValidationError
from pyfleet.models._base import coerce_model
from pyfleet.models.query import Page, Pagination, QueryParams, SortOrder
from pyfleet.state.events import EntityKind

E = TypeVar("E", bound=BaseModel)

#: String fields matched by free-text ``search``, per entity kind.
SEARCH_FIELDS: dict[EntityKind, tuple[str, ...]] = {
    EntityKind.DEVICE: ("name", "model", "serial_number"),
    EntityKind.TASK: ("name", "device_name"),
    EntityKind.CAPABILITY: ("name", "description"),
    EntityKind.TEMPLATE: ("name",),
    EntityKind.TARGET: ("name", "description"),
    EntityKind.TASK_STATUS: ("notes", "operator"),
}

#: Creation timestamp field used by ``dateRange``, per entity kind.
DATE_FIELDS: dict[EntityKind, str] = {
    EntityKind.DEVICE: "last_update",
    EntityKind.TASK: "created_at",
    EntityKind.TEMPLATE: "created_at",
    EntityKind.TASK_STATUS: "timestamp",
}


def resolve_field(model_cls: type[BaseModel], name: str) -> str:
    """Map an external (camelCase) or attribute (snake_case) name to the attribute name."""
    fields: dict[str, Any] = {**model_cls.model_fields, **model_cls.model_computed_fields}
    if name in fields:
        return name
    for field_name, info in fields.items():
        if name in (info.alias, to_camel(field_name)):
            return field_name
    raise FleetValidationError(f"{model_cls.__name__} has no field {name!r}")


def _matches_search(entity: BaseModel, needle: str, fields: Sequence[str]) -> bool:
    for field_name in fields:
        value = getattr(entity, field_name, None)
        if value is not None and needle in str(value).lower():
            return True
    return False


def _in_set(entity: BaseModel, field_name: str, allowed: Sequence[str]) -> bool:
    return getattr(entity, field_name, None) in allowed


def _sort(entities: list[E], field_name: str, order: SortOrder) -> list[E]:
    """Stable sort on the raw field value; ``None`` values go last in both orders."""
    present = [e for e in entities if getattr(e, field_name, None) is not None]
    missing = [e for e in entities if getattr(e, field_name, None) is None]
    try:
        ordered = sorted(present, key=lambda e: getattr(e, field_name), reverse=order == SortOrder.DESC)
    except TypeError as exc:
        raise FleetValidationError(f"field {field_name!r} is not sortable") from exc
    return ordered + missing


def paginate(items: Sequence[E], page: int, limit: int) -> Page[E]:
    """Slice one page out of *items*; pages past the end are empty, not errors."""
    total = len(items)
    start = (page - 1) * limit
    return Page(
        items=list(items[start : start + limit]),
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
        ),
    )


def query(
    entities: Sequence[E],
    params: QueryParams | Mapping[str, Any] | None = None,
    *,
    search_fields: Sequence[str] = ("name",),
    date_field: str | None = None,
) -> Page[E]:
    """Evaluate *params* against *entities* without mutating them.

    Parameters
    ----------
    entities
        Snapshot of one collection, in collection order.
    params
        Query parameters; mappings use the external camelCase names.
    search_fields
        Attribute names matched case-insensitively by ``search``.
    date_field
        Attribute compared against ``dateRange``. Entities without it are
        excluded whenever a date range is given.

    Returns
    -------
    Page
        Matching entities; ``pagination`` is set only when both ``page``
        and ``limit`` were given.
    """
    qp = QueryParams() if params is None else coerce_model(QueryParams, params)
    result = list(entities)

    if qp.search:
        needle = qp.search.lower()
        result = [e for e in result if _matches_search(e, needle, search_fields)]
    if qp.status:
        result = [e for e in result if _in_set(e, "status", qp.status)]
    if qp.type:
        result = [e for e in result if _in_set(e, "type", qp.type)]
    if qp.priority:
        result = [e for e in result if _in_set(e, "priority", qp.priority)]
    if qp.device_ids:
        result = [e for e in result if _in_set(e, "device_id", qp.device_ids)]
    if qp.date_range is not None:
        start, end = qp.date_range.start, qp.date_range.end
        result = [
            e
            for e in result
            if date_field is not None
            and getattr(e, date_field, None) is not None
            and start <= getattr(e, date_field) <= end
        ]
    if qp.sort_by and result:
        field_name = resolve_field(type(result[0]), qp.sort_by)
        result = _sort(result, field_name, qp.sort_order)

    if qp.page is not None and qp.limit is not None:
        return paginate(result, qp.page, qp.limit)
    return Page(items=result)


def query_kind(
    kind: EntityKind,
    entities: Sequence[E],
    params: QueryParams | Mapping[str, Any] | None = None,
) -> Page[E]:
    """Run :func:`query` with the search/date field table of *kind*."""
    return query(
        entities,
        params,
        search_fields=SEARCH_FIELDS.get(kind, ("name",)),
        date_field=DATE_FIELDS.get(kind),
    )
