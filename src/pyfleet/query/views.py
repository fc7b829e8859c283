"""Derived read-only aggregations.

Every function recomputes from the collections it is given; there is no
cache to invalidate. Ratios return ``0.0`` when the denominator is 0.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any

from pydantic import BaseModel

from pyfleet.models.capability import Capability, CapabilityType
from pyfleet.models.device import Device, DeviceStatus
from pyfleet.models.stats import DeviceStats, Efficiency, Statistics, StatisticsPeriod, TaskStats
from pyfleet.models.task import InspectionTask, TaskStatus
from pyfleet.state.store import StoreSnapshot


def ratio(part: float, total: float) -> float:
    """``part / total``, or ``0.0`` when *total* is 0."""
    if not total:
        return 0.0
    return part / total


def count_by(entities: Iterable[BaseModel], field_name: str) -> dict[str, int]:
    """Count entities per value of *field_name* (values as strings)."""
    counts: Counter[str] = Counter()
    for entity in entities:
        value: Any = getattr(entity, field_name, None)
        if value is not None:
            counts[str(value)] += 1
    return dict(counts)


def device_status_counts(devices: Sequence[Device]) -> DeviceStats:
    counts = count_by(devices, "status")
    return DeviceStats(
        total=len(devices),
        online=counts.get(DeviceStatus.ONLINE.value, 0),
        offline=counts.get(DeviceStatus.OFFLINE.value, 0),
        maintenance=counts.get(DeviceStatus.MAINTENANCE.value, 0),
    )


def task_status_counts(tasks: Sequence[InspectionTask]) -> TaskStats:
    counts = count_by(tasks, "status")
    return TaskStats(
        total=len(tasks),
        pending=counts.get(TaskStatus.PENDING.value, 0),
        running=counts.get(TaskStatus.RUNNING.value, 0),
        completed=counts.get(TaskStatus.COMPLETED.value, 0),
        failed=counts.get(TaskStatus.FAILED.value, 0),
        cancelled=counts.get(TaskStatus.CANCELLED.value, 0),
    )


def capabilities_by_type(capabilities: Iterable[Capability]) -> dict[CapabilityType, list[Capability]]:
    """Group capabilities by type. Every type is present, possibly with an empty list."""
    grouped: dict[CapabilityType, list[Capability]] = {cap_type: [] for cap_type in CapabilityType}
    for capability in capabilities:
        grouped[capability.type].append(capability)
    return grouped


def online_rate(devices: Sequence[Device]) -> float:
    stats = device_status_counts(devices)
    return ratio(stats.online, stats.total)


def success_rate(tasks: Sequence[InspectionTask]) -> float:
    stats = task_status_counts(tasks)
    return ratio(stats.completed, stats.completed + stats.failed)


def average_task_duration(tasks: Iterable[InspectionTask]) -> float:
    """Mean duration in minutes over tasks with both start and completion times."""
    durations = [t.duration_minutes for t in tasks if t.duration_minutes is not None]
    return ratio(sum(durations), len(durations))


def device_utilization(devices: Sequence[Device], tasks: Iterable[InspectionTask]) -> float:
    """Share of devices that currently own at least one running task."""
    known = {d.id for d in devices}
    busy = {t.device_id for t in tasks if t.status == TaskStatus.RUNNING and t.device_id in known}
    return ratio(len(busy), len(known))


def statistics_overview(
    snapshot: StoreSnapshot,
    *,
    start: datetime | None = None,
    end: datetime | None = None,
) -> Statistics:
    """Dashboard overview over tasks created in ``[start, end]``.

    The period defaults to the earliest task creation time up to the
    snapshot time. Device figures always cover the whole fleet.
    """
    period_end = end or snapshot.taken_at
    created = [t.created_at for t in snapshot.tasks]
    period_start = start or (min(created) if created else period_end)
    tasks = [t for t in snapshot.tasks if period_start <= t.created_at <= period_end]
    return Statistics(
        period=StatisticsPeriod(start=period_start, end=period_end),
        tasks=task_status_counts(tasks),
        devices=device_status_counts(snapshot.devices),
        efficiency=Efficiency(
            average_task_duration=average_task_duration(tasks),
            success_rate=success_rate(tasks),
            device_utilization=device_utilization(snapshot.devices, snapshot.tasks),
        ),
    )
