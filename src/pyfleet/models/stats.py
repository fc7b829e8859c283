"""Aggregated statistics models."""

from __future__ import annotations

from pyfleet.models._base import FleetBaseModel, FleetTimestamp


class DeviceStats(FleetBaseModel):
    total: int = 0
    online: int = 0
    offline: int = 0
    maintenance: int = 0


class TaskStats(FleetBaseModel):
    total: int = 0
    pending: int = 0
    running: int = 0
    completed: int = 0
    failed: int = 0
    cancelled: int = 0


class Efficiency(FleetBaseModel):
    average_task_duration: float = 0.0
    """Mean duration in minutes of tasks with start and completion timestamps."""
    success_rate: float = 0.0
    """``completed / (completed + failed)``."""
    device_utilization: float = 0.0
    """Share of devices currently owning a running task."""


class StatisticsPeriod(FleetBaseModel):
    start: FleetTimestamp
    end: FleetTimestamp


class Statistics(FleetBaseModel):
    """Dashboard overview for a period."""

    period: StatisticsPeriod
    tasks: TaskStats
    devices: DeviceStats
    efficiency: Efficiency
