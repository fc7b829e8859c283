from __future__ import annotations

from datetime import UTC, datetime

from pyfleet.models import Capability, CapabilityType, Device, InspectionTask
from pyfleet.models._base import coerce_model
from pyfleet.query.views import (
    average_task_duration,
    capabilities_by_type,
    count_by,
    device_status_counts,
    device_utilization,
    online_rate,
    ratio,
    statistics_overview,
    success_rate,
    task_status_counts,
)
from pyfleet.state.store import StoreSnapshot
from tests.factories import device_payload, task_payload


def _dt(day: int, hour: int = 0, minute: int = 0) -> datetime:
    return datetime(2026, 1, day, hour, minute, tzinfo=UTC)


def _task(task_id: str, device_id: str, status: str, **extra: object) -> InspectionTask:
    return coerce_model(InspectionTask, task_payload(task_id, device_id, status=status, **extra))


def _device(device_id: str, status: str) -> Device:
    return coerce_model(Device, device_payload(device_id, status=status))


def test_ratio_guards_zero_denominator() -> None:
    assert ratio(3, 0) == 0.0
    assert ratio(1, 4) == 0.25


def test_device_status_counts_and_online_rate() -> None:
    devices = [_device("d1", "online"), _device("d2", "online"), _device("d3", "offline"), _device("d4", "maintenance")]

    stats = device_status_counts(devices)

    assert (stats.total, stats.online, stats.offline, stats.maintenance) == (4, 2, 1, 1)
    assert online_rate(devices) == 0.5
    assert online_rate([]) == 0.0


def test_task_status_counts() -> None:
    tasks = [
        _task("t1", "d1", "pending"),
        _task("t2", "d1", "completed"),
        _task("t3", "d1", "completed"),
        _task("t4", "d2", "cancelled"),
    ]

    stats = task_status_counts(tasks)

    assert stats.total == 4
    assert stats.completed == 2
    assert stats.cancelled == 1
    assert stats.running == 0
    assert count_by(tasks, "device_id") == {"d1": 3, "d2": 1}


def test_success_rate_ignores_unfinished_and_cancelled() -> None:
    tasks = [
        _task("t1", "d1", "completed"),
        _task("t2", "d1", "completed"),
        _task("t3", "d1", "completed"),
        _task("t4", "d1", "failed"),
        _task("t5", "d1", "cancelled"),
        _task("t6", "d1", "running"),
    ]

    assert success_rate(tasks) == 0.75
    assert success_rate([_task("t1", "d1", "pending")]) == 0.0


def test_average_task_duration_in_minutes() -> None:
    tasks = [
        _task("t1", "d1", "completed", startedAt=_dt(1, 10), completedAt=_dt(1, 10, 30)),
        _task("t2", "d1", "completed", startedAt=_dt(1, 11), completedAt=_dt(1, 12)),
        _task("t3", "d1", "running", startedAt=_dt(1, 11)),
    ]

    assert average_task_duration(tasks) == 45.0
    assert average_task_duration([]) == 0.0


def test_device_utilization_counts_devices_with_running_tasks() -> None:
    devices = [_device("d1", "online"), _device("d2", "online"), _device("d3", "online"), _device("d4", "offline")]
    tasks = [
        _task("t1", "d1", "running"),
        _task("t2", "d1", "running"),
        _task("t3", "d2", "pending"),
        _task("t4", "ghost", "running"),
    ]

    assert device_utilization(devices, tasks) == 0.25


def test_capabilities_by_type_includes_every_type() -> None:
    capabilities = [
        coerce_model(Capability, {"id": "c1", "name": "Detect", "type": "video_processing"}),
        coerce_model(Capability, {"id": "c2", "name": "Track", "type": "video_processing"}),
        coerce_model(Capability, {"id": "c3", "name": "Pan", "type": "control"}),
    ]

    grouped = capabilities_by_type(capabilities)

    assert set(grouped) == set(CapabilityType)
    assert [c.id for c in grouped[CapabilityType.VIDEO_PROCESSING]] == ["c1", "c2"]
    assert grouped[CapabilityType.LOGIC] == []


def test_statistics_overview_defaults_period_to_task_span() -> None:
    snapshot = StoreSnapshot(
        taken_at=_dt(20),
        devices=(_device("d1", "online"), _device("d2", "offline")),
        tasks=(
            _task("t1", "d1", "completed", createdAt=_dt(2), startedAt=_dt(2, 8), completedAt=_dt(2, 9)),
            _task("t2", "d1", "running", createdAt=_dt(5), startedAt=_dt(5, 8)),
            _task("t3", "d2", "failed", createdAt=_dt(7)),
        ),
    )

    overview = statistics_overview(snapshot)

    assert overview.period.start == _dt(2)
    assert overview.period.end == _dt(20)
    assert overview.tasks.total == 3
    assert overview.devices.online == 1
    assert overview.efficiency.success_rate == 0.5
    assert overview.efficiency.average_task_duration == 60.0
    assert overview.efficiency.device_utilization == 0.5


def test_statistics_overview_limits_tasks_to_period() -> None:
    snapshot = StoreSnapshot(
        taken_at=_dt(20),
        tasks=(
            _task("t1", "d1", "completed", createdAt=_dt(2)),
            _task("t2", "d1", "failed", createdAt=_dt(10)),
        ),
    )

    overview = statistics_overview(snapshot, start=_dt(5), end=_dt(15))

    assert overview.tasks.total == 1
    assert overview.tasks.failed == 1
    assert overview.efficiency.success_rate == 0.0
    assert overview.devices.total == 0


def test_statistics_overview_of_empty_snapshot() -> None:
    overview = statistics_overview(StoreSnapshot(taken_at=_dt(1)))

    assert overview.period.start == overview.period.end == _dt(1)
    assert overview.tasks.total == 0
    assert overview.efficiency.device_utilization == 0.0
    assert overview.to_api()["efficiency"]["successRate"] == 0.0
