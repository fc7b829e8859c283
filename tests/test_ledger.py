from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from pyfleet.exceptions import FleetNotFoundError, FleetValidationError
from pyfleet.models import TaskStatusRecord
from pyfleet.state.events import EntityKind, MutationKind, StoreEvent
from pyfleet.state.ledger import StatusLedger
from pyfleet.state.store import FleetStore
from tests.factories import SteppingClock, device_payload, task_payload


def _record(record_id: str, task_id: str, status: str, at: datetime) -> TaskStatusRecord:
    return TaskStatusRecord(id=record_id, task_id=task_id, status=status, timestamp=at)


@pytest.fixture
def seeded(store: FleetStore) -> FleetStore:
    store.add_device(device_payload("d1"))
    store.add_task(task_payload("t1", "d1"))
    return store


def test_transition_to_running_stamps_start(seeded: FleetStore) -> None:
    record = seeded.record_transition("t1", "running")

    task = seeded.get_task("t1")
    assert task.status == "running"
    assert task.started_at == record.timestamp
    assert record.task_id == "t1"
    assert record.review_required is False
    assert record.id.startswith("status-")
    assert seeded.task_history("t1") == [record]


def test_transition_to_failed_requires_review(seeded: FleetStore) -> None:
    seeded.record_transition("t1", "running")

    record = seeded.record_transition("t1", "failed", "sensor timeout", operator="ops-1")

    assert seeded.get_task("t1").status == "failed"
    assert record.review_required is True
    assert record.notes == "sensor timeout"
    assert record.operator == "ops-1"
    assert [r.status for r in seeded.task_history("t1")] == ["failed", "running"]


def test_transition_to_completed_sets_progress_and_completion(seeded: FleetStore) -> None:
    seeded.record_transition("t1", "running")
    seeded.update_task("t1", {"progress": 60})

    record = seeded.record_transition("t1", "completed")

    task = seeded.get_task("t1")
    assert task.progress == 100
    assert task.completed_at == record.timestamp
    assert task.duration_minutes is not None
    assert task.duration_minutes > 0


def test_started_at_is_kept_on_second_running_transition(seeded: FleetStore) -> None:
    first = seeded.record_transition("t1", "running")
    seeded.record_transition("t1", "pending")
    seeded.record_transition("t1", "running")

    assert seeded.get_task("t1").started_at == first.timestamp
    assert len(seeded.task_history("t1")) == 3


def test_reopening_completed_task_clears_completion(seeded: FleetStore) -> None:
    seeded.record_transition("t1", "running")
    first_done = seeded.record_transition("t1", "completed")

    seeded.record_transition("t1", "running")

    reopened = seeded.get_task("t1")
    assert reopened.status == "running"
    assert reopened.completed_at is None
    assert reopened.duration_minutes is None

    second_done = seeded.record_transition("t1", "completed")
    assert second_done.timestamp > first_done.timestamp
    assert seeded.get_task("t1").completed_at == second_done.timestamp


def test_failing_after_completion_keeps_completion_time(seeded: FleetStore) -> None:
    seeded.record_transition("t1", "running")
    done = seeded.record_transition("t1", "completed")

    seeded.record_transition("t1", "failed", "post-run check failed")

    assert seeded.get_task("t1").completed_at == done.timestamp

    seeded.record_transition("t1", "pending")
    assert seeded.get_task("t1").completed_at is None


def test_transition_of_unknown_task_raises(seeded: FleetStore) -> None:
    with pytest.raises(FleetNotFoundError):
        seeded.record_transition("ghost", "running")

    assert seeded.task_history("ghost") == []


def test_transition_to_unknown_status_raises(seeded: FleetStore) -> None:
    with pytest.raises(FleetValidationError):
        seeded.record_transition("t1", "exploded")

    assert seeded.get_task("t1").status == "pending"
    assert seeded.task_history("t1") == []


def test_transition_emits_task_event(seeded: FleetStore) -> None:
    events: list[StoreEvent] = []
    seeded.subscribe(events.append)

    seeded.record_transition("t1", "cancelled")

    assert [(e.entity, e.mutation, e.ids) for e in events] == [
        (EntityKind.TASK, MutationKind.TRANSITION, ("t1",)),
    ]


def test_add_task_status_appends_without_touching_task(seeded: FleetStore) -> None:
    record = seeded.add_task_status(
        {"taskId": "t1", "status": "cancelled", "timestamp": "2026-01-02T00:00:00Z", "notes": "imported"}
    )

    assert record.review_required is True
    assert seeded.get_task("t1").status == "pending"
    assert seeded.task_history("t1") == [record]


def test_history_is_newest_first_and_stable_for_ties() -> None:
    ledger = StatusLedger()
    base = datetime(2026, 1, 1, tzinfo=UTC)
    ledger.append(_record("s1", "t1", "pending", base))
    ledger.append(_record("s2", "t1", "running", base + timedelta(minutes=5)))
    ledger.append(_record("s3", "t2", "running", base + timedelta(minutes=6)))
    ledger.append(_record("s4", "t1", "failed", base + timedelta(minutes=5)))

    assert [r.id for r in ledger.history("t1")] == ["s2", "s4", "s1"]
    assert [r.id for r in ledger.history("t2")] == ["s3"]


def test_purge_only_drops_matching_task() -> None:
    ledger = StatusLedger()
    base = datetime(2026, 1, 1, tzinfo=UTC)
    ledger.append(_record("s1", "t1", "running", base))
    ledger.append(_record("s2", "t2", "running", base))
    ledger.append(_record("s3", "t1", "completed", base))

    assert ledger.purge("t1") == 2
    assert [r.id for r in ledger.records()] == ["s2"]
    assert ledger.purge("t1") == 0


def test_history_uses_injected_clock() -> None:
    clock = SteppingClock(start=datetime(2026, 5, 1, tzinfo=UTC), step=timedelta(minutes=1))
    store = FleetStore(clock=clock)
    store.add_device(device_payload("d1"))
    store.add_task(task_payload("t1", "d1"))

    running = store.record_transition("t1", "running")
    done = store.record_transition("t1", "completed")

    assert running.timestamp >= datetime(2026, 5, 1, tzinfo=UTC)
    assert done.timestamp > running.timestamp
    elapsed = (done.timestamp - running.timestamp).total_seconds() / 60
    assert store.get_task("t1").duration_minutes == elapsed
