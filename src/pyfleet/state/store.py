"""Deterministic in-memory fleet store.

This is the only component allowed to mutate devices, tasks,
capabilities, templates, targets, the status ledger, the monitoring
buffers and the notification inbox. Readers get a :class:`StoreSnapshot`
and run queries against it.
"""

from __future__ import annotations

import dataclasses
import logging
import secrets
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import UTC, datetime
from typing import Any, TypeVar

from pydantic import BaseModel

from pyfleet._constants import (
    CAPABILITY_ID_PREFIX,
    DEVICE_ID_PREFIX,
    NOTIFICATION_ID_PREFIX,
    STATUS_ID_PREFIX,
    TARGET_ID_PREFIX,
    TASK_ID_PREFIX,
    TEMPLATE_ID_PREFIX,
)
from pyfleet.config import FleetConfig
from pyfleet.exceptions import FleetNotFoundError, FleetValidationError
from pyfleet.models._base import FleetPatch, coerce_model, has_field
from pyfleet.models.capability import Capability, CapabilityPatch
from pyfleet.models.device import Device, DevicePatch, DeviceStatus, DeviceStatusChange, DeviceType
from pyfleet.models.ledger import TaskStatusRecord
from pyfleet.models.monitoring import MonitoringData
from pyfleet.models.notification import Notification
from pyfleet.models.query import DateRange, Page, QueryParams
from pyfleet.models.target import InspectionTarget, InspectionTargetPatch
from pyfleet.models.task import InspectionTask, TaskPatch, TaskPriority, TaskStatus, TaskStatusChange
from pyfleet.models.template import DeviceTemplate, DeviceTemplatePatch
from pyfleet.query.engine import query_kind
from pyfleet.state.events import EntityKind, MutationKind, StoreEvent
from pyfleet.state.ledger import StatusLedger
from pyfleet.state.monitoring import MonitoringBuffers
from pyfleet.state.notifications import NotificationInbox
from pyfleet.state.repository import EntityRepository

_logger = logging.getLogger(__name__)

P = TypeVar("P", bound=FleetPatch)

Subscriber = Callable[[StoreEvent], None]

_FINISHED_STATUSES = frozenset({TaskStatus.COMPLETED, TaskStatus.FAILED, TaskStatus.CANCELLED})


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _mint_id(prefix: str) -> str:
    return f"{prefix}-{secrets.token_hex(6)}"


def _with_defaults(data: Mapping[str, Any], defaults: Mapping[str, Callable[[], Any]]) -> dict[str, Any]:
    """Copy *data*, filling fields the caller did not supply.

    Each default is a factory called only when its field is missing, so
    minted ids and clock readings are not spent on supplied values.
    """
    filled = dict(data)
    for name, factory in defaults.items():
        if not has_field(filled, name):
            filled[name] = factory()
    return filled


def _apply_status(task: InspectionTask, status: TaskStatus, now: datetime) -> InspectionTask:
    """Return *task* moved to *status*, stamping timestamps and progress.

    Leaving a finished state clears ``completed_at``.
    """
    update: dict[str, Any] = {"status": status}
    if status == TaskStatus.RUNNING and task.started_at is None:
        update["started_at"] = now
    if status == TaskStatus.COMPLETED:
        update["progress"] = 100.0
        if task.completed_at is None:
            update["completed_at"] = now
    elif status not in _FINISHED_STATUSES:
        update["completed_at"] = None
    return task.model_copy(update=update)


@dataclasses.dataclass(frozen=True)
class TaskFilters:
    """Saved task list filters (status, priority, device and date window)."""

    status: tuple[str, ...] = ()
    priority: tuple[str, ...] = ()
    device_id: tuple[str, ...] = ()
    date_range: DateRange | None = None

    def to_params(self) -> QueryParams:
        return QueryParams(
            status=self.status,
            priority=self.priority,
            device_ids=self.device_id,
            date_range=self.date_range,
        )


@dataclasses.dataclass(frozen=True)
class StoreSnapshot:
    """Point-in-time view of every collection.

    Entities are immutable values, so the tuples can be shared safely with
    readers while the store keeps mutating.
    """

    taken_at: datetime
    devices: tuple[Device, ...] = ()
    tasks: tuple[InspectionTask, ...] = ()
    capabilities: tuple[Capability, ...] = ()
    templates: tuple[DeviceTemplate, ...] = ()
    targets: tuple[InspectionTarget, ...] = ()
    task_statuses: tuple[TaskStatusRecord, ...] = ()

    def collection(self, kind: EntityKind) -> tuple[BaseModel, ...]:
        collections: dict[EntityKind, tuple[BaseModel, ...]] = {
            EntityKind.DEVICE: self.devices,
            EntityKind.TASK: self.tasks,
            EntityKind.CAPABILITY: self.capabilities,
            EntityKind.TEMPLATE: self.templates,
            EntityKind.TARGET: self.targets,
            EntityKind.TASK_STATUS: self.task_statuses,
        }
        try:
            return collections[kind]
        except KeyError:
            raise FleetValidationError(f"{kind.value} is not a queryable collection") from None


class FleetStore:
    """In-memory store for fleet entities.

    The store is an explicitly constructed container: create one per
    session and pass it to whatever needs it. Every committed mutation is
    reported synchronously to subscribers registered with
    :meth:`subscribe`.

    Usage::

        store = FleetStore()
        store.add_device({"name": "Cam 1", "type": "camera", ...})
        page = store.query(EntityKind.DEVICE, {"status": ["online"], "page": 1, "limit": 10})
    """

    def __init__(
        self,
        config: FleetConfig | None = None,
        *,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[str], str] = _mint_id,
    ) -> None:
        self._config = config or FleetConfig()
        self._clock = clock
        self._id_factory = id_factory
        self._devices: EntityRepository[Device] = EntityRepository(EntityKind.DEVICE, Device)
        self._tasks: EntityRepository[InspectionTask] = EntityRepository(EntityKind.TASK, InspectionTask)
        self._capabilities: EntityRepository[Capability] = EntityRepository(EntityKind.CAPABILITY, Capability)
        self._templates: EntityRepository[DeviceTemplate] = EntityRepository(EntityKind.TEMPLATE, DeviceTemplate)
        self._targets: EntityRepository[InspectionTarget] = EntityRepository(EntityKind.TARGET, InspectionTarget)
        self._ledger = StatusLedger()
        self._monitoring = MonitoringBuffers(self._config.monitoring_capacity)
        self._selected_device: Device | None = None
        self._selected_task: InspectionTask | None = None
        self._task_filters = TaskFilters()
        self._notifications = NotificationInbox()
        self._subscribers: list[Subscriber] = []

    @property
    def config(self) -> FleetConfig:
        return self._config

    def now(self) -> datetime:
        return self._clock()

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register *callback* for mutation events; return an unsubscribe function."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def _notify(self, entity: EntityKind, mutation: MutationKind, ids: Iterable[str] = ()) -> None:
        event = StoreEvent(entity=entity, mutation=mutation, ids=tuple(ids), observed_at=self._clock())
        _logger.debug("Store %s %s ids=%s", entity.value, mutation.value, event.ids)
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                _logger.debug("store subscriber callback failed", exc_info=True)

    # ------------------------------------------------------------------
    # Shared CRUD helpers
    # ------------------------------------------------------------------

    def _prepare(self, data: Any, prefix: str, **defaults: Callable[[], Any]) -> Any:
        if isinstance(data, BaseModel):
            return data
        if not isinstance(data, Mapping):
            raise FleetValidationError(f"expected a mapping or model, got {type(data).__name__}")
        return _with_defaults(data, {"id": lambda: self._id_factory(prefix), **defaults})

    @staticmethod
    def _patch(patch_cls: type[P], patch: P | Mapping[str, Any]) -> P:
        return coerce_model(patch_cls, patch)

    def _set(self, repo: EntityRepository[Any], entities: Iterable[Any]) -> list[Any]:
        stored = repo.set_all(entities)
        self._notify(repo.kind, MutationKind.SET)
        return stored

    def _add(self, repo: EntityRepository[Any], entity: Any) -> Any:
        stored = repo.add(entity)
        self._notify(repo.kind, MutationKind.ADD, (stored.id,))
        return stored

    def _remove(self, repo: EntityRepository[Any], entity_id: str) -> bool:
        removed = repo.discard(entity_id)
        if removed is None:
            return False
        self._notify(repo.kind, MutationKind.REMOVE, (entity_id,))
        return True

    # ------------------------------------------------------------------
    # Devices
    # ------------------------------------------------------------------

    def set_devices(self, devices: Iterable[Device | Mapping[str, Any]]) -> list[Device]:
        """Replace the whole device collection (bulk load)."""
        return self._set(self._devices, devices)

    def add_device(self, device: Device | Mapping[str, Any]) -> Device:
        """Insert one device, minting an id and ``lastUpdate`` when absent.

        Raises :class:`FleetDuplicateIdError` if the id is already stored.
        """
        return self._add(
            self._devices,
            self._prepare(device, DEVICE_ID_PREFIX, last_update=self._clock),
        )

    def get_device(self, device_id: str) -> Device:
        return self._devices.get(device_id)

    def update_device(self, device_id: str, patch: DevicePatch | Mapping[str, Any]) -> Device:
        """Merge *patch* into the device and return the merged value."""
        merged = self._devices.update(device_id, self._patch(DevicePatch, patch))
        if self._selected_device is not None and self._selected_device.id == device_id:
            self._selected_device = merged
        self._notify(EntityKind.DEVICE, MutationKind.UPDATE, (device_id,))
        return merged

    def remove_device(self, device_id: str) -> bool:
        """Delete a device and its monitoring buffer.

        Idempotent: removing a missing id is a no-op. Tasks referencing the
        device are left untouched. Returns whether a device was removed.
        """
        removed = self._remove(self._devices, device_id)
        dropped = self._monitoring.drop(device_id)
        if self._selected_device is not None and self._selected_device.id == device_id:
            self._selected_device = None
        if dropped and not removed:
            self._notify(EntityKind.MONITORING, MutationKind.REMOVE, (device_id,))
        return removed

    def update_device_statuses(
        self,
        changes: Iterable[DeviceStatusChange | Mapping[str, Any]],
    ) -> list[Device]:
        """Overwrite the status of several devices; unknown ids are skipped."""
        updated: list[Device] = []
        for change in (coerce_model(DeviceStatusChange, c) for c in changes):
            device = self._devices.find(change.id)
            if device is None:
                continue
            merged = self._devices.replace(device.model_copy(update={"status": change.status}))
            if self._selected_device is not None and self._selected_device.id == merged.id:
                self._selected_device = merged
            updated.append(merged)
        if updated:
            self._notify(EntityKind.DEVICE, MutationKind.STATUS, (d.id for d in updated))
        return updated

    def devices(self) -> list[Device]:
        return self._devices.values()

    def devices_by_type(self, device_type: DeviceType | str) -> list[Device]:
        return [d for d in self._devices if d.type == device_type]

    def devices_by_status(self, status: DeviceStatus | str) -> list[Device]:
        return [d for d in self._devices if d.status == status]

    def online_devices(self) -> list[Device]:
        return self.devices_by_status(DeviceStatus.ONLINE)

    # ------------------------------------------------------------------
    # Device templates
    # ------------------------------------------------------------------

    def set_templates(self, templates: Iterable[DeviceTemplate | Mapping[str, Any]]) -> list[DeviceTemplate]:
        return self._set(self._templates, templates)

    def add_template(self, template: DeviceTemplate | Mapping[str, Any]) -> DeviceTemplate:
        return self._add(
            self._templates,
            self._prepare(template, TEMPLATE_ID_PREFIX, created_at=self._clock),
        )

    def get_template(self, template_id: str) -> DeviceTemplate:
        return self._templates.get(template_id)

    def update_template(
        self,
        template_id: str,
        patch: DeviceTemplatePatch | Mapping[str, Any],
    ) -> DeviceTemplate:
        merged = self._templates.update(template_id, self._patch(DeviceTemplatePatch, patch))
        self._notify(EntityKind.TEMPLATE, MutationKind.UPDATE, (template_id,))
        return merged

    def remove_template(self, template_id: str) -> bool:
        return self._remove(self._templates, template_id)

    def templates(self) -> list[DeviceTemplate]:
        return self._templates.values()

    # ------------------------------------------------------------------
    # Capabilities
    # ------------------------------------------------------------------

    def set_capabilities(self, capabilities: Iterable[Capability | Mapping[str, Any]]) -> list[Capability]:
        return self._set(self._capabilities, capabilities)

    def add_capability(self, capability: Capability | Mapping[str, Any]) -> Capability:
        return self._add(self._capabilities, self._prepare(capability, CAPABILITY_ID_PREFIX))

    def get_capability(self, capability_id: str) -> Capability:
        return self._capabilities.get(capability_id)

    def update_capability(
        self,
        capability_id: str,
        patch: CapabilityPatch | Mapping[str, Any],
    ) -> Capability:
        merged = self._capabilities.update(capability_id, self._patch(CapabilityPatch, patch))
        self._notify(EntityKind.CAPABILITY, MutationKind.UPDATE, (capability_id,))
        return merged

    def toggle_capability(self, capability_id: str) -> Capability:
        """Flip ``is_active`` and return the updated capability."""
        capability = self._capabilities.get(capability_id)
        toggled = self._capabilities.replace(capability.model_copy(update={"is_active": not capability.is_active}))
        self._notify(EntityKind.CAPABILITY, MutationKind.TOGGLE, (capability_id,))
        return toggled

    def remove_capability(self, capability_id: str) -> bool:
        return self._remove(self._capabilities, capability_id)

    def capabilities(self) -> list[Capability]:
        return self._capabilities.values()

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def set_tasks(self, tasks: Iterable[InspectionTask | Mapping[str, Any]]) -> list[InspectionTask]:
        """Replace the whole task collection (bulk load, no referential checks)."""
        return self._set(self._tasks, tasks)

    def add_task(self, task: InspectionTask | Mapping[str, Any]) -> InspectionTask:
        """Insert one task.

        The owning device must exist at this point. Every task starts
        ``pending`` with progress 0 and no start/completion timestamps;
        later status changes go through :meth:`record_transition`.
        ``deviceName`` is filled from the device when absent.
        """
        validated = coerce_model(
            InspectionTask,
            self._prepare(task, TASK_ID_PREFIX, created_at=self._clock),
        )
        device = self._devices.find(validated.device_id)
        if device is None:
            raise FleetValidationError(
                f"task {validated.id!r} references unknown device {validated.device_id!r}"
            )
        update: dict[str, Any] = {
            "status": TaskStatus.PENDING,
            "progress": 0.0,
            "started_at": None,
            "completed_at": None,
        }
        if validated.device_name is None:
            update["device_name"] = device.name
        return self._add(self._tasks, validated.model_copy(update=update))

    def get_task(self, task_id: str) -> InspectionTask:
        return self._tasks.get(task_id)

    def update_task(self, task_id: str, patch: TaskPatch | Mapping[str, Any]) -> InspectionTask:
        """Merge non-status fields into the task.

        Status changes are rejected here; use :meth:`record_transition`.
        Progress may not decrease while the task is running and stays at
        100 once it is completed.
        """
        if isinstance(patch, Mapping) and has_field(patch, "status"):
            raise FleetValidationError("task status changes must go through record_transition")
        task_patch = self._patch(TaskPatch, patch)
        current = self._tasks.get(task_id)
        progress = task_patch.changes().get("progress")
        if progress is not None:
            if current.status == TaskStatus.RUNNING and progress < current.progress:
                raise FleetValidationError(
                    f"progress of running task {task_id!r} cannot decrease ({current.progress} -> {progress})"
                )
            if current.status == TaskStatus.COMPLETED and progress != 100:
                raise FleetValidationError(f"progress of completed task {task_id!r} is fixed at 100, got {progress}")
        merged = self._tasks.update(task_id, task_patch)
        self._refresh_selected_task(merged)
        self._notify(EntityKind.TASK, MutationKind.UPDATE, (task_id,))
        return merged

    def remove_task(self, task_id: str) -> bool:
        """Delete a task and its ledger records. Idempotent."""
        removed = self._remove(self._tasks, task_id)
        purged = self._ledger.purge(task_id)
        if self._selected_task is not None and self._selected_task.id == task_id:
            self._selected_task = None
        if purged:
            self._notify(EntityKind.TASK_STATUS, MutationKind.REMOVE, (task_id,))
        return removed

    def update_task_statuses(
        self,
        changes: Iterable[TaskStatusChange | Mapping[str, Any]],
    ) -> list[InspectionTask]:
        """Overwrite the status of several tasks without ledger records.

        Unknown ids are skipped.
        """
        now = self._clock()
        updated: list[InspectionTask] = []
        for change in (coerce_model(TaskStatusChange, c) for c in changes):
            task = self._tasks.find(change.id)
            if task is None:
                continue
            merged = self._tasks.replace(_apply_status(task, change.status, now))
            self._refresh_selected_task(merged)
            updated.append(merged)
        if updated:
            self._notify(EntityKind.TASK, MutationKind.STATUS, (t.id for t in updated))
        return updated

    def tasks(self) -> list[InspectionTask]:
        return self._tasks.values()

    def tasks_by_status(self, status: TaskStatus | str) -> list[InspectionTask]:
        return [t for t in self._tasks if t.status == status]

    def tasks_by_priority(self, priority: TaskPriority | str) -> list[InspectionTask]:
        return [t for t in self._tasks if t.priority == priority]

    def tasks_by_device(self, device_id: str) -> list[InspectionTask]:
        return [t for t in self._tasks if t.device_id == device_id]

    def _refresh_selected_task(self, task: InspectionTask) -> None:
        if self._selected_task is not None and self._selected_task.id == task.id:
            self._selected_task = task

    # ------------------------------------------------------------------
    # Status ledger
    # ------------------------------------------------------------------

    def record_transition(
        self,
        task_id: str,
        status: TaskStatus | str,
        notes: str | None = None,
        *,
        operator: str | None = None,
    ) -> TaskStatusRecord:
        """Move a task to *status* and append the matching ledger record.

        This is the audited path for task status changes.
        """
        task = self._tasks.get(task_id)
        try:
            new_status = TaskStatus(status)
        except ValueError:
            raise FleetValidationError(f"unknown task status {status!r}") from None
        now = self._clock()
        record = TaskStatusRecord(
            id=self._id_factory(STATUS_ID_PREFIX),
            task_id=task_id,
            status=new_status,
            timestamp=now,
            operator=operator,
            notes=notes,
        )
        updated = self._tasks.replace(_apply_status(task, new_status, now))
        self._ledger.append(record)
        self._refresh_selected_task(updated)
        _logger.debug("Task %s -> %s review_required=%s", task_id, new_status.value, record.review_required)
        self._notify(EntityKind.TASK, MutationKind.TRANSITION, (task_id,))
        return record

    def add_task_status(self, record: TaskStatusRecord | Mapping[str, Any]) -> TaskStatusRecord:
        """Append an externally produced ledger record as-is."""
        prepared = self._prepare(record, STATUS_ID_PREFIX, timestamp=self._clock)
        appended = self._ledger.append(coerce_model(TaskStatusRecord, prepared))
        self._notify(EntityKind.TASK_STATUS, MutationKind.ADD, (appended.id,))
        return appended

    def task_history(self, task_id: str) -> list[TaskStatusRecord]:
        """Ledger records of *task_id*, most recent first."""
        return self._ledger.history(task_id)

    # ------------------------------------------------------------------
    # Inspection targets
    # ------------------------------------------------------------------

    def set_targets(self, targets: Iterable[InspectionTarget | Mapping[str, Any]]) -> list[InspectionTarget]:
        return self._set(self._targets, targets)

    def add_target(self, target: InspectionTarget | Mapping[str, Any]) -> InspectionTarget:
        return self._add(self._targets, self._prepare(target, TARGET_ID_PREFIX))

    def get_target(self, target_id: str) -> InspectionTarget:
        return self._targets.get(target_id)

    def update_target(
        self,
        target_id: str,
        patch: InspectionTargetPatch | Mapping[str, Any],
    ) -> InspectionTarget:
        merged = self._targets.update(target_id, self._patch(InspectionTargetPatch, patch))
        self._notify(EntityKind.TARGET, MutationKind.UPDATE, (target_id,))
        return merged

    def remove_target(self, target_id: str) -> bool:
        return self._remove(self._targets, target_id)

    def targets(self) -> list[InspectionTarget]:
        return self._targets.values()

    # ------------------------------------------------------------------
    # Monitoring buffers
    # ------------------------------------------------------------------

    def add_monitoring_data(self, device_id: str, data: MonitoringData | Mapping[str, Any]) -> MonitoringData:
        sample = self._sample(device_id, data)
        self._monitoring.append(device_id, sample)
        self._notify(EntityKind.MONITORING, MutationKind.ADD, (device_id,))
        return sample

    def set_monitoring_data(
        self,
        device_id: str,
        data: Sequence[MonitoringData | Mapping[str, Any]],
    ) -> list[MonitoringData]:
        """Replace the device's buffer, keeping only the newest samples that fit."""
        samples = [self._sample(device_id, d) for d in data]
        self._monitoring.replace(device_id, samples)
        self._notify(EntityKind.MONITORING, MutationKind.SET, (device_id,))
        return self._monitoring.get(device_id)

    def clear_monitoring_data(self, device_id: str) -> None:
        self._monitoring.clear(device_id)
        self._notify(EntityKind.MONITORING, MutationKind.CLEAR, (device_id,))

    def monitoring_data(self, device_id: str) -> list[MonitoringData]:
        return self._monitoring.get(device_id)

    def has_monitoring_buffer(self, device_id: str) -> bool:
        return device_id in self._monitoring

    def _sample(self, device_id: str, data: MonitoringData | Mapping[str, Any]) -> MonitoringData:
        if not isinstance(data, MonitoringData):
            data = coerce_model(
                MonitoringData,
                _with_defaults(data, {"device_id": lambda: device_id, "timestamp": self._clock}),
            )
        if data.device_id != device_id:
            raise FleetValidationError(
                f"monitoring sample for {data.device_id!r} cannot be stored under {device_id!r}"
            )
        return data

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def add_notification(self, notification: Notification | Mapping[str, Any]) -> Notification:
        """Post an unread notification at the top of the inbox."""
        prepared = self._prepare(notification, NOTIFICATION_ID_PREFIX, timestamp=self._clock)
        posted = coerce_model(Notification, prepared).model_copy(update={"read": False})
        self._notifications.add(posted)
        self._notify(EntityKind.NOTIFICATION, MutationKind.ADD, (posted.id,))
        return posted

    def remove_notification(self, notification_id: str) -> bool:
        removed = self._notifications.remove(notification_id)
        if removed:
            self._notify(EntityKind.NOTIFICATION, MutationKind.REMOVE, (notification_id,))
        return removed

    def mark_notification_read(self, notification_id: str) -> Notification:
        marked = self._notifications.mark_read(notification_id)
        if marked is None:
            raise FleetNotFoundError(EntityKind.NOTIFICATION.value, notification_id)
        self._notify(EntityKind.NOTIFICATION, MutationKind.UPDATE, (notification_id,))
        return marked

    def mark_all_notifications_read(self) -> int:
        """Mark every notification read; return how many were unread."""
        marked = self._notifications.mark_all_read()
        if marked:
            self._notify(EntityKind.NOTIFICATION, MutationKind.UPDATE)
        return marked

    def clear_notifications(self) -> None:
        self._notifications.clear()
        self._notify(EntityKind.NOTIFICATION, MutationKind.CLEAR)

    def notifications(self) -> list[Notification]:
        """Notifications, newest first."""
        return self._notifications.items()

    @property
    def unread_count(self) -> int:
        return self._notifications.unread_count

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    @property
    def selected_device(self) -> Device | None:
        return self._selected_device

    def select_device(self, device_id: str | None) -> Device | None:
        self._selected_device = None if device_id is None else self._devices.get(device_id)
        self._notify(EntityKind.DEVICE, MutationKind.SELECT, () if device_id is None else (device_id,))
        return self._selected_device

    @property
    def selected_task(self) -> InspectionTask | None:
        return self._selected_task

    def select_task(self, task_id: str | None) -> InspectionTask | None:
        self._selected_task = None if task_id is None else self._tasks.get(task_id)
        self._notify(EntityKind.TASK, MutationKind.SELECT, () if task_id is None else (task_id,))
        return self._selected_task

    # ------------------------------------------------------------------
    # Task filters
    # ------------------------------------------------------------------

    @property
    def task_filters(self) -> TaskFilters:
        return self._task_filters

    def set_task_filters(
        self,
        *,
        status: Iterable[str] | None = None,
        priority: Iterable[str] | None = None,
        device_id: Iterable[str] | None = None,
        date_range: DateRange | Mapping[str, Any] | None = None,
    ) -> TaskFilters:
        """Merge the given filter fields into the saved task filters."""
        changes: dict[str, Any] = {}
        if status is not None:
            changes["status"] = tuple(status)
        if priority is not None:
            changes["priority"] = tuple(priority)
        if device_id is not None:
            changes["device_id"] = tuple(device_id)
        if date_range is not None:
            changes["date_range"] = coerce_model(DateRange, date_range)
        self._task_filters = dataclasses.replace(self._task_filters, **changes)
        self._notify(EntityKind.TASK_FILTERS, MutationKind.UPDATE)
        return self._task_filters

    def clear_task_filters(self) -> TaskFilters:
        self._task_filters = TaskFilters()
        self._notify(EntityKind.TASK_FILTERS, MutationKind.CLEAR)
        return self._task_filters

    def filtered_tasks(self) -> list[InspectionTask]:
        """Tasks matching the saved filters, in collection order."""
        page = query_kind(EntityKind.TASK, self.snapshot().tasks, self._task_filters.to_params())
        return list(page.items)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            taken_at=self._clock(),
            devices=tuple(self._devices),
            tasks=tuple(self._tasks),
            capabilities=tuple(self._capabilities),
            templates=tuple(self._templates),
            targets=tuple(self._targets),
            task_statuses=tuple(self._ledger.records()),
        )

    def query(
        self,
        kind: EntityKind,
        params: QueryParams | Mapping[str, Any] | None = None,
    ) -> Page[Any]:
        """Run a query for *kind* against a fresh snapshot."""
        return query_kind(kind, self.snapshot().collection(kind), params)
