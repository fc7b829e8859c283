"""Async stand-in for the remote fleet API."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeVar

from pyfleet._api._envelope import api_error, build_response, page_response
from pyfleet.config import FleetConfig
from pyfleet.exceptions import FleetError
from pyfleet.models._base import has_field
from pyfleet.models.capability import Capability
from pyfleet.models.device import Device, DevicePatch
from pyfleet.models.ledger import TaskStatusRecord
from pyfleet.models.query import QueryParams
from pyfleet.models.response import ApiResponse
from pyfleet.models.stats import Statistics
from pyfleet.models.target import InspectionTarget
from pyfleet.models.task import InspectionTask, TaskPatch, TaskStatus
from pyfleet.models.template import DeviceTemplate
from pyfleet.query.views import statistics_overview
from pyfleet.state.events import EntityKind
from pyfleet.state.store import FleetStore

_logger = logging.getLogger(__name__)

T = TypeVar("T")

Params = QueryParams | Mapping[str, Any] | None


class FleetClient:
    """Async client for the (simulated) fleet API.

    Every call first waits ``config.api_latency`` seconds, then reads or
    mutates the store. The store is touched only after the wait, so a
    call sees the state as of its own completion, concurrent calls may
    complete in any order, and cancelling a call during the wait leaves
    the store unchanged. Failures raise
    :class:`pyfleet.exceptions.FleetApiError`.

    Usage::

        store = FleetStore()
        async with FleetClient(store) as client:
            response = await client.get_devices({"status": ["online"], "page": 1, "limit": 20})
    """

    def __init__(
        self,
        store: FleetStore,
        config: FleetConfig | None = None,
        *,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._store = store
        self._config = config or store.config
        self._sleep = sleep
        self._open = False

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> FleetClient:
        self._open = True
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self._open = False

    @property
    def store(self) -> FleetStore:
        return self._store

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_open(self) -> None:
        if not self._open:
            raise FleetError("Client not initialized. Use 'async with FleetClient(...) as client:'")

    async def _call(self, endpoint: str, fn: Callable[[], T]) -> T:
        """Wait for the simulated latency, then run *fn* against the store."""
        self._require_open()
        if self._config.api_trace_enabled:
            _logger.debug("API call %s latency=%.3fs", endpoint, self._config.api_latency)
        if self._config.api_latency > 0:
            await self._sleep(self._config.api_latency)
        try:
            return fn()
        except FleetError as exc:
            _logger.debug("API call %s failed: %s", endpoint, exc)
            raise api_error(endpoint, exc) from exc

    # ------------------------------------------------------------------
    # Devices
    # ------------------------------------------------------------------

    async def get_devices(self, params: Params = None) -> ApiResponse[list[Device]]:
        return await self._call(
            "/devices",
            lambda: page_response(self._store.query(EntityKind.DEVICE, params)),
        )

    async def get_device(self, device_id: str) -> ApiResponse[Device]:
        return await self._call(
            f"/devices/{device_id}",
            lambda: build_response(self._store.get_device(device_id)),
        )

    async def create_device(self, device: Mapping[str, Any]) -> ApiResponse[Device]:
        """Create a device with a minted ``device-*`` id and a fresh ``lastUpdate``."""

        def _create() -> ApiResponse[Device]:
            payload = {k: v for k, v in device.items() if k not in {"id", "lastUpdate", "last_update"}}
            payload["last_update"] = self._store.now()
            return build_response(self._store.add_device(payload))

        return await self._call("/devices", _create)

    async def update_device(self, device_id: str, updates: DevicePatch | Mapping[str, Any]) -> ApiResponse[Device]:
        """Patch a device and stamp ``lastUpdate`` unless the caller set it."""

        def _update() -> ApiResponse[Device]:
            patch = dict(updates.changes()) if isinstance(updates, DevicePatch) else dict(updates)
            if not has_field(patch, "last_update"):
                patch["last_update"] = self._store.now()
            return build_response(self._store.update_device(device_id, patch))

        return await self._call(f"/devices/{device_id}", _update)

    async def delete_device(self, device_id: str) -> ApiResponse[None]:
        def _delete() -> ApiResponse[None]:
            self._store.remove_device(device_id)
            return build_response(None)

        return await self._call(f"/devices/{device_id}", _delete)

    async def get_device_templates(self) -> ApiResponse[list[DeviceTemplate]]:
        return await self._call("/devices/templates", lambda: build_response(self._store.templates()))

    async def get_capabilities(self, params: Params = None) -> ApiResponse[list[Capability]]:
        return await self._call(
            "/capabilities",
            lambda: page_response(self._store.query(EntityKind.CAPABILITY, params)),
        )

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    async def get_tasks(self, params: Params = None) -> ApiResponse[list[InspectionTask]]:
        return await self._call(
            "/tasks",
            lambda: page_response(self._store.query(EntityKind.TASK, params)),
        )

    async def get_task(self, task_id: str) -> ApiResponse[InspectionTask]:
        return await self._call(
            f"/tasks/{task_id}",
            lambda: build_response(self._store.get_task(task_id)),
        )

    async def create_task(self, task: Mapping[str, Any]) -> ApiResponse[InspectionTask]:
        """Create a task with a minted ``task-*`` id and ``createdAt``; the store starts it ``pending``."""

        def _create() -> ApiResponse[InspectionTask]:
            payload = {k: v for k, v in task.items() if k not in {"id", "status", "createdAt", "created_at"}}
            payload["created_at"] = self._store.now()
            return build_response(self._store.add_task(payload))

        return await self._call("/tasks", _create)

    async def update_task(self, task_id: str, updates: TaskPatch | Mapping[str, Any]) -> ApiResponse[InspectionTask]:
        return await self._call(
            f"/tasks/{task_id}",
            lambda: build_response(self._store.update_task(task_id, updates)),
        )

    async def update_task_status(
        self,
        task_id: str,
        status: TaskStatus | str,
        notes: str | None = None,
        *,
        operator: str | None = None,
    ) -> ApiResponse[TaskStatusRecord]:
        return await self._call(
            f"/tasks/{task_id}/status",
            lambda: build_response(self._store.record_transition(task_id, status, notes, operator=operator)),
        )

    async def get_task_history(self, task_id: str) -> ApiResponse[list[TaskStatusRecord]]:
        return await self._call(
            f"/tasks/{task_id}/history",
            lambda: build_response(self._store.task_history(task_id)),
        )

    async def delete_task(self, task_id: str) -> ApiResponse[None]:
        def _delete() -> ApiResponse[None]:
            self._store.remove_task(task_id)
            return build_response(None)

        return await self._call(f"/tasks/{task_id}", _delete)

    async def get_targets(self) -> ApiResponse[list[InspectionTarget]]:
        return await self._call("/tasks/targets", lambda: build_response(self._store.targets()))

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    async def get_statistics_overview(self) -> ApiResponse[Statistics]:
        return await self._call(
            "/statistics/overview",
            lambda: build_response(statistics_overview(self._store.snapshot())),
        )
