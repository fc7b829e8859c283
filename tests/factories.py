"""Payload builders shared by the test modules."""

from __future__ import annotations

import itertools
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any


class SteppingClock:
    """Deterministic clock: every call advances by ``step``."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)) -> None:
        self.current = start or datetime(2026, 1, 1, tzinfo=UTC)
        self.step = step

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + self.step
        return now


def sequential_ids() -> Callable[[str], str]:
    counter = itertools.count(1)
    return lambda prefix: f"{prefix}-{next(counter)}"


def device_payload(device_id: str, **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": device_id,
        "name": f"Device {device_id}",
        "type": "drone",
        "status": "online",
        "location": {"lat": 39.9, "lng": 116.4},
        "capabilities": ["cap-1"],
        "lastUpdate": "2026-01-01T00:00:00Z",
    }
    payload.update(overrides)
    return payload


def task_payload(task_id: str, device_id: str, **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": task_id,
        "name": f"Task {task_id}",
        "deviceId": device_id,
        "createdAt": "2026-01-01T00:00:00Z",
        "priority": "medium",
    }
    payload.update(overrides)
    return payload
