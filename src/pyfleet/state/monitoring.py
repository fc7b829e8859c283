"""Fixed-capacity monitoring buffers, one per device id."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable

from pyfleet._constants import MONITORING_BUFFER_CAPACITY
from pyfleet.models.monitoring import MonitoringData


class MonitoringBuffers:
    """Ring buffers of :class:`MonitoringData` keyed by device id.

    Each buffer keeps the newest ``capacity`` samples; appending to a
    full buffer evicts the oldest sample.
    """

    def __init__(self, capacity: int = MONITORING_BUFFER_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._buffers: dict[str, deque[MonitoringData]] = {}

    def __contains__(self, device_id: object) -> bool:
        return device_id in self._buffers

    def _buffer(self, device_id: str) -> deque[MonitoringData]:
        buffer = self._buffers.get(device_id)
        if buffer is None:
            buffer = deque(maxlen=self.capacity)
            self._buffers[device_id] = buffer
        return buffer

    def append(self, device_id: str, data: MonitoringData) -> None:
        self._buffer(device_id).append(data)

    def replace(self, device_id: str, records: Iterable[MonitoringData]) -> None:
        self._buffers[device_id] = deque(records, maxlen=self.capacity)

    def clear(self, device_id: str) -> None:
        """Empty the buffer but keep the device key."""
        self._buffer(device_id).clear()

    def drop(self, device_id: str) -> bool:
        """Remove the buffer entirely; return whether one existed."""
        return self._buffers.pop(device_id, None) is not None

    def get(self, device_id: str) -> list[MonitoringData]:
        buffer = self._buffers.get(device_id)
        if buffer is None:
            return []
        return list(buffer)

    def device_ids(self) -> list[str]:
        return list(self._buffers)
