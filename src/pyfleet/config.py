"""Client configuration for pyfleet."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyfleet._constants import DEFAULT_API_LATENCY, MONITORING_BUFFER_CAPACITY
from pyfleet.exceptions import FleetConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class FleetConfig:
    """Store and simulated-API configuration.

    Parameters
    ----------
    api_latency : float
        Seconds every simulated API call waits before it reads or
        mutates the store. ``0`` disables the wait.
    monitoring_capacity : int
        Maximum number of monitoring records retained per device.
        Older records are evicted first.
    api_trace_enabled : bool
        Emit a DEBUG log line for every simulated API call.
    """

    api_latency: float = DEFAULT_API_LATENCY
    monitoring_capacity: int = MONITORING_BUFFER_CAPACITY
    api_trace_enabled: bool = False

    def __post_init__(self) -> None:
        if self.api_latency < 0:
            raise FleetConfigError(f"api_latency must be >= 0, got {self.api_latency}")
        if self.monitoring_capacity < 1:
            raise FleetConfigError(f"monitoring_capacity must be >= 1, got {self.monitoring_capacity}")

    @classmethod
    def from_env(cls, **overrides: Any) -> FleetConfig:
        """Create configuration from environment variables.

        Reads ``FLEET_API_LATENCY``, ``FLEET_MONITORING_CAPACITY`` and
        ``FLEET_API_TRACE_ENABLED``. Explicit keyword arguments override
        environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        FleetConfig
            Populated configuration.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        latency_env = env.get("FLEET_API_LATENCY")
        if latency_env is not None and "api_latency" not in overrides:
            try:
                config_kwargs["api_latency"] = float(latency_env)
            except ValueError as exc:
                raise FleetConfigError(f"FLEET_API_LATENCY is not a number: {latency_env!r}") from exc

        capacity_env = env.get("FLEET_MONITORING_CAPACITY")
        if capacity_env is not None and "monitoring_capacity" not in overrides:
            try:
                config_kwargs["monitoring_capacity"] = int(capacity_env)
            except ValueError as exc:
                raise FleetConfigError(f"FLEET_MONITORING_CAPACITY is not an integer: {capacity_env!r}") from exc

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("FLEET_API_TRACE_ENABLED"),
                False,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
