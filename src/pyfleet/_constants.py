"""Internal constants shared across the library."""

#: Simulated network latency applied by :class:`pyfleet.client.FleetClient`.
DEFAULT_API_LATENCY: float = 0.5

#: Number of monitoring records kept per device.
MONITORING_BUFFER_CAPACITY: int = 100

#: Task statuses whose ledger records are flagged for operator review.
REVIEW_REQUIRED_STATUSES: frozenset[str] = frozenset({"failed", "cancelled"})

# ------------------------------------------------------------------
# Minted identifiers
# ------------------------------------------------------------------

DEVICE_ID_PREFIX = "device"
TASK_ID_PREFIX = "task"
CAPABILITY_ID_PREFIX = "cap"
TEMPLATE_ID_PREFIX = "template"
TARGET_ID_PREFIX = "target"
STATUS_ID_PREFIX = "status"
NOTIFICATION_ID_PREFIX = "notice"
