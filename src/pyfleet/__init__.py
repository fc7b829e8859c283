"""pyfleet - In-memory state store and query engine for field device fleets."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyfleet")
except PackageNotFoundError:
    __version__ = "0+local"
from pyfleet.client import FleetClient
from pyfleet.config import FleetConfig
from pyfleet.exceptions import (
    FleetApiError,
    FleetConfigError,
    FleetDuplicateIdError,
    FleetError,
    FleetNotFoundError,
    FleetValidationError,
)
from pyfleet.models import (
    ApiResponse,
    Capability,
    CapabilityType,
    DateRange,
    Device,
    DevicePatch,
    DeviceStatus,
    DeviceTemplate,
    DeviceType,
    GeoPoint,
    InspectionTarget,
    InspectionTask,
    MonitoringData,
    Notification,
    Page,
    Pagination,
    QueryParams,
    SortOrder,
    Statistics,
    TargetType,
    TaskPatch,
    TaskPriority,
    TaskStatus,
    TaskStatusRecord,
    Waypoint,
)
from pyfleet.query.engine import query, query_kind
from pyfleet.state.events import EntityKind, MutationKind, StoreEvent
from pyfleet.state.store import FleetStore, StoreSnapshot, TaskFilters

__all__ = [
    "__version__",
    "ApiResponse",
    "Capability",
    "CapabilityType",
    "DateRange",
    "Device",
    "DevicePatch",
    "DeviceStatus",
    "DeviceTemplate",
    "DeviceType",
    "EntityKind",
    "FleetApiError",
    "FleetClient",
    "FleetConfig",
    "FleetConfigError",
    "FleetDuplicateIdError",
    "FleetError",
    "FleetNotFoundError",
    "FleetStore",
    "FleetValidationError",
    "GeoPoint",
    "InspectionTarget",
    "InspectionTask",
    "MonitoringData",
    "Notification",
    "MutationKind",
    "Page",
    "Pagination",
    "QueryParams",
    "SortOrder",
    "Statistics",
    "StoreEvent",
    "StoreSnapshot",
    "TargetType",
    "TaskFilters",
    "TaskPatch",
    "TaskPriority",
    "TaskStatus",
    "TaskStatusRecord",
    "Waypoint",
    "query",
    "query_kind",
]
