"""Data models for pyfleet entities, queries and responses."""

from pyfleet.models._base import FleetBaseModel, FleetPatch, FleetTimestamp, parse_timestamp
from pyfleet.models.capability import Capability, CapabilityPatch, CapabilityType
from pyfleet.models.device import Device, DevicePatch, DeviceStatus, DeviceStatusChange, DeviceType, GeoPoint
from pyfleet.models.ledger import TaskStatusRecord
from pyfleet.models.monitoring import MediaRef, MediaType, MonitoringData, MonitoringLocation, Telemetry
from pyfleet.models.notification import Notification, NotificationType
from pyfleet.models.query import DateRange, Page, Pagination, QueryParams, SortOrder
from pyfleet.models.response import ApiResponse
from pyfleet.models.stats import DeviceStats, Efficiency, Statistics, StatisticsPeriod, TaskStats
from pyfleet.models.target import InspectionTarget, InspectionTargetPatch, TargetType
from pyfleet.models.task import (
    InspectionTask,
    TaskPatch,
    TaskPriority,
    TaskStatus,
    TaskStatusChange,
    Waypoint,
)
from pyfleet.models.template import DeviceTemplate, DeviceTemplatePatch

__all__ = [
    "ApiResponse",
    "Capability",
    "CapabilityPatch",
    "CapabilityType",
    "DateRange",
    "Device",
    "DevicePatch",
    "DeviceStats",
    "DeviceStatus",
    "DeviceStatusChange",
    "DeviceTemplate",
    "DeviceTemplatePatch",
    "DeviceType",
    "Efficiency",
    "FleetBaseModel",
    "FleetPatch",
    "FleetTimestamp",
    "GeoPoint",
    "InspectionTarget",
    "InspectionTargetPatch",
    "InspectionTask",
    "MediaRef",
    "MediaType",
    "MonitoringData",
    "MonitoringLocation",
    "Notification",
    "NotificationType",
    "Page",
    "Pagination",
    "QueryParams",
    "SortOrder",
    "Statistics",
    "StatisticsPeriod",
    "TargetType",
    "TaskPatch",
    "TaskPriority",
    "TaskStats",
    "TaskStatus",
    "TaskStatusChange",
    "TaskStatusRecord",
    "Telemetry",
    "Waypoint",
    "parse_timestamp",
]
