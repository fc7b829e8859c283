from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from pyfleet.exceptions import FleetValidationError
from pyfleet.models import (
    ApiResponse,
    Device,
    DevicePatch,
    InspectionTarget,
    InspectionTask,
    Notification,
    QueryParams,
    TaskStatusRecord,
)
from pyfleet.models._base import apply_patch, coerce_model, has_field, parse_timestamp
from pyfleet.models.query import DateRange
from tests.factories import device_payload, task_payload


def test_device_accepts_camel_case_and_normalises_timestamp() -> None:
    device = coerce_model(
        Device,
        device_payload("d1", lastUpdate="2026-03-01T12:00:00+02:00", serialNumber="SN-1", batteryLevel=55),
    )

    assert device.last_update == datetime(2026, 3, 1, 10, 0, tzinfo=UTC)
    assert device.serial_number == "SN-1"
    assert device.battery_level == 55


def test_device_rejects_out_of_range_battery() -> None:
    with pytest.raises(FleetValidationError):
        coerce_model(Device, device_payload("d1", batteryLevel=101))

    with pytest.raises(FleetValidationError):
        coerce_model(Device, device_payload("d1", batteryLevel=-1))


def test_device_rejects_unknown_enum_and_extra_keys() -> None:
    with pytest.raises(FleetValidationError):
        coerce_model(Device, device_payload("d1", type="submarine"))

    with pytest.raises(FleetValidationError):
        coerce_model(Device, device_payload("d1", color="red"))


def test_device_capabilities_are_deduplicated_in_order() -> None:
    device = coerce_model(Device, device_payload("d1", capabilities=["cap-2", "cap-1", "cap-2"]))

    assert device.capabilities == ("cap-2", "cap-1")


def test_device_rejects_empty_id() -> None:
    with pytest.raises(FleetValidationError):
        coerce_model(Device, device_payload("   "))


def test_validation_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        coerce_model(Device, device_payload("d1", location={"lat": 91, "lng": 0}))


def test_parse_timestamp_handles_seconds_and_milliseconds() -> None:
    assert parse_timestamp(1_700_000_000) == datetime.fromtimestamp(1_700_000_000, tz=UTC)
    assert parse_timestamp(1_700_000_000_000) == datetime.fromtimestamp(1_700_000_000, tz=UTC)
    assert parse_timestamp(None) is None


def test_naive_datetimes_are_treated_as_utc() -> None:
    device = coerce_model(Device, device_payload("d1", lastUpdate=datetime(2026, 1, 1, 8, 0)))

    assert device.last_update.tzinfo is not None
    assert device.last_update == datetime(2026, 1, 1, 8, 0, tzinfo=UTC)


def test_aware_datetimes_are_converted_to_utc() -> None:
    local = datetime(2026, 1, 1, 8, 0, tzinfo=timezone(timedelta(hours=8)))
    device = coerce_model(Device, device_payload("d1", lastUpdate=local))

    assert device.last_update == datetime(2026, 1, 1, 0, 0, tzinfo=UTC)


def test_device_to_api_uses_camel_case_keys() -> None:
    device = coerce_model(Device, device_payload("d1", batteryLevel=80))
    data = device.to_api()

    assert data["lastUpdate"] == "2026-01-01T00:00:00Z"
    assert data["batteryLevel"] == 80
    assert "last_update" not in data


def test_patch_changes_only_contain_explicit_fields() -> None:
    patch = DevicePatch.model_validate({"batteryLevel": 40, "model": None})

    assert patch.changes() == {"battery_level": 40, "model": None}


def test_patch_rejects_id() -> None:
    with pytest.raises(FleetValidationError):
        coerce_model(DevicePatch, {"id": "other"})


def test_apply_patch_revalidates_merged_entity() -> None:
    device = coerce_model(Device, device_payload("d1", model="M300"))

    merged = apply_patch(device, DevicePatch(name="Renamed", model=None))
    assert merged.name == "Renamed"
    assert merged.model is None
    assert merged.id == "d1"
    assert device.name == "Device d1"

    with pytest.raises(FleetValidationError):
        apply_patch(device, DevicePatch(name=None))


def test_has_field_checks_both_spellings() -> None:
    assert has_field({"lastUpdate": 1}, "last_update")
    assert has_field({"last_update": 1}, "last_update")
    assert not has_field({"name": "x"}, "last_update")


@pytest.mark.parametrize(
    ("target_type", "coordinates"),
    [
        ("point", [[116.4, 39.9]]),
        ("line", [[116.4, 39.9], [116.5, 39.9]]),
        ("polygon", [[0, 0], [1, 0], [1, 1], [0, 0]]),
    ],
)
def test_target_geometry_accepted(target_type: str, coordinates: list[list[float]]) -> None:
    target = coerce_model(InspectionTarget, {"id": "t1", "type": target_type, "coordinates": coordinates})

    assert len(target.coordinates) == len(coordinates)


@pytest.mark.parametrize(
    ("target_type", "coordinates"),
    [
        ("point", [[0, 0], [1, 1]]),
        ("point", []),
        ("line", [[0, 0]]),
        ("polygon", [[0, 0], [1, 0], [0, 0]]),
        ("polygon", [[0, 0], [1, 0], [1, 1], [0, 1]]),
        ("point", [[0]]),
    ],
)
def test_target_geometry_rejected(target_type: str, coordinates: list[list[float]]) -> None:
    with pytest.raises(FleetValidationError):
        coerce_model(InspectionTarget, {"id": "t1", "type": target_type, "coordinates": coordinates})


def test_target_children_are_validated_and_walked() -> None:
    target = coerce_model(
        InspectionTarget,
        {
            "id": "area",
            "type": "polygon",
            "coordinates": [[0, 0], [2, 0], [2, 2], [0, 0]],
            "children": [
                {"id": "tower", "type": "point", "coordinates": [[1, 1]], "parentId": "area"},
                {"id": "line", "type": "line", "coordinates": [[0, 0], [1, 1]], "parentId": "area"},
            ],
        },
    )

    assert [t.id for t in target.walk()] == ["area", "tower", "line"]

    with pytest.raises(FleetValidationError):
        coerce_model(
            InspectionTarget,
            {
                "id": "area",
                "type": "point",
                "coordinates": [[0, 0]],
                "children": [{"id": "bad", "type": "line", "coordinates": [[0, 0]]}],
            },
        )


def test_task_defaults_and_progress_range() -> None:
    task = coerce_model(InspectionTask, task_payload("t1", "d1"))

    assert task.status == "pending"
    assert task.progress == 0
    assert task.duration_minutes is None

    with pytest.raises(FleetValidationError):
        coerce_model(InspectionTask, task_payload("t1", "d1", progress=120))


def test_task_duration_minutes() -> None:
    task = coerce_model(
        InspectionTask,
        task_payload(
            "t1",
            "d1",
            startedAt="2026-01-01T10:00:00Z",
            completedAt="2026-01-01T10:45:00Z",
        ),
    )

    assert task.duration_minutes == 45


@pytest.mark.parametrize(
    ("status", "review_required"),
    [
        ("pending", False),
        ("running", False),
        ("completed", False),
        ("failed", True),
        ("cancelled", True),
    ],
)
def test_review_required_is_derived_from_status(status: str, review_required: bool) -> None:
    record = TaskStatusRecord.model_validate(
        {
            "id": "s1",
            "taskId": "t1",
            "status": status,
            "timestamp": "2026-01-01T00:00:00Z",
            "reviewRequired": not review_required,
        }
    )

    assert record.review_required is review_required


def test_review_required_is_serialized_but_not_settable() -> None:
    record = TaskStatusRecord(id="s1", task_id="t1", status="failed", timestamp=datetime(2026, 1, 1, tzinfo=UTC))

    payload = record.to_api()

    assert payload["reviewRequired"] is True
    assert "review_required" not in payload
    assert TaskStatusRecord.model_validate(payload) == record
    with pytest.raises(FleetValidationError):
        coerce_model(TaskStatusRecord, {**payload, "status": "paused"})


def test_notification_defaults_to_unread() -> None:
    notification = Notification.model_validate(
        {
            "id": "notice-1",
            "type": "warning",
            "title": "Battery low",
            "message": "Device d1 below 20%",
            "timestamp": "2026-01-01T00:00:00Z",
            "relatedId": "d1",
        }
    )

    assert notification.read is False
    assert notification.to_api()["relatedId"] == "d1"
    assert "actionUrl" in notification.to_api()


def test_query_params_accept_camel_case_and_scalars() -> None:
    params = QueryParams.model_validate(
        {
            "status": "online",
            "deviceIds": {"d2", "d1"},
            "sortBy": "name",
            "sortOrder": "desc",
            "page": 2,
            "limit": 5,
        }
    )

    assert params.status == ("online",)
    assert params.device_ids == ("d1", "d2")
    assert params.sort_by == "name"
    assert params.sort_order == "desc"
    assert params.paginated


def test_query_params_reject_non_positive_page() -> None:
    with pytest.raises(FleetValidationError):
        coerce_model(QueryParams, {"page": 0, "limit": 10})


def test_date_range_must_be_ordered() -> None:
    with pytest.raises(FleetValidationError):
        coerce_model(DateRange, {"start": "2026-02-01T00:00:00Z", "end": "2026-01-01T00:00:00Z"})


def test_api_response_to_api_drops_missing_fields() -> None:
    device = coerce_model(Device, device_payload("d1"))
    response = ApiResponse(data=[device])

    data = response.to_api()
    assert data["success"] is True
    assert data["data"][0]["lastUpdate"] == "2026-01-01T00:00:00Z"
    assert "pagination" not in data
    assert "message" not in data
