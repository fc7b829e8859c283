"""Custom exception hierarchy for pyfleet."""

from __future__ import annotations


class FleetError(Exception):
    """Base exception for all pyfleet errors."""


class FleetConfigError(FleetError):
    """Invalid or missing configuration."""


class FleetNotFoundError(FleetError):
    """No entity with the requested id exists."""

    def __init__(self, entity_kind: str, entity_id: str) -> None:
        self.entity_kind = entity_kind
        self.entity_id = entity_id
        super().__init__(f"{entity_kind} {entity_id!r} not found")


class FleetDuplicateIdError(FleetError):
    """An entity with the same id is already stored."""

    def __init__(self, entity_kind: str, entity_id: str) -> None:
        self.entity_kind = entity_kind
        self.entity_id = entity_id
        super().__init__(f"{entity_kind} {entity_id!r} already exists")


class FleetValidationError(FleetError, ValueError):
    """Entity, patch or query parameters failed validation.

    Covers malformed geometry, out-of-range battery/progress values,
    unknown enum values, unknown sort fields and dangling device
    references at task creation.
    """


class FleetApiError(FleetError):
    """The simulated remote API rejected a call.

    ``code`` is one of ``"not_found"``, ``"validation"`` or
    ``"duplicate_id"``; the underlying store error is chained as
    ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        endpoint: str = "",
    ) -> None:
        self.code = code
        self.endpoint = endpoint
        super().__init__(message)
