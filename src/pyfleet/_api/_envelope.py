"""Envelope building and error mapping for the simulated API.

It is internal to pyfleet and may change at any time.
"""

from __future__ import annotations

from typing import Any

from pyfleet.exceptions import (
    FleetApiError,
    FleetDuplicateIdError,
    FleetError,
    FleetNotFoundError,
    FleetValidationError,
)
from pyfleet.models.query import Page
from pyfleet.models.response import ApiResponse


def build_response(data: Any = None, *, message: str | None = None) -> ApiResponse[Any]:
    """Wrap *data* in a success envelope."""
    return ApiResponse(success=True, data=data, message=message)


def page_response(page: Page[Any]) -> ApiResponse[Any]:
    """Wrap a query page; ``pagination`` is carried over when present."""
    return ApiResponse(success=True, data=list(page.items), pagination=page.pagination)


def _error_code(exc: FleetError) -> str:
    if isinstance(exc, FleetNotFoundError):
        return "not_found"
    if isinstance(exc, FleetDuplicateIdError):
        return "duplicate_id"
    if isinstance(exc, FleetValidationError):
        return "validation"
    return "error"


def api_error(endpoint: str, exc: FleetError) -> FleetApiError:
    """Translate a store error into the :class:`FleetApiError` raised for *endpoint*."""
    code = _error_code(exc)
    return FleetApiError(
        f"{endpoint} failed: code={code} message={exc}",
        code=code,
        endpoint=endpoint,
    )
