"""
Error taxonomy for the admin console core.

Validation errors are raised before any network call. Request errors are
produced at the API client boundary and end up in a store's ``error`` field;
they are never raised into the view layer.
"""

from __future__ import annotations

from typing import Optional

NOT_IMPLEMENTED_STATUS = "NOT_IMPLEMENTED"
TRANSPORT_STATUS = "TRANSPORT"


class ConsoleError(Exception):
    """Base class for console core errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class FilterValidationError(ConsoleError):
    """Raised when a filter draft or pagination input fails validation."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        self.field = field
        super().__init__(message)


class ApiRequestError(ConsoleError):
    """Non-success envelope or HTTP/transport failure."""

    def __init__(
        self,
        message: str,
        status: str = TRANSPORT_STATUS,
        http_status: Optional[int] = None,
    ) -> None:
        self.status = status
        self.http_status = http_status
        super().__init__(message)


class UnauthorizedError(ApiRequestError):
    def __init__(self, message: str = "Session expired, please log in again") -> None:
        super().__init__(message, status="HTTP_401", http_status=401)


class NotImplementedBackendError(ApiRequestError):
    """The backend endpoint exists only as a stub."""

    def __init__(self, message: str = "This operation is not implemented yet", http_status: Optional[int] = 501) -> None:
        super().__init__(message, status=NOT_IMPLEMENTED_STATUS, http_status=http_status)


class FormValidationError(ConsoleError):
    """Raised when create/edit form input is rejected before the round trip."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        self.field = field
        super().__init__(message)
