"""
Closed result type returned by every admin API call.

The raw envelope (``{"status": "0000", "data": ...}``) is unwrapped at the
client boundary; the rest of the console only ever sees ``ApiSuccess`` or
``ApiFailure``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

from chicken_admin.core.errors import ApiRequestError

T = TypeVar("T")

SUCCESS_STATUS = "0000"


@dataclass(frozen=True)
class ApiSuccess(Generic[T]):
    data: T
    ok: bool = True


@dataclass(frozen=True)
class ApiFailure:
    error: ApiRequestError
    ok: bool = False

    @property
    def message(self) -> str:
        return self.error.message


ApiResult = Union[ApiSuccess[Any], ApiFailure]


def unwrap_envelope(payload: Any, http_status: Optional[int] = None) -> ApiResult:
    """
    Convert a decoded response body into an ``ApiResult``.

    Any status other than ``"0000"`` is a failure carrying the server message.
    """
    if not isinstance(payload, dict):
        return ApiFailure(ApiRequestError("Malformed response from admin API", status="MALFORMED", http_status=http_status))

    status = str(payload.get("status", ""))
    if status == SUCCESS_STATUS:
        return ApiSuccess(payload.get("data"))

    message = payload.get("message") or f"Request failed with status {status or 'unknown'}"
    return ApiFailure(ApiRequestError(str(message), status=status or "UNKNOWN", http_status=http_status))
