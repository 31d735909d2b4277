"""
Transport layer models for VRT API communication.

This module defines the data structures for API requests, responses,
and transport-level errors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ApiErrorCode(IntEnum):
    """Transport-level error codes (HTTP failures use the status code)."""
    CONNECTION_ERROR = -1
    TIMEOUT_ERROR = -2
    INVALID_RESPONSE = -3
    INTERNAL_ERROR = -4


@dataclass
class ApiError:
    """Represents a failed API call."""
    code: int
    message: str
    status: int | None = None
    data: Any = None
    exception: BaseException | None = field(default=None, repr=False)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.status is not None:
            result["status"] = self.status
        if self.data is not None:
            result["data"] = self.data
        return result

    def __str__(self) -> str:
        return self.message

    @classmethod
    def http_error(cls, status: int, reason: str | None, body: Any = None) -> ApiError:
        return cls(status, f"HTTP {status}: {reason}", status=status, data=body)

    @classmethod
    def connection_error(cls, message: str, data: Any = None,
                         exception: BaseException | None = None) -> ApiError:
        return cls(ApiErrorCode.CONNECTION_ERROR, message, data=data, exception=exception)

    @classmethod
    def timeout_error(cls, message: str, data: Any = None,
                      exception: BaseException | None = None) -> ApiError:
        return cls(ApiErrorCode.TIMEOUT_ERROR, message, data=data, exception=exception)


@dataclass
class ApiRequest:
    """A single call to the VRT API."""
    method: str
    path: str
    body: dict[str, Any] | None = None
    ignore_body: bool = False  # accept any 2xx without parsing


@dataclass
class ApiResponse:
    """Represents the result of an API call."""
    success: bool
    status: int | None = None
    data: Any = None
    error: ApiError | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        if self.success:
            return {
                "success": True,
                "status": self.status,
                "data": self.data,
            }
        else:
            return {
                "success": False,
                "error": self.error.to_dict() if self.error else None,
            }

    @classmethod
    def ok(cls, status: int, data: Any = None) -> ApiResponse:
        return cls(success=True, status=status, data=data)

    @classmethod
    def from_error(cls, error: ApiError) -> ApiResponse:
        """Create a response from a transport-level error."""
        return cls(success=False, status=error.status, error=error)
