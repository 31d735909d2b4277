"""
VRT API Transport Layer

This package provides the transport used to talk to the Visual
Regression Tracker service.

Usage:
    from vrt.transport import HTTPTransport, ApiRequest

    transport = HTTPTransport("http://localhost:4200", api_key="secret")

    async with transport:
        response = await transport.send(ApiRequest("PATCH", "/builds/123"))

        if response.success:
            print(response.data)
        else:
            print(response.error)
"""

# Transport implementations
from .base import BaseTransport
from .http import HTTPTransport

# Models
from .models import (
    ApiError,
    ApiErrorCode,
    ApiRequest,
    ApiResponse,
)

__all__ = [
    # Base
    "BaseTransport",
    # Implementations
    "HTTPTransport",
    # Models
    "ApiError",
    "ApiErrorCode",
    "ApiRequest",
    "ApiResponse",
]
