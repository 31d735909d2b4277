"""
Base transport interface for VRT API communication.

This module defines the abstract base class that all transport
implementations must follow, plus the typed calls for each endpoint.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from .models import ApiRequest

if TYPE_CHECKING:
    from .models import ApiResponse
    from ..tracker.models import CreateBuildRequest, TestRunRequest


BUILDS_PATH = "/builds"
TEST_RUNS_PATH = "/test-runs"


class BaseTransport(ABC):
    """
    Abstract base class for VRT transports.

    Implementations report failures through the returned ApiResponse
    rather than raising, so the caller decides how to surface them.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Prepare the transport for sending requests."""
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Release any resources held by the transport."""
        pass

    @abstractmethod
    async def send(self, request: ApiRequest, timeout_ms: int | None = None) -> ApiResponse:
        """
        Send a request to the VRT API.

        Args:
            request: The request to send
            timeout_ms: Optional timeout in milliseconds

        Returns:
            ApiResponse with either data or error
        """
        pass

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Return True if the transport is ready to send."""
        pass

    async def create_build(
        self, request: CreateBuildRequest, timeout_ms: int | None = None
    ) -> ApiResponse:
        """POST /builds"""
        return await self.send(
            ApiRequest("POST", BUILDS_PATH, request.to_dict()), timeout_ms=timeout_ms
        )

    async def stop_build(self, build_id: str, timeout_ms: int | None = None) -> ApiResponse:
        """PATCH /builds/{build_id}"""
        return await self.send(
            ApiRequest("PATCH", f"{BUILDS_PATH}/{build_id}", ignore_body=True),
            timeout_ms=timeout_ms,
        )

    async def submit_test_run(
        self, request: TestRunRequest, timeout_ms: int | None = None
    ) -> ApiResponse:
        """POST /test-runs"""
        return await self.send(
            ApiRequest("POST", TEST_RUNS_PATH, request.to_dict()), timeout_ms=timeout_ms
        )

    async def __aenter__(self) -> BaseTransport:
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.disconnect()
