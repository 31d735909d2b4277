"""
Build lifecycle and test-run submission.

VisualRegressionTracker owns one build at a time. It starts the build,
submits screenshots to it and stops it, refusing to track or stop when
no build is active.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from pathlib import Path
from typing import Any, BinaryIO, Iterable, Mapping

import aiohttp

from ..config import Config, get_default
from ..errors import SessionStateError, TransportError
from ..results import ResultInterpreter, TestRunResult
from ..transport import ApiResponse, BaseTransport, HTTPTransport
from .models import BuildResponse, CreateBuildRequest, IgnoreArea, TestRunRequest
from .session import BuildSession

logger = logging.getLogger(__name__)

NOT_STARTED = "Visual Regression Tracker has not been started"
ALREADY_STARTED = "Visual Regression Tracker has already been started"

# Multiple of 3 so chunk encodings concatenate without inner padding
STREAM_CHUNK_SIZE = 3 * 64 * 1024


def encode_image(image: bytes) -> str:
    """Standard padded base64 without line breaks."""
    return base64.b64encode(image).decode("ascii")


def encode_stream(stream: BinaryIO, chunk_size: int = STREAM_CHUNK_SIZE) -> str:
    """Base64-encode a readable byte stream until EOF."""
    if chunk_size % 3:
        raise ValueError("chunk_size must be a multiple of 3")
    parts: list[str] = []
    pending = b""
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        pending += chunk
        usable = len(pending) - len(pending) % 3
        if usable:
            parts.append(encode_image(pending[:usable]))
            pending = pending[usable:]
    if pending:
        parts.append(encode_image(pending))
    return "".join(parts)


class VisualRegressionTracker:
    """
    Client for a Visual Regression Tracker service.

    Not safe for concurrent use: start, track and stop on one instance
    must be awaited one after another.

    Use it as an async context manager, or call close(), so the HTTP
    session is released. Calls made from a different event loop (for
    example separate asyncio.run() invocations) get a fresh session.

    Example:
        tracker = VisualRegressionTracker(config)

        async with tracker:
            async with await tracker.start():
                result = await tracker.track_file("home", "home.png")
    """

    def __init__(self, config: Config | None = None, transport: BaseTransport | None = None):
        """
        Args:
            config: Resolved configuration; loaded from vrt.json and the
                environment when omitted
            transport: Transport to use instead of an HTTPTransport

        Raises:
            MissingConfigurationError: If a required field is absent
        """
        self.config = config if config is not None else get_default()
        self.config.check_complete()
        self._owns_transport = transport is None
        self._transport = transport or HTTPTransport(self.config.api_url, api_key=self.config.api_key)
        self._build_id: str | None = None
        self._project_id: str | None = None

    @property
    def is_started(self) -> bool:
        return self._build_id is not None and self._project_id is not None

    @property
    def build_id(self) -> str | None:
        return self._build_id

    @property
    def project_id(self) -> str | None:
        return self._project_id

    @property
    def transport(self) -> BaseTransport:
        return self._transport

    async def _request(self, call, *args: Any, timeout_ms: int | None) -> ApiResponse:
        """Run one transport call and raise TransportError on any failure."""
        try:
            if not self._transport.is_connected:
                await self._transport.connect()
            response = await call(*args, timeout_ms=timeout_ms)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise TransportError(f"Request failed: {type(e).__name__}: {e}") from e

        if not response.success:
            error = response.error
            message = str(error) if error else "Request failed"
            raise TransportError(message, error) from (error.exception if error else None)
        return response

    async def start(self, timeout_ms: int | None = None) -> BuildSession:
        """
        Create a build on the service.

        Returns:
            A BuildSession whose exit stops the build

        Raises:
            SessionStateError: If a build is already active
            TransportError: If the request fails
            ProtocolError: If the response lacks the build or project id
        """
        if self.is_started:
            raise SessionStateError(ALREADY_STARTED)

        request = CreateBuildRequest(
            project=self.config.project,
            branch_name=self.config.branch_name,
            ci_build_id=self.config.ci_build_id,
        )
        response = await self._request(self._transport.create_build, request, timeout_ms=timeout_ms)
        build = BuildResponse.from_dict(response.data)

        self._build_id = build.id
        self._project_id = build.project_id
        logger.info(f"Started build {build.id} for project {self.config.project}")
        return BuildSession(self, timeout_ms)

    async def stop(self, timeout_ms: int | None = None) -> None:
        """
        Stop the active build.

        The build and project ids are cleared only if the request succeeds.

        Raises:
            SessionStateError: If no build is active
            TransportError: If the request fails
        """
        if not self.is_started:
            raise SessionStateError(NOT_STARTED)

        build_id = self._build_id
        await self._request(self._transport.stop_build, build_id, timeout_ms=timeout_ms)

        self._build_id = None
        self._project_id = None
        logger.info(f"Stopped build {build_id}")

    async def track(
        self,
        name: str,
        image_base64: str,
        *,
        os: str | None = None,
        browser: str | None = None,
        viewport: str | None = None,
        device: str | None = None,
        custom_tags: str | None = None,
        diff_tolerance_percent: float | None = None,
        comment: str | None = None,
        ignore_areas: Iterable[IgnoreArea | Mapping[str, Any]] | None = None,
        timeout_ms: int | None = None,
    ) -> TestRunResult:
        """
        Submit a screenshot to the active build.

        Args:
            name: Test run name
            image_base64: The screenshot, base64 encoded
            diff_tolerance_percent: Allowed difference, 0 when omitted
            ignore_areas: Rectangles excluded from the comparison

        Returns:
            The comparison result

        Raises:
            SessionStateError: If no build is active
            TransportError: If the request fails
            ProtocolError: If the service returns an unknown status
            TestRunAssertionError: If soft assert is off and the status is not OK
        """
        if not self.is_started:
            raise SessionStateError(NOT_STARTED)

        request = TestRunRequest(
            project_id=self._project_id,
            build_id=self._build_id,
            branch_name=self.config.branch_name,
            name=name,
            image_base64=image_base64,
            os=os,
            browser=browser,
            viewport=viewport,
            device=device,
            custom_tags=custom_tags,
            diff_tolerance_percent=diff_tolerance_percent or 0,
            comment=comment,
            ignore_areas=(
                [IgnoreArea.from_value(area) for area in ignore_areas]
                if ignore_areas is not None else None
            ),
        )
        response = await self._request(self._transport.submit_test_run, request, timeout_ms=timeout_ms)

        result = ResultInterpreter(self.config.enable_soft_assert).interpret(response.data)
        logger.info(f"Test run {name!r}: {result.status.value}")
        return result

    async def track_bytes(self, name: str, image: bytes, **options: Any) -> TestRunResult:
        """Submit an in-memory image. Accepts the same options as track()."""
        return await self.track(name, encode_image(image), **options)

    async def track_stream(self, name: str, stream: BinaryIO, **options: Any) -> TestRunResult:
        """Submit an image read from a binary stream. Accepts the same options as track()."""
        return await self.track(name, encode_stream(stream), **options)

    async def track_file(self, name: str, path: str | Path, **options: Any) -> TestRunResult:
        """Submit an image file. Accepts the same options as track()."""
        with open(path, "rb") as f:
            return await self.track_stream(name, f, **options)

    async def close(self) -> None:
        """Release the transport if this tracker created it."""
        if self._owns_transport:
            await self._transport.disconnect()

    async def __aenter__(self) -> VisualRegressionTracker:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        state = f"build={self._build_id!r}" if self.is_started else "idle"
        return f"VisualRegressionTracker(project={self.config.project!r}, {state})"
