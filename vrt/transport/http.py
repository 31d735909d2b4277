"""
HTTP transport for the VRT API.

This module implements JSON over HTTP with aiohttp. Every request
carries the configured API key in the ``apiKey`` header.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import aiohttp

from .base import BaseTransport
from .models import ApiError, ApiErrorCode, ApiRequest, ApiResponse

logger = logging.getLogger(__name__)

# Headers
CONTENT_TYPE = "Content-Type"
ACCEPT = "Accept"
API_KEY = "apiKey"

JSON_CONTENT_TYPE = "application/json"

DEFAULT_TIMEOUT_MS = 30000


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class HTTPTransport(BaseTransport):
    """
    VRT API transport over HTTP.

    The underlying aiohttp session is created on connect() and closed
    on disconnect(). A single request is made per send() call.
    """

    def __init__(self, url: str, api_key: str | None = None,
                 session: aiohttp.ClientSession | None = None):
        """
        Initialize HTTP transport.

        Args:
            url: Base URL of the VRT API (e.g., "http://localhost:4200")
            api_key: Value sent in the apiKey header
            session: Optional externally owned aiohttp session
        """
        self.url = url.rstrip("/")
        self._api_key = api_key
        self._session = session
        self._owns_session = session is None
        self._connected = session is not None
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def is_connected(self) -> bool:
        return (
            self._connected
            and self._session is not None
            and not self._session.closed
            and (not self._owns_session or self._loop is _running_loop())
        )

    def _build_url(self, path: str) -> str:
        return f"{self.url}/{path.lstrip('/')}"

    def _build_headers(self) -> dict[str, str]:
        headers = {
            CONTENT_TYPE: JSON_CONTENT_TYPE,
            ACCEPT: JSON_CONTENT_TYPE,
        }
        if self._api_key:
            headers[API_KEY] = self._api_key
            logger.debug("Applied apiKey header")
        return headers

    async def connect(self) -> None:
        """Create the HTTP session for the running event loop."""
        loop = asyncio.get_running_loop()
        if self._session is not None and self._owns_session and self._loop is not loop:
            # a session belongs to the loop it was created on
            stale, self._session = self._session, None
            logger.debug("Event loop changed, recreating HTTP session")
            await stale.close()
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
            self._loop = loop
        self._connected = True

    async def disconnect(self) -> None:
        """Close the HTTP session if this transport created it."""
        if self._session and self._owns_session:
            await self._session.close()
            self._session = None
            self._loop = None
        self._connected = False

    @staticmethod
    def _parse_body(text: str) -> Any:
        if not text.strip():
            return None
        return json.loads(text)

    async def send(self, request: ApiRequest, timeout_ms: int | None = None) -> ApiResponse:
        """
        Send a request to the VRT API.

        Args:
            request: The request to send
            timeout_ms: Timeout in milliseconds (30s when omitted)

        Returns:
            ApiResponse with parsed JSON data or an error
        """
        if not self.is_connected:
            return ApiResponse.from_error(
                ApiError.connection_error("Transport not connected. Call connect() first.")
            )

        timeout_ms = DEFAULT_TIMEOUT_MS if timeout_ms is None else timeout_ms
        timeout = aiohttp.ClientTimeout(total=timeout_ms / 1000)
        url = self._build_url(request.path)
        kwargs: dict[str, Any] = {"headers": self._build_headers(), "timeout": timeout}
        if request.body is not None:
            kwargs["json"] = request.body

        logger.debug(f"{request.method} {url}")

        try:
            async with self._session.request(request.method, url, **kwargs) as resp:
                text = await resp.text()

                if not 200 <= resp.status < 300:
                    try:
                        body = self._parse_body(text)
                    except json.JSONDecodeError:
                        body = text[:500]
                    return ApiResponse.from_error(
                        ApiError.http_error(resp.status, resp.reason, body)
                    )

                if request.ignore_body:
                    return ApiResponse.ok(resp.status)

                try:
                    data = self._parse_body(text)
                except json.JSONDecodeError as e:
                    return ApiResponse.from_error(
                        ApiError(
                            code=ApiErrorCode.INVALID_RESPONSE,
                            message=f"Invalid JSON response: {e}",
                            status=resp.status,
                            data={"body": text[:500]},
                            exception=e,
                        )
                    )
                return ApiResponse.ok(resp.status, data)

        except asyncio.TimeoutError as e:
            return ApiResponse.from_error(
                ApiError.timeout_error(
                    f"Request timed out after {timeout_ms}ms",
                    data={"url": url, "method": request.method},
                    exception=e,
                )
            )
        except aiohttp.ClientConnectorError as e:
            return ApiResponse.from_error(
                ApiError.connection_error(
                    f"Connection failed: {e}",
                    data={"url": url},
                    exception=e,
                )
            )
        except aiohttp.ClientError as e:
            return ApiResponse.from_error(
                ApiError.connection_error(
                    f"HTTP error: {e}",
                    data={"url": url},
                    exception=e,
                )
            )
        except Exception as e:
            return ApiResponse.from_error(
                ApiError(
                    code=ApiErrorCode.INTERNAL_ERROR,
                    message=f"Unexpected error: {type(e).__name__}: {e}",
                    exception=e,
                )
            )

    def __repr__(self) -> str:
        status = "connected" if self.is_connected else "disconnected"
        return f"HTTPTransport(url={self.url!r}, status={status})"
