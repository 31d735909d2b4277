"""
Scoped handle for an active build.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .tracker import VisualRegressionTracker


class BuildSession:
    """
    Returned by VisualRegressionTracker.start().

    Leaving ``async with`` (normally or through an exception) stops the
    build, using the timeout the build was started with.

    The session only stops the build. The tracker itself must still be
    closed, normally by entering it with ``async with`` first, so its
    HTTP session is released on the same event loop that opened it.

    Example:
        async with tracker:
            async with await tracker.start() as session:
                await tracker.track("home", image_base64)
            # build stopped here
        # HTTP session closed here
    """

    def __init__(self, tracker: VisualRegressionTracker, timeout_ms: int | None = None):
        self.tracker = tracker
        self.timeout_ms = timeout_ms
        self.build_id = tracker.build_id
        self.project_id = tracker.project_id
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def aclose(self) -> None:
        """Stop the build. Calling it again is a no-op."""
        if self._closed:
            return
        if self.tracker.build_id != self.build_id:
            # already stopped through the tracker
            self._closed = True
            return
        await self.tracker.stop(timeout_ms=self.timeout_ms)
        self._closed = True

    async def __aenter__(self) -> BuildSession:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "active"
        return f"BuildSession(build_id={self.build_id!r}, {state})"
