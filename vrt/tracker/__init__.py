"""
Build lifecycle and test-run submission.

Usage:
    from vrt.tracker import VisualRegressionTracker, IgnoreArea

    async with VisualRegressionTracker() as tracker:
        async with await tracker.start():
            await tracker.track_file(
                "checkout",
                "checkout.png",
                browser="chromium",
                ignore_areas=[IgnoreArea(x=0, y=0, width=200, height=40)],
            )
"""

from .models import BuildResponse, CreateBuildRequest, IgnoreArea, TestRunRequest
from .session import BuildSession
from .tracker import VisualRegressionTracker, encode_image, encode_stream

__all__ = [
    # Tracker
    "VisualRegressionTracker",
    "BuildSession",
    # Models
    "BuildResponse",
    "CreateBuildRequest",
    "IgnoreArea",
    "TestRunRequest",
    # Encoding helpers
    "encode_image",
    "encode_stream",
]
