"""
Test run result models.

This module defines the comparison status enumeration, the raw
test-run response returned by the service and the typed result handed
back to callers.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from ..errors import ProtocolError


class TestRunStatus(str, Enum):
    """Comparison status reported by the service."""

    NEW = "new"
    OK = "ok"
    UNRESOLVED = "unresolved"
    APPROVED = "approved"
    AUTO_APPROVED = "autoApproved"
    FAILED = "failed"

    @classmethod
    def from_wire(cls, value: Any) -> TestRunStatus:
        """Exact, case-sensitive mapping of a wire value."""
        for status in cls:
            if status.value == value:
                return status
        raise ProtocolError(f"Unknown test run status: {value!r}", value=value)


def _optional_name(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


@dataclass
class TestRunResponse:
    """
    Raw response to a test-run submission.

    Attributes:
        status: Wire status string, not yet mapped
        url: Link to the test run in the VRT UI
        image_name: Name of the submitted image
        baseline_name: Name of the baseline image, None when absent or empty
        diff_name: Name of the diff image, None when absent or empty
    """

    status: str
    url: str
    image_name: str
    baseline_name: str | None = None
    diff_name: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> TestRunResponse:
        if not isinstance(data, Mapping):
            raise ProtocolError("Test run response must be an object", value=data)
        missing = [key for key in ("status", "url", "imageName") if key not in data]
        if missing:
            raise ProtocolError(
                f"Test run response is missing: {', '.join(missing)}", value=dict(data)
            )
        return cls(
            status=data["status"],
            url=data["url"],
            image_name=data["imageName"],
            baseline_name=_optional_name(data.get("baselineName")),
            diff_name=_optional_name(data.get("diffName")),
        )


@dataclass
class TestRunResult:
    """
    Outcome of a single test run.

    Attributes:
        status: Mapped comparison status
        url: Link to the test run in the VRT UI
        image_url: Link to the submitted image
        baseline_url: Link to the baseline image, if one exists
        diff_url: Link to the diff image, if one exists
    """

    status: TestRunStatus
    url: str
    image_url: str
    baseline_url: str | None = None
    diff_url: str | None = None

    @property
    def passed(self) -> bool:
        return self.status == TestRunStatus.OK

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "url": self.url,
            "imageUrl": self.image_url,
            "baselineUrl": self.baseline_url,
            "diffUrl": self.diff_url,
        }

    def __str__(self) -> str:
        """Format as a human-readable string."""
        icon = "✅" if self.passed else "❌"
        lines = [f"{icon} {self.status.value.upper()}: {self.url}"]
        lines.append(f"   Image:    {self.image_url}")
        if self.baseline_url:
            lines.append(f"   Baseline: {self.baseline_url}")
        if self.diff_url:
            lines.append(f"   Diff:     {self.diff_url}")
        return "\n".join(lines)
