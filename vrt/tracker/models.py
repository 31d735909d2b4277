"""
Request and response bodies for the builds and test-runs endpoints.

Field names on the wire are camelCase and must match the service
exactly, including the ``diffTollerancePercent`` spelling.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from ..errors import ProtocolError


@dataclass
class IgnoreArea:
    """Rectangle excluded from the comparison."""
    x: int
    y: int
    width: int
    height: int

    def to_dict(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_value(cls, value: IgnoreArea | Mapping[str, Any]) -> IgnoreArea:
        if isinstance(value, IgnoreArea):
            return value
        return cls(x=value["x"], y=value["y"], width=value["width"], height=value["height"])


@dataclass
class CreateBuildRequest:
    project: str
    branch_name: str
    ci_build_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "project": self.project,
            "branchName": self.branch_name,
            "ciBuildId": self.ci_build_id,
        }


@dataclass
class BuildResponse:
    id: str
    project_id: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> BuildResponse:
        if not isinstance(data, Mapping):
            raise ProtocolError("Build response must be an object", value=data)
        if not data.get("id") or not data.get("projectId"):
            raise ProtocolError("Build response is missing id or projectId", value=dict(data))
        return cls(id=str(data["id"]), project_id=str(data["projectId"]))


@dataclass
class TestRunRequest:
    """Body of POST /test-runs."""

    project_id: str
    build_id: str
    branch_name: str
    name: str
    image_base64: str
    os: str | None = None
    browser: str | None = None
    viewport: str | None = None
    device: str | None = None
    custom_tags: str | None = None
    diff_tolerance_percent: float = 0
    comment: str | None = None
    ignore_areas: list[IgnoreArea] | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "projectId": self.project_id,
            "buildId": self.build_id,
            "branchName": self.branch_name,
            "name": self.name,
            "imageBase64": self.image_base64,
        }
        optional = {
            "os": self.os,
            "browser": self.browser,
            "viewport": self.viewport,
            "device": self.device,
            "customTags": self.custom_tags,
        }
        body.update({k: v for k, v in optional.items() if v is not None})
        body["diffTollerancePercent"] = self.diff_tolerance_percent
        if self.comment is not None:
            body["comment"] = self.comment
        if self.ignore_areas is not None:
            body["ignoreAreas"] = [area.to_dict() for area in self.ignore_areas]
        return body
