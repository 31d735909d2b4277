from __future__ import annotations

from typing import Any

import pytest

from vrt.config import Config
from vrt.config.models import FIELD_KEYS, env_var_name
from vrt.tracker import VisualRegressionTracker
from vrt.transport import ApiError, ApiRequest, ApiResponse, BaseTransport

BUILD_ID = "build-1"
PROJECT_ID = "project-1"


class FakeTransport(BaseTransport):
    """Records requests and replays queued responses or exceptions."""

    def __init__(self) -> None:
        self.requests: list[ApiRequest] = []
        self.timeouts: list[int | None] = []
        self._queue: list[ApiResponse | BaseException] = []
        self._connected = False
        self.connect_calls = 0

    def queue(self, *items: ApiResponse | BaseException) -> None:
        self._queue.extend(items)

    def queue_ok(self, data: Any = None, status: int = 200) -> None:
        self.queue(ApiResponse.ok(status, data))

    def queue_error(self, status: int = 500, body: Any = None) -> None:
        self.queue(ApiResponse.from_error(ApiError.http_error(status, "Server Error", body)))

    @property
    def is_connected(self) -> bool:
        return self._connected

    async def connect(self) -> None:
        self.connect_calls += 1
        self._connected = True

    async def disconnect(self) -> None:
        self._connected = False

    async def send(self, request: ApiRequest, timeout_ms: int | None = None) -> ApiResponse:
        self.requests.append(request)
        self.timeouts.append(timeout_ms)
        if not self._queue:
            raise AssertionError(f"Unexpected request: {request.method} {request.path}")
        item = self._queue.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


def make_test_run_response(status: str = "ok", **overrides: Any) -> dict[str, Any]:
    data = {
        "status": status,
        "url": "Url1",
        "imageName": "image.png",
        "baselineName": "baseline.png",
        "diffName": "diff.png",
    }
    data.update(overrides)
    return data


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep VRT_* variables and any ./vrt.json out of the tests."""
    for attr in FIELD_KEYS:
        monkeypatch.delenv(env_var_name(attr), raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def config() -> Config:
    return Config(
        api_url="http://localhost:4200",
        ci_build_id="build id",
        branch_name="branch name",
        project="project",
        api_key="api key",
    )


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def tracker(config: Config, transport: FakeTransport) -> VisualRegressionTracker:
    return VisualRegressionTracker(config, transport=transport)


async def start_tracker(tracker: VisualRegressionTracker, transport: FakeTransport):
    transport.queue_ok({"id": BUILD_ID, "projectId": PROJECT_ID}, status=201)
    return await tracker.start()
