from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from conftest import BUILD_ID, PROJECT_ID, FakeTransport, make_test_run_response
from vrt import __version__
from vrt.cli import app
from vrt.tracker import tracker as tracker_module

runner = CliRunner()


@pytest.fixture
def env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VRT_APIURL", "http://vrt.test")
    monkeypatch.setenv("VRT_PROJECT", "Website")
    monkeypatch.setenv("VRT_BRANCHNAME", "main")
    monkeypatch.setenv("VRT_APIKEY", "secret-key")


@pytest.fixture
def fake_transport(monkeypatch: pytest.MonkeyPatch) -> FakeTransport:
    transport = FakeTransport()
    monkeypatch.setattr(tracker_module, "HTTPTransport", lambda url, api_key=None: transport)
    return transport


@pytest.fixture
def images(tmp_path: Path) -> list[Path]:
    paths = []
    for name in ("home", "checkout"):
        path = tmp_path / f"{name}.png"
        path.write_bytes(bytes(range(10)))
        paths.append(path)
    return paths


def test_version() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_config_masks_api_key(env) -> None:
    result = runner.invoke(app, ["config"])

    assert result.exit_code == 0
    assert "Website" in result.stdout
    assert "secret-key" not in result.stdout


def test_config_reports_missing_field(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VRT_PROJECT", "Website")
    monkeypatch.setenv("VRT_BRANCHNAME", "main")

    result = runner.invoke(app, ["config"])

    assert result.exit_code == 1
    assert "apiKey" in result.stdout


def test_validate_good_file(tmp_path: Path) -> None:
    path = tmp_path / "vrt.json"
    path.write_text(json.dumps({"project": "Website", "enableSoftAssert": False}))

    result = runner.invoke(app, ["validate", str(path)])

    assert result.exit_code == 0


def test_validate_bad_file(tmp_path: Path) -> None:
    path = tmp_path / "vrt.json"
    path.write_text(json.dumps({"project": 1}))

    result = runner.invoke(app, ["validate", str(path)])

    assert result.exit_code == 1
    assert "Must be a string" in result.stdout


def test_track_all_ok(env, fake_transport: FakeTransport, images: list[Path]) -> None:
    fake_transport.queue_ok({"id": BUILD_ID, "projectId": PROJECT_ID})
    fake_transport.queue_ok(make_test_run_response("ok"))
    fake_transport.queue_ok(make_test_run_response("ok"))
    fake_transport.queue_ok()

    result = runner.invoke(app, ["track", *map(str, images), "--browser", "chromium", "-o", "json"])

    assert result.exit_code == 0, result.stdout
    paths = [request.path for request in fake_transport.requests]
    assert paths == ["/builds", "/test-runs", "/test-runs", f"/builds/{BUILD_ID}"]
    assert [request.body["name"] for request in fake_transport.requests[1:3]] == ["home", "checkout"]
    assert fake_transport.requests[1].body["browser"] == "chromium"

    output = json.loads(result.stdout)
    assert [record["status"] for record in output["results"]] == ["ok", "ok"]


def test_track_reports_failures_and_still_stops(
    env, fake_transport: FakeTransport, images: list[Path]
) -> None:
    fake_transport.queue_ok({"id": BUILD_ID, "projectId": PROJECT_ID})
    fake_transport.queue_ok(make_test_run_response("unresolved"))
    fake_transport.queue_ok(make_test_run_response("ok"))
    fake_transport.queue_ok()

    result = runner.invoke(app, ["track", *map(str, images), "--strict", "-o", "json"])

    assert result.exit_code == 1
    assert fake_transport.requests[-1].method == "PATCH"
    output = json.loads(result.stdout)
    assert output["results"][0]["status"] == "unresolved"
    assert output["results"][0]["error"] == "Difference found: Url1"


def test_track_start_failure(env, fake_transport: FakeTransport, images: list[Path]) -> None:
    fake_transport.queue_error(401, {"message": "Unauthorized"})

    result = runner.invoke(app, ["track", str(images[0])])

    assert result.exit_code == 1
    assert "transport" in result.stdout


def test_track_rejects_unknown_output_format(env, fake_transport: FakeTransport, images: list[Path]) -> None:
    result = runner.invoke(app, ["track", str(images[0]), "-o", "xml"])

    assert result.exit_code == 2
    assert fake_transport.requests == []
