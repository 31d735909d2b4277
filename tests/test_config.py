from __future__ import annotations

import json
from pathlib import Path

import pytest

from vrt.config import (
    DEFAULT_API_URL,
    DEFAULT_PATH,
    Config,
    get_default,
    load_config,
    load_config_file,
)
from vrt.errors import ConfigurationError, MissingConfigurationError

FILE_CONFIG = {
    "apiUrl": "http://vrt.example.com",
    "ciBuildId": "ci-42",
    "branchName": "main",
    "project": "Website",
    "apiKey": "file-key",
    "enableSoftAssert": True,
}


def write_config(path: Path, data: dict) -> Path:
    path.write_text(json.dumps(data))
    return path


def assert_matches_file(config: Config) -> None:
    assert config.api_url == "http://vrt.example.com"
    assert config.ci_build_id == "ci-42"
    assert config.branch_name == "main"
    assert config.project == "Website"
    assert config.api_key == "file-key"
    assert config.enable_soft_assert is True


def test_defaults() -> None:
    config = Config()

    assert config.api_url == DEFAULT_API_URL
    assert config.enable_soft_assert is False
    assert config.project is None


def test_dict_round_trip() -> None:
    config = Config.from_dict(FILE_CONFIG)

    assert_matches_file(config)
    assert config.to_dict() == FILE_CONFIG


def test_legacy_ci_build_id_key() -> None:
    config = Config.from_dict({"aciBuildIdpiUrl": "legacy"})

    assert config.ci_build_id == "legacy"


def test_current_key_wins_over_legacy_key() -> None:
    config = Config.from_dict({"aciBuildIdpiUrl": "legacy", "ciBuildId": "current"})

    assert config.ci_build_id == "current"


def test_from_file(tmp_path: Path) -> None:
    path = write_config(tmp_path / "custom.json", FILE_CONFIG)

    assert_matches_file(load_config(path, environ={}))


def test_apply_environment() -> None:
    environ = {
        "VRT_APIURL": "http://env",
        "VRT_CIBUILDID": "env-ci",
        "VRT_PROJECT": "env-project",
        "VRT_BRANCHNAME": "env-branch",
        "VRT_APIKEY": "env-key",
        "VRT_ENABLESOFTASSERT": "true",
    }

    config = Config().apply_environment(environ)

    assert config.api_url == "http://env"
    assert config.ci_build_id == "env-ci"
    assert config.project == "env-project"
    assert config.branch_name == "env-branch"
    assert config.api_key == "env-key"
    assert config.enable_soft_assert is True


@pytest.mark.parametrize("value, expected", [("false", False), ("TRUE", True), ("1", True), ("no", False)])
def test_soft_assert_environment_values(value: str, expected: bool) -> None:
    config = Config(enable_soft_assert=not expected).apply_environment({"VRT_ENABLESOFTASSERT": value})

    assert config.enable_soft_assert is expected


def test_invalid_soft_assert_environment_value() -> None:
    with pytest.raises(ConfigurationError):
        Config().apply_environment({"VRT_ENABLESOFTASSERT": "maybe"})


def test_check_complete_reports_fields_in_order() -> None:
    config = Config(api_url=None)

    with pytest.raises(MissingConfigurationError) as exc_info:
        config.check_complete()
    assert exc_info.value.field_name == "apiUrl"

    config = config.with_overrides(api_url="1")
    with pytest.raises(MissingConfigurationError) as exc_info:
        config.check_complete()
    assert exc_info.value.field_name == "branchName"

    config = config.with_overrides(branch_name="2")
    with pytest.raises(MissingConfigurationError) as exc_info:
        config.check_complete()
    assert exc_info.value.field_name == "project"

    config = config.with_overrides(project="3")
    with pytest.raises(MissingConfigurationError) as exc_info:
        config.check_complete()
    assert exc_info.value.field_name == "apiKey"

    config.with_overrides(api_key="4").check_complete()


def test_empty_string_counts_as_missing() -> None:
    config = Config(branch_name="main", project="p", api_key="")

    with pytest.raises(MissingConfigurationError) as exc_info:
        config.check_complete()

    assert exc_info.value.field_name == "apiKey"


def test_get_default_without_sources_raises() -> None:
    with pytest.raises(MissingConfigurationError):
        get_default()


def test_get_default_reads_default_path() -> None:
    write_config(Path(DEFAULT_PATH), FILE_CONFIG)

    assert_matches_file(get_default())


def test_get_default_explicit_path(tmp_path: Path) -> None:
    path = write_config(tmp_path / "bob.json", FILE_CONFIG)

    assert_matches_file(get_default(path))


def test_explicit_path_must_exist() -> None:
    with pytest.raises(FileNotFoundError):
        get_default("bob.json")


def test_environment_overrides_file(monkeypatch: pytest.MonkeyPatch) -> None:
    write_config(Path(DEFAULT_PATH), FILE_CONFIG)
    monkeypatch.setenv("VRT_PROJECT", "overridden")

    config = get_default()

    assert config.project == "overridden"
    assert config.api_key == "file-key"
    assert config.branch_name == "main"


def test_overrides_win_over_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    write_config(Path(DEFAULT_PATH), FILE_CONFIG)
    monkeypatch.setenv("VRT_PROJECT", "from-env")

    config = load_config(project="explicit", api_key=None)

    assert config.project == "explicit"
    assert config.api_key == "file-key"


def test_unknown_override_rejected() -> None:
    with pytest.raises(TypeError):
        Config().with_overrides(colour="blue")


def test_config_file_validation_errors(tmp_path: Path) -> None:
    path = write_config(
        tmp_path / "bad.json",
        {"apiUrl": "localhost:4200", "project": 7, "enableSoftAssert": "yes", "colour": "blue"},
    )

    data, result = load_config_file(path)

    assert data is None
    assert not result.is_valid
    assert {error.path for error in result.errors} == {"apiUrl", "project", "enableSoftAssert", "colour"}


def test_invalid_file_raises_configuration_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("[1, 2, 3]")

    with pytest.raises(ConfigurationError):
        load_config(path, environ={})


def test_yaml_config_file(tmp_path: Path) -> None:
    path = tmp_path / "vrt.yaml"
    path.write_text("project: Website\nbranchName: main\napiKey: k\n")

    config = get_default(path)

    assert config.project == "Website"
    assert config.api_url == DEFAULT_API_URL


def test_masked_api_key() -> None:
    assert Config(api_key="secret-key").masked_api_key == "se********"
    assert Config().masked_api_key is None
