"""
Typed configuration for the VRT client.

This module holds the immutable Config dataclass together with the
mapping between its attributes, the wire names used in configuration
files and the VRT_* environment variables.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Mapping

from ..errors import ConfigurationError, MissingConfigurationError


DEFAULT_API_URL = "http://localhost:4200"
DEFAULT_PATH = "vrt.json"
ENV_PREFIX = "VRT_"

# attribute name -> file key
FIELD_KEYS: dict[str, str] = {
    "api_url": "apiUrl",
    "ci_build_id": "ciBuildId",
    "branch_name": "branchName",
    "project": "project",
    "api_key": "apiKey",
    "enable_soft_assert": "enableSoftAssert",
}

# Older vrt.json files were written with this key for the CI build id
LEGACY_KEYS: dict[str, str] = {
    "aciBuildIdpiUrl": "ciBuildId",
}

# Checked in this order, reported by file key
REQUIRED_FIELDS = ("api_url", "branch_name", "project", "api_key")

TRUE_VALUES = {"true", "1", "yes", "on"}
FALSE_VALUES = {"false", "0", "no", "off", ""}


def env_var_name(attr: str) -> str:
    """Environment variable for a config attribute, e.g. VRT_APIURL."""
    return ENV_PREFIX + FIELD_KEYS[attr].upper()


def parse_bool(value: str, source: str) -> bool:
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ConfigurationError(f"{source}: expected a boolean, got {value!r}")


@dataclass(frozen=True)
class Config:
    """Resolved connection and behaviour settings for a tracker."""
    api_url: str | None = DEFAULT_API_URL
    ci_build_id: str | None = None
    branch_name: str | None = None
    project: str | None = None
    api_key: str | None = None
    enable_soft_assert: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Config:
        """Build a Config from file keys, starting from the defaults."""
        return cls().merge(data)

    def to_dict(self) -> dict[str, Any]:
        """Serialize using file keys."""
        return {FIELD_KEYS[attr]: value for attr, value in asdict(self).items()}

    def merge(self, data: Mapping[str, Any]) -> Config:
        """Return a copy with values from a file-keyed mapping applied."""
        changes: dict[str, Any] = {}
        for attr, key in FIELD_KEYS.items():
            for legacy, target in LEGACY_KEYS.items():
                if target == key and legacy in data and key not in data:
                    changes[attr] = data[legacy]
            if key in data:
                changes[attr] = data[key]
        return replace(self, **changes)

    def apply_environment(self, environ: Mapping[str, str]) -> Config:
        """Return a copy with any VRT_* variables in environ applied."""
        changes: dict[str, Any] = {}
        for attr in FIELD_KEYS:
            name = env_var_name(attr)
            if name not in environ:
                continue
            value = environ[name]
            if attr == "enable_soft_assert":
                changes[attr] = parse_bool(value, name)
            else:
                changes[attr] = value
        return replace(self, **changes)

    def with_overrides(self, **overrides: Any) -> Config:
        """Return a copy with explicit overrides applied; None means unset."""
        unknown = set(overrides) - set(FIELD_KEYS)
        if unknown:
            raise TypeError(f"Unknown config fields: {', '.join(sorted(unknown))}")
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def check_complete(self) -> None:
        """Raise MissingConfigurationError for the first absent required field."""
        for attr in REQUIRED_FIELDS:
            if not getattr(self, attr):
                raise MissingConfigurationError(FIELD_KEYS[attr])

    @property
    def masked_api_key(self) -> str | None:
        if not self.api_key:
            return self.api_key
        return self.api_key[:2] + "*" * max(len(self.api_key) - 2, 4)
