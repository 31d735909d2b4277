"""
Validation for VRT configuration files.

This module checks the raw mapping read from a configuration file and
reports every problem at once, with a suggestion where one helps.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .models import FIELD_KEYS, LEGACY_KEYS


# ─────────────────────────────────────────────────────────────────────────────
# Validation Result Types
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class ValidationError:
    """A single problem found in a configuration file."""
    path: str  # the offending key, e.g. "apiUrl"
    message: str
    value: Any = None
    suggestion: str | None = None

    def __str__(self) -> str:
        parts = [f"❌ {self.path}: {self.message}"]
        if self.value is not None:
            parts.append(f"   Got: {repr(self.value)}")
        if self.suggestion:
            parts.append(f"   💡 {self.suggestion}")
        return "\n".join(parts)


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(
        self,
        path: str,
        message: str,
        value: Any = None,
        suggestion: str | None = None
    ) -> None:
        self.errors.append(ValidationError(path, message, value, suggestion))

    def __str__(self) -> str:
        if self.is_valid:
            return "✅ Configuration is valid"
        lines = [f"Configuration validation failed with {len(self.errors)} error(s):\n"]
        lines.extend(str(e) for e in self.errors)
        return "\n".join(lines)


# ─────────────────────────────────────────────────────────────────────────────
# Config Validator
# ─────────────────────────────────────────────────────────────────────────────

class ConfigValidator:
    """Validates a raw configuration mapping read from a file."""

    STRING_KEYS = {"apiUrl", "ciBuildId", "branchName", "project", "apiKey"}
    BOOL_KEYS = {"enableSoftAssert"}
    KNOWN_KEYS = set(FIELD_KEYS.values()) | set(LEGACY_KEYS)

    def __init__(self, data: dict[str, Any]):
        self.data = data
        self.result = ValidationResult()

    def validate(self) -> ValidationResult:
        """Run all validation checks and return result."""
        self._validate_keys()
        self._validate_types()
        self._validate_api_url()
        return self.result

    def _validate_keys(self) -> None:
        for key in self.data:
            if key not in self.KNOWN_KEYS:
                self.result.add_error(
                    str(key),
                    f"Unknown configuration field '{key}'",
                    suggestion=f"Valid fields are: {', '.join(sorted(FIELD_KEYS.values()))}"
                )

    def _validate_types(self) -> None:
        for key, value in self.data.items():
            if value is None:
                continue
            target = LEGACY_KEYS.get(key, key)
            if target in self.STRING_KEYS and not isinstance(value, str):
                self.result.add_error(
                    key,
                    "Must be a string",
                    value=value,
                    suggestion=f'Quote the value: "{key}": "{value}"'
                )
            elif target in self.BOOL_KEYS and not isinstance(value, bool):
                self.result.add_error(
                    key,
                    "Must be a boolean",
                    value=value,
                    suggestion="Use true or false"
                )

    def _validate_api_url(self) -> None:
        url = self.data.get("apiUrl")
        if isinstance(url, str) and url and not url.startswith(("http://", "https://")):
            self.result.add_error(
                "apiUrl",
                "Must be an http(s) URL",
                value=url,
                suggestion="Use something like http://localhost:4200"
            )
