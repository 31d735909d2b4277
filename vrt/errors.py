"""
Error types raised by the VRT client.

Every error derives from VisualRegressionTrackerError and carries a
``kind`` so callers can tell a failed comparison apart from a broken
connection without relying on the class hierarchy alone.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .results.models import TestRunResult
    from .transport.models import ApiError


class ErrorKind(str, Enum):
    """Discriminator for VRT errors."""
    CONFIGURATION = "configuration"
    SESSION_STATE = "session_state"
    TRANSPORT = "transport"
    PROTOCOL = "protocol"
    ASSERTION = "assertion"


class VisualRegressionTrackerError(Exception):
    """Base class for all VRT client errors."""
    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(VisualRegressionTrackerError):
    """The configuration could not be loaded or holds invalid values."""
    kind = ErrorKind.CONFIGURATION


class MissingConfigurationError(ConfigurationError):
    """A required configuration field is absent."""

    def __init__(self, field_name: str):
        super().__init__(f"Missing configuration field: {field_name}")
        self.field_name = field_name


class SessionStateError(VisualRegressionTrackerError):
    """An operation was invoked in the wrong build state."""
    kind = ErrorKind.SESSION_STATE


class TransportError(VisualRegressionTrackerError):
    """A request to the VRT service failed."""
    kind = ErrorKind.TRANSPORT

    def __init__(self, message: str, api_error: ApiError | None = None):
        super().__init__(message)
        self.api_error = api_error

    @property
    def status(self) -> int | None:
        return self.api_error.status if self.api_error else None


class ProtocolError(VisualRegressionTrackerError):
    """The service answered with something this client does not understand."""
    kind = ErrorKind.PROTOCOL

    def __init__(self, message: str, value: Any = None):
        super().__init__(message)
        self.value = value


class TestRunAssertionError(VisualRegressionTrackerError):
    """A test run did not match its baseline and soft assert is disabled."""
    kind = ErrorKind.ASSERTION

    def __init__(self, message: str, result: TestRunResult):
        super().__init__(message)
        self.result = result
