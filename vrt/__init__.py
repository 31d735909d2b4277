"""
VRT - Visual Regression Tracker client

This package provides an async client for submitting screenshots to a
Visual Regression Tracker service and interpreting the comparisons.

Subpackages:
    - config: Load configuration from vrt.json, VRT_* variables and overrides
    - transport: HTTP transport for the VRT API
    - tracker: Build lifecycle and test-run submission
    - results: Comparison results and the soft assert policy

Usage:
    from vrt import VisualRegressionTracker, load_config

    config = load_config(project="Website", branch_name="main")
    tracker = VisualRegressionTracker(config)

    async with tracker:
        async with await tracker.start():
            result = await tracker.track_file("home", "screenshots/home.png")
            print(result)
"""

__version__ = "0.1.0"

# Errors
from .errors import (
    ConfigurationError,
    ErrorKind,
    MissingConfigurationError,
    ProtocolError,
    SessionStateError,
    TestRunAssertionError,
    TransportError,
    VisualRegressionTrackerError,
)

# Re-export config for convenience
from .config import (
    Config,
    get_default,
    load_config,
    load_config_file,
    ValidationResult,
)

# Re-export transport for convenience
from .transport import (
    ApiError,
    ApiRequest,
    ApiResponse,
    BaseTransport,
    HTTPTransport,
)

# Re-export results for convenience
from .results import (
    ResultInterpreter,
    TestRunResult,
    TestRunStatus,
)

# Re-export tracker for convenience
from .tracker import (
    BuildSession,
    IgnoreArea,
    VisualRegressionTracker,
)

__all__ = [
    # Package info
    "__version__",
    # Errors
    "ErrorKind",
    "VisualRegressionTrackerError",
    "ConfigurationError",
    "MissingConfigurationError",
    "SessionStateError",
    "TransportError",
    "ProtocolError",
    "TestRunAssertionError",
    # Config
    "Config",
    "get_default",
    "load_config",
    "load_config_file",
    "ValidationResult",
    # Transport
    "ApiError",
    "ApiRequest",
    "ApiResponse",
    "BaseTransport",
    "HTTPTransport",
    # Results
    "ResultInterpreter",
    "TestRunResult",
    "TestRunStatus",
    # Tracker
    "BuildSession",
    "IgnoreArea",
    "VisualRegressionTracker",
]
