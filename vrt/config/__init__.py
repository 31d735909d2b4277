"""
Configuration for the VRT client.

Usage:
    from vrt.config import load_config, get_default

    # Merge vrt.json, VRT_* environment variables and overrides
    config = load_config(project="Website")

    # Same, but fail if a required field is missing
    config = get_default("ci/vrt.json")
"""

from .loader import get_default, load_config, load_config_file
from .models import DEFAULT_API_URL, DEFAULT_PATH, Config, env_var_name
from .validation import ConfigValidator, ValidationError, ValidationResult

__all__ = [
    # Loader functions
    "load_config",
    "load_config_file",
    "get_default",
    # Models
    "Config",
    "DEFAULT_API_URL",
    "DEFAULT_PATH",
    "env_var_name",
    # Validation
    "ConfigValidator",
    "ValidationError",
    "ValidationResult",
]
