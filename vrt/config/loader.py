"""
Configuration loader for the VRT client.

Settings are resolved from, lowest to highest precedence: built-in
defaults, a configuration file, VRT_* environment variables and
explicit keyword overrides.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from ..errors import ConfigurationError
from .models import DEFAULT_PATH, Config
from .validation import ConfigValidator, ValidationResult

logger = logging.getLogger(__name__)


def load_config_file(path: str | Path) -> tuple[dict[str, Any] | None, ValidationResult]:
    """
    Read and validate a configuration file.

    The file is JSON (vrt.json) but is read with the YAML loader, so YAML
    files are accepted as well.

    Args:
        path: Path to the configuration file

    Returns:
        Tuple of (raw mapping or None, ValidationResult)
        If validation fails, the mapping will be None.
    """
    path = Path(path)

    if not path.exists():
        result = ValidationResult()
        result.add_error(
            str(path),
            "File not found",
            suggestion="Check the file path is correct"
        )
        return None, result

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        result = ValidationResult()
        result.add_error(
            str(path),
            f"Invalid syntax: {e}",
            suggestion="Check the file is valid JSON"
        )
        return None, result

    if data is None:
        data = {}

    if not isinstance(data, dict):
        result = ValidationResult()
        result.add_error(
            str(path),
            "File must contain an object (not a list or scalar)",
            value=type(data).__name__
        )
        return None, result

    result = ConfigValidator(data).validate()
    if not result.is_valid:
        return None, result

    return data, result


def load_config(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> Config:
    """
    Resolve a Config from file, environment and overrides.

    Args:
        path: Configuration file. When omitted, vrt.json in the current
            directory is used if it exists.
        environ: Environment to read VRT_* variables from (os.environ by default)
        **overrides: Explicit values keyed by Config attribute name

    Returns:
        The merged Config. Required fields are not checked here.

    Raises:
        FileNotFoundError: If an explicit path does not exist
        ConfigurationError: If the file is malformed or holds invalid values
    """
    config = Config()

    if path is not None:
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")
    else:
        file_path = Path(DEFAULT_PATH)

    if file_path.exists():
        data, result = load_config_file(file_path)
        if data is None:
            raise ConfigurationError(str(result))
        config = config.merge(data)
        logger.debug(f"Loaded configuration from {file_path}")

    config = config.apply_environment(os.environ if environ is None else environ)
    return config.with_overrides(**overrides)


def get_default(path: str | Path | None = None, **overrides: Any) -> Config:
    """Load the configuration and require every mandatory field."""
    config = load_config(path, **overrides)
    config.check_complete()
    return config
