"""Configuration module for flutterkit.

This module loads the step inputs from the environment (and an optional YAML
file) and validates them.
"""

from flutterkit.config.parser import (
    StepConfig,
    load_config,
    load_config_file,
    parse_channel,
    parse_commands,
    validate,
)
from flutterkit.core.exceptions import ConfigError, InvalidVersionError

__all__ = [
    "StepConfig",
    "ConfigError",
    "InvalidVersionError",
    "load_config",
    "load_config_file",
    "parse_channel",
    "parse_commands",
    "validate",
]
