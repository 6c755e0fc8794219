"""Step configuration loader for flutterkit.

Configuration is read from the process environment (the way pipeline steps
receive their inputs). An optional YAML file can provide the same keys;
environment values take precedence over file values.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from flutterkit.core.exceptions import ConfigError, InvalidVersionError

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_BASE_URL = "https://storage.googleapis.com/flutter_infra"
KNOWN_CHANNELS = ("stable", "beta", "dev", "master")

# Input keys
VERSION_KEY = "version"
WORKING_DIR_KEY = "working_dir"
COMMANDS_KEY = "commands"
USE_SHELL_KEY = "use_shell"
STORAGE_BASE_URL_KEY = "storage_base_url"
# Mirror variable understood by the flutter tool itself
FLUTTER_STORAGE_BASE_URL_ENV = "FLUTTER_STORAGE_BASE_URL"

_CONFIG_KEYS = (VERSION_KEY, WORKING_DIR_KEY, COMMANDS_KEY, USE_SHELL_KEY, STORAGE_BASE_URL_KEY)

_TRUE_VALUES = ("yes", "true", "1", "on")
_FALSE_VALUES = ("no", "false", "0", "off", "")


@dataclass(frozen=True)
class StepConfig:
    """Resolved step configuration. Immutable after load."""

    version: str
    working_dir: Optional[Path]
    commands: Tuple[str, ...] = ()
    use_shell: bool = False
    storage_base_url: str = DEFAULT_STORAGE_BASE_URL

    @property
    def channel(self) -> str:
        """Release channel encoded in the version string."""
        return parse_channel(self.version)

    def dump(self) -> str:
        """Human-readable summary of the configuration for the build log."""
        lines = [
            "Configs:",
            f" - Version: {self.version}",
            f" - WorkingDir: {self.working_dir}",
            f" - UseShell: {'yes' if self.use_shell else 'no'}",
            f" - StorageBaseURL: {self.storage_base_url}",
            " - Commands:",
        ]
        if self.commands:
            lines.extend(f"   - {command}" for command in self.commands)
        else:
            lines.append("   (none)")
        return "\n".join(lines)


def parse_channel(version: str) -> str:
    """
    Derive the release channel from a version string.

    The channel is the last dash-separated token ("1.7.8-beta" -> "beta").

    Raises:
        InvalidVersionError: If the version has no recognised channel suffix
    """
    if "-" not in version:
        raise InvalidVersionError(
            version, f"expected a channel suffix, e.g. '{version}-stable'"
        )

    channel = version.rsplit("-", 1)[1]
    if channel not in KNOWN_CHANNELS:
        raise InvalidVersionError(
            version,
            f"unknown channel '{channel}' (expected one of: {', '.join(KNOWN_CHANNELS)})",
        )
    return channel


def parse_commands(value: Optional[str]) -> Tuple[str, ...]:
    """
    Split a delimiter-joined command list.

    Newline-separated values are split on newlines (which leaves '|' free for
    shell pipes); single-line values are split on '|'. Blank entries are dropped.
    """
    if not value:
        return ()
    separator = "\n" if "\n" in value else "|"
    return tuple(part.strip() for part in value.split(separator) if part.strip())


def parse_bool(key: str, value: Any) -> bool:
    """Parse a yes/no style input."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower() if value is not None else ""
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid value for '{key}': {value!r} (expected yes or no)")


def load_config_file(config_file: Path) -> Dict[str, Any]:
    """
    Load step inputs from a YAML file.

    Raises:
        ConfigError: If the file is missing, unreadable or not a mapping
    """
    if not config_file.exists():
        raise ConfigError(f"Configuration file not found: {config_file}")

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Could not read {config_file}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file must contain a mapping: {config_file}")

    unknown = sorted(set(data) - set(_CONFIG_KEYS))
    if unknown:
        logger.warning(f"Ignoring unknown configuration keys: {', '.join(unknown)}")

    # YAML lists are accepted for commands
    commands = data.get(COMMANDS_KEY)
    if isinstance(commands, list):
        data[COMMANDS_KEY] = "\n".join(str(c) for c in commands)

    return data


def _merge_inputs(environ: Mapping[str, str], file_values: Mapping[str, Any]) -> Dict[str, Any]:
    merged: Dict[str, Any] = {k: file_values[k] for k in _CONFIG_KEYS if k in file_values}
    if FLUTTER_STORAGE_BASE_URL_ENV in environ:
        merged[STORAGE_BASE_URL_KEY] = environ[FLUTTER_STORAGE_BASE_URL_ENV]
    for key in _CONFIG_KEYS:
        if key in environ:
            merged[key] = environ[key]
    return merged


def load_config(
    environ: Optional[Mapping[str, str]] = None, config_file: Optional[Path] = None
) -> StepConfig:
    """
    Build the step configuration from the environment and an optional file.

    Args:
        environ: Environment mapping (os.environ if None)
        config_file: Optional YAML file with the same keys

    Returns:
        StepConfig (not yet validated, see validate())

    Raises:
        ConfigError: If an input cannot be parsed
    """
    if environ is None:
        environ = os.environ

    file_values = load_config_file(config_file) if config_file else {}
    inputs = _merge_inputs(environ, file_values)

    version = str(inputs.get(VERSION_KEY) or "").strip()
    working_dir = str(inputs.get(WORKING_DIR_KEY) or "").strip()
    base_url = str(inputs.get(STORAGE_BASE_URL_KEY) or "").strip()

    return StepConfig(
        version=version,
        working_dir=Path(working_dir) if working_dir else None,
        commands=parse_commands(inputs.get(COMMANDS_KEY)),
        use_shell=parse_bool(USE_SHELL_KEY, inputs.get(USE_SHELL_KEY)),
        storage_base_url=base_url.rstrip("/") or DEFAULT_STORAGE_BASE_URL,
    )


def validate(config: StepConfig) -> None:
    """
    Validate a loaded configuration.

    Raises:
        ConfigError: If a required input is missing or invalid
        InvalidVersionError: If the version has no recognised channel suffix
    """
    missing: List[str] = []
    if not config.version:
        missing.append(VERSION_KEY)
    if config.working_dir is None:
        missing.append(WORKING_DIR_KEY)
    if missing:
        raise ConfigError(f"Missing required inputs: {', '.join(missing)}")

    logger.debug(f"Release channel: {config.channel}")

    if not config.working_dir.is_dir():
        raise ConfigError(f"Working directory does not exist: {config.working_dir}")

    if not config.storage_base_url.startswith(("http://", "https://")):
        raise ConfigError(f"Invalid storage base URL: {config.storage_base_url}")


__all__ = [
    "DEFAULT_STORAGE_BASE_URL",
    "KNOWN_CHANNELS",
    "StepConfig",
    "parse_channel",
    "parse_commands",
    "parse_bool",
    "load_config_file",
    "load_config",
    "validate",
]
