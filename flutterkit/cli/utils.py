"""
Shared utilities for CLI commands.

Provides the steps that several commands have in common: loading and
validating the step configuration, and making sure the SDK is installed.
"""

import logging
from pathlib import Path
from typing import Mapping, Optional, Tuple

from flutterkit.config.parser import StepConfig, load_config, validate
from flutterkit.core.filesystem import directory_exists
from flutterkit.core.platform import HostEnvironment, PlatformStrategy, resolve_platform
from flutterkit.sdk.installer import SdkInstaller, executable_path

logger = logging.getLogger(__name__)


def load_validated_config(
    config_file: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None
) -> StepConfig:
    """
    Load, validate and log the step configuration.

    Raises:
        ConfigError: If the configuration is missing or invalid
    """
    config = load_config(environ=environ, config_file=config_file)
    validate(config)
    logger.info(config.dump())
    return config


def ensure_sdk(
    config: StepConfig, host: HostEnvironment, installer: Optional[SdkInstaller] = None
) -> Tuple[PlatformStrategy, Path]:
    """
    Make sure the configured SDK is present, installing it at most once.

    An existing install directory is trusted as-is.

    Returns:
        Resolved platform strategy and path to the flutter executable

    Raises:
        UnsupportedPlatformError: If the host has no Flutter distribution
        SdkPresenceError: If the install directory cannot be probed
        InstallError: If installation fails
    """
    strategy = resolve_platform(host)
    sdk_dir = strategy.install_dir

    if directory_exists(sdk_dir):
        logger.info("Flutter SDK folder already exists, skipping installation.")
        return strategy, executable_path(sdk_dir)

    if installer is None:
        installer = SdkInstaller(host, strategy, base_url=config.storage_base_url)
    return strategy, installer.install(config.version, sdk_dir)


def print_box(text: str, width: int = 70, char: str = "="):
    """Print text in a box for emphasis."""
    print(char * width)
    print(text)
    print(char * width)
