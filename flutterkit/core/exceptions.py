"""
Centralized exception hierarchy for flutterkit.

Every top-level failure category carries its own process exit code so that
pipeline automation can tell them apart. The CLI maps an exception to its
exit code in one place (see ``flutterkit.cli.parser``).
"""

from typing import Optional, Sequence


# ============================================================================
# Exit Codes
# ============================================================================

EXIT_OK = 0
EXIT_PRESENCE_CHECK = 1
EXIT_INSTALL = 2
EXIT_COMMAND = 3
EXIT_CONFIG = 4
EXIT_PLATFORM = 5
EXIT_ANDROID_SDK = 6
EXIT_UNEXPECTED = 7
EXIT_INTERRUPTED = 130


# ============================================================================
# Base Exception
# ============================================================================


class FlutterKitError(Exception):
    """Base exception for all flutterkit errors."""

    exit_code = EXIT_UNEXPECTED


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(FlutterKitError):
    """Missing or invalid required input."""

    exit_code = EXIT_CONFIG


class InvalidVersionError(ConfigError):
    """SDK version string does not carry a recognised channel suffix."""

    def __init__(self, version: str, reason: str):
        self.version = version
        super().__init__(f"Invalid Flutter version '{version}': {reason}")


# ============================================================================
# Platform / Filesystem Exceptions
# ============================================================================


class UnsupportedPlatformError(FlutterKitError):
    """Host operating system has no Flutter SDK distribution."""

    exit_code = EXIT_PLATFORM

    def __init__(self, os_name: str, supported: Sequence[str] = ()):
        self.os_name = os_name
        self.supported = tuple(supported)
        msg = f"Unsupported OS: {os_name}"
        if self.supported:
            msg += f" (supported: {', '.join(self.supported)})"
        super().__init__(msg)


class SdkPresenceError(FlutterKitError):
    """Install directory could not be probed."""

    exit_code = EXIT_PRESENCE_CHECK


# ============================================================================
# Installation Exceptions
# ============================================================================


class InstallError(FlutterKitError):
    """Download or extraction of the SDK archive failed."""

    exit_code = EXIT_INSTALL


class AndroidSdkError(FlutterKitError):
    """Android SDK location is configured but unusable."""

    exit_code = EXIT_ANDROID_SDK


# ============================================================================
# Command Exceptions
# ============================================================================


class CommandError(FlutterKitError):
    """A Flutter command failed to start or exited non-zero."""

    exit_code = EXIT_COMMAND

    def __init__(self, command: str, returncode: Optional[int] = None, reason: str = ""):
        self.command = command
        self.returncode = returncode
        if returncode is not None:
            msg = f"Flutter command '{command}' failed with exit code {returncode}"
        else:
            msg = f"Flutter command '{command}' could not be executed"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


__all__ = [
    "EXIT_OK",
    "EXIT_PRESENCE_CHECK",
    "EXIT_INSTALL",
    "EXIT_COMMAND",
    "EXIT_CONFIG",
    "EXIT_PLATFORM",
    "EXIT_ANDROID_SDK",
    "EXIT_UNEXPECTED",
    "EXIT_INTERRUPTED",
    "FlutterKitError",
    "ConfigError",
    "InvalidVersionError",
    "UnsupportedPlatformError",
    "SdkPresenceError",
    "InstallError",
    "AndroidSdkError",
    "CommandError",
]
