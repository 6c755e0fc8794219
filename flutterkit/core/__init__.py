"""
Core functionality for flutterkit.

This package contains the foundational modules that other components depend on.
"""

from .platform import (
    ArchiveFormat,
    RetrievalMode,
    HostEnvironment,
    PlatformStrategy,
    resolve_platform,
    get_supported_platforms,
)

from .exceptions import (
    FlutterKitError,
    ConfigError,
    InvalidVersionError,
    UnsupportedPlatformError,
    SdkPresenceError,
    InstallError,
    AndroidSdkError,
    CommandError,
)

__all__ = [
    "ArchiveFormat",
    "RetrievalMode",
    "HostEnvironment",
    "PlatformStrategy",
    "resolve_platform",
    "get_supported_platforms",
    "FlutterKitError",
    "ConfigError",
    "InvalidVersionError",
    "UnsupportedPlatformError",
    "SdkPresenceError",
    "InstallError",
    "AndroidSdkError",
    "CommandError",
]
