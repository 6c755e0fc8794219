"""
Platform resolution for flutterkit.

This module maps the host operating system to the Flutter SDK distribution
that matches it: the platform id used in release URLs, the archive format the
upstream publishes, the default install directory and how the archive is
retrieved.

The retrieval mode follows the archive format: tar.xz (Linux) is a sequential
format and is piped straight into the extractor, while zip (macOS) needs random
access to its central directory and goes through a temp file first.

Host-wide state (OS, home directory, temp directory) is captured once in a
HostEnvironment so tests can inject fixtures instead of relying on the real host.

Usage:
    from flutterkit.core.platform import HostEnvironment, resolve_platform

    host = HostEnvironment.detect()
    strategy = resolve_platform(host)
    print(f"Install dir: {strategy.install_dir}")
"""

import platform
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict

from flutterkit.core.exceptions import UnsupportedPlatformError


class ArchiveFormat(str, Enum):
    """Archive formats published for Flutter SDK releases."""

    ZIP = "zip"
    TAR_XZ = "tar.xz"


class RetrievalMode(str, Enum):
    """How an archive travels from the network to the extractor."""

    STREAM = "stream"  # piped straight into the extractor
    TEMPFILE = "tempfile"  # downloaded to a scoped temp file first


@dataclass(frozen=True)
class HostEnvironment:
    """
    Host capabilities the resolver and installer depend on.

    Attributes:
        os_name: Normalized OS name ('linux', 'macos', 'windows', ...)
        home_dir: Current user's home directory
        temp_dir: Directory for temporary files
    """

    os_name: str
    home_dir: Path
    temp_dir: Path

    @classmethod
    def detect(cls) -> "HostEnvironment":
        """
        Capture the real host environment.

        Example:
            >>> host = HostEnvironment.detect()
            >>> host.os_name
            'linux'
        """
        return cls(
            os_name=_normalize_os(platform.system()),
            home_dir=Path.home(),
            temp_dir=Path(tempfile.gettempdir()),
        )


@dataclass(frozen=True)
class PlatformStrategy:
    """
    Everything that differs between supported hosts, resolved once.

    Attributes:
        os_name: Host OS this strategy was resolved for
        channel_platform: Platform id used in Flutter release URLs
        archive_format: Archive format published for this platform
        install_dir: Default SDK install directory
        retrieval: How the archive is fetched and fed to the extractor
    """

    os_name: str
    channel_platform: str
    archive_format: ArchiveFormat
    install_dir: Path
    retrieval: RetrievalMode

    @property
    def archive_extension(self) -> str:
        """File extension of the release archive (without leading dot)."""
        return self.archive_format.value

    def __str__(self) -> str:
        return (
            f"{self.channel_platform} [{self.archive_extension}, "
            f"{self.retrieval.value}] -> {self.install_dir}"
        )


def _normalize_os(system: str) -> str:
    """Normalize platform.system() output ('Darwin' -> 'macos')."""
    system = system.lower()
    if system == "darwin":
        return "macos"
    return system


def _linux_strategy(host: HostEnvironment) -> PlatformStrategy:
    # tar is a stream format, so no temp file is needed
    return PlatformStrategy(
        os_name=host.os_name,
        channel_platform="linux",
        archive_format=ArchiveFormat.TAR_XZ,
        install_dir=Path("/opt/flutter"),
        retrieval=RetrievalMode.STREAM,
    )


def _macos_strategy(host: HostEnvironment) -> PlatformStrategy:
    # zip needs random access to its central directory
    return PlatformStrategy(
        os_name=host.os_name,
        channel_platform="macos",
        archive_format=ArchiveFormat.ZIP,
        install_dir=host.home_dir / "Library" / "flutter",
        retrieval=RetrievalMode.TEMPFILE,
    )


_STRATEGIES: Dict[str, Callable[[HostEnvironment], PlatformStrategy]] = {
    "linux": _linux_strategy,
    "macos": _macos_strategy,
}


def resolve_platform(host: HostEnvironment) -> PlatformStrategy:
    """
    Resolve the platform strategy for a host.

    Pure and deterministic given the host; performs no I/O.

    Args:
        host: Host environment to resolve for

    Returns:
        PlatformStrategy for the host

    Raises:
        UnsupportedPlatformError: If no Flutter distribution exists for the host OS

    Example:
        >>> host = HostEnvironment("linux", Path("/home/ci"), Path("/tmp"))
        >>> resolve_platform(host).archive_extension
        'tar.xz'
    """
    factory = _STRATEGIES.get(_normalize_os(host.os_name))
    if factory is None:
        raise UnsupportedPlatformError(host.os_name, get_supported_platforms())
    return factory(host)


def get_supported_platforms() -> list[str]:
    """Get the host OS names that have a Flutter distribution."""
    return sorted(_STRATEGIES)


__all__ = [
    "ArchiveFormat",
    "RetrievalMode",
    "HostEnvironment",
    "PlatformStrategy",
    "resolve_platform",
    "get_supported_platforms",
]
