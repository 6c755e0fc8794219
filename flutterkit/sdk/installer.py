"""
Flutter SDK download and extraction.

This module builds the release archive URL for a version, retrieves the archive
according to the platform strategy and extracts it so that the archive's
top-level ``flutter/`` folder becomes the destination directory.
"""

import logging
import time
from pathlib import Path
from typing import Optional

from flutterkit.config.parser import DEFAULT_STORAGE_BASE_URL, parse_channel
from flutterkit.core.download import DownloadProgress, download_to_file, open_stream
from flutterkit.core.exceptions import InstallError
from flutterkit.core.filesystem import (
    FilesystemError,
    directory_exists,
    extract_archive,
    extract_tar_stream,
    safe_rmtree,
    temporary_file,
)
from flutterkit.core.platform import HostEnvironment, PlatformStrategy, RetrievalMode

logger = logging.getLogger(__name__)

ARCHIVE_NAME = "flutter"
EXECUTABLE_RELATIVE_PATH = Path("bin") / "flutter"


def build_download_url(
    version: str, strategy: PlatformStrategy, base_url: str = DEFAULT_STORAGE_BASE_URL
) -> str:
    """
    Build the canonical release archive URL for a version.

    Example:
        >>> build_download_url("1.7.8-stable", linux_strategy)
        'https://storage.googleapis.com/flutter_infra/releases/stable/linux/flutter_linux_v1.7.8-stable.tar.xz'

    Raises:
        InvalidVersionError: If the version has no recognised channel suffix
    """
    channel = parse_channel(version)
    platform_id = strategy.channel_platform
    return (
        f"{base_url.rstrip('/')}/releases/{channel}/{platform_id}/"
        f"{ARCHIVE_NAME}_{platform_id}_v{version}.{strategy.archive_extension}"
    )


def executable_path(sdk_dir: Path) -> Path:
    """Path of the flutter executable inside an SDK directory."""
    return sdk_dir / EXECUTABLE_RELATIVE_PATH


def _log_progress(progress: DownloadProgress) -> None:
    logger.debug(f"  {progress}")


class SdkInstaller:
    """
    Installs a Flutter SDK release into a destination directory.

    Example:
        >>> host = HostEnvironment.detect()
        >>> installer = SdkInstaller(host, resolve_platform(host))
        >>> installer.install("1.7.8-stable", Path("/opt/flutter"))
    """

    def __init__(
        self,
        host: HostEnvironment,
        strategy: PlatformStrategy,
        base_url: str = DEFAULT_STORAGE_BASE_URL,
        timeout: Optional[float] = None,
    ):
        """
        Initialize installer.

        Args:
            host: Host environment (provides the temp directory)
            strategy: Resolved platform strategy
            base_url: Release storage base URL (mirror support)
            timeout: Network timeout in seconds (None waits indefinitely)
        """
        self.host = host
        self.strategy = strategy
        self.base_url = base_url
        self.timeout = timeout

    def install(self, version: str, destination_dir: Path) -> Path:
        """
        Download and extract an SDK release.

        The archive is extracted into the parent of destination_dir. If the
        attempt fails, anything it created at destination_dir is removed so
        that a later presence check does not mistake it for an installed SDK.

        Args:
            version: SDK version with channel suffix (e.g. '1.7.8-stable')
            destination_dir: Final SDK location

        Returns:
            Path to the flutter executable

        Raises:
            InstallError: If download, extraction or verification fails
        """
        destination_dir = Path(destination_dir)
        url = build_download_url(version, self.strategy, self.base_url)
        parent_dir = destination_dir.parent
        existed_before = directory_exists(destination_dir)

        logger.info(f"Extracting Flutter SDK to {destination_dir}")
        start = time.time()

        try:
            parent_dir.mkdir(parents=True, exist_ok=True)
            if self.strategy.retrieval is RetrievalMode.STREAM:
                self._stream_and_extract(url, parent_dir)
            else:
                self._download_and_extract(url, parent_dir)

            executable = executable_path(destination_dir)
            if not executable.is_file():
                raise InstallError(
                    f"Archive from {url} did not provide {executable}"
                )
        except Exception as e:
            if not existed_before:
                self._rollback(destination_dir)
            if isinstance(e, InstallError):
                raise
            raise InstallError(f"Could not install Flutter SDK {version}: {e}") from e

        logger.info(f"Flutter SDK installed in {time.time() - start:.1f}s")
        return executable

    def _stream_and_extract(self, url: str, parent_dir: Path) -> None:
        with open_stream(url, timeout=self.timeout) as stream:
            extract_tar_stream(stream, parent_dir)

    def _download_and_extract(self, url: str, parent_dir: Path) -> None:
        suffix = f".{self.strategy.archive_extension}"
        with temporary_file(
            prefix=ARCHIVE_NAME, suffix=suffix, directory=self.host.temp_dir
        ) as archive:
            logger.debug(f"Downloading archive to {archive}")
            with open(archive, "wb") as f:
                download_to_file(
                    url, f, progress_callback=_log_progress, timeout=self.timeout
                )
            extract_archive(archive, parent_dir)

    def _rollback(self, destination_dir: Path) -> None:
        try:
            if destination_dir.exists() or destination_dir.is_symlink():
                logger.warning(f"Removing partially installed SDK at {destination_dir}")
                safe_rmtree(destination_dir)
        except FilesystemError as e:
            logger.error(f"Failed to remove {destination_dir}: {e}")


__all__ = [
    "ARCHIVE_NAME",
    "SdkInstaller",
    "build_download_url",
    "executable_path",
    "parse_channel",
]
