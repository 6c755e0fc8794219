"""
Network download helpers with progress tracking.

This module provides:
- Streaming HTTP/HTTPS downloads to a file with TLS verification
- Raw response streams for extractors that read sequentially
- Progress reporting (bytes, percentage, speed, ETA)

A single attempt is made per call. Transport failures and non-2xx responses
surface as DownloadError with the underlying requests exception chained.
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import BinaryIO, Callable, Iterator, Optional

import requests
from requests.exceptions import RequestException

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second
    eta_seconds: float  # estimated time remaining

    def __str__(self) -> str:
        """Format progress for display."""
        return format_progress(self)


class DownloadError(Exception):
    """Exception raised when download fails."""

    pass


def _get(url: str, timeout: Optional[float]) -> requests.Response:
    logger.info(f"Downloading from {url}")
    try:
        response = requests.get(url, stream=True, timeout=timeout, allow_redirects=True)
        response.raise_for_status()
    except RequestException as e:
        raise DownloadError(f"Failed to download from {url}: {e}") from e
    return response


def download_to_file(
    url: str,
    out_file: BinaryIO,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: Optional[float] = None,
) -> int:
    """
    Download URL contents into an already opened binary file.

    Args:
        url: URL to download from
        out_file: Writable binary file object
        progress_callback: Optional callback for progress updates
        timeout: Request timeout in seconds (None waits indefinitely)

    Returns:
        Number of bytes written

    Raises:
        DownloadError: If the request fails or the file cannot be written
        ValueError: If URL is empty

    Example:
        >>> with open("flutter.zip", "wb") as f:
        ...     download_to_file("https://example.com/flutter.zip", f)
    """
    if not url:
        raise ValueError("URL cannot be empty")

    response = _get(url, timeout)

    content_length = response.headers.get("content-length")
    total_size = int(content_length) if content_length else 0

    downloaded = 0
    start_time = time.time()
    last_progress_time = start_time

    try:
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            if not chunk:
                continue
            out_file.write(chunk)
            downloaded += len(chunk)

            # Report progress (max once per 0.5 seconds to avoid spam)
            current_time = time.time()
            if progress_callback and (
                current_time - last_progress_time >= 0.5 or downloaded == total_size
            ):
                progress_callback(
                    _make_progress(downloaded, total_size, current_time - start_time)
                )
                last_progress_time = current_time
        out_file.flush()
    except RequestException as e:
        raise DownloadError(f"Failed to download from {url}: {e}") from e
    except OSError as e:
        name = getattr(out_file, "name", "<stream>")
        raise DownloadError(f"Failed to save file {name}: {e}") from e
    finally:
        response.close()

    logger.info(f"Download complete: {downloaded} bytes")
    return downloaded


@contextmanager
def open_stream(url: str, timeout: Optional[float] = None) -> Iterator[BinaryIO]:
    """
    Open a URL as a sequential, decoded byte stream.

    The response is closed when the context exits.

    Raises:
        DownloadError: If the request fails or returns a non-2xx status
    """
    response = _get(url, timeout)
    try:
        # Undo any transfer Content-Encoding (gzip etc.) on the raw socket
        response.raw.decode_content = True
        yield response.raw
    finally:
        response.close()


def _make_progress(downloaded: int, total_size: int, elapsed: float) -> DownloadProgress:
    speed = downloaded / elapsed if elapsed > 0 else 0
    remaining = total_size - downloaded if total_size > 0 else 0
    eta = remaining / speed if speed > 0 else 0
    return DownloadProgress(
        bytes_downloaded=downloaded,
        total_bytes=total_size if total_size > 0 else downloaded,
        percentage=(downloaded / total_size * 100) if total_size > 0 else 0,
        speed_bps=speed,
        eta_seconds=eta,
    )


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Args:
        progress: Download progress information

    Returns:
        Formatted progress string

    Example:
        >>> progress = DownloadProgress(52428800, 104857600, 50.0, 1048576, 50)
        >>> print(format_progress(progress))
        50.0/100.0 MB (50.0%) at 1.0 MB/s ETA: 50s
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    mb_total = progress.total_bytes / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.total_bytes > 0 and progress.percentage > 0:
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s "
            f"ETA: {progress.eta_seconds:.0f}s"
        )
    # Unknown total size
    return f"{mb_downloaded:.1f} MB at {speed_mbps:.1f} MB/s"


__all__ = [
    "DownloadProgress",
    "DownloadError",
    "download_to_file",
    "open_stream",
    "format_progress",
]
