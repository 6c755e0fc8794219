"""
File system utilities for flutterkit.

This module provides:
- Directory presence probing with explicit error reporting
- Archive extraction (zip, tar.xz from a file, tar.xz from a stream)
- Safe deletion and scoped temporary files

All extraction paths validate archive members to prevent directory traversal.
"""

import os
import shutil
import stat
import sys
import tarfile
import tempfile
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

from flutterkit.core.exceptions import SdkPresenceError


# ============================================================================
# Error Handling
# ============================================================================


class FilesystemError(Exception):
    """Base exception for filesystem operations."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""

    pass


class UnsupportedArchiveFormat(ArchiveExtractionError):
    """Archive format is not supported."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to parent.

    Args:
        path: Path to check
        parent: Potential parent path

    Returns:
        True if path is under parent
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def directory_exists(path: Union[str, Path]) -> bool:
    """
    Probe whether a directory exists.

    A missing path, or a path that is not a directory, yields False. Any other
    OS error (permission denied, I/O error) is reported instead of being
    mistaken for absence.

    Raises:
        SdkPresenceError: If the path cannot be inspected
    """
    try:
        st = os.stat(path)
    except (FileNotFoundError, NotADirectoryError):
        return False
    except OSError as e:
        raise SdkPresenceError(f"Could not check if {path} exists: {e}") from e
    return stat.S_ISDIR(st.st_mode)


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Prevents directory traversal attacks (e.g., paths containing '../').

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def extract_archive(archive_path: Union[str, Path], destination: Union[str, Path]) -> None:
    """
    Extract an archive file to a destination directory.

    Supported formats: .zip, .tar.xz

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to

    Raises:
        UnsupportedArchiveFormat: If archive format is not recognized
        ArchiveExtractionError: If extraction fails
        InsecureArchiveError: If archive contains malicious paths

    Example:
        >>> extract_archive('flutter_macos_v1.7.8-stable.zip', '/Users/ci/Library')
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)

    archive_name = archive_path.name.lower()

    try:
        if archive_name.endswith(".zip") or zipfile.is_zipfile(archive_path):
            _extract_zip(archive_path, destination)
        elif archive_name.endswith((".tar.xz", ".txz")):
            with tarfile.open(archive_path, "r:xz") as tar:
                _extract_tar_members(tar, destination)
        else:
            raise UnsupportedArchiveFormat(
                f"Unsupported archive format: {archive_path.suffix}. "
                "Supported: .zip, .tar.xz"
            )
    except ArchiveExtractionError:
        raise
    except Exception as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e


def extract_tar_stream(
    stream: BinaryIO, destination: Union[str, Path], compression: str = "xz"
) -> None:
    """
    Extract a tar archive read sequentially from a non-seekable stream.

    Args:
        stream: Readable binary stream (e.g. an HTTP response body)
        destination: Directory to extract to
        compression: Tar compression ('xz', 'gz', 'bz2')

    Raises:
        ArchiveExtractionError: If extraction fails
        InsecureArchiveError: If archive contains malicious paths
    """
    destination = Path(destination)
    destination.mkdir(parents=True, exist_ok=True)

    try:
        with tarfile.open(fileobj=stream, mode=f"r|{compression}") as tar:
            _extract_tar_members(tar, destination)
    except ArchiveExtractionError:
        raise
    except Exception as e:
        raise ArchiveExtractionError(f"Failed to extract tar stream: {e}") from e


def _validated_members(tar: tarfile.TarFile, destination: Path) -> Iterator[tarfile.TarInfo]:
    for member in tar:
        _validate_archive_path(member.name, destination)
        yield member


def _extract_tar_members(tar: tarfile.TarFile, destination: Path) -> None:
    # Members are validated lazily so stream-mode archives are read only once
    members = _validated_members(tar, destination)
    if sys.version_info >= (3, 12):
        tar.extractall(destination, members=members, filter="data")
    else:
        tar.extractall(destination, members=members)


def _extract_zip(archive_path: Path, destination: Path) -> None:
    """Extract a ZIP archive, keeping POSIX permissions and symlinks."""
    with zipfile.ZipFile(archive_path, "r") as zf:
        infos = zf.infolist()

        # Validate all paths first
        for info in infos:
            _validate_archive_path(info.filename, destination)

        for info in infos:
            mode = info.external_attr >> 16
            target = destination / info.filename

            if stat.S_ISLNK(mode):
                link_target = zf.read(info).decode("utf-8")
                _validate_archive_path(
                    str(Path(info.filename).parent / link_target), destination
                )
                target.parent.mkdir(parents=True, exist_ok=True)
                if target.is_symlink() or target.exists():
                    target.unlink()
                os.symlink(link_target, target)
                continue

            extracted = zf.extract(info, destination)
            permissions = stat.S_IMODE(mode)
            if permissions and not info.is_dir():
                os.chmod(extracted, permissions)


# ============================================================================
# Safe File Operations
# ============================================================================


def safe_rmtree(path: Union[str, Path]) -> None:
    """
    Remove a directory tree, including read-only entries.

    A missing path is ignored.

    Args:
        path: Directory to remove

    Raises:
        FilesystemError: If removal fails
    """
    path = Path(path)

    if not path.exists() and not path.is_symlink():
        return

    def handle_remove_readonly(func, p, exc):
        os.chmod(p, stat.S_IWRITE)
        func(p)

    try:
        if path.is_symlink() or path.is_file():
            path.unlink()
        elif sys.version_info >= (3, 12):
            shutil.rmtree(path, onexc=handle_remove_readonly)
        else:
            shutil.rmtree(path, onerror=handle_remove_readonly)
    except OSError as e:
        raise FilesystemError(f"Failed to remove {path}: {e}") from e


# ============================================================================
# Temporary File Management
# ============================================================================


@contextmanager
def temporary_file(
    prefix: str = "flutterkit_", suffix: str = "", directory: Optional[Path] = None
) -> Iterator[Path]:
    """
    Context manager for a temporary file that is always removed.

    The file is created before the body runs and deleted on exit, whether the
    body succeeded or raised.

    Args:
        prefix: Prefix for temp file name
        suffix: Suffix for temp file name (e.g. '.zip')
        directory: Directory to create the file in (system temp dir if None)

    Yields:
        Path to temporary file

    Example:
        >>> with temporary_file(suffix=".zip") as tmp:
        ...     tmp.write_bytes(b"...")
    """
    fd, name = tempfile.mkstemp(
        prefix=prefix, suffix=suffix, dir=str(directory) if directory else None
    )
    os.close(fd)
    temp_path = Path(name)

    try:
        yield temp_path
    finally:
        temp_path.unlink(missing_ok=True)


__all__ = [
    # Exceptions
    "FilesystemError",
    "ArchiveExtractionError",
    "UnsupportedArchiveFormat",
    "InsecureArchiveError",
    # Path utilities
    "is_relative_to",
    "directory_exists",
    # Archive extraction
    "extract_archive",
    "extract_tar_stream",
    # Safe file operations
    "safe_rmtree",
    # Temporary files
    "temporary_file",
]
