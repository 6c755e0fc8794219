"""
Pytest configuration and shared fixtures for flutterkit tests.
"""

import io
import logging
import stat
import tarfile
import zipfile
from pathlib import Path

import pytest

from flutterkit.core.platform import (
    ArchiveFormat,
    HostEnvironment,
    PlatformStrategy,
    RetrievalMode,
)

FLUTTER_SCRIPT = b"#!/bin/sh\necho flutter \"$@\"\n"


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if config.getoption("--integration"):
        return
    skip_integration = pytest.mark.skip(reason="need --integration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


# ============================================================================
# Logging
# ============================================================================


@pytest.fixture(autouse=True)
def reset_cli_logging():
    """Drop the console handler and level the CLI installs on the root logger."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(logging.WARNING)


# ============================================================================
# Host Fixtures
# ============================================================================


@pytest.fixture
def host_temp_dir(tmp_path) -> Path:
    """Isolated temp directory for a fake host."""
    path = tmp_path / "host-tmp"
    path.mkdir()
    return path


@pytest.fixture
def linux_host(tmp_path, host_temp_dir) -> HostEnvironment:
    """Linux host with an isolated home and temp dir."""
    return HostEnvironment("linux", tmp_path / "home", host_temp_dir)


@pytest.fixture
def macos_host(tmp_path, host_temp_dir) -> HostEnvironment:
    """macOS host with an isolated home and temp dir."""
    return HostEnvironment("macos", tmp_path / "home", host_temp_dir)


@pytest.fixture
def sdk_root(tmp_path) -> Path:
    """Parent directory the SDK gets extracted into."""
    path = tmp_path / "sdk-root"
    path.mkdir()
    return path


@pytest.fixture
def tar_strategy(sdk_root) -> PlatformStrategy:
    """Linux-like strategy installing under sdk_root."""
    return PlatformStrategy(
        os_name="linux",
        channel_platform="linux",
        archive_format=ArchiveFormat.TAR_XZ,
        install_dir=sdk_root / "flutter",
        retrieval=RetrievalMode.STREAM,
    )


@pytest.fixture
def zip_strategy(sdk_root) -> PlatformStrategy:
    """macOS-like strategy installing under sdk_root."""
    return PlatformStrategy(
        os_name="macos",
        channel_platform="macos",
        archive_format=ArchiveFormat.ZIP,
        install_dir=sdk_root / "flutter",
        retrieval=RetrievalMode.TEMPFILE,
    )


# ============================================================================
# Archive Fixtures
# ============================================================================


def _build_tar_xz(files: dict) -> bytes:
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:xz") as tar:
        for name, (content, mode) in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            info.mode = mode
            tar.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


def _build_zip(files: dict, symlinks: dict = None) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, (content, mode) in files.items():
            info = zipfile.ZipInfo(name)
            info.external_attr = (stat.S_IFREG | mode) << 16
            zf.writestr(info, content)
        for name, target in (symlinks or {}).items():
            info = zipfile.ZipInfo(name)
            info.external_attr = (stat.S_IFLNK | 0o777) << 16
            zf.writestr(info, target)
    return buffer.getvalue()


@pytest.fixture
def sdk_tar_xz() -> bytes:
    """A minimal Flutter SDK archive in tar.xz format."""
    return _build_tar_xz(
        {
            "flutter/bin/flutter": (FLUTTER_SCRIPT, 0o755),
            "flutter/version": (b"1.7.8\n", 0o644),
        }
    )


@pytest.fixture
def sdk_zip() -> bytes:
    """A minimal Flutter SDK archive in zip format, with a symlink."""
    return _build_zip(
        {
            "flutter/bin/flutter": (FLUTTER_SCRIPT, 0o755),
            "flutter/version": (b"1.7.8\n", 0o644),
        },
        symlinks={"flutter/bin/flutter-link": "flutter"},
    )


@pytest.fixture
def build_tar_xz():
    """Factory building tar.xz bytes from {name: (content, mode)}."""
    return _build_tar_xz


@pytest.fixture
def build_zip():
    """Factory building zip bytes from {name: (content, mode)}."""
    return _build_zip
