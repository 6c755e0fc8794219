"""
Unit tests for the platform resolution module.

Tests cover:
- Host environment detection with mocking
- Strategy table per supported OS
- Unsupported hosts
"""

import dataclasses
import pytest
from pathlib import Path
from unittest.mock import patch

from flutterkit.core.exceptions import UnsupportedPlatformError
from flutterkit.core.platform import (
    ArchiveFormat,
    HostEnvironment,
    RetrievalMode,
    get_supported_platforms,
    resolve_platform,
)


class TestHostEnvironment:
    """Tests for HostEnvironment.detect()."""

    @patch("flutterkit.core.platform.platform.system", return_value="Darwin")
    def test_detect_darwin_is_macos(self, mock_system):
        """Test Darwin is normalized to macos."""
        host = HostEnvironment.detect()
        assert host.os_name == "macos"

    @patch("flutterkit.core.platform.platform.system", return_value="Linux")
    def test_detect_linux(self, mock_system):
        """Test Linux detection."""
        host = HostEnvironment.detect()
        assert host.os_name == "linux"

    @patch("flutterkit.core.platform.platform.system", return_value="Linux")
    def test_detect_uses_home_and_temp(self, mock_system, tmp_path):
        """Test home and temp dirs come from the host."""
        with patch("flutterkit.core.platform.Path.home", return_value=tmp_path), patch(
            "flutterkit.core.platform.tempfile.gettempdir", return_value=str(tmp_path)
        ):
            host = HostEnvironment.detect()

        assert host.home_dir == tmp_path
        assert host.temp_dir == tmp_path

    def test_host_is_immutable(self, linux_host):
        """Test HostEnvironment cannot be modified."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            linux_host.os_name = "macos"


class TestResolvePlatform:
    """Tests for resolve_platform()."""

    def test_linux_strategy(self, linux_host):
        """Test Linux resolves to tar.xz streamed into /opt/flutter."""
        strategy = resolve_platform(linux_host)

        assert strategy.channel_platform == "linux"
        assert strategy.archive_format is ArchiveFormat.TAR_XZ
        assert strategy.archive_extension == "tar.xz"
        assert strategy.install_dir == Path("/opt/flutter")
        assert strategy.retrieval is RetrievalMode.STREAM

    def test_macos_strategy(self, macos_host):
        """Test macOS resolves to zip under the home Library folder."""
        strategy = resolve_platform(macos_host)

        assert strategy.channel_platform == "macos"
        assert strategy.archive_format is ArchiveFormat.ZIP
        assert strategy.archive_extension == "zip"
        assert strategy.install_dir == macos_host.home_dir / "Library" / "flutter"
        assert strategy.retrieval is RetrievalMode.TEMPFILE

    def test_darwin_alias(self, tmp_path):
        """Test raw 'Darwin' host name resolves like macos."""
        host = HostEnvironment("Darwin", tmp_path, tmp_path)
        assert resolve_platform(host).channel_platform == "macos"

    @pytest.mark.parametrize("os_name", ["windows", "freebsd", "android", ""])
    def test_unsupported_os(self, os_name, tmp_path):
        """Test unsupported hosts raise UnsupportedPlatformError."""
        host = HostEnvironment(os_name, tmp_path / "home", tmp_path / "tmp")

        with pytest.raises(UnsupportedPlatformError, match="Unsupported OS"):
            resolve_platform(host)

    def test_unsupported_os_lists_supported(self, tmp_path):
        """Test the error names the hosts that are supported."""
        host = HostEnvironment("windows", tmp_path / "home", tmp_path / "tmp")

        with pytest.raises(UnsupportedPlatformError) as exc_info:
            resolve_platform(host)

        assert exc_info.value.supported == ("linux", "macos")
        assert "supported: linux, macos" in str(exc_info.value)

    def test_unsupported_os_performs_no_io(self, tmp_path):
        """Test resolution of an unsupported host touches no files."""
        host = HostEnvironment("windows", tmp_path / "home", tmp_path / "tmp")

        with pytest.raises(UnsupportedPlatformError):
            resolve_platform(host)

        assert list(tmp_path.iterdir()) == []

    def test_resolution_is_deterministic(self, linux_host):
        """Test repeated resolution gives equal strategies."""
        assert resolve_platform(linux_host) == resolve_platform(linux_host)

    def test_strategy_str(self, linux_host):
        """Test string representation mentions platform and format."""
        text = str(resolve_platform(linux_host))
        assert "linux" in text
        assert "tar.xz" in text

    def test_supported_platforms(self):
        """Test supported platform list."""
        assert get_supported_platforms() == ["linux", "macos"]
