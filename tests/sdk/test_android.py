"""
Tests for the Android SDK precondition check.
"""

import logging

import pytest

from flutterkit.core.exceptions import AndroidSdkError
from flutterkit.sdk.android import android_environment, ensure_android_sdk


class TestEnsureAndroidSdk:
    """Test ensure_android_sdk()."""

    def test_android_home(self, tmp_path):
        """Test ANDROID_HOME is used when set."""
        assert ensure_android_sdk({"ANDROID_HOME": str(tmp_path)}) == tmp_path

    def test_sdk_root_fallback(self, tmp_path):
        """Test ANDROID_SDK_ROOT is used when ANDROID_HOME is empty."""
        environ = {"ANDROID_HOME": "", "ANDROID_SDK_ROOT": str(tmp_path)}
        assert ensure_android_sdk(environ) == tmp_path

    def test_not_configured(self, caplog):
        """Test missing configuration only warns."""
        caplog.set_level(logging.WARNING)
        assert ensure_android_sdk({}) is None
        assert "ANDROID_HOME" in caplog.text

    def test_missing_directory(self, tmp_path):
        """Test configured but missing directory fails."""
        with pytest.raises(AndroidSdkError, match="missing directory"):
            ensure_android_sdk({"ANDROID_HOME": str(tmp_path / "missing")})

    def test_exit_code(self, tmp_path):
        """Test SDK setup failures map to exit code 6."""
        with pytest.raises(AndroidSdkError) as exc_info:
            ensure_android_sdk({"ANDROID_HOME": str(tmp_path / "missing")})
        assert exc_info.value.exit_code == 6


class TestAndroidEnvironment:
    """Test android_environment()."""

    def test_exports_both_variables(self, tmp_path):
        env = android_environment(tmp_path)
        assert env == {"ANDROID_HOME": str(tmp_path), "ANDROID_SDK_ROOT": str(tmp_path)}

    def test_none(self):
        assert android_environment(None) == {}
