"""
Flutter SDK installation and command execution.
"""

from .installer import SdkInstaller, build_download_url, executable_path
from .runner import CommandRunner
from .android import ensure_android_sdk, android_environment

__all__ = [
    "SdkInstaller",
    "build_download_url",
    "executable_path",
    "CommandRunner",
    "ensure_android_sdk",
    "android_environment",
]
