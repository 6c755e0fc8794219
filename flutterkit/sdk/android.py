"""
Android SDK precondition check.

Flutter builds for Android need an Android SDK. Pipeline hosts advertise it
through ANDROID_HOME (or the older ANDROID_SDK_ROOT). When neither is set the
step continues, since iOS-only builds are valid; when one is set it must point
to a directory.
"""

import logging
import os
from pathlib import Path
from typing import Dict, Mapping, Optional

from flutterkit.core.exceptions import AndroidSdkError, SdkPresenceError
from flutterkit.core.filesystem import directory_exists

logger = logging.getLogger(__name__)

ANDROID_SDK_VARIABLES = ("ANDROID_HOME", "ANDROID_SDK_ROOT")


def ensure_android_sdk(environ: Optional[Mapping[str, str]] = None) -> Optional[Path]:
    """
    Locate and check the Android SDK.

    Args:
        environ: Environment mapping (os.environ if None)

    Returns:
        Android SDK path, or None if no SDK is configured

    Raises:
        AndroidSdkError: If a configured SDK path is not a usable directory
    """
    if environ is None:
        environ = os.environ

    for variable in ANDROID_SDK_VARIABLES:
        value = environ.get(variable, "").strip()
        if not value:
            continue

        sdk_path = Path(value)
        try:
            exists = directory_exists(sdk_path)
        except SdkPresenceError as e:
            raise AndroidSdkError(f"Could not inspect Android SDK at {sdk_path}: {e}") from e
        if not exists:
            raise AndroidSdkError(f"{variable} points to a missing directory: {sdk_path}")

        logger.info(f"Android SDK: {sdk_path}")
        return sdk_path

    logger.warning(
        "Neither ANDROID_HOME nor ANDROID_SDK_ROOT is set, Android builds will not work"
    )
    return None


def android_environment(sdk_path: Optional[Path]) -> Dict[str, str]:
    """Environment variables that point child processes at the Android SDK."""
    if sdk_path is None:
        return {}
    return {variable: str(sdk_path) for variable in ANDROID_SDK_VARIABLES}


__all__ = ["ANDROID_SDK_VARIABLES", "ensure_android_sdk", "android_environment"]
