"""
Run command implementation.

Ensures the Flutter SDK is installed, then executes the configured Flutter
commands in the working directory.
"""

import logging
from typing import Mapping, Optional

from flutterkit.cli.utils import ensure_sdk, load_validated_config
from flutterkit.core.exceptions import EXIT_OK
from flutterkit.core.platform import HostEnvironment
from flutterkit.sdk.android import android_environment, ensure_android_sdk
from flutterkit.sdk.runner import CommandRunner

logger = logging.getLogger(__name__)


def run(
    args,
    environ: Optional[Mapping[str, str]] = None,
    host: Optional[HostEnvironment] = None,
) -> int:
    """
    Run the full step.

    Args:
        args: Parsed command-line arguments
        environ: Environment mapping (os.environ if None)
        host: Host environment (detected if None)

    Returns:
        Exit code (0 for success)

    Raises:
        FlutterKitError: Subclass matching the failed stage
    """
    android_sdk = ensure_android_sdk(environ)

    config = load_validated_config(args.config, environ)

    if host is None:
        host = HostEnvironment.detect()
    _, executable = ensure_sdk(config, host)

    runner = CommandRunner(
        executable,
        config.working_dir,
        use_shell=config.use_shell,
        env=android_environment(android_sdk),
    )
    executed = runner.run_all(config.commands)

    logger.info(f"Done, {executed} Flutter command(s) executed")
    return EXIT_OK
