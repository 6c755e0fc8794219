"""
Install command implementation.

Ensures the configured Flutter SDK is installed without running any commands.
"""

import logging
from typing import Mapping, Optional

from flutterkit.cli.utils import ensure_sdk, load_validated_config
from flutterkit.core.exceptions import EXIT_OK
from flutterkit.core.platform import HostEnvironment

logger = logging.getLogger(__name__)


def run(
    args,
    environ: Optional[Mapping[str, str]] = None,
    host: Optional[HostEnvironment] = None,
) -> int:
    """
    Run the install command.

    Returns:
        Exit code (0 for success)
    """
    config = load_validated_config(args.config, environ)

    if host is None:
        host = HostEnvironment.detect()
    _, executable = ensure_sdk(config, host)

    logger.info(f"Flutter executable: {executable}")
    return EXIT_OK
