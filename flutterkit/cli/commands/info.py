"""
Info command implementation.

Shows how the SDK would be resolved on this host without changing anything.
"""

import logging
import os
from typing import Mapping, Optional

from flutterkit.cli.utils import print_box
from flutterkit.config.parser import DEFAULT_STORAGE_BASE_URL, load_config
from flutterkit.core.exceptions import EXIT_OK
from flutterkit.core.filesystem import directory_exists
from flutterkit.core.platform import HostEnvironment, resolve_platform
from flutterkit.sdk.installer import build_download_url, executable_path

logger = logging.getLogger(__name__)


def run(
    args,
    environ: Optional[Mapping[str, str]] = None,
    host: Optional[HostEnvironment] = None,
) -> int:
    """
    Run the info command.

    The version is optional here; the download URL is shown only when set.

    Returns:
        Exit code (0 for success)
    """
    if environ is None:
        environ = os.environ
    if host is None:
        host = HostEnvironment.detect()

    strategy = resolve_platform(host)
    installed = directory_exists(strategy.install_dir)

    print_box("flutterkit")
    print(f"Host OS: {host.os_name}")
    print(f"Platform: {strategy.channel_platform}")
    print(f"Archive format: {strategy.archive_extension}")
    print(f"Retrieval: {strategy.retrieval.value}")
    print(f"Install dir: {strategy.install_dir}")
    print(f"Installed: {'yes' if installed else 'no'}")
    if installed:
        print(f"Executable: {executable_path(strategy.install_dir)}")

    config = load_config(environ=environ, config_file=args.config)
    if config.version:
        base_url = config.storage_base_url or DEFAULT_STORAGE_BASE_URL
        print(f"Version: {config.version}")
        print(f"Download URL: {build_download_url(config.version, strategy, base_url)}")

    return EXIT_OK
