"""
flutterkit CLI argument parser.

This module implements the command-line interface for flutterkit using argparse.
Step inputs come from the environment; the CLI only selects the command and
output verbosity.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from flutterkit.core.exceptions import (
    EXIT_ANDROID_SDK,
    EXIT_COMMAND,
    EXIT_CONFIG,
    EXIT_INSTALL,
    EXIT_INTERRUPTED,
    EXIT_OK,
    EXIT_PLATFORM,
    EXIT_PRESENCE_CHECK,
    EXIT_UNEXPECTED,
    FlutterKitError,
)

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("flutterkit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = "run"

EPILOG = f"""\
Inputs are read from the environment: version, working_dir, commands, use_shell,
storage_base_url.

Exit codes:
  {EXIT_OK}    success
  {EXIT_PRESENCE_CHECK}    SDK presence check failed
  {EXIT_INSTALL}    SDK download or extraction failed (also used by argparse for usage errors)
  {EXIT_COMMAND}    Flutter command failed
  {EXIT_CONFIG}    invalid configuration
  {EXIT_PLATFORM}    unsupported platform
  {EXIT_ANDROID_SDK}    Android SDK setup failed
  {EXIT_UNEXPECTED}    unexpected error
  {EXIT_INTERRUPTED}  interrupted

Use "flutterkit COMMAND --help" for command-specific help"""


class CLI:
    """flutterkit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="flutterkit",
            description="flutterkit - Install the Flutter SDK and run Flutter commands",
            epilog=EPILOG,
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"flutterkit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="YAML file with step inputs (environment values take precedence)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        subparsers.add_parser(
            "run",
            help="Install the SDK if missing and run the configured commands (default)",
        )
        subparsers.add_parser(
            "install",
            help="Install the SDK if missing",
        )
        subparsers.add_parser(
            "info",
            help="Show platform resolution and install state",
        )

        return parser

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        parsed = self.parser.parse_args(args)
        if not parsed.command:
            parsed.command = DEFAULT_COMMAND
        return parsed

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, the failing stage's code otherwise)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return EXIT_INTERRUPTED
        except FlutterKitError as e:
            logger.error(f"Error: {e}")
            if e.__cause__ is not None:
                logger.debug(f"Caused by: {e.__cause__!r}")
            self._print_traceback(parsed_args)
            return e.exit_code
        except Exception as e:
            logger.error(f"Unexpected error: {e}")
            self._print_traceback(parsed_args)
            return EXIT_UNEXPECTED

    def _print_traceback(self, args):
        if args.verbose:
            import traceback

            traceback.print_exc()

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "run": "flutterkit.cli.commands.run",
            "install": "flutterkit.cli.commands.install",
            "info": "flutterkit.cli.commands.info",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return EXIT_UNEXPECTED

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
