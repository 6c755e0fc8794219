"""
Flutter command execution.

Each configured command is appended to the flutter executable and run in the
working directory, one at a time. Output is streamed to the console. The first
failure stops the sequence.

By default a command is split into arguments (``shlex.split``) and executed
directly. Shell evaluation (pipes, expansions) is opt-in via ``use_shell``.
"""

import logging
import os
import shlex
import subprocess
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from flutterkit.core.exceptions import CommandError

logger = logging.getLogger(__name__)

SHELL = "bash"


class CommandRunner:
    """Runs flutter subcommands sequentially in a working directory."""

    def __init__(
        self,
        executable: Path,
        working_dir: Path,
        use_shell: bool = False,
        env: Optional[Mapping[str, str]] = None,
    ):
        """
        Initialize runner.

        Args:
            executable: Path to the flutter executable
            working_dir: Directory commands run in
            use_shell: Evaluate each command body through bash
            env: Extra environment variables for the commands
        """
        self.executable = Path(executable)
        self.working_dir = Path(working_dir)
        self.use_shell = use_shell
        self.env = dict(env) if env else {}

    def build_invocation(self, command: str) -> List[str]:
        """
        Build the argv for a command.

        Example:
            >>> CommandRunner(Path("/opt/flutter/bin/flutter"), Path(".")).build_invocation("build apk --release")
            ['/opt/flutter/bin/flutter', 'build', 'apk', '--release']

        Raises:
            ValueError: If the command has unbalanced quotes
        """
        if self.use_shell:
            return [SHELL, "-c", f"{shlex.quote(str(self.executable))} {command}"]
        return [str(self.executable), *shlex.split(command)]

    def _environment(self) -> Optional[Dict[str, str]]:
        if not self.env:
            return None
        return {**os.environ, **self.env}

    def run(self, command: str) -> None:
        """
        Run a single command and wait for it.

        Raises:
            CommandError: If the command cannot be started or exits non-zero
        """
        logger.info(f"Executing Flutter command: {command}")

        try:
            argv = self.build_invocation(command)
        except ValueError as e:
            raise CommandError(command, reason=str(e)) from e

        logger.debug(f"$ {shlex.join(argv)}")

        try:
            result = subprocess.run(
                argv, cwd=self.working_dir, env=self._environment(), check=False
            )
        except OSError as e:
            raise CommandError(command, reason=str(e)) from e

        if result.returncode != 0:
            raise CommandError(command, returncode=result.returncode)

    def run_all(self, commands: Sequence[str]) -> int:
        """
        Run commands in order, stopping at the first failure.

        Returns:
            Number of commands executed

        Raises:
            CommandError: Identifying the first command that failed
        """
        if not commands:
            logger.info("No Flutter commands configured")
            return 0

        for command in commands:
            self.run(command)

        return len(commands)


__all__ = ["CommandRunner", "SHELL"]
