"""Narrow check/act access to the machine being provisioned.

Presence checks go through the query methods (``command_exists``,
``dir_exists``, ``env``), which never change anything. Every effect goes
through ``run`` so a mock host, or a fake in tests, can stand in for it.
"""
import os
import platform
import shlex
import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from macsetup.core.logger import get_logger
from macsetup.models.errors import StepExecutionFailure

logger = get_logger(__name__)


@dataclass(frozen=True)
class CommandResult:
    argv: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""


def format_argv(argv: Sequence[str]) -> str:
    """Render argv for logs, eliding inline scripts."""
    shown = []
    for arg in argv:
        if "\n" in arg:
            arg = f"<script: {len(arg.splitlines())} lines>"
        shown.append(shlex.quote(arg))
    return " ".join(shown)


class Host:
    """Queries and commands against the local machine."""

    def __init__(self, mock: bool = False):
        self.mock = mock

    # Queries

    def platform(self) -> str:
        return sys.platform

    def machine(self) -> str:
        return platform.machine()

    def command_exists(self, name: str) -> bool:
        return shutil.which(name) is not None

    def which(self, name: str) -> Optional[str]:
        return shutil.which(name)

    def dir_exists(self, path: Path) -> bool:
        return Path(path).is_dir()

    def env(self, name: str, default: str = "") -> str:
        return os.environ.get(name, default)

    # Actions

    def run(
        self,
        argv: Sequence[str],
        *,
        capture: bool = True,
        check: bool = True,
    ) -> CommandResult:
        """Run a command with consistent logging.

        Args:
            argv: Command and arguments
            capture: Capture stdout/stderr; when False the command shares the
                terminal so interactive installers can prompt
            check: Raise StepExecutionFailure on a non-zero exit

        Returns:
            CommandResult for the finished command
        """
        argv_list = [str(a) for a in argv]

        if self.mock:
            logger.info(f"MOCK: Would run {format_argv(argv_list)}")
            return CommandResult(argv=argv_list, returncode=0)

        logger.info(f"CMD {format_argv(argv_list)}")

        try:
            if capture:
                proc = subprocess.run(
                    argv_list, capture_output=True, text=True, errors="replace", check=False
                )
            else:
                proc = subprocess.run(argv_list, check=False)
        except FileNotFoundError as e:
            raise StepExecutionFailure(
                f"Command not found: {argv_list[0]}",
                argv=argv_list,
                returncode=127,
                stderr=str(e),
            ) from e
        except OSError as e:
            raise StepExecutionFailure(
                f"Cannot run {argv_list[0]}: {e}",
                argv=argv_list,
                returncode=126 if isinstance(e, PermissionError) else 1,
                stderr=str(e),
            ) from e

        stdout = proc.stdout or ""
        stderr = proc.stderr or ""
        if stdout:
            logger.debug(f"STDOUT {stdout.strip()}")
        if stderr:
            logger.debug(f"STDERR {stderr.strip()}")

        if check and proc.returncode != 0:
            raise StepExecutionFailure(
                f"Command failed ({proc.returncode}): {format_argv(argv_list)}",
                argv=argv_list,
                returncode=proc.returncode,
                stderr=stderr,
            )

        return CommandResult(
            argv=argv_list,
            returncode=proc.returncode,
            stdout=stdout,
            stderr=stderr,
        )

    def prepend_path(self, directory: str):
        """Put a directory at the front of PATH for the rest of this run."""
        if self.mock:
            logger.info(f"MOCK: Would prepend {directory} to PATH")
            return
        current = os.environ.get("PATH", "")
        if directory in current.split(os.pathsep):
            return
        os.environ["PATH"] = os.pathsep.join(p for p in (directory, current) if p)
        logger.debug(f"PATH now starts with {directory}")
