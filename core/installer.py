"""Package manager install collaborator."""

import logging
import shlex
import subprocess
from typing import Protocol

from .config import DEFAULT_INSTALL_COMMAND
from .errors import InstallCommandError

logger = logging.getLogger(__name__)

FROZEN_LOCKFILE_FLAG = "--frozen-lockfile"


class Installer(Protocol):
    """Anything that can reinstall a workspace's dependencies."""

    def install(self, path: str, frozen: bool = False) -> None:
        """Install dependencies for the workspace at path, blocking until done.

        Raises:
            InstallCommandError: If the install fails
        """
        ...


class SubprocessInstaller:
    """Runs the package manager as a child process.

    Output goes straight to the invoking terminal. There is no timeout: a
    hung install hangs the run.
    """

    def __init__(self, command: str = DEFAULT_INSTALL_COMMAND):
        self.command = command

    def build_command(self, frozen: bool = False) -> list[str]:
        args = shlex.split(self.command)
        if frozen and FROZEN_LOCKFILE_FLAG not in args:
            args.append(FROZEN_LOCKFILE_FLAG)
        return args

    def install(self, path: str, frozen: bool = False) -> None:
        args = self.build_command(frozen)
        logger.info("Running %s in %s", shlex.join(args), path)

        try:
            completed = subprocess.run(args, cwd=path, check=False)
        except OSError as e:
            logger.error("Could not start %s: %s", args[0], e)
            raise InstallCommandError(shlex.join(args), 127) from e

        if completed.returncode != 0:
            raise InstallCommandError(shlex.join(args), completed.returncode)
