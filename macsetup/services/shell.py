"""Login shell management via chsh."""
from macsetup.core.host import Host
from macsetup.core.logger import get_logger
from macsetup.models.errors import StepExecutionFailure

logger = get_logger(__name__)


class ShellManager:
    """Compares the current login shell with the desired one and switches it."""

    def __init__(self, host: Host):
        self.host = host

    def is_default(self, shell_name: str) -> bool:
        """Return True if $SHELL already points at ``shell_name``."""
        return shell_name in self.host.env("SHELL")

    def set_default(self, shell_name: str):
        """Make ``shell_name`` the login shell.

        The change applies to new login sessions; $SHELL in the running
        process keeps its old value.

        Raises:
            StepExecutionFailure: If the shell is not on PATH or chsh fails
        """
        path = self.host.which(shell_name)
        if path is None:
            if not self.host.mock:
                raise StepExecutionFailure(
                    f"Cannot set default shell: {shell_name} not found on PATH",
                    argv=["chsh", "-s", shell_name],
                    returncode=127,
                )
            path = shell_name

        logger.info(f"Setting {path} as default shell...")
        self.host.run(["chsh", "-s", path], capture=False)
