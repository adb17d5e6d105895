"""Homebrew management: bootstrap brew itself, then install formulae and casks."""
from typing import Optional

from macsetup.core.host import Host
from macsetup.core.logger import get_logger
from macsetup.core.startup_file import StartupFile
from macsetup.services.remote_script import run_remote_script

logger = get_logger(__name__)


class BrewManager:
    """Installs packages through Homebrew."""

    INSTALL_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"

    # Apple Silicon installs live outside the default PATH
    APPLE_SILICON_PREFIX = "/opt/homebrew"
    SHELLENV_LINE = 'eval "$(/opt/homebrew/bin/brew shellenv)"'

    def __init__(self, host: Host, profile: Optional[StartupFile] = None):
        self.host = host
        self.profile = profile

    def is_installed(self) -> bool:
        """Check whether the brew binary is on PATH."""
        return self.host.command_exists("brew")

    def install_self(self):
        """Install Homebrew with the official installer script.

        On arm64 also adds the shellenv line to the login profile and puts
        /opt/homebrew/bin on PATH for the remaining steps of this run.
        """
        logger.info("Installing Homebrew...")
        run_remote_script(self.host, self.INSTALL_URL, interpreter="/bin/bash")

        if self.host.machine() == "arm64":
            if self.profile is not None:
                self.profile.append_line(self.SHELLENV_LINE)
            self.host.prepend_path(f"{self.APPLE_SILICON_PREFIX}/sbin")
            self.host.prepend_path(f"{self.APPLE_SILICON_PREFIX}/bin")

        logger.info("✓ Homebrew installed")

    def install(self, package: str, cask: bool = False):
        """Install a formula or cask.

        Args:
            package: Formula or cask name, optionally tap-qualified
                (e.g. nikitabobko/tap/aerospace)
            cask: Install as a cask

        Raises:
            StepExecutionFailure: If brew exits non-zero
        """
        argv = ["brew", "install"]
        if cask:
            argv.append("--cask")
        argv.append(package)

        logger.info(f"Installing {package}{' (cask)' if cask else ''}...")
        self.host.run(argv, capture=False)
