"""Run installer scripts fetched over HTTPS (Homebrew, Oh My Zsh)."""
from typing import Sequence

from macsetup.core.host import Host
from macsetup.core.logger import get_logger

logger = get_logger(__name__)


def run_remote_script(
    host: Host,
    url: str,
    interpreter: str = "/bin/bash",
    args: Sequence[str] = (),
):
    """Download a script with curl and hand it to an interpreter.

    Equivalent to ``interpreter -c "$(curl -fsSL url)" args...``. The script
    runs attached to the terminal so it can prompt for a password.

    Raises:
        StepExecutionFailure: If the download or the script fails
    """
    logger.info(f"Fetching installer from {url}")
    script = host.run(["curl", "-fsSL", url]).stdout
    host.run([interpreter, "-c", script, *args], capture=False)
