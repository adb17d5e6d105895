"""Git clones for shell themes and plugins."""
from pathlib import Path
from typing import Optional

from macsetup.core.host import Host
from macsetup.core.logger import get_logger

logger = get_logger(__name__)


class GitManager:
    """Clone-if-absent keyed by target directory."""

    def __init__(self, host: Host):
        self.host = host

    def repo_exists(self, path: Path) -> bool:
        """Check whether the target directory is already there."""
        return self.host.dir_exists(path)

    def clone_repo(self, url: str, path: Path, depth: Optional[int] = None):
        """Clone a repository into ``path``.

        Args:
            url: Repository URL
            path: Target directory; git creates missing parents
            depth: Shallow clone depth, or None for full history

        Raises:
            StepExecutionFailure: If git exits non-zero
        """
        argv = ["git", "clone"]
        if depth:
            argv.append(f"--depth={depth}")
        argv += [url, str(path)]

        logger.info(f"Cloning {url} into {path}")
        self.host.run(argv, capture=False)
