"""Append-only management of shell startup files (~/.zshrc, ~/.zprofile)."""
from pathlib import Path

from macsetup.core.logger import get_logger

logger = get_logger(__name__)


class StartupFile:
    """A plain-text shell startup file where line presence is the only contract.

    A line counts as present when any existing line contains it verbatim,
    matching ``grep -qF`` on the file. A missing file contains nothing.
    """

    def __init__(self, path: Path, mock: bool = False):
        self.path = Path(path)
        self.mock = mock

    def read(self) -> str:
        if not self.path.exists():
            return ""
        # Bytes that are not UTF-8 still match, as with grep
        return self.path.read_text(errors="surrogateescape")

    def has_line(self, line: str) -> bool:
        """Return True if ``line`` already appears in the file."""
        needle = line.strip()
        return any(needle in existing for existing in self.read().splitlines())

    def append_line(self, line: str) -> bool:
        """Append ``line`` unless it is already present.

        Returns:
            True if the file was modified
        """
        if self.has_line(line):
            logger.debug(f"{self.path} already contains: {line}")
            return False

        if self.mock:
            logger.info(f"MOCK: Would append to {self.path}: {line}")
            return True

        content = self.read()
        prefix = "\n" if content and not content.endswith("\n") else ""

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a") as f:
            f.write(f"{prefix}{line.strip()}\n")

        logger.info(f"Appended to {self.path}: {line.strip()}")
        return True
