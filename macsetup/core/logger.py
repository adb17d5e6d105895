"""Unified logging for macsetup with console and file output."""
import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

console = Console()

# Log file configuration
LOG_DIR = Path.home() / "Library" / "Logs" / "macsetup"
LOG_FILE = LOG_DIR / "macsetup.log"
FALLBACK_LOG_FILE = Path("/tmp/macsetup.log")

# Track if file logging has been set up
_file_logging_configured = False


def setup_file_logging(log_file: str = None, verbose: bool = False) -> Path:
    """Set up file logging for provisioning runs.

    Args:
        log_file: Path to log file (defaults to ~/Library/Logs/macsetup/macsetup.log)
        verbose: Enable debug-level logging

    Returns:
        Path of the log file actually in use

    Note:
        Creates log directory if it doesn't exist.
        Falls back to /tmp if the directory is not writable.
    """
    global _file_logging_configured

    root_logger = logging.getLogger("macsetup")

    if _file_logging_configured:
        return Path(getattr(root_logger, "_macsetup_log_file", LOG_FILE))

    target_log_file = Path(log_file).expanduser() if log_file else LOG_FILE

    try:
        target_log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(target_log_file)
    except OSError:
        target_log_file = FALLBACK_LOG_FILE
        target_log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(target_log_file)

    file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)

    # Detailed format for file logs
    file_formatter = logging.Formatter(
        "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(file_formatter)
    root_logger.addHandler(file_handler)

    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    _file_logging_configured = True
    setattr(root_logger, "_macsetup_log_file", str(target_log_file))

    root_logger.info(f"macsetup logging initialized: {target_log_file}")
    return target_log_file


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger instance with console output.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger with Rich console handler

    Note:
        File logging must be enabled separately via setup_file_logging()
    """
    logger = logging.getLogger(name)

    # Only add console handler if not already present
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=console, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)

    return logger
