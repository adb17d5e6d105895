"""macsetup runtime configuration and settings."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class MacSetupConfig:
    """Runtime configuration for provisioning runs.

    Attributes:
        home: Home directory all relative paths resolve against
        startup_file: Shell startup file receiving alias/init lines (default: ~/.zshrc)
        profile_file: Login profile receiving the Homebrew shellenv line (default: ~/.zprofile)
        wezterm_file: Where the terminal settings document is written (default: ~/.wezterm.lua)
        expected_platform: Platform identifier the host must report (default: darwin)
        log_file: Optional log file override
    """

    home: Path = field(default_factory=Path.home)
    startup_file: Optional[Path] = None
    profile_file: Optional[Path] = None
    wezterm_file: Optional[Path] = None
    expected_platform: str = "darwin"
    log_file: Optional[str] = None

    def __post_init__(self):
        self.home = Path(self.home).expanduser()
        if self.startup_file is None:
            self.startup_file = self.home / ".zshrc"
        if self.profile_file is None:
            self.profile_file = self.home / ".zprofile"
        if self.wezterm_file is None:
            self.wezterm_file = self.home / ".wezterm.lua"
        self.startup_file = Path(self.startup_file).expanduser()
        self.profile_file = Path(self.profile_file).expanduser()
        self.wezterm_file = Path(self.wezterm_file).expanduser()

    def expand_path(self, raw: str) -> Path:
        """Resolve a path from the sequence definition against ``home``."""
        text = raw.replace("{home}", str(self.home))
        if text == "~" or text.startswith("~/"):
            text = str(self.home) + text[1:]
        return Path(text)

    @classmethod
    def from_env(cls) -> "MacSetupConfig":
        """Create config from environment variables.

        Environment variables:
            MACSETUP_HOME: Home directory override
            MACSETUP_STARTUP_FILE: Shell startup file
            MACSETUP_PROFILE_FILE: Login profile file
            MACSETUP_WEZTERM_FILE: Terminal settings document
            MACSETUP_PLATFORM: Expected platform identifier
            MACSETUP_LOG_FILE: Log file path

        Returns:
            MacSetupConfig instance with values from environment or defaults
        """
        home = os.getenv("MACSETUP_HOME")
        return cls(
            home=Path(home) if home else Path.home(),
            startup_file=_optional_path(os.getenv("MACSETUP_STARTUP_FILE")),
            profile_file=_optional_path(os.getenv("MACSETUP_PROFILE_FILE")),
            wezterm_file=_optional_path(os.getenv("MACSETUP_WEZTERM_FILE")),
            expected_platform=os.getenv("MACSETUP_PLATFORM", "darwin"),
            log_file=os.getenv("MACSETUP_LOG_FILE"),
        )


def _optional_path(value: Optional[str]) -> Optional[Path]:
    return Path(value) if value else None


# Global config instance (can be overridden)
_config: Optional[MacSetupConfig] = None


def get_config() -> MacSetupConfig:
    """Get the global macsetup configuration.

    Returns:
        MacSetupConfig instance (creates from environment if not set)
    """
    global _config
    if _config is None:
        _config = MacSetupConfig.from_env()
    return _config


def set_config(config: Optional[MacSetupConfig]):
    """Set the global macsetup configuration.

    Args:
        config: MacSetupConfig instance to use globally, or None to re-read the environment
    """
    global _config
    _config = config
