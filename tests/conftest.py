"""Shared test fixtures for macsetup tests."""
from pathlib import Path

import pytest

from macsetup.core.config import MacSetupConfig, set_config
from macsetup.core.host import CommandResult, Host
from macsetup.core.sequence_loader import build_sequence
from macsetup.models.errors import StepExecutionFailure


class FakeHost(Host):
    """In-memory host that records commands and simulates their effects.

    ``commands`` is the record of everything that would have been executed.
    """

    def __init__(
        self,
        home: Path,
        platform: str = "darwin",
        machine: str = "arm64",
        binaries=(),
        dirs=(),
        shell: str = "/bin/bash",
        fail_on: str = None,
        fail_code: int = 1,
    ):
        super().__init__(mock=False)
        self.home = Path(home)
        self._platform = platform
        self._machine = machine
        self.binaries = set(binaries)
        self.dirs = {str(d) for d in dirs}
        self.shell = shell
        self.fail_on = fail_on
        self.fail_code = fail_code
        self.commands = []
        self.path_prepends = []

    def platform(self) -> str:
        return self._platform

    def machine(self) -> str:
        return self._machine

    def command_exists(self, name: str) -> bool:
        return name in self.binaries

    def which(self, name: str):
        return f"/opt/homebrew/bin/{name}" if name in self.binaries else None

    def dir_exists(self, path) -> bool:
        return str(path) in self.dirs

    def env(self, name: str, default: str = "") -> str:
        if name == "SHELL":
            return self.shell
        return default

    def run(self, argv, *, capture=True, check=True):
        argv = [str(a) for a in argv]
        self.commands.append(argv)

        if self.fail_on and self.fail_on in " ".join(argv):
            if check:
                raise StepExecutionFailure(
                    f"Command failed ({self.fail_code}): {' '.join(argv)}",
                    argv=argv,
                    returncode=self.fail_code,
                    stderr="simulated failure",
                )
            return CommandResult(argv=argv, returncode=self.fail_code)

        stdout = ""
        if argv[0] == "curl":
            stdout = f"# installer from {argv[-1]}\n"
        elif argv[0] in ("/bin/bash", "sh") and len(argv) > 2:
            if "Homebrew" in argv[2]:
                self.binaries.add("brew")
            elif "ohmyzsh" in argv[2]:
                self.dirs.add(str(self.home / ".oh-my-zsh"))
        elif argv[:2] == ["brew", "install"]:
            self.binaries.add(argv[-1].rsplit("/", 1)[-1])
        elif argv[:2] == ["git", "clone"]:
            self.dirs.add(argv[-1])
        elif argv[0] == "chsh":
            self.shell = argv[2]

        return CommandResult(argv=argv, returncode=0, stdout=stdout)

    def prepend_path(self, directory: str):
        self.path_prepends.append(directory)

    def ran(self, fragment: str) -> bool:
        """Return True if any recorded command contains ``fragment``."""
        return any(fragment in " ".join(argv) for argv in self.commands)


@pytest.fixture
def home(tmp_path):
    """Empty home directory."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def config(home, tmp_path):
    """Config rooted at the temporary home directory."""
    cfg = MacSetupConfig(home=home, log_file=str(tmp_path / "macsetup.log"))
    set_config(cfg)
    yield cfg
    set_config(None)


@pytest.fixture
def fake_host(home):
    """Empty macOS host: nothing installed, bash as login shell."""
    return FakeHost(home)


@pytest.fixture
def sequence(fake_host, config):
    """Packaged sequence bound to the fake host."""
    return build_sequence(fake_host, config)


EXPECTED_ORDER = [
    "homebrew",
    "zsh",
    "login-shell",
    "oh-my-zsh",
    "powerlevel10k",
    "zsh-autosuggestions",
    "aerospace",
    "wezterm",
    "lazygit",
    "tig",
    "fzf",
    "eza",
    "zoxide",
    "alias-ls",
    "alias-cd",
    "zoxide-init",
]

STARTUP_LINES = [
    "alias ls='eza'",
    "alias cd='z'",
    'eval "$(zoxide init zsh)"',
]


@pytest.fixture
def expected_order():
    """Step names of the packaged sequence in declared order."""
    return list(EXPECTED_ORDER)


@pytest.fixture
def startup_lines():
    """Lines the sequence adds to ~/.zshrc."""
    return list(STARTUP_LINES)


@pytest.fixture
def make_host(home):
    """Factory for fake hosts with custom state."""
    def _make(**kwargs):
        return FakeHost(home, **kwargs)
    return _make
