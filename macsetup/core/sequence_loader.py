"""Load the declared provisioning sequence and turn it into Steps."""
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml

from macsetup.core.config import MacSetupConfig
from macsetup.core.host import Host
from macsetup.core.logger import get_logger
from macsetup.core.startup_file import StartupFile
from macsetup.models.errors import SequenceDefinitionError
from macsetup.models.step import Step
from macsetup.services.brew import BrewManager
from macsetup.services.git_manager import GitManager
from macsetup.services.remote_script import run_remote_script
from macsetup.services.shell import ShellManager

logger = get_logger(__name__)

DEFAULT_SEQUENCE_FILE = Path(__file__).parent.parent / "data" / "sequence.yml"

# Fields each kind must declare
REQUIRED_FIELDS: Dict[str, List[str]] = {
    'homebrew': [],
    'formula': ['package'],
    'cask': ['package'],
    'login_shell': ['shell'],
    'script_dir': ['url', 'path'],
    'git_clone': ['url', 'path'],
    'startup_line': ['line'],
}


@dataclass
class Toolbox:
    """Collaborators the steps act through."""
    host: Host
    config: MacSetupConfig
    brew: BrewManager
    git: GitManager
    shell: ShellManager
    startup_file: StartupFile
    profile_file: StartupFile

    @classmethod
    def for_host(cls, host: Host, config: MacSetupConfig) -> "Toolbox":
        profile = StartupFile(config.profile_file, mock=host.mock)
        return cls(
            host=host,
            config=config,
            brew=BrewManager(host, profile=profile),
            git=GitManager(host),
            shell=ShellManager(host),
            startup_file=StartupFile(config.startup_file, mock=host.mock),
            profile_file=profile,
        )


def load_definitions(path: Optional[Path] = None) -> List[Dict[str, Any]]:
    """Read and validate step definitions from YAML.

    Args:
        path: Sequence file (defaults to the packaged macsetup/data/sequence.yml)

    Returns:
        List of step definition dicts in declared order

    Raises:
        SequenceDefinitionError: On unknown kinds, missing fields or duplicate names
    """
    sequence_path = Path(path) if path else DEFAULT_SEQUENCE_FILE
    if not sequence_path.exists():
        raise SequenceDefinitionError(f"Sequence file not found: {sequence_path}")

    try:
        with open(sequence_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise SequenceDefinitionError(f"{sequence_path}: invalid YAML: {e}") from e

    steps = data.get('steps') if isinstance(data, dict) else None
    if not isinstance(steps, list) or not steps:
        raise SequenceDefinitionError(f"{sequence_path}: expected a non-empty 'steps' list")

    validate_definitions(steps)
    logger.debug(f"Loaded {len(steps)} step definitions from {sequence_path}")
    return steps


def validate_definitions(steps: List[Dict[str, Any]]):
    """Check kinds, required fields and name uniqueness.

    Raises:
        SequenceDefinitionError: On the first problem found
    """
    seen = set()
    for index, definition in enumerate(steps, start=1):
        if not isinstance(definition, dict):
            raise SequenceDefinitionError(f"Step #{index} must be a mapping")

        name = definition.get('name')
        if not name:
            raise SequenceDefinitionError(f"Step #{index} has no name")
        if name in seen:
            raise SequenceDefinitionError(f"Duplicate step name: {name}")
        seen.add(name)

        kind = definition.get('kind')
        if kind not in REQUIRED_FIELDS:
            raise SequenceDefinitionError(f"Step '{name}' has unknown kind: {kind}")

        missing = [f for f in REQUIRED_FIELDS[kind] if not definition.get(f)]
        if missing:
            raise SequenceDefinitionError(
                f"Step '{name}' ({kind}) is missing: {', '.join(missing)}"
            )

        if kind == 'startup_line' and definition.get('file', 'startup') not in ('startup', 'profile'):
            raise SequenceDefinitionError(
                f"Step '{name}' has unknown file: {definition['file']} (use startup or profile)"
            )


def _homebrew_step(d: Dict[str, Any], tools: Toolbox) -> Step:
    return Step(
        name=d['name'],
        presence_check=tools.brew.is_installed,
        install_action=tools.brew.install_self,
        post_install_message=d.get('message'),
        description=d.get('description', ''),
    )


def _package_step(d: Dict[str, Any], tools: Toolbox) -> Step:
    package = d['package']
    binary = d.get('binary') or package.rsplit('/', 1)[-1]
    cask = d['kind'] == 'cask'

    def present() -> bool:
        return tools.host.command_exists(binary)

    def install():
        tools.brew.install(package, cask=cask)

    return Step(
        name=d['name'],
        presence_check=present,
        install_action=install,
        post_install_message=d.get('message'),
        description=d.get('description', ''),
    )


def _login_shell_step(d: Dict[str, Any], tools: Toolbox) -> Step:
    shell = d['shell']

    def present() -> bool:
        return tools.shell.is_default(shell)

    def install():
        tools.shell.set_default(shell)

    return Step(
        name=d['name'],
        presence_check=present,
        install_action=install,
        post_install_message=d.get('message'),
        description=d.get('description', ''),
        verify_after_install=False,
    )


def _script_dir_step(d: Dict[str, Any], tools: Toolbox) -> Step:
    target = tools.config.expand_path(d['path'])
    args = [str(a) for a in d.get('args', [])]
    interpreter = d.get('interpreter', '/bin/bash')

    def present() -> bool:
        return tools.host.dir_exists(target)

    def install():
        run_remote_script(tools.host, d['url'], interpreter=interpreter, args=args)

    return Step(
        name=d['name'],
        presence_check=present,
        install_action=install,
        post_install_message=d.get('message'),
        description=d.get('description', ''),
    )


def _git_clone_step(d: Dict[str, Any], tools: Toolbox) -> Step:
    target = tools.config.expand_path(d['path'])

    def present() -> bool:
        return tools.git.repo_exists(target)

    def install():
        tools.git.clone_repo(d['url'], target, depth=d.get('depth'))

    return Step(
        name=d['name'],
        presence_check=present,
        install_action=install,
        post_install_message=d.get('message'),
        description=d.get('description', ''),
    )


def _startup_line_step(d: Dict[str, Any], tools: Toolbox) -> Step:
    line = d['line']
    target = tools.profile_file if d.get('file') == 'profile' else tools.startup_file

    def present() -> bool:
        return target.has_line(line)

    def install():
        target.append_line(line)

    return Step(
        name=d['name'],
        presence_check=present,
        install_action=install,
        post_install_message=d.get('message'),
        description=d.get('description', ''),
    )


_BUILDERS: Dict[str, Callable[[Dict[str, Any], Toolbox], Step]] = {
    'homebrew': _homebrew_step,
    'formula': _package_step,
    'cask': _package_step,
    'login_shell': _login_shell_step,
    'script_dir': _script_dir_step,
    'git_clone': _git_clone_step,
    'startup_line': _startup_line_step,
}


def build_sequence(
    host: Host,
    config: MacSetupConfig,
    definitions: Optional[List[Dict[str, Any]]] = None,
) -> List[Step]:
    """Build the ordered Step list bound to a host.

    Args:
        host: Host (real, mock or fake) every check and action goes through
        config: Paths and platform settings
        definitions: Step definitions (defaults to the packaged sequence)

    Returns:
        Steps in declared order
    """
    if definitions is None:
        definitions = load_definitions()
    else:
        validate_definitions(definitions)

    tools = Toolbox.for_host(host, config)
    return [_BUILDERS[d['kind']](d, tools) for d in definitions]
