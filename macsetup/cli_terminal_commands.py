"""Terminal emulator CLI commands - wezterm."""
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from macsetup.cli_support import create_host, handle_cli_error, print_success
from macsetup.core.config import get_config
from macsetup.models.errors import ConfigEmitError
from macsetup.services.wezterm_config import TerminalConfig

# Module-level console instance (will be set by register function)
console: Console = Console()


def wezterm(
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the settings document to this file"),
    write: bool = typer.Option(False, "--write", help="Write to ~/.wezterm.lua (or MACSETUP_WEZTERM_FILE)"),
    overrides: Optional[List[str]] = typer.Option(None, "--set", help="Override a setting (key=value, repeatable)"),
):
    """Render the WezTerm settings document.

    Prints to stdout unless --output or --write is given.

    Examples:
        macsetup wezterm
        macsetup wezterm --set font_size=14 --write
    """
    config = TerminalConfig()
    try:
        config.apply_overrides(overrides or [])
        if output is None and not write:
            typer.echo(config.render(), nl=False)
            return
        target = output if output is not None else get_config().wezterm_file
        path = config.write(target, mock=create_host().mock)
    except ConfigEmitError as e:
        handle_cli_error(e, console)

    print_success(console, f"WezTerm settings written to {path}")


def register_terminal_commands(app: typer.Typer, shared_console: Console):
    """Register terminal commands with the main Typer app.

    Args:
        app: Main Typer application
        shared_console: Shared Rich console instance
    """
    global console
    console = shared_console

    app.command()(wezterm)
