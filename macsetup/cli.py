#!/usr/bin/env python3
"""macsetup CLI - idempotent macOS development environment setup."""

import typer
from rich.console import Console

from macsetup import __version__
from macsetup.cli_provision_commands import provision, register_provision_commands
from macsetup.cli_terminal_commands import register_terminal_commands
from macsetup.core.logger import get_logger

app = typer.Typer(
    name="macsetup",
    help="""macsetup - macOS development environment setup

Installs Homebrew, ZSH, Oh My Zsh, Powerlevel10k, AeroSpace, WezTerm,
lazygit, tig, fzf, eza and zoxide, then adds shell aliases.
Safe to re-run: anything already installed is skipped.

Quick start:
  macsetup             # Install everything that is missing
  macsetup status      # See what is already installed
  macsetup wezterm     # Print the WezTerm settings
""",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context):
    """Run the full setup when no command is given."""
    if ctx.invoked_subcommand is None:
        provision()


@app.command()
def version():
    """Show macsetup version."""
    console.print(f"macsetup {__version__}")


# Attach modular subcommands
register_provision_commands(app, console)
register_terminal_commands(app, console)

if __name__ == "__main__":
    app()
