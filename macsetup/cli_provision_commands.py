"""Provisioning CLI commands - install, status, steps."""
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from macsetup.cli_support import (
    create_host,
    handle_cli_error,
    print_error,
    print_success,
    print_warning,
    setup_file_logging,
)
from macsetup.core.config import get_config
from macsetup.core.provisioner import Provisioner
from macsetup.core.sequence_loader import build_sequence, load_definitions
from macsetup.models.errors import (
    PreconditionFailure,
    SequenceDefinitionError,
    StepExecutionFailure,
)
from macsetup.models.step import Report, StepStatus

# Module-level console instance (will be set by register function)
console: Console = Console()

FINAL_NOTES = [
    "Please restart your terminal or run 'source ~/.zshrc' to apply changes",
    "Run 'p10k configure' to configure Powerlevel10k theme",
]

_STATUS_STYLES = {
    StepStatus.SKIPPED: "dim",
    StepStatus.DONE: "green",
    StepStatus.FAILED: "red",
}


def render_report(report: Report, title: str = "Provisioning summary") -> Table:
    """Build a table of step outcomes in run order."""
    table = Table(title=title, show_header=True)
    table.add_column("Step", style="cyan")
    table.add_column("Status")
    table.add_column("Notes", overflow="fold")

    for outcome in report.outcomes:
        style = _STATUS_STYLES.get(outcome.status, "white")
        notes = outcome.cause or ""
        if not outcome.verified:
            notes = "installed, but still not detected"
        table.add_row(
            outcome.name,
            f"[{style}]{outcome.status.label}[/{style}]",
            notes,
        )
    return table


def provision(dry_run: bool = False, verbose: bool = False, log_file: Optional[str] = None):
    """Run the full sequence and exit with the run's status code."""
    config = get_config()
    setup_file_logging(log_file or config.log_file, verbose)

    host = create_host(mock=True if dry_run else None)
    if host.mock:
        print_warning(console, "Dry run: no changes will be made")

    try:
        sequence = build_sequence(host, config)
    except SequenceDefinitionError as e:
        handle_cli_error(e, console, verbose)

    console.print("\n[bold cyan]Starting macOS development environment setup...[/bold cyan]\n")

    provisioner = Provisioner(host, expected_platform=config.expected_platform)
    try:
        report = provisioner.run(sequence)
    except PreconditionFailure as e:
        handle_cli_error(e, console, verbose, exit_code=1)

    console.print()
    console.print(render_report(report))

    failed = report.failed
    if failed is not None:
        not_attempted = len(sequence) - len(report.outcomes)
        print_error(console, f"{failed.name} failed: {failed.cause}")
        if not_attempted:
            print_warning(console, f"{not_attempted} step(s) not attempted. Fix the problem and re-run.")
        raise typer.Exit(report.exit_code)

    for name in report.unverified:
        print_warning(console, f"{name} was installed but is still not detected; check your PATH")

    print_success(console, "All installations completed!")
    for note in FINAL_NOTES:
        print_warning(console, note)


def install(
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be installed without changing anything"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Write the run log to this file"),
):
    """Install everything that is missing, in order.

    Already-installed tools are skipped, so re-running after a failure
    resumes at the step that failed.
    """
    provision(dry_run=dry_run, verbose=verbose, log_file=log_file)


def status(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show tracebacks on error"),
):
    """Show which steps are already satisfied. Changes nothing."""
    config = get_config()
    host = create_host()

    try:
        sequence = build_sequence(host, config)
        results = Provisioner(host, expected_platform=config.expected_platform).survey(sequence)
    except (PreconditionFailure, SequenceDefinitionError, StepExecutionFailure) as e:
        handle_cli_error(e, console, verbose)

    table = Table(title="Environment status", show_header=True)
    table.add_column("Step", style="cyan")
    table.add_column("Description")
    table.add_column("Present", justify="center")

    for step, present in results:
        mark = "[green]✓[/green]" if present else "[red]✗[/red]"
        table.add_row(step.name, step.description, mark)

    console.print(table)

    missing: List[str] = [step.name for step, present in results if not present]
    if missing:
        print_warning(console, f"{len(missing)} step(s) would be installed: {', '.join(missing)}")
    else:
        print_success(console, "Everything is already installed")


def steps():
    """List the provisioning sequence in execution order."""
    try:
        definitions = load_definitions()
    except SequenceDefinitionError as e:
        handle_cli_error(e, console)

    table = Table(title="Provisioning sequence", show_header=True)
    table.add_column("#", justify="right")
    table.add_column("Step", style="cyan")
    table.add_column("Kind", style="blue")
    table.add_column("Description")

    for index, definition in enumerate(definitions, start=1):
        table.add_row(
            str(index),
            definition['name'],
            definition['kind'],
            definition.get('description', ''),
        )

    console.print(table)


def register_provision_commands(app: typer.Typer, shared_console: Console):
    """Register provisioning commands with the main Typer app.

    Args:
        app: Main Typer application
        shared_console: Shared Rich console instance
    """
    global console
    console = shared_console

    app.command()(install)
    app.command()(status)
    app.command()(steps)
