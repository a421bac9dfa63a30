"""Command-line interface for qa-scaffold."""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from qa_scaffold import __version__
from qa_scaffold.compat import Conflict, Decision
from qa_scaffold.config import ScaffoldConfig, load_config
from qa_scaffold.console import console
from qa_scaffold.errors import InvalidProjectType, MissingMandatoryNamespace
from qa_scaffold.project_types import (
    DEFAULT_PROJECT_TYPE,
    PROJECT_TYPES,
    all_ids,
)
from qa_scaffold.reporter import ConsoleReporter
from qa_scaffold.scaffold import (
    Outcome,
    SetupOptions,
    SetupReport,
    plan_setup,
    run_init,
    run_setup,
)

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def configure_logging(verbose: bool) -> None:
    """Route log records through rich; DEBUG when verbose, else WARNING."""
    handler = RichHandler(console=Console(stderr=True), show_path=verbose)
    if not verbose:
        # Reporter messages are already on the console
        handler.addFilter(lambda record: record.name != "qa_scaffold.reporter")
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )


def version_callback(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    console.print(f"qa-scaffold [bold cyan]{__version__}[/bold cyan]")
    ctx.exit()


def setup_options(func: F) -> F:
    """Options shared by the default command, setup and init."""
    decorators = [
        click.option(
            "--type",
            "-t",
            "project_type",
            type=click.Choice(sorted(all_ids())),
            default=DEFAULT_PROJECT_TYPE,
            help=f"Project type (default: {DEFAULT_PROJECT_TYPE}).",
        ),
        click.option(
            "--force",
            "-f",
            is_flag=True,
            default=False,
            help="Overwrite existing configuration files.",
        ),
        click.option(
            "--skip-install",
            is_flag=True,
            default=False,
            help="Do not install npm dependencies.",
        ),
        click.option(
            "--verbose",
            "-v",
            is_flag=True,
            default=False,
            help="Show detailed output.",
        ),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


SHARED_PARAMS = ("project_type", "force", "skip_install", "verbose")


def build_options(ctx: click.Context, root: Path) -> SetupOptions:
    """Layer explicitly passed CLI flags over the loaded configuration.

    Shared flags may be given before the subcommand (``qa-scaffold --force
    setup``) or after it; the subcommand's own value wins.
    """
    explicit: dict[str, Any] = {}
    for context in (ctx.parent, ctx):
        if context is None:
            continue
        for name in SHARED_PARAMS:
            source = context.get_parameter_source(name)
            if source == click.core.ParameterSource.COMMANDLINE:
                explicit[name] = context.params[name]

    config = load_config(root).merge(ScaffoldConfig(**explicit))
    return SetupOptions.from_config(config)


def ask_conflict_decision(conflict: Conflict) -> Decision:
    """Prompt whether to upgrade the dependent package of a conflict."""
    name = conflict.issue.dependent.name
    if click.confirm(f"Do you want to update {name}?", default=True):
        return Decision.UPDATE
    return Decision.KEEP


def ask_continue(message: str) -> bool:
    """Prompt whether to go on after a recoverable failure."""
    return click.confirm(message, default=True)


def _exit_for(report: SetupReport) -> None:
    if report.outcome is Outcome.FAILED:
        raise SystemExit(1)


def _setup(options: SetupOptions, root: Path, dry_run: bool) -> None:
    configure_logging(options.verbose)
    reporter = ConsoleReporter(verbose=options.verbose)

    if dry_run:
        _show_plan(options, root, reporter)
        return

    report = run_setup(
        root,
        options,
        reporter=reporter,
        should_proceed=ask_conflict_decision,
        confirm=ask_continue,
    )
    _exit_for(report)


def _show_plan(options: SetupOptions, root: Path, reporter: ConsoleReporter) -> None:
    """Print the files setup would write without touching the project."""
    try:
        resolution = plan_setup(root, options, reporter=reporter)
    except (InvalidProjectType, MissingMandatoryNamespace) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1) from None

    table = Table(title=f"Planned files ({resolution.project_type})")
    table.add_column("Path", style="cyan")
    table.add_column("Kind", style="white")
    table.add_column("Template", style="dim")
    table.add_column("Action", style="green")

    for artifact in resolution.artifacts:
        exists = (root / artifact.output_path).exists()
        if not exists:
            action = "[green]create[/green]"
        elif options.force:
            action = "[yellow]overwrite[/yellow]"
        else:
            action = "[dim]skip[/dim]"
        table.add_row(
            artifact.output_path, artifact.kind.value, artifact.template, action
        )

    console.print(table)
    if resolution.directories:
        console.print(
            "\n[bold]Directories:[/bold] " + ", ".join(resolution.directories)
        )
    if resolution.missing:
        console.print(
            f"\n[yellow]{len(resolution.missing)} expected file(s) have no "
            "template[/yellow]"
        )


@click.group(invoke_without_command=True)
@click.option(
    "--version",
    is_flag=True,
    callback=version_callback,
    expose_value=False,
    is_eager=True,
    help="Show version and exit.",
)
@setup_options
@click.pass_context
def main(
    ctx: click.Context,
    project_type: str,
    force: bool,
    skip_install: bool,
    verbose: bool,
) -> None:
    """qa-scaffold - code quality tooling for JavaScript projects.

    Without a command, runs setup in the current directory.
    """
    if ctx.invoked_subcommand is not None:
        return
    root = Path.cwd()
    options = build_options(ctx, root)
    _setup(options, root, dry_run=False)


@main.command()
@setup_options
@click.option(
    "--dry-run",
    is_flag=True,
    help="Show the files that would be written without writing them.",
)
@click.pass_context
def setup(
    ctx: click.Context,
    project_type: str,
    force: bool,
    skip_install: bool,
    verbose: bool,
    dry_run: bool,
) -> None:
    """Set up linting, formatting, testing and git hooks in this project.

    Requires an existing package.json. Existing configuration files are kept
    unless --force is given.
    """
    root = Path.cwd()
    options = build_options(ctx, root)
    _setup(options, root, dry_run)


@main.command()
@click.argument(
    "directory",
    type=click.Path(file_okay=False, path_type=Path),
)
@setup_options
@click.pass_context
def init(
    ctx: click.Context,
    directory: Path,
    project_type: str,
    force: bool,
    skip_install: bool,
    verbose: bool,
) -> None:
    """Create a new project in DIRECTORY with the quality tooling set up."""
    directory = directory.resolve()
    options = build_options(ctx, directory)
    configure_logging(options.verbose)
    reporter = ConsoleReporter(verbose=options.verbose)

    report = run_init(
        directory,
        options,
        reporter=reporter,
        should_proceed=ask_conflict_decision,
        confirm=ask_continue,
    )
    _exit_for(report)
    console.print("\nNext steps:")
    console.print(f"  [cyan]cd {directory}[/cyan]")
    console.print("  [cyan]npm test[/cyan]")


@main.command("list")
def list_types() -> None:
    """List the supported project types."""
    table = Table(title="Project Types")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="white")
    table.add_column("Description", style="dim")

    for project_type in PROJECT_TYPES:
        label = project_type.id
        if project_type.id == DEFAULT_PROJECT_TYPE:
            label += " (default)"
        table.add_row(label, project_type.name, project_type.description)

    console.print(table)
