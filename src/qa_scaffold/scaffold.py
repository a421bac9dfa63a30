"""Setup and init orchestration."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from qa_scaffold.compat import Conflict, Decision, ShouldProceed, check_compatibility
from qa_scaffold.config import ScaffoldConfig
from qa_scaffold.errors import (
    InvalidProjectType,
    MissingMandatoryNamespace,
    PackageJsonError,
)
from qa_scaffold.git import GitError, init_repo, install_hooks
from qa_scaffold.materializer import MaterializationResult, materialize
from qa_scaffold.package_json import (
    add_quality_scripts,
    get_package_json_path,
    read_package_json,
    update_package_json,
)
from qa_scaffold.package_manager import (
    NpmPackageManager,
    PackageManager,
    PackageManagerError,
    missing_dependencies,
)
from qa_scaffold.project_types import DEFAULT_PROJECT_TYPE, ProjectType, describe
from qa_scaffold.reporter import NullReporter, Reporter
from qa_scaffold.templates import Resolution, TemplateStore, default_variables, resolve

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]


class Outcome(str, Enum):
    SUCCESS = "success"
    COMPLETED_WITH_WARNINGS = "completed_with_warnings"
    FAILED = "failed"


OUTCOME_COLORS = {
    Outcome.SUCCESS: "green",
    Outcome.COMPLETED_WITH_WARNINGS: "yellow",
    Outcome.FAILED: "red",
}


@dataclass
class SetupOptions:
    """Effective options for one setup or init run."""

    project_type: str = DEFAULT_PROJECT_TYPE
    force: bool = False
    skip_install: bool = False
    verbose: bool = False
    templates_dir: Path | None = None
    variables: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config: ScaffoldConfig) -> SetupOptions:
        return cls(
            project_type=config.project_type or DEFAULT_PROJECT_TYPE,
            force=bool(config.force),
            skip_install=bool(config.skip_install),
            verbose=bool(config.verbose),
            templates_dir=(
                Path(config.templates_dir).expanduser()
                if config.templates_dir
                else None
            ),
            variables=dict(config.variables or {}),
        )

    def template_store(self) -> TemplateStore:
        return TemplateStore(self.templates_dir)


@dataclass
class SetupReport:
    """What happened during a run, for the summary and the exit code."""

    outcome: Outcome = Outcome.SUCCESS
    resolution: Resolution | None = None
    materialization: MaterializationResult | None = None
    installed: list[str] = field(default_factory=list)
    conflicts: list[Conflict] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        self.warnings.append(message)
        if self.outcome is Outcome.SUCCESS:
            self.outcome = Outcome.COMPLETED_WITH_WARNINGS

    def fail(self, message: str) -> SetupReport:
        self.errors.append(message)
        self.outcome = Outcome.FAILED
        return self


def _keep(conflict: Conflict) -> Decision:
    return Decision.KEEP


def _continue(message: str) -> bool:
    return True


def build_variables(
    root: Path, project_type: ProjectType, extra: Mapping[str, str] | None = None
) -> dict[str, object]:
    """Standard template variables overlaid with user-supplied ones."""
    variables = default_variables(root, project_type)
    variables.update(extra or {})
    return variables


def plan_setup(
    root: Path, options: SetupOptions, *, reporter: Reporter | None = None
) -> Resolution:
    """Resolve the artifacts a setup run would write, without writing them.

    Raises:
        InvalidProjectType: The project type is not registered.
        MissingMandatoryNamespace: The common templates cannot be loaded.
    """
    project_type = describe(options.project_type)
    if project_type is None:
        raise InvalidProjectType(options.project_type)
    return resolve(
        project_type.id,
        build_variables(root, project_type, options.variables),
        store=options.template_store(),
        reporter=reporter,
    )


def run_setup(
    root: Path,
    options: SetupOptions,
    *,
    reporter: Reporter | None = None,
    package_manager: PackageManager | None = None,
    should_proceed: ShouldProceed | None = None,
    confirm: Confirm | None = None,
) -> SetupReport:
    """Install and configure the quality tooling in an existing project.

    Args:
        root: Project root containing package.json.
        options: Effective options.
        reporter: Progress output (discarded if omitted).
        package_manager: Defaults to npm run in root.
        should_proceed: Decides each detected version conflict. Installed
            versions are kept if omitted.
        confirm: Asked whether to continue after a git hook failure.
            Continues if omitted.

    Returns:
        The run report. Its outcome is FAILED only for unrecoverable errors.
    """
    reporter = reporter or NullReporter()
    package_manager = package_manager or NpmPackageManager(root)
    should_proceed = should_proceed or _keep
    confirm = confirm or _continue
    report = SetupReport()

    project_type = describe(options.project_type)
    if project_type is None:
        err = InvalidProjectType(options.project_type)
        reporter.error(str(err))
        return report.fail(str(err))

    reporter.show_header(f"Setting up {project_type.name} quality tooling")

    if not get_package_json_path(root).exists():
        message = f"No package.json found in {root}"
        reporter.error(message)
        reporter.info(
            "Run [cyan]npm init[/cyan] first or use [cyan]qa-scaffold init[/cyan]"
        )
        return report.fail(message)
    try:
        read_package_json(root)
    except PackageJsonError as e:
        reporter.error(str(e))
        return report.fail(str(e))

    if options.skip_install:
        reporter.info("Skipping dependency installation")
    else:
        _install_dependencies(project_type, package_manager, reporter, report)

        report.conflicts = check_compatibility(
            package_manager, should_proceed, reporter=reporter
        )
        for conflict in report.conflicts:
            if not conflict.updated:
                report.warn(conflict.describe())

    try:
        report.resolution = plan_setup(root, options, reporter=reporter)
    except (InvalidProjectType, MissingMandatoryNamespace) as e:
        reporter.error(str(e))
        return report.fail(str(e))
    for missing in report.resolution.missing:
        report.warn(str(missing))

    report.materialization = materialize(
        report.resolution.artifacts,
        report.resolution.directories,
        root=root,
        force=options.force,
        reporter=reporter,
    )
    for failed in report.materialization.failed:
        report.warn(str(failed.error))

    try:
        add_quality_scripts(root)
    except PackageJsonError as e:
        reporter.error(str(e))
        report.warn(str(e))
    else:
        reporter.success("Added quality scripts to package.json")

    if not _setup_git_hooks(root, reporter, report, confirm):
        return report.fail("Setup aborted after git hook failure")

    show_summary(report, reporter)
    return report


def _install_dependencies(
    project_type: ProjectType,
    package_manager: PackageManager,
    reporter: Reporter,
    report: SetupReport,
) -> None:
    missing = missing_dependencies(package_manager, project_type.dependencies)
    if not missing:
        reporter.success("All dependencies already installed")
        return
    reporter.info(f"Installing {len(missing)} dev dependencies...")
    logger.debug("Installing %s", ", ".join(missing))
    try:
        package_manager.install_dev(missing)
    except PackageManagerError as e:
        reporter.error(f"Failed to install dependencies: {e}")
        report.warn(str(e))
        return
    report.installed = missing
    reporter.success("Dependencies installed")


def _setup_git_hooks(
    root: Path, reporter: Reporter, report: SetupReport, confirm: Confirm
) -> bool:
    """Initialize git if needed and install husky.

    Returns False when the user chose to stop after a failure.
    """
    try:
        if init_repo(root):
            reporter.success("Initialized git repository")
        else:
            reporter.debug("Git repository already initialized")
        install_hooks(root)
    except GitError as e:
        reporter.error(str(e))
        if not confirm("Git hooks could not be configured. Continue anyway?"):
            return False
        reporter.warning("Continuing without git hooks")
        report.warn(str(e))
        return True
    reporter.success("Git hooks configured")
    return True


def run_init(
    directory: Path,
    options: SetupOptions,
    *,
    reporter: Reporter | None = None,
    package_manager: PackageManager | None = None,
    should_proceed: ShouldProceed | None = None,
    confirm: Confirm | None = None,
) -> SetupReport:
    """Create a new project in directory and set it up.

    The directory is created when missing, given a package.json with the
    project type's defaults and a git repository, then set up with force
    enabled. The type's directories are created by the setup step.
    """
    reporter = reporter or NullReporter()
    package_manager = package_manager or NpmPackageManager(directory)

    project_type = describe(options.project_type)
    if project_type is None:
        err = InvalidProjectType(options.project_type)
        reporter.error(str(err))
        return SetupReport().fail(str(err))

    reporter.show_header(f"Creating {project_type.name} project")

    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        message = f"Cannot create {directory}: {e}"
        reporter.error(message)
        return SetupReport().fail(message)

    if not get_package_json_path(directory).exists():
        try:
            package_manager.init_project()
            update_package_json(directory, project_type.package_defaults)
        except (PackageManagerError, PackageJsonError) as e:
            reporter.error(f"Failed to create package.json: {e}")
            return SetupReport().fail(str(e))
        reporter.success("Created package.json")
    else:
        reporter.info("package.json already exists")

    try:
        if init_repo(directory):
            reporter.success("Initialized git repository")
    except GitError as e:
        # Retried by the setup step, which reports it there
        logger.debug("git init failed: %s", e)

    report = run_setup(
        directory,
        dataclasses.replace(options, force=True),
        reporter=reporter,
        package_manager=package_manager,
        should_proceed=should_proceed,
        confirm=confirm,
    )
    if report.outcome is not Outcome.FAILED:
        reporter.success(
            f"[bold]{directory.name}[/bold] project initialized in {directory}"
        )
    return report


def show_summary(report: SetupReport, reporter: Reporter) -> None:
    """Report the counts and outcome of a run."""
    reporter.show_header("Setup Summary", OUTCOME_COLORS[report.outcome])
    result = report.materialization
    if result is not None:
        reporter.info(
            f"{len(result.created)} created, {len(result.skipped)} skipped, "
            f"{len(result.failed)} failed"
        )
    if report.outcome is Outcome.SUCCESS:
        reporter.success("Quality system setup completed successfully!")
    elif report.outcome is Outcome.COMPLETED_WITH_WARNINGS:
        reporter.warning(f"Setup completed with {len(report.warnings)} warning(s)")
    else:
        reporter.error("Setup failed")
