"""Writing resolved artifacts into a project tree."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from qa_scaffold.errors import (
    ArtifactError,
    DirectoryCreateFailure,
    PermissionFailure,
    WriteFailure,
)
from qa_scaffold.reporter import NullReporter, Reporter
from qa_scaffold.templates.base import KIND_ORDER, ArtifactKind, ResolvedArtifact

logger = logging.getLogger(__name__)

# rwxr-xr-x
HOOK_MODE = 0o755


@dataclass(frozen=True)
class FailedArtifact:
    """An artifact or directory that could not be materialized."""

    path: Path
    error: ArtifactError


@dataclass
class MaterializationResult:
    """Per-file outcomes of one materialize call."""

    created: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    failed: list[FailedArtifact] = field(default_factory=list)
    directories_created: list[Path] = field(default_factory=list)
    directories_existing: list[Path] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when nothing failed. Skips do not count as failures."""
        return not self.failed

    def record_failure(self, error: ArtifactError, path: Path | None = None) -> None:
        self.failed.append(FailedArtifact(path=path or error.path, error=error))


def order_artifacts(artifacts: Iterable[ResolvedArtifact]) -> list[ResolvedArtifact]:
    """Sort artifacts configs first, then hooks, then samples (stable)."""
    rank = {kind: i for i, kind in enumerate(KIND_ORDER)}
    return sorted(artifacts, key=lambda a: rank[a.kind])


def ensure_directory(path: Path) -> bool:
    """Create a directory and its parents.

    Returns True if it was created, False if it already existed.
    """
    if path.is_dir():
        return False
    path.mkdir(parents=True, exist_ok=True)
    return True


def _display(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


def materialize(
    artifacts: Iterable[ResolvedArtifact],
    directories: Iterable[str],
    *,
    root: Path,
    force: bool = False,
    reporter: Reporter | None = None,
) -> MaterializationResult:
    """Write artifacts below root, honouring existing files.

    Declared directories are created first, then artifacts in the order
    configs, hooks, samples. An existing file is only replaced when force is
    set. A failure on one file or directory is recorded in the result and
    never stops the remaining ones.

    Args:
        artifacts: Resolved artifacts with paths relative to root.
        directories: Directories to ensure, relative to root.
        root: Project root directory.
        force: Overwrite files that already exist.
        reporter: Receives one message per created, skipped or failed path.

    Returns:
        The created, skipped and failed paths.
    """
    reporter = reporter or NullReporter()
    result = MaterializationResult()

    for directory in directories:
        path = root / directory
        try:
            created = ensure_directory(path)
        except OSError as e:
            err = DirectoryCreateFailure(path, e)
            result.record_failure(err)
            reporter.error(str(err))
            continue
        if created:
            result.directories_created.append(path)
            reporter.success(f"Created directory [cyan]{directory}[/cyan]")
        else:
            result.directories_existing.append(path)
            reporter.debug(f"Directory {directory} already exists")

    for artifact in order_artifacts(artifacts):
        _write_artifact(artifact, root, force, result, reporter)

    logger.debug(
        "Materialized %d created, %d skipped, %d failed",
        len(result.created),
        len(result.skipped),
        len(result.failed),
    )
    return result


def _write_artifact(
    artifact: ResolvedArtifact,
    root: Path,
    force: bool,
    result: MaterializationResult,
    reporter: Reporter,
) -> None:
    target = root / artifact.output_path
    shown = _display(target, root)
    err: ArtifactError

    try:
        # A symlink counts as present even when it dangles
        present = target.is_symlink() or target.exists()
    except OSError as e:
        err = WriteFailure(target, e)
        result.record_failure(err)
        reporter.error(str(err))
        return

    if present and not force:
        result.skipped.append(target)
        reporter.info(f"[cyan]{shown}[/cyan] already exists, skipping")
        return

    try:
        ensure_directory(target.parent)
    except OSError as e:
        err = DirectoryCreateFailure(target.parent, e)
        result.record_failure(err, path=target)
        reporter.error(f"{err} (needed for {shown})")
        return

    try:
        if target.is_symlink():
            # Replace the link itself, never the file it points to
            target.unlink()
        target.write_text(artifact.content, encoding="utf-8", newline="")
    except OSError as e:
        err = WriteFailure(target, e)
        result.record_failure(err)
        reporter.error(str(err))
        return

    if artifact.kind is ArtifactKind.HOOK:
        # The written content stays in place if this fails
        try:
            target.chmod(HOOK_MODE)
        except OSError as e:
            err = PermissionFailure(target, e)
            result.record_failure(err)
            reporter.error(str(err))
            return

    result.created.append(target)
    label = "hook" if artifact.kind is ArtifactKind.HOOK else "file"
    reporter.success(f"Created {label} [cyan]{shown}[/cyan]")
