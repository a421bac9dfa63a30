"""Known version conflicts between the installed quality tools."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from packaging.version import InvalidVersion, Version

from qa_scaffold.package_manager import PackageManager, PackageManagerError
from qa_scaffold.reporter import NullReporter, Reporter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageConstraint:
    name: str
    pattern: str


@dataclass(frozen=True)
class CompatibilityIssue:
    """Two packages whose matching versions are known not to work together.

    When both match, ``dependent`` is the one to upgrade.
    """

    primary: PackageConstraint
    dependent: PackageConstraint
    message: str


COMPATIBILITY_ISSUES: tuple[CompatibilityIssue, ...] = (
    CompatibilityIssue(
        primary=PackageConstraint("eslint", "8.x+"),
        dependent=PackageConstraint("eslint-config-prettier", "<8.0.0"),
        message="ESLint 8+ works best with eslint-config-prettier 8+",
    ),
    CompatibilityIssue(
        primary=PackageConstraint("prettier", "3.x+"),
        dependent=PackageConstraint("eslint-plugin-prettier", "<5.0.0"),
        message="Prettier 3+ requires eslint-plugin-prettier 5+",
    ),
    CompatibilityIssue(
        primary=PackageConstraint("husky", "8.x+"),
        dependent=PackageConstraint("lint-staged", "<10.0.0"),
        message="Husky 8+ works best with lint-staged 10+",
    ),
)


class Decision(str, Enum):
    """What to do about a detected conflict."""

    UPDATE = "update"
    KEEP = "keep"


@dataclass(frozen=True)
class Conflict:
    issue: CompatibilityIssue
    primary_version: str
    dependent_version: str
    decision: Decision = Decision.KEEP
    updated: bool = False

    def describe(self) -> str:
        return (
            f"{self.issue.primary.name}@{self.primary_version} and "
            f"{self.issue.dependent.name}@{self.dependent_version} "
            "may have compatibility issues"
        )


def _major_of(pattern: str) -> int:
    return int(pattern.split(".", 1)[0])


def version_matches_pattern(version: str | None, pattern: str) -> bool:
    """Check a version against ``N.x+``, ``N.x``, ``<v``, ``>v`` or an exact version.

    Unparseable versions never match.
    """
    if not version:
        return False
    try:
        parsed = Version(version)
        if pattern.endswith("x+"):
            return parsed.major >= _major_of(pattern)
        if "x" in pattern:
            return parsed.major == _major_of(pattern)
        if pattern.startswith("<"):
            return parsed < Version(pattern[1:])
        if pattern.startswith(">"):
            return parsed > Version(pattern[1:])
        return parsed == Version(pattern)
    except (InvalidVersion, ValueError):
        logger.debug("Cannot compare %r against %r", version, pattern)
        return False


ShouldProceed = Callable[[Conflict], Decision]


def check_compatibility(
    package_manager: PackageManager,
    should_proceed: ShouldProceed,
    *,
    issues: Sequence[CompatibilityIssue] = COMPATIBILITY_ISSUES,
    reporter: Reporter | None = None,
) -> list[Conflict]:
    """Detect known conflicts among installed packages.

    For each conflict the decision callback chooses whether to upgrade the
    dependent package to its latest release or keep the installed versions.

    Returns:
        The detected conflicts with the decision taken and whether the
        upgrade succeeded.
    """
    reporter = reporter or NullReporter()
    reporter.info("Checking package version compatibility...")
    conflicts: list[Conflict] = []

    for issue in issues:
        primary_version = package_manager.get_installed_version(issue.primary.name)
        dependent_version = package_manager.get_installed_version(
            issue.dependent.name
        )
        if not primary_version or not dependent_version:
            reporter.debug(
                f"Skipping {issue.primary.name}/{issue.dependent.name} check "
                "(one or both not installed)"
            )
            continue

        if not (
            version_matches_pattern(primary_version, issue.primary.pattern)
            and version_matches_pattern(dependent_version, issue.dependent.pattern)
        ):
            reporter.debug(
                f"{issue.primary.name}@{primary_version} and "
                f"{issue.dependent.name}@{dependent_version} are compatible"
            )
            continue

        conflict = Conflict(issue, primary_version, dependent_version)
        reporter.warning(f"Compatibility issue detected: {issue.message}")
        reporter.warning(f"  {conflict.describe()}")

        decision = should_proceed(conflict)
        updated = False
        if decision is Decision.UPDATE:
            try:
                package_manager.update_package(issue.dependent.name)
            except PackageManagerError as e:
                reporter.error(f"Failed to update {issue.dependent.name}: {e}")
            else:
                updated = True
                reporter.success(f"Updated {issue.dependent.name} to latest")
        else:
            reporter.warning(
                f"Continuing with potentially incompatible versions of "
                f"{issue.primary.name} and {issue.dependent.name}"
            )
        conflicts.append(
            Conflict(issue, primary_version, dependent_version, decision, updated)
        )

    if not conflicts:
        reporter.success("All package versions are compatible")
    return conflicts
