"""npm package manager adapter."""

from __future__ import annotations

import json
import logging
import subprocess
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Protocol

from qa_scaffold.errors import ScaffoldError
from qa_scaffold.package_json import declared_dependencies

logger = logging.getLogger(__name__)


class PackageManagerError(ScaffoldError):
    """Raised when a package manager command fails."""

    def __init__(self, command: Sequence[str], detail: str) -> None:
        self.command = list(command)
        self.detail = detail
        super().__init__(f"`{' '.join(command)}` failed: {detail}")


def extract_package_name(dependency: str) -> str:
    """Strip the version from a dependency spec.

    >>> extract_package_name("@commitlint/cli@19.0.0")
    '@commitlint/cli'
    >>> extract_package_name("eslint")
    'eslint'
    """
    if dependency.startswith("@"):
        return "@" + dependency[1:].partition("@")[0]
    return dependency.split("@", 1)[0]


def extract_package_version(dependency: str) -> str | None:
    """Return the version part of a dependency spec, or None."""
    if dependency.startswith("@"):
        _, sep, version = dependency[1:].partition("@")
    else:
        _, sep, version = dependency.partition("@")
    return version if sep and version else None


class PackageManager(Protocol):
    """Operations the scaffolder needs from a Node package manager."""

    def is_installed(self, name: str) -> bool: ...

    def install(self, packages: Sequence[str]) -> None: ...

    def install_dev(self, packages: Sequence[str]) -> None: ...

    def get_installed_version(self, name: str) -> str | None: ...

    def init_project(self) -> None: ...

    def update_package(self, name: str) -> None: ...


class NpmPackageManager:
    """Runs npm in a project root."""

    executable = "npm"

    def __init__(self, root: Path) -> None:
        self.root = root

    def _run(self, *args: str) -> subprocess.CompletedProcess[str]:
        command = [self.executable, *args]
        logger.debug("Running %s in %s", " ".join(command), self.root)
        try:
            result = subprocess.run(
                command,
                cwd=self.root,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as e:
            raise PackageManagerError(command, f"{self.executable} not found") from e
        if result.returncode != 0:
            detail = result.stderr.strip() or f"exit code {result.returncode}"
            raise PackageManagerError(command, detail)
        return result

    def is_installed(self, name: str) -> bool:
        """Check the package is declared in package.json and present on disk."""
        if name not in declared_dependencies(self.root):
            return False
        return (self.root / "node_modules" / name).is_dir()

    def install(self, packages: Sequence[str]) -> None:
        if not packages:
            return
        self._run("install", "--save", *packages)

    def install_dev(self, packages: Sequence[str]) -> None:
        if not packages:
            return
        self._run("install", "--save-dev", *packages)

    def get_installed_version(self, name: str) -> str | None:
        """Read the version from node_modules/<name>/package.json."""
        manifest = self.root / "node_modules" / name / "package.json"
        try:
            data = json.loads(manifest.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return None
        version = data.get("version") if isinstance(data, dict) else None
        return version if isinstance(version, str) else None

    def init_project(self) -> None:
        """Create a default package.json with ``npm init -y``."""
        self._run("init", "-y")

    def update_package(self, name: str) -> None:
        """Reinstall a dev dependency at its latest version."""
        self._run("install", "--save-dev", f"{name}@latest")


def missing_dependencies(
    package_manager: PackageManager, dependencies: Iterable[str]
) -> list[str]:
    """Return the dependency specs whose package is not installed."""
    return [
        dep
        for dep in dependencies
        if not package_manager.is_installed(extract_package_name(dep))
    ]
