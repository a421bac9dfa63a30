"""Git repository and husky hook operations."""

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


class GitError(Exception):
    """Raised when a git command fails."""


class HuskyError(GitError):
    """Raised when husky cannot install the hooks."""


def _run(command: list[str], cwd: Path) -> subprocess.CompletedProcess[str]:
    logger.debug("Running %s in %s", " ".join(command), cwd)
    return subprocess.run(
        command,
        cwd=cwd,
        capture_output=True,
        text=True,
    )


def is_git_repo(path: Path) -> bool:
    """Check if path is inside a git repository."""
    try:
        result = _run(["git", "rev-parse", "--git-dir"], path)
    except FileNotFoundError:
        return False
    return result.returncode == 0


def init_repo(path: Path) -> bool:
    """Run ``git init`` unless path is already inside a repository.

    Returns:
        True if a repository was created, False if one already existed.
    """
    if is_git_repo(path):
        return False
    try:
        result = _run(["git", "init"], path)
    except FileNotFoundError as e:
        raise GitError("git executable not found") from e
    if result.returncode != 0:
        raise GitError(f"Failed to initialize git repository: {result.stderr}")
    return True


def install_hooks(path: Path) -> None:
    """Point git at the .husky directory via ``npx husky``.

    ``husky init`` is avoided because it overwrites ``.husky/pre-commit``.
    """
    try:
        result = _run(["npx", "husky"], path)
    except FileNotFoundError as e:
        raise HuskyError("npx executable not found") from e
    if result.returncode != 0:
        detail = result.stderr.strip() or result.stdout.strip()
        raise HuskyError(f"Failed to install husky hooks: {detail}")
