"""Git operations for qa-scaffold."""

from qa_scaffold.git.operations import (
    GitError,
    HuskyError,
    init_repo,
    install_hooks,
    is_git_repo,
)

__all__ = [
    "GitError",
    "HuskyError",
    "init_repo",
    "install_hooks",
    "is_git_repo",
]
