"""Template namespace loading."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from qa_scaffold.templates.base import TemplateSet

logger = logging.getLogger(__name__)


class TemplateStoreError(Exception):
    """Raised when a template namespace exists but cannot be read."""

    def __init__(self, namespace: str, reason: str) -> None:
        self.namespace = namespace
        self.reason = reason
        super().__init__(f"Failed to load templates from '{namespace}': {reason}")


class NamespaceNotFound(TemplateStoreError):
    """Raised when a template namespace directory does not exist."""

    def __init__(self, namespace: str, path: Path) -> None:
        self.path = path
        super().__init__(namespace, f"directory not found: {path}")


def get_package_templates_path() -> Path:
    """Get path to package-bundled default templates."""
    return Path(__file__).parent / "default"


class TemplateStore:
    """Read-only provider of template namespaces under a root directory.

    Each namespace is a directory; every regular file beneath it becomes one
    entry keyed by its ``/``-joined path relative to the namespace root, so
    ``husky/pre-commit`` stays ``"husky/pre-commit"`` on every platform.
    """

    def __init__(self, root: Path | None = None) -> None:
        self.root = root or get_package_templates_path()

    def namespace_path(self, namespace: str) -> Path:
        return self.root / namespace

    def has_namespace(self, namespace: str) -> bool:
        return self.namespace_path(namespace).is_dir()

    def namespaces(self) -> list[str]:
        """List the namespace directories present under the root."""
        if not self.root.is_dir():
            return []
        return sorted(item.name for item in self.root.iterdir() if item.is_dir())

    def load(self, namespace: str) -> TemplateSet:
        """Load every template file in a namespace.

        Raises:
            NamespaceNotFound: The namespace directory does not exist.
            TemplateStoreError: The directory or one of its files is unreadable.
        """
        base = self.namespace_path(namespace)
        if not base.is_dir():
            raise NamespaceNotFound(namespace, base)

        templates: TemplateSet = {}
        try:
            for path in _iter_files(base):
                key = path.relative_to(base).as_posix()
                templates[key] = path.read_text(encoding="utf-8")
                logger.debug("Loaded template %s/%s", namespace, key)
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateStoreError(namespace, str(e)) from e

        return templates


def _iter_files(directory: Path) -> Iterator[Path]:
    """Yield regular files beneath directory, depth-first in name order.

    Unlike ``Path.rglob`` this lets permission errors propagate.
    """
    for item in sorted(directory.iterdir()):
        if item.is_dir():
            yield from _iter_files(item)
        elif item.is_file():
            yield item
