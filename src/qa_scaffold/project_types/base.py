"""Base project type definition."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

COMMON_DEPENDENCIES: tuple[str, ...] = (
    "eslint@^8.57.0",
    "eslint-plugin-import@^2.29.1",
    "eslint-plugin-jest@^27.9.0",
    "eslint-plugin-promise@^6.1.1",
    "eslint-config-prettier@^9.1.0",
    "eslint-plugin-prettier@^5.1.3",
    "prettier@^3.1.1",
    "husky@^9.0.11",
    "lint-staged@^15.2.2",
    "@commitlint/cli@^19.0.3",
    "@commitlint/config-conventional@^19.0.3",
    "commitizen@^4.3.0",
    "cz-conventional-changelog@^3.3.0",
    "jest@^29.7.0",
)

COMMON_DIRECTORIES: tuple[str, ...] = (
    "src",
    "tests",
    "tests/integration",
    "tests/e2e",
)

COMMON_NAMESPACE = "common"


@dataclass(frozen=True)
class TemplateNamespaces:
    """Template namespaces consulted for a project type, base first."""

    base: str
    specific: str


@dataclass(frozen=True)
class ProjectType:
    """Definition of a supported project type."""

    id: str  # e.g. "node", "react", "next"
    name: str
    description: str
    dependencies: tuple[str, ...] = COMMON_DEPENDENCIES
    directories: tuple[str, ...] = COMMON_DIRECTORIES
    package_defaults: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({})
    )
    templates: TemplateNamespaces | None = None

    @property
    def namespaces(self) -> TemplateNamespaces:
        """Return the template namespaces, defaulting to common + own id."""
        return self.templates or TemplateNamespaces(
            base=COMMON_NAMESPACE, specific=self.id
        )
