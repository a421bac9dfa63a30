"""Supported project types and lookup."""

from qa_scaffold.project_types.base import (
    COMMON_DEPENDENCIES,
    COMMON_DIRECTORIES,
    COMMON_NAMESPACE,
    ProjectType,
    TemplateNamespaces,
)
from qa_scaffold.project_types.next import NEXT
from qa_scaffold.project_types.node import NODE
from qa_scaffold.project_types.react import REACT

__all__ = [
    "COMMON_DEPENDENCIES",
    "COMMON_DIRECTORIES",
    "COMMON_NAMESPACE",
    "DEFAULT_PROJECT_TYPE",
    "NEXT",
    "NODE",
    "PROJECT_TYPES",
    "REACT",
    "ProjectType",
    "TemplateNamespaces",
    "all_ids",
    "describe",
    "get_all_project_types",
]

PROJECT_TYPES: tuple[ProjectType, ...] = (
    NODE,
    REACT,
    NEXT,
)

DEFAULT_PROJECT_TYPE = NODE.id

_BY_ID: dict[str, ProjectType] = {pt.id: pt for pt in PROJECT_TYPES}


def describe(project_type_id: str) -> ProjectType | None:
    """Return the project type with the given id, or None if unknown."""
    return _BY_ID.get(project_type_id)


def all_ids() -> frozenset[str]:
    """Return the ids of all supported project types."""
    return frozenset(_BY_ID)


def get_all_project_types() -> tuple[ProjectType, ...]:
    """Return all project types in display order."""
    return PROJECT_TYPES
