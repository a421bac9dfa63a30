"""Exceptions raised and recorded by the scaffolding core."""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base exception for qa-scaffold."""


class InvalidProjectType(ScaffoldError):
    """Raised when a project type id is not in the registry."""

    def __init__(self, project_type: str) -> None:
        self.project_type = project_type
        super().__init__(f"Invalid project type: {project_type}")


class MissingMandatoryNamespace(ScaffoldError):
    """Raised when the common template namespace cannot be loaded."""

    def __init__(self, namespace: str, reason: str) -> None:
        self.namespace = namespace
        self.reason = reason
        super().__init__(f"Cannot load template namespace '{namespace}': {reason}")


class TemplateNotFound(ScaffoldError):
    """An expected output has no template after the merge.

    Collected in ``Resolution.missing``, never raised by ``resolve``.
    """

    def __init__(self, template: str, output_path: str) -> None:
        self.template = template
        self.output_path = output_path
        super().__init__(f"Template {template} not found, skipping {output_path}")


class ArtifactError(ScaffoldError):
    """Base for per-artifact failures recorded by the materializer."""

    action = "Failed to process"

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"{self.action} {path}: {cause}")


class WriteFailure(ArtifactError):
    """Writing an artifact's content failed."""

    action = "Failed to write"


class PermissionFailure(ArtifactError):
    """Setting the executable bits on a written hook failed."""

    action = "Failed to make executable"


class DirectoryCreateFailure(ArtifactError):
    """Creating a declared directory failed."""

    action = "Failed to create directory"


class PackageJsonError(ScaffoldError):
    """Raised when package.json is missing or cannot be parsed."""
