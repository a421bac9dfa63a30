"""Resolved template artifacts."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from qa_scaffold.errors import TemplateNotFound

# Relative template name -> text content
TemplateSet = dict[str, str]


class ArtifactKind(str, Enum):
    """How a resolved artifact is handled after it is written."""

    CONFIG = "config"
    HOOK = "hook"  # receives executable permission bits
    SAMPLE = "sample"


# Materialization order
KIND_ORDER: tuple[ArtifactKind, ...] = (
    ArtifactKind.CONFIG,
    ArtifactKind.HOOK,
    ArtifactKind.SAMPLE,
)


@dataclass(frozen=True)
class ResolvedArtifact:
    """One file ready to be written into a project."""

    output_path: str  # POSIX path relative to the project root
    content: str
    kind: ArtifactKind
    template: str = ""  # template key the content came from


@dataclass(frozen=True)
class Resolution:
    """Result of resolving the templates for one project type."""

    project_type: str
    artifacts: tuple[ResolvedArtifact, ...]
    directories: tuple[str, ...]
    missing: tuple[TemplateNotFound, ...] = field(default=())

    def by_kind(self, kind: ArtifactKind) -> list[ResolvedArtifact]:
        """Return the artifacts of the given kind, in resolution order."""
        return [a for a in self.artifacts if a.kind is kind]
