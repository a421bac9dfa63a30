"""Template namespaces, resolution and the bundled defaults."""

from qa_scaffold.templates.base import (
    ArtifactKind,
    Resolution,
    ResolvedArtifact,
    TemplateSet,
)
from qa_scaffold.templates.resolver import (
    default_variables,
    merge_template_sets,
    resolve,
    substitute,
)
from qa_scaffold.templates.store import (
    NamespaceNotFound,
    TemplateStore,
    TemplateStoreError,
    get_package_templates_path,
)

__all__ = [
    "ArtifactKind",
    "NamespaceNotFound",
    "Resolution",
    "ResolvedArtifact",
    "TemplateSet",
    "TemplateStore",
    "TemplateStoreError",
    "default_variables",
    "get_package_templates_path",
    "merge_template_sets",
    "resolve",
    "substitute",
]
