"""Template resolution: layered merge, variable substitution, output mapping."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from qa_scaffold.errors import (
    InvalidProjectType,
    MissingMandatoryNamespace,
    TemplateNotFound,
)
from qa_scaffold.project_types import ProjectType, describe
from qa_scaffold.reporter import NullReporter, Reporter
from qa_scaffold.templates.base import (
    ArtifactKind,
    Resolution,
    ResolvedArtifact,
    TemplateSet,
)
from qa_scaffold.templates.store import (
    NamespaceNotFound,
    TemplateStore,
    TemplateStoreError,
)

logger = logging.getLogger(__name__)

# {{ name }} with insignificant whitespace around the name
PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*([A-Za-z_][\w.-]*)\s*\}\}")

# Template name -> output path. Missing entries are reported.
CONFIG_FILES: dict[str, str] = {
    "eslintrc.json": ".eslintrc.json",
    "prettierrc.json": ".prettierrc.json",
    "jest.config.js": "jest.config.js",
    "lintstagedrc.json": ".lintstagedrc.json",
    "commitlint.config.js": "commitlint.config.js",
    "gitignore": ".gitignore",
}

# Only some project types ship these; absence is not worth a warning.
OPTIONAL_CONFIG_FILES: dict[str, str] = {
    "jest.setup.js": "jest.setup.js",
    "next.config.js": "next.config.js",
}

HOOK_TEMPLATE_DIR = "husky"
HOOK_OUTPUT_DIR = ".husky"
EXPECTED_HOOKS: tuple[str, ...] = (
    "pre-commit",
    "commit-msg",
    "prepare-commit-msg",
    "pre-push",
)

SAMPLE_TEMPLATE_DIR = "tests"


@dataclass(frozen=True)
class SampleFile:
    """A sample test file with a per-project-type template and a fallback."""

    output_path: str
    name: str

    def template_for(self, project_type: str) -> str:
        return f"{SAMPLE_TEMPLATE_DIR}/{project_type}/{self.name}"

    @property
    def fallback(self) -> str:
        return f"{SAMPLE_TEMPLATE_DIR}/{self.name}"


SAMPLE_FILES: tuple[SampleFile, ...] = (
    SampleFile(output_path="tests/unit/sample.test.js", name="sample.test.js"),
    SampleFile(
        output_path="tests/integration/sample.integration.test.js",
        name="sample.integration.test.js",
    ),
)


def substitute(template: str, variables: Mapping[str, object]) -> str:
    """Replace ``{{ name }}`` placeholders with values from variables.

    Placeholders without a matching variable are left verbatim, since
    templates may carry ``{{ }}`` text meant for another tool.
    """

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in variables:
            return str(variables[name])
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(_replace, template)


def merge_template_sets(base: TemplateSet, specific: TemplateSet) -> TemplateSet:
    """Overlay specific entries on base entries; specific wins per key."""
    merged = dict(base)
    merged.update(specific)
    return merged


def default_variables(root: Path, project_type: ProjectType) -> dict[str, object]:
    """Build the standard template variables for a project root."""
    return {
        "projectName": root.resolve().name,
        "projectType": project_type.id,
        "year": date.today().year,
    }


def load_layers(
    project_type: ProjectType,
    store: TemplateStore,
    reporter: Reporter,
) -> TemplateSet:
    """Load the base namespace then the specific one and merge them.

    Raises:
        MissingMandatoryNamespace: The base namespace could not be loaded.
    """
    namespaces = project_type.namespaces

    try:
        base = store.load(namespaces.base)
    except TemplateStoreError as e:
        raise MissingMandatoryNamespace(namespaces.base, e.reason) from e
    reporter.debug(f"Loaded {len(base)} templates from '{namespaces.base}'")

    try:
        specific = store.load(namespaces.specific)
    except NamespaceNotFound:
        logger.debug("No specific templates for %s", project_type.id)
        specific = {}
    except TemplateStoreError as e:
        reporter.warning(
            f"Could not load {project_type.name} templates, using "
            f"'{namespaces.base}' only: {e.reason}"
        )
        specific = {}
    else:
        reporter.debug(
            f"Loaded {len(specific)} templates from '{namespaces.specific}'"
        )

    return merge_template_sets(base, specific)


def _artifact(
    templates: TemplateSet,
    key: str,
    output_path: str,
    kind: ArtifactKind = ArtifactKind.CONFIG,
) -> ResolvedArtifact:
    return ResolvedArtifact(
        output_path=output_path, content=templates[key], kind=kind, template=key
    )


def map_outputs(
    templates: TemplateSet, project_type: str
) -> tuple[list[ResolvedArtifact], list[TemplateNotFound]]:
    """Map merged template entries to output artifacts.

    Returns the artifacts (configs, then hooks, then samples) and the
    expected outputs for which no template exists.
    """
    artifacts: list[ResolvedArtifact] = []
    missing: list[TemplateNotFound] = []
    consumed: set[str] = set()

    for template, output in CONFIG_FILES.items():
        consumed.add(template)
        if template in templates:
            artifacts.append(_artifact(templates, template, output))
        else:
            missing.append(TemplateNotFound(template, output))

    for template, output in OPTIONAL_CONFIG_FILES.items():
        consumed.add(template)
        if template in templates:
            artifacts.append(_artifact(templates, template, output))

    # Anything else outside the hook and sample folders is copied as-is
    for template in sorted(templates):
        top = template.split("/", 1)[0]
        if template in consumed or top in (HOOK_TEMPLATE_DIR, SAMPLE_TEMPLATE_DIR):
            continue
        artifacts.append(_artifact(templates, template, template))

    hook_prefix = f"{HOOK_TEMPLATE_DIR}/"
    hooks = {
        key[len(hook_prefix):]: key for key in templates if key.startswith(hook_prefix)
    }
    for name in EXPECTED_HOOKS:
        if name not in hooks:
            missing.append(
                TemplateNotFound(f"{hook_prefix}{name}", f"{HOOK_OUTPUT_DIR}/{name}")
            )
    hook_names = [n for n in EXPECTED_HOOKS if n in hooks]
    hook_names += sorted(n for n in hooks if n not in EXPECTED_HOOKS)
    for name in hook_names:
        key = hooks[name]
        output = f"{HOOK_OUTPUT_DIR}/{name}"
        artifacts.append(_artifact(templates, key, output, ArtifactKind.HOOK))

    for sample in SAMPLE_FILES:
        specific = sample.template_for(project_type)
        if specific in templates:
            key = specific
        elif sample.fallback in templates:
            key = sample.fallback
        else:
            missing.append(TemplateNotFound(specific, sample.output_path))
            continue
        artifacts.append(
            _artifact(templates, key, sample.output_path, ArtifactKind.SAMPLE)
        )

    return artifacts, missing


def resolve(
    project_type_id: str,
    variables: Mapping[str, object] | None = None,
    *,
    store: TemplateStore | None = None,
    reporter: Reporter | None = None,
) -> Resolution:
    """Resolve the templates of a project type into artifacts.

    Common templates are loaded first and the project type's own namespace
    is overlaid key-for-key, so a type only ships the files it customises.
    Every entry then has its ``{{ name }}`` placeholders substituted and is
    mapped to an output path.

    Args:
        project_type_id: One of the registered project type ids.
        variables: Values for ``{{ name }}`` placeholders.
        store: Template store to read from (package defaults if omitted).
        reporter: Receives warnings for missing templates.

    Returns:
        The artifacts, the directories declared by the project type, and the
        expected outputs that had no template.

    Raises:
        InvalidProjectType: The id is not registered.
        MissingMandatoryNamespace: The common namespace could not be loaded.
    """
    project_type = describe(project_type_id)
    if project_type is None:
        raise InvalidProjectType(project_type_id)

    store = store or TemplateStore()
    reporter = reporter or NullReporter()
    variables = variables or {}

    merged = load_layers(project_type, store, reporter)
    rendered = {key: substitute(content, variables) for key, content in merged.items()}
    artifacts, missing = map_outputs(rendered, project_type.id)

    for err in missing:
        reporter.warning(str(err))

    return Resolution(
        project_type=project_type.id,
        artifacts=tuple(artifacts),
        directories=project_type.directories,
        missing=tuple(missing),
    )
