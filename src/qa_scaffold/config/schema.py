"""Configuration schema for qa-scaffold."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any


@dataclass
class ScaffoldConfig:
    """qa-scaffold configuration schema.

    Fields mirror the CLI options of `qa-scaffold setup`.
    None values indicate "not set" and will use defaults or be inherited.
    """

    project_type: str | None = None
    force: bool | None = None
    skip_install: bool | None = None
    verbose: bool | None = None

    # Directory holding template namespaces, replacing the bundled ones
    templates_dir: str | None = None

    # Extra {{ name }} values, merged key by key
    variables: dict[str, str] | None = None

    def merge(self, other: ScaffoldConfig) -> ScaffoldConfig:
        """Merge another config into this one.

        Values from `other` take precedence when they are not None.
        Returns a new ScaffoldConfig instance.
        """
        variables = self.variables
        if other.variables is not None:
            variables = {**(self.variables or {}), **other.variables}
        return ScaffoldConfig(
            project_type=(
                other.project_type
                if other.project_type is not None
                else self.project_type
            ),
            force=other.force if other.force is not None else self.force,
            skip_install=(
                other.skip_install
                if other.skip_install is not None
                else self.skip_install
            ),
            verbose=other.verbose if other.verbose is not None else self.verbose,
            templates_dir=(
                other.templates_dir
                if other.templates_dir is not None
                else self.templates_dir
            ),
            variables=variables,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary, excluding None values."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                result[f.name] = value
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ScaffoldConfig:
        """Create a ScaffoldConfig from a dictionary.

        Unknown keys are ignored. Type validation is performed.
        """
        project_type_raw = data.get("project_type")
        project_type = str(project_type_raw) if project_type_raw is not None else None

        def _flag(key: str) -> bool | None:
            raw = data.get(key)
            return bool(raw) if raw is not None else None

        templates_dir_raw = data.get("templates_dir")
        templates_dir = (
            str(templates_dir_raw) if templates_dir_raw is not None else None
        )

        variables_raw = data.get("variables")
        variables = (
            {str(k): str(v) for k, v in variables_raw.items()}
            if isinstance(variables_raw, dict)
            else None
        )

        return cls(
            project_type=project_type,
            force=_flag("force"),
            skip_install=_flag("skip_install"),
            verbose=_flag("verbose"),
            templates_dir=templates_dir,
            variables=variables,
        )


# Default configuration values (used when not specified anywhere)
DEFAULT_CONFIG = ScaffoldConfig(
    project_type="node",
    force=False,
    skip_install=False,
    verbose=False,
)
