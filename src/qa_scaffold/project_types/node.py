"""Node.js project type definition."""

from types import MappingProxyType

from qa_scaffold.project_types.base import (
    COMMON_DEPENDENCIES,
    COMMON_DIRECTORIES,
    ProjectType,
    TemplateNamespaces,
)

NODE = ProjectType(
    id="node",
    name="Node.js",
    description="Node.js application or library",
    dependencies=(*COMMON_DEPENDENCIES, "eslint-config-airbnb-base@^15.0.0"),
    directories=(*COMMON_DIRECTORIES, "src/utils"),
    package_defaults=MappingProxyType(
        {
            "type": "module",
            "main": "src/index.js",
            "engines": {"node": ">=20.0.0"},
        }
    ),
    templates=TemplateNamespaces(base="common", specific="node"),
)
