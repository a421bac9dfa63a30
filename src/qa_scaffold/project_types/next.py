"""Next.js project type definition."""

from types import MappingProxyType

from qa_scaffold.project_types.base import (
    COMMON_DEPENDENCIES,
    COMMON_DIRECTORIES,
    ProjectType,
    TemplateNamespaces,
)
from qa_scaffold.project_types.react import REACT_DEPENDENCIES

NEXT = ProjectType(
    id="next",
    name="Next.js",
    description="Next.js application",
    dependencies=(
        *COMMON_DEPENDENCIES,
        "eslint-config-next@^14.2.0",
        *REACT_DEPENDENCIES,
    ),
    directories=(
        *COMMON_DIRECTORIES,
        "src/app",
        "src/components",
        "src/lib",
        "public",
    ),
    package_defaults=MappingProxyType(
        {
            "type": "module",
            "engines": {"node": ">=20.0.0"},
        }
    ),
    templates=TemplateNamespaces(base="common", specific="next"),
)
