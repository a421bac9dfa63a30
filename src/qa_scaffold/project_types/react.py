"""React project type definition."""

from types import MappingProxyType

from qa_scaffold.project_types.base import (
    COMMON_DEPENDENCIES,
    COMMON_DIRECTORIES,
    ProjectType,
    TemplateNamespaces,
)

# Shared with Next.js, which is a React framework
REACT_DEPENDENCIES: tuple[str, ...] = (
    "eslint-plugin-react@^7.33.2",
    "eslint-plugin-react-hooks@^4.6.0",
    "eslint-plugin-jsx-a11y@^6.8.0",
    "@testing-library/react@^14.1.2",
    "@testing-library/jest-dom@^6.1.5",
    "@testing-library/user-event@^14.5.1",
)

REACT = ProjectType(
    id="react",
    name="React",
    description="React application",
    dependencies=(
        *COMMON_DEPENDENCIES,
        "eslint-config-airbnb@^19.0.4",
        *REACT_DEPENDENCIES,
    ),
    directories=(
        *COMMON_DIRECTORIES,
        "src/components",
        "src/hooks",
        "src/assets",
        "public",
    ),
    package_defaults=MappingProxyType(
        {
            "type": "module",
            "engines": {"node": ">=20.0.0"},
        }
    ),
    templates=TemplateNamespaces(base="common", specific="react"),
)
