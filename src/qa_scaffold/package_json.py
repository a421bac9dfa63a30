"""package.json reading, deep merging and quality script configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from qa_scaffold.errors import PackageJsonError

logger = logging.getLogger(__name__)

PACKAGE_JSON = "package.json"

_JEST = "node --experimental-vm-modules node_modules/jest/bin/jest.js"

QUALITY_SCRIPTS: dict[str, str] = {
    "lint": "eslint --ignore-path .gitignore --ext .js .",
    "lint:fix": "eslint --ignore-path .gitignore --ext .js . --fix",
    "format": 'prettier --ignore-path .gitignore --write "**/*.{js,json,md}"',
    "commit": "cz",
    "prepare": "husky",
    "test": _JEST,
    "test:watch": f"{_JEST} --watch",
    "test:unit": f"{_JEST} src",
    "test:unit:watch": f"{_JEST} src --watch",
    "test:unit:coverage": f"{_JEST} src --coverage",
    "test:integration": f"{_JEST} tests/integration",
    "test:integration:watch": f"{_JEST} tests/integration --watch",
    "test:e2e": f"{_JEST} tests/e2e",
    "test:e2e:watch": f"{_JEST} tests/e2e --watch",
    "test:ci": (
        f"{_JEST} --ci --runInBand --forceExit --coverage src tests/integration"
    ),
    "test:coverage": f"{_JEST} --coverage",
}

COMMITIZEN_CONFIG: dict[str, Any] = {
    "commitizen": {"path": "./node_modules/cz-conventional-changelog"},
}


def deep_merge(target: Mapping[str, Any], source: Mapping[str, Any]) -> dict[str, Any]:
    """Merge source into a copy of target.

    Object values merge recursively key-by-key. Arrays and scalars from
    source replace the target value wholesale; arrays are never
    concatenated. Neither input is mutated.
    """
    result: dict[str, Any] = dict(target)
    for key, value in source.items():
        if isinstance(value, Mapping):
            existing = result.get(key)
            if isinstance(existing, Mapping):
                result[key] = deep_merge(existing, value)
            else:
                result[key] = deep_merge({}, value)
        elif isinstance(value, list):
            result[key] = list(value)
        else:
            result[key] = value
    return result


def get_package_json_path(root: Path) -> Path:
    return root / PACKAGE_JSON


def read_package_json(root: Path) -> dict[str, Any]:
    """Read and parse package.json in root.

    Raises:
        PackageJsonError: The file is missing, unreadable or not an object.
    """
    path = get_package_json_path(root)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise PackageJsonError(f"No package.json found in {root}") from None
    except (OSError, json.JSONDecodeError) as e:
        raise PackageJsonError(f"Cannot read {path}: {e}") from e
    if not isinstance(data, dict):
        raise PackageJsonError(f"{path} does not contain a JSON object")
    return data


def write_package_json(root: Path, data: Mapping[str, Any]) -> None:
    """Write package.json with two-space indentation and a final newline."""
    path = get_package_json_path(root)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def update_package_json(root: Path, values: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge values into package.json in root and write it back.

    Returns the merged document.
    """
    merged = deep_merge(read_package_json(root), values)
    try:
        write_package_json(root, merged)
    except OSError as e:
        raise PackageJsonError(f"Cannot write package.json: {e}") from e
    logger.debug("Updated package.json keys: %s", ", ".join(values))
    return merged


def add_quality_scripts(root: Path) -> dict[str, Any]:
    """Add the quality scripts and Commitizen config to package.json."""
    return update_package_json(
        root,
        {"scripts": QUALITY_SCRIPTS, "config": COMMITIZEN_CONFIG},
    )


def declared_dependencies(root: Path) -> dict[str, str]:
    """Return dependencies and devDependencies declared in package.json.

    Returns an empty dict when package.json is missing or invalid.
    """
    try:
        data = read_package_json(root)
    except PackageJsonError:
        return {}
    declared: dict[str, str] = {}
    for section in ("dependencies", "devDependencies"):
        entries = data.get(section)
        if isinstance(entries, dict):
            declared.update({str(k): str(v) for k, v in entries.items()})
    return declared
