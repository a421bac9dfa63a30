"""Tests for package.json handling."""

import json
from pathlib import Path
from types import MappingProxyType

import pytest

from qa_scaffold.errors import PackageJsonError
from qa_scaffold.package_json import (
    COMMITIZEN_CONFIG,
    QUALITY_SCRIPTS,
    add_quality_scripts,
    declared_dependencies,
    deep_merge,
    read_package_json,
    update_package_json,
)


def write_package(root: Path, data: dict) -> Path:
    path = root / "package.json"
    path.write_text(json.dumps(data))
    return path


class TestDeepMerge:
    """Tests for deep_merge()."""

    def test_objects_merge_and_arrays_replace(self) -> None:
        target = {"scripts": {"test": "jest"}, "files": ["a"]}
        source = {"scripts": {"lint": "eslint"}, "files": ["b"]}

        assert deep_merge(target, source) == {
            "scripts": {"test": "jest", "lint": "eslint"},
            "files": ["b"],
        }

    def test_scalars_replace(self) -> None:
        assert deep_merge({"type": "commonjs"}, {"type": "module"}) == {
            "type": "module"
        }

    def test_nested_objects_merge_recursively(self) -> None:
        target = {"config": {"commitizen": {"path": "old"}, "other": 1}}
        source = {"config": {"commitizen": {"path": "new"}}}
        assert deep_merge(target, source) == {
            "config": {"commitizen": {"path": "new"}, "other": 1}
        }

    def test_object_replaces_scalar(self) -> None:
        assert deep_merge({"engines": "node"}, {"engines": {"node": ">=20"}}) == {
            "engines": {"node": ">=20"}
        }

    def test_inputs_not_mutated(self) -> None:
        target = {"scripts": {"test": "jest"}, "keywords": ["x"]}
        source = {"scripts": {"lint": "eslint"}, "keywords": ["y"]}
        merged = deep_merge(target, source)

        merged["keywords"].append("z")
        assert target == {"scripts": {"test": "jest"}, "keywords": ["x"]}
        assert source["keywords"] == ["y"]

    def test_read_only_mappings_become_dicts(self) -> None:
        source = MappingProxyType({"engines": MappingProxyType({"node": ">=20"})})
        merged = deep_merge({}, source)

        assert type(merged["engines"]) is dict
        assert json.loads(json.dumps(merged)) == {"engines": {"node": ">=20"}}


class TestPackageJsonFile:
    """Tests for reading and updating package.json."""

    def test_read(self, tmp_path: Path) -> None:
        write_package(tmp_path, {"name": "demo"})
        assert read_package_json(tmp_path) == {"name": "demo"}

    def test_read_missing(self, tmp_path: Path) -> None:
        with pytest.raises(PackageJsonError, match="No package.json"):
            read_package_json(tmp_path)

    def test_read_invalid_json(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{not json")
        with pytest.raises(PackageJsonError):
            read_package_json(tmp_path)

    def test_read_non_object(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("[1, 2]")
        with pytest.raises(PackageJsonError, match="JSON object"):
            read_package_json(tmp_path)

    def test_update_writes_indented_json(self, tmp_path: Path) -> None:
        path = write_package(tmp_path, {"name": "demo", "files": ["dist"]})

        update_package_json(tmp_path, {"files": ["lib"], "private": True})

        text = path.read_text()
        assert text.endswith("}\n")
        assert '  "name": "demo"' in text
        assert json.loads(text) == {"name": "demo", "files": ["lib"], "private": True}

    def test_add_quality_scripts_keeps_existing_scripts(self, tmp_path: Path) -> None:
        write_package(tmp_path, {"name": "demo", "scripts": {"start": "node ."}})

        merged = add_quality_scripts(tmp_path)

        assert merged["scripts"]["start"] == "node ."
        for name, command in QUALITY_SCRIPTS.items():
            assert merged["scripts"][name] == command
        assert merged["config"] == COMMITIZEN_CONFIG
        assert read_package_json(tmp_path) == merged

    def test_quality_scripts_include_hooks_and_commit(self) -> None:
        assert QUALITY_SCRIPTS["prepare"] == "husky"
        assert QUALITY_SCRIPTS["commit"] == "cz"
        assert "lint:fix" in QUALITY_SCRIPTS

    def test_declared_dependencies(self, tmp_path: Path) -> None:
        write_package(
            tmp_path,
            {
                "dependencies": {"react": "^18.0.0"},
                "devDependencies": {"jest": "^29.7.0"},
            },
        )
        assert declared_dependencies(tmp_path) == {
            "react": "^18.0.0",
            "jest": "^29.7.0",
        }

    def test_declared_dependencies_without_package_json(self, tmp_path: Path) -> None:
        assert declared_dependencies(tmp_path) == {}
