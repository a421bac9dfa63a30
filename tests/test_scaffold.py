"""Tests for setup and init orchestration."""

import json
import os
import stat
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from qa_scaffold.compat import Decision
from qa_scaffold.config import ScaffoldConfig
from qa_scaffold.git import HuskyError
from qa_scaffold.package_manager import PackageManagerError
from qa_scaffold.project_types import NODE, REACT
from qa_scaffold.scaffold import (
    Outcome,
    SetupOptions,
    plan_setup,
    run_init,
    run_setup,
)


class FakePackageManager:
    """In-memory package manager recording what it was asked to do."""

    def __init__(self, root: Path, versions: dict[str, str] | None = None) -> None:
        self.root = root
        self.versions = versions or {}
        self.installed_dev: list[str] = []
        self.updated: list[str] = []
        self.init_calls = 0
        self.fail_install = False

    def is_installed(self, name: str) -> bool:
        return name in self.versions

    def install(self, packages) -> None:
        self.install_dev(packages)

    def install_dev(self, packages) -> None:
        if self.fail_install:
            raise PackageManagerError(["npm", "install"], "network down")
        self.installed_dev.extend(packages)

    def get_installed_version(self, name: str) -> str | None:
        return self.versions.get(name)

    def init_project(self) -> None:
        self.init_calls += 1
        (self.root / "package.json").write_text(
            json.dumps({"name": self.root.name, "version": "1.0.0"})
        )

    def update_package(self, name: str) -> None:
        self.updated.append(name)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "demo-app"
    root.mkdir()
    (root / "package.json").write_text(json.dumps({"name": "demo-app"}))
    return root


@pytest.fixture
def mock_git():
    """Patch git init and husky so no external commands run."""
    with (
        patch("qa_scaffold.scaffold.init_repo", return_value=True) as init_repo,
        patch("qa_scaffold.scaffold.install_hooks") as install_hooks,
    ):
        yield MagicMock(init_repo=init_repo, install_hooks=install_hooks)


class TestRunSetup:
    """Tests for run_setup()."""

    def test_full_setup_succeeds(self, project: Path, mock_git) -> None:
        report = run_setup(
            project,
            SetupOptions(skip_install=True),
            package_manager=FakePackageManager(project),
        )

        assert report.outcome is Outcome.SUCCESS
        assert (project / ".eslintrc.json").exists()
        assert (project / ".husky" / "pre-commit").exists()
        assert (project / "tests" / "unit" / "sample.test.js").exists()
        assert (project / "src" / "utils").is_dir()
        jest_config = (project / "jest.config.js").read_text()
        assert "demo-app" in jest_config
        mock_git.install_hooks.assert_called_once_with(project)

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
    def test_hooks_executable(self, project: Path, mock_git) -> None:
        run_setup(project, SetupOptions(skip_install=True))
        mode = (project / ".husky" / "commit-msg").stat().st_mode
        assert mode & stat.S_IXUSR

    def test_scripts_added_to_package_json(self, project: Path, mock_git) -> None:
        run_setup(project, SetupOptions(skip_install=True))

        data = json.loads((project / "package.json").read_text())
        assert data["name"] == "demo-app"
        assert data["scripts"]["prepare"] == "husky"
        assert data["config"]["commitizen"]["path"].endswith(
            "cz-conventional-changelog"
        )

    def test_missing_package_json_fails(self, tmp_path: Path, mock_git) -> None:
        report = run_setup(tmp_path, SetupOptions(skip_install=True))

        assert report.outcome is Outcome.FAILED
        assert not (tmp_path / ".eslintrc.json").exists()
        mock_git.install_hooks.assert_not_called()

    def test_invalid_package_json_fails(self, tmp_path: Path, mock_git) -> None:
        (tmp_path / "package.json").write_text("[]")
        report = run_setup(tmp_path, SetupOptions(skip_install=True))
        assert report.outcome is Outcome.FAILED

    def test_invalid_project_type_fails(self, project: Path, mock_git) -> None:
        report = run_setup(project, SetupOptions(project_type="vue"))
        assert report.outcome is Outcome.FAILED
        assert "vue" in report.errors[0]

    def test_existing_files_kept_without_force(self, project: Path, mock_git) -> None:
        (project / ".eslintrc.json").write_text('{"root": true}')

        report = run_setup(project, SetupOptions(skip_install=True))

        assert (project / ".eslintrc.json").read_text() == '{"root": true}'
        assert project / ".eslintrc.json" in report.materialization.skipped
        assert report.outcome is Outcome.SUCCESS

    def test_force_overwrites(self, project: Path, mock_git) -> None:
        (project / ".eslintrc.json").write_text('{"root": true}')

        run_setup(project, SetupOptions(skip_install=True, force=True))

        assert (project / ".eslintrc.json").read_text() != '{"root": true}'

    def test_failed_artifact_gives_warnings(self, project: Path, mock_git) -> None:
        (project / ".husky").write_text("in the way")

        report = run_setup(project, SetupOptions(skip_install=True))

        assert report.outcome is Outcome.COMPLETED_WITH_WARNINGS
        assert len(report.materialization.failed) == 4
        assert (project / ".eslintrc.json").exists()

    def test_installs_missing_dependencies(self, project: Path, mock_git) -> None:
        pm = FakePackageManager(project, versions={"jest": "29.7.0"})

        report = run_setup(project, SetupOptions(), package_manager=pm)

        assert "jest@^29.7.0" not in pm.installed_dev
        assert "eslint@^8.57.0" in pm.installed_dev
        assert report.installed == pm.installed_dev
        assert report.outcome is Outcome.SUCCESS

    def test_skip_install_installs_nothing(self, project: Path, mock_git) -> None:
        pm = FakePackageManager(project)
        run_setup(project, SetupOptions(skip_install=True), package_manager=pm)
        assert pm.installed_dev == []

    def test_install_failure_is_a_warning(self, project: Path, mock_git) -> None:
        pm = FakePackageManager(project)
        pm.fail_install = True

        report = run_setup(project, SetupOptions(), package_manager=pm)

        assert report.outcome is Outcome.COMPLETED_WITH_WARNINGS
        assert (project / ".eslintrc.json").exists()

    def test_conflict_decision_is_injected(self, project: Path, mock_git) -> None:
        pm = FakePackageManager(
            project, versions={"husky": "9.0.11", "lint-staged": "9.5.0"}
        )
        should_proceed = MagicMock(return_value=Decision.UPDATE)

        report = run_setup(
            project, SetupOptions(), package_manager=pm, should_proceed=should_proceed
        )

        should_proceed.assert_called_once()
        assert pm.updated == ["lint-staged"]
        assert report.conflicts[0].updated

    def test_kept_conflict_is_a_warning(self, project: Path, mock_git) -> None:
        pm = FakePackageManager(
            project, versions={"husky": "9.0.11", "lint-staged": "9.5.0"}
        )

        report = run_setup(project, SetupOptions(), package_manager=pm)

        assert pm.updated == []
        assert report.outcome is Outcome.COMPLETED_WITH_WARNINGS

    def test_husky_failure_continue(self, project: Path, mock_git) -> None:
        mock_git.install_hooks.side_effect = HuskyError("no .git")
        confirm = MagicMock(return_value=True)

        report = run_setup(project, SetupOptions(skip_install=True), confirm=confirm)

        confirm.assert_called_once()
        assert report.outcome is Outcome.COMPLETED_WITH_WARNINGS

    def test_husky_failure_abort(self, project: Path, mock_git) -> None:
        mock_git.install_hooks.side_effect = HuskyError("no .git")

        report = run_setup(
            project, SetupOptions(skip_install=True), confirm=lambda message: False
        )

        assert report.outcome is Outcome.FAILED

    def test_custom_templates_dir(
        self, project: Path, tmp_path: Path, mock_git
    ) -> None:
        templates = tmp_path / "templates" / "common"
        templates.mkdir(parents=True)
        (templates / "gitignore").write_text("dist/\n")

        report = run_setup(
            project,
            SetupOptions(skip_install=True, templates_dir=tmp_path / "templates"),
        )

        assert (project / ".gitignore").read_text() == "dist/\n"
        assert not (project / ".eslintrc.json").exists()
        assert report.outcome is Outcome.COMPLETED_WITH_WARNINGS

    def test_reporter_receives_summary(self, project: Path, mock_git) -> None:
        reporter = MagicMock()
        run_setup(project, SetupOptions(skip_install=True), reporter=reporter)

        titles = [c.args[0] for c in reporter.show_header.call_args_list]
        assert titles[-1] == "Setup Summary"


class TestPlanSetup:
    """Tests for plan_setup()."""

    def test_writes_nothing(self, project: Path) -> None:
        resolution = plan_setup(project, SetupOptions(project_type="react"))

        assert resolution.project_type == "react"
        assert resolution.directories == REACT.directories
        assert not (project / ".eslintrc.json").exists()

    def test_user_variables_override_defaults(self, project: Path) -> None:
        resolution = plan_setup(
            project, SetupOptions(variables={"projectName": "renamed"})
        )
        jest = next(
            a for a in resolution.artifacts if a.output_path == "jest.config.js"
        )
        assert "renamed" in jest.content


class TestRunInit:
    """Tests for run_init()."""

    def test_creates_project(self, tmp_path: Path, mock_git) -> None:
        directory = tmp_path / "new-app"
        pm = FakePackageManager(directory)

        report = run_init(
            directory, SetupOptions(skip_install=True), package_manager=pm
        )

        assert report.outcome is Outcome.SUCCESS
        assert pm.init_calls == 1
        data = json.loads((directory / "package.json").read_text())
        assert data["name"] == "new-app"
        assert data["type"] == NODE.package_defaults["type"]
        assert data["engines"] == {"node": ">=20.0.0"}
        assert "lint" in data["scripts"]
        assert (directory / "src").is_dir()
        mock_git.init_repo.assert_any_call(directory)

    def test_existing_package_json_is_kept(self, project: Path, mock_git) -> None:
        pm = FakePackageManager(project)

        run_init(project, SetupOptions(skip_install=True), package_manager=pm)

        assert pm.init_calls == 0
        assert json.loads((project / "package.json").read_text())["name"] == (
            "demo-app"
        )

    def test_init_forces_overwrite(self, project: Path, mock_git) -> None:
        (project / ".prettierrc.json").write_text("old")

        run_init(
            project,
            SetupOptions(skip_install=True),
            package_manager=FakePackageManager(project),
        )

        assert (project / ".prettierrc.json").read_text() != "old"

    def test_npm_init_failure(self, tmp_path: Path, mock_git) -> None:
        pm = MagicMock()
        pm.init_project.side_effect = PackageManagerError(["npm", "init"], "boom")

        report = run_init(tmp_path / "x", SetupOptions(), package_manager=pm)

        assert report.outcome is Outcome.FAILED

    def test_invalid_project_type(self, tmp_path: Path, mock_git) -> None:
        report = run_init(tmp_path / "x", SetupOptions(project_type="vue"))
        assert report.outcome is Outcome.FAILED
        assert not (tmp_path / "x").exists()


class TestSetupOptions:
    """Tests for SetupOptions.from_config()."""

    def test_from_config(self, tmp_path: Path) -> None:
        config = ScaffoldConfig(
            project_type="next",
            force=True,
            templates_dir=str(tmp_path),
            variables={"author": "me"},
        )
        options = SetupOptions.from_config(config)

        assert options.project_type == "next"
        assert options.force is True
        assert options.skip_install is False
        assert options.templates_dir == tmp_path
        assert options.variables == {"author": "me"}

    def test_defaults_when_unset(self) -> None:
        options = SetupOptions.from_config(ScaffoldConfig())
        assert options.project_type == "node"
        assert options.templates_dir is None
