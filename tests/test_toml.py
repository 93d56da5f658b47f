"""Tests for monosemver.toml."""

from __future__ import annotations

from pathlib import Path

import pytest
import tomlkit

from monosemver.errors import WorkspaceError
from monosemver.toml import (
    get_all_dependency_strings,
    get_project_name,
    get_project_version,
    get_tool_table,
    get_workspace_member_globs,
    load_pyproject,
    save_pyproject,
)


class TestLoadSavePyproject:
    def test_save_preserves_content(self, tmp_pyproject: Path) -> None:
        doc = load_pyproject(tmp_pyproject)
        doc["project"]["version"] = "9.9.9"
        save_pyproject(tmp_pyproject, doc)

        reloaded = load_pyproject(tmp_pyproject)
        assert get_project_version(reloaded) == "9.9.9"
        assert get_project_name(reloaded, "") == "test-package"

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(WorkspaceError, match="Could not read"):
            load_pyproject(tmp_path / "pyproject.toml")

    def test_invalid_toml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text("[project\n")
        with pytest.raises(WorkspaceError):
            load_pyproject(path)


class TestGetProjectName:
    def test_normalizes_name(self) -> None:
        doc = tomlkit.parse('[project]\nname = "My_Package"')
        assert get_project_name(doc, "fallback") == "my-package"

    def test_returns_fallback_when_no_project(self) -> None:
        assert get_project_name(tomlkit.parse(""), "fallback") == "fallback"


class TestGetProjectVersion:
    def test_returns_version(self, sample_toml_doc: tomlkit.TOMLDocument) -> None:
        assert get_project_version(sample_toml_doc) == "2.0.0"

    def test_returns_default_when_missing(self) -> None:
        assert get_project_version(tomlkit.parse("[project]")) == "0.0.0"


class TestGetAllDependencyStrings:
    def test_collects_all_groups(self, sample_toml_doc: tomlkit.TOMLDocument) -> None:
        deps = get_all_dependency_strings(sample_toml_doc)
        assert deps == ["click>=8.0", "pydantic>=2.0", "pytest>=8.0", "hypothesis>=6.0"]

    def test_skips_include_group_entries(self) -> None:
        doc = tomlkit.parse(
            '[dependency-groups]\ndev = ["ruff", {include-group = "test"}]\ntest = ["pytest"]'
        )
        assert get_all_dependency_strings(doc) == ["ruff", "pytest"]


class TestGetWorkspaceMemberGlobs:
    def test_returns_members(self, sample_toml_doc: tomlkit.TOMLDocument) -> None:
        assert get_workspace_member_globs(sample_toml_doc) == ["packages/*", "libs/*"]

    def test_missing_members_raises(self) -> None:
        with pytest.raises(WorkspaceError, match="No \\[tool.uv.workspace\\] members"):
            get_workspace_member_globs(tomlkit.parse("[project]"))


class TestGetToolTable:
    def test_returns_plain_dict(self, sample_toml_doc: tomlkit.TOMLDocument) -> None:
        table = get_tool_table(sample_toml_doc)
        assert table == {"preset": "conventional", "syncVersions": True}
        assert type(table) is dict

    def test_empty_when_absent(self) -> None:
        assert get_tool_table(tomlkit.parse("[project]")) == {}
