"""Tests for monosemver.workspace."""

from __future__ import annotations

from pathlib import Path

import pytest

from monosemver.errors import WorkspaceError
from monosemver.toml import load_pyproject
from monosemver.workspace import UvWorkspace
from tests.fakes import write_uv_workspace

APP_EXTRA = """\
dependencies = ["lib>=1.0", "requests>=2.0"]

[tool.monosemver.targets.deploy]
options = { command = "deploy", args = ["{{tag}}"] }

[tool.monosemver.targets.deploy.configurations.production]
args = ["--prod", "{{tag}}"]
"""


@pytest.fixture
def uv_root(tmp_path: Path) -> Path:
    write_uv_workspace(tmp_path, {"app": APP_EXTRA, "lib": "", "tool": ""})
    return tmp_path


class TestDiscover:
    def test_finds_all_members(self, uv_root: Path) -> None:
        ws = UvWorkspace.discover(uv_root)

        assert set(ws.projects) == {"app", "lib", "tool"}
        assert ws.root == uv_root.resolve()
        assert ws.projects["app"].path == "packages/app"
        assert ws.projects["lib"].version == "1.0.0"

    def test_keeps_only_internal_deps(self, uv_root: Path) -> None:
        ws = UvWorkspace.discover(uv_root)

        assert ws.projects["app"].deps == ["lib"]
        assert ws.projects["lib"].deps == []

    def test_reads_targets(self, uv_root: Path) -> None:
        target = UvWorkspace.discover(uv_root).projects["app"].targets["deploy"]

        assert target.executor == "command"
        assert target.options == {"command": "deploy", "args": ["{{tag}}"]}
        assert target.configurations == {"production": {"args": ["--prod", "{{tag}}"]}}

    def test_no_members_raises(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[tool.uv.workspace]\nmembers = ["packages/*"]\n')

        with pytest.raises(WorkspaceError, match="No projects found"):
            UvWorkspace.discover(tmp_path)

    def test_missing_workspace_table_raises(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "solo"\n')

        with pytest.raises(WorkspaceError, match="tool.uv.workspace"):
            UvWorkspace.discover(tmp_path)

    def test_invalid_target_raises(self, tmp_path: Path) -> None:
        write_uv_workspace(tmp_path, {"app": '\n[tool.monosemver.targets.bad]\noptions = "nope"\n'})

        with pytest.raises(WorkspaceError, match='Invalid target configuration in project "app"'):
            UvWorkspace.discover(tmp_path)


class TestVersions:
    def test_read_version_from_manifest(self, uv_root: Path) -> None:
        ws = UvWorkspace.discover(uv_root)
        assert ws.read_version("lib") == "1.0.0"

    def test_write_version_pins_internal_deps(self, uv_root: Path) -> None:
        ws = UvWorkspace.discover(uv_root)

        ws.write_version("lib", "1.1.0")
        manifest = ws.write_version("app", "2.0.0")

        doc = load_pyproject(manifest)
        assert manifest == ws.root / "packages" / "app" / "pyproject.toml"
        assert doc["project"]["version"] == "2.0.0"
        assert list(doc["project"]["dependencies"]) == ["lib==1.1.0", "requests>=2.0"]
        assert ws.read_version("lib") == "1.1.0"
        assert ws.projects["app"].version == "2.0.0"

    def test_write_version_preserves_formatting(self, uv_root: Path) -> None:
        ws = UvWorkspace.discover(uv_root)

        ws.write_version("app", "1.0.1")

        text = (uv_root / "packages" / "app" / "pyproject.toml").read_text()
        assert "[tool.monosemver.targets.deploy]" in text
        assert 'args = ["{{tag}}"]' in text

    def test_unknown_project(self, uv_root: Path) -> None:
        ws = UvWorkspace.discover(uv_root)

        with pytest.raises(WorkspaceError, match="ghost"):
            ws.project_root("ghost")
