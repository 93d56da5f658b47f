"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
import tomlkit

from monosemver.models import ProjectInfo, TargetConfig
from tests.fakes import EventRecorder, FakeExecutor, FakeWorkspace


@pytest.fixture
def events() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def projects() -> dict[str, ProjectInfo]:
    """app → lib → core, plus an unrelated tool project."""
    return {
        "app": ProjectInfo(
            name="app",
            path="packages/app",
            version="1.0.0",
            deps=["lib"],
            targets={
                "deploy": TargetConfig(options={"command": "deploy", "args": ["{{tag}}"]}),
                "notify": TargetConfig(
                    options={"command": "notify", "args": ["{{projectName}}@{{version}}"]}
                ),
            },
        ),
        "lib": ProjectInfo(name="lib", path="packages/lib", version="0.3.0", deps=["core"]),
        "core": ProjectInfo(name="core", path="packages/core", version="2.1.0"),
        "tool": ProjectInfo(name="tool", path="packages/tool", version="0.1.0"),
    }


@pytest.fixture
def workspace(tmp_path: Path, projects: dict[str, ProjectInfo]) -> FakeWorkspace:
    for info in projects.values():
        (tmp_path / info.path).mkdir(parents=True, exist_ok=True)
    return FakeWorkspace(tmp_path, projects)


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def tmp_pyproject(tmp_path: Path) -> Path:
    """Create a temporary pyproject.toml file."""
    content = """\
[project]
name = "test-package"
version = "1.0.0"
dependencies = [
    "requests>=2.0",
    "internal-dep>=1.0",
]

[project.optional-dependencies]
dev = ["pytest>=8.0", "another-internal>=0.5"]

[dependency-groups]
test = ["pytest>=8.0", "group-internal>=0.1"]
"""
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text(content)
    return pyproject


@pytest.fixture
def sample_toml_doc() -> tomlkit.TOMLDocument:
    """Create a sample TOML document."""
    content = """\
[project]
name = "my-package"
version = "2.0.0"
dependencies = ["click>=8.0", "pydantic>=2.0"]

[project.optional-dependencies]
dev = ["pytest>=8.0"]

[dependency-groups]
test = ["hypothesis>=6.0"]

[tool.uv.workspace]
members = ["packages/*", "libs/*"]

[tool.monosemver]
preset = "conventional"
syncVersions = true
"""
    return tomlkit.parse(content)
