"""Workspace graph and manifest capabilities.

The release pipeline talks to the workspace only through the Workspace
protocol. UvWorkspace implements it for a uv workspace: projects are the
[tool.uv.workspace] members, manifests are their pyproject.toml files and
targets are declared under [tool.monosemver.targets].
"""

from __future__ import annotations

import glob
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from .deps import dep_canonical_name, rewrite_pyproject
from .errors import WorkspaceError
from .models import ProjectInfo, TargetConfig
from .toml import (
    get_all_dependency_strings,
    get_project_name,
    get_project_version,
    get_tool_table,
    get_workspace_member_globs,
    load_pyproject,
)


class Workspace(Protocol):
    root: Path

    @property
    def projects(self) -> dict[str, ProjectInfo]: ...

    def get_project(self, name: str) -> ProjectInfo: ...

    def project_root(self, name: str) -> Path: ...

    def read_version(self, name: str) -> str: ...

    def write_version(self, name: str, version: str) -> Path:
        """Write a project's manifest version and return the manifest path."""
        ...


class UvWorkspace:
    """A uv workspace rooted at a directory containing pyproject.toml."""

    def __init__(self, root: Path, projects: dict[str, ProjectInfo]) -> None:
        self.root = root
        self._projects = projects

    @property
    def projects(self) -> dict[str, ProjectInfo]:
        return self._projects

    @classmethod
    def discover(cls, root: Path | None = None) -> UvWorkspace:
        """Scan the workspace and discover all projects.

        Reads [tool.uv.workspace].members from root pyproject.toml to find
        project directories, then extracts name, version, internal deps and
        targets from each project's pyproject.toml.

        Raises:
            WorkspaceError: If no members are found or a target is malformed.
        """
        root = (root or Path.cwd()).resolve()
        root_doc = load_pyproject(root / "pyproject.toml")
        member_globs = get_workspace_member_globs(root_doc)

        member_dirs: list[Path] = []
        for pattern in member_globs:
            for match in sorted(glob.glob(str(root / pattern))):
                p = Path(match)
                if (p / "pyproject.toml").exists():
                    member_dirs.append(p)

        if not member_dirs:
            raise WorkspaceError("No projects found matching workspace members")

        # First pass: collect basic info from each project
        projects: dict[str, ProjectInfo] = {}
        raw_deps: dict[str, list[str]] = {}
        for d in member_dirs:
            doc = load_pyproject(d / "pyproject.toml")
            name = get_project_name(doc, d.name)
            projects[name] = ProjectInfo(
                name=name,
                path=d.relative_to(root).as_posix(),
                version=get_project_version(doc),
                targets=_read_targets(doc, name),
            )
            raw_deps[name] = get_all_dependency_strings(doc)

        # Second pass: keep only internal deps
        for name, deps in raw_deps.items():
            for dep_str in deps:
                dep_name = dep_canonical_name(dep_str)
                if dep_name in projects and dep_name not in projects[name].deps:
                    projects[name].deps.append(dep_name)

        return cls(root, projects)

    def get_project(self, name: str) -> ProjectInfo:
        try:
            return self._projects[name]
        except KeyError:
            raise WorkspaceError(
                f'Project "{name}" does not exist in the workspace.'
            ) from None

    def project_root(self, name: str) -> Path:
        return self.root / self.get_project(name).path

    def read_version(self, name: str) -> str:
        doc = load_pyproject(self.project_root(name) / "pyproject.toml")
        return get_project_version(doc)

    def write_version(self, name: str, version: str) -> Path:
        """Set a project's version and pin its internal deps to current versions."""
        info = self.get_project(name)
        manifest = self.project_root(name) / "pyproject.toml"
        internal_dep_versions = {
            dep: self._projects[dep].version for dep in info.deps
        }
        rewrite_pyproject(manifest, version, internal_dep_versions)
        info.version = version
        return manifest


def _read_targets(doc, project_name: str) -> dict[str, TargetConfig]:
    raw = get_tool_table(doc).get("targets", {})
    try:
        return {name: TargetConfig.model_validate(cfg) for name, cfg in raw.items()}
    except ValidationError as e:
        raise WorkspaceError(
            f'Invalid target configuration in project "{project_name}": {e}'
        ) from e
