"""Data models for monosemver.

These Pydantic models represent the core data structures passed between
the stages of a release run.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TargetConfig(BaseModel):
    """A named automation unit declared by a project.

    Attributes:
        executor: Name of the executor that runs this target (e.g. "command").
        options: Option tree passed to the executor after template resolution.
        configurations: Named option overrides, selected with
                        "project:target:configuration".
    """

    executor: str = "command"
    options: dict[str, Any] = Field(default_factory=dict)
    configurations: dict[str, dict[str, Any]] = Field(default_factory=dict)


class ProjectInfo(BaseModel):
    """Metadata for a single project in the workspace.

    Attributes:
        name: Canonical project name.
        path: Relative path from workspace root to the project directory.
        version: Current version string from the project's manifest.
        deps: Internal (workspace) dependency names.
        targets: Automation targets declared by the project.
    """

    name: str
    path: str
    version: str = "0.0.0"
    deps: list[str] = Field(default_factory=list)
    targets: dict[str, TargetConfig] = Field(default_factory=dict)


class DependencyRoot(BaseModel):
    """An upstream project whose commits count toward a release decision."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    release_as: str | None = None


class DependencyUpdate(BaseModel):
    """A dependency that was released along with the project."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str


class VersionDecision(BaseModel):
    """Outcome of the bump calculation.

    A ``version`` of None means there is nothing to release.
    """

    version: str | None = None
    previous_version: str | None = None
    previous_tag: str | None = None
    dependency_updates: list[DependencyUpdate] = Field(default_factory=list)


class ChangelogResult(BaseModel):
    path: str
    content: str = ""


class TargetRef(BaseModel):
    """Reference to a target, parsed from "project:target[:configuration]"."""

    model_config = ConfigDict(frozen=True)

    project: str
    target: str
    configuration: str | None = None

    def __str__(self) -> str:
        return f"{self.project}:{self.target}"


class TargetResult(BaseModel):
    success: bool


class LogEvent(BaseModel):
    """A single step reported through the logging side channel."""

    model_config = ConfigDict(frozen=True)

    step: str
    message: str
    project_name: str
    level: str = "info"


class RunResult(BaseModel):
    success: bool


class Commit(BaseModel):
    """A commit read from version control."""

    model_config = ConfigDict(frozen=True)

    sha: str
    message: str
