"""Version bump calculation.

Decides whether a release is warranted and at which version, from the
commits made since the last release tag of the project and of its
dependency roots. Nothing here mutates the repository.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path

from .commits import Severity, check_preset, classify, parse_commits
from .errors import BumpCalculationError, GitOperationError, WorkspaceError
from .models import Commit, DependencyRoot, DependencyUpdate, VersionDecision
from .shell import GitClient
from .versions import bump_version, is_prerelease_type, is_release_type, parse_version
from .workspace import Workspace


def _with_preid(release_type: str, version: str, preid: str | None) -> str:
    """Turn a release type into its prerelease form when preid is set."""
    if not preid or is_prerelease_type(release_type):
        return release_type
    current = parse_version(version)
    if current.prerelease and current.prerelease.startswith(f"{preid}."):
        return "prerelease"
    return f"pre{release_type}"


def _apply_release_as(version: str, release_as: str, preid: str | None) -> str:
    if is_release_type(release_as):
        return bump_version(version, _with_preid(release_as, version, preid), preid)
    # An explicit version string is used as-is
    return str(parse_version(release_as))


async def compute_bump(
    *,
    preset: str,
    project_root: Path,
    dependency_roots: Sequence[DependencyRoot],
    tag_prefix: str,
    release_type: str | None = None,
    preid: str | None = None,
    sync_versions: bool = False,
    allow_empty_release: bool = False,
    skip_commit_types: Sequence[str] = (),
    project_name: str,
    git: GitClient,
    workspace: Workspace,
) -> VersionDecision:
    """Compute the next version of a project.

    Resolution order:
    1. An explicit release_type (release type or version) wins.
    2. Otherwise the highest severity among the project's own commits.
    3. If the project has none, any qualifying dependency commit forces a
       patch release and records one DependencyUpdate per updated root.
    4. Otherwise no release (version is None), unless allow_empty_release
       re-emits the current version.

    Raises:
        BumpCalculationError: If the preset is unknown or history cannot be read.
    """
    check_preset(preset)
    try:
        last_tag = await asyncio.to_thread(git.latest_tag, tag_prefix)
        if last_tag:
            previous_version = last_tag[len(tag_prefix) :]
        else:
            previous_version = workspace.read_version(project_name)

        commit_path = workspace.root if sync_versions else project_root
        project_commits = await asyncio.to_thread(
            git.commits_since, last_tag, commit_path
        )
        dependency_commits: list[list[Commit]] = await asyncio.gather(
            *(
                asyncio.to_thread(git.commits_since, last_tag, workspace.root / root.path)
                for root in dependency_roots
            )
        )
    except (GitOperationError, WorkspaceError) as e:
        raise BumpCalculationError(
            f'Failed to read release history of "{project_name}": {e}'
        ) from e

    severity = classify(parse_commits(project_commits, preset, skip_commit_types))
    dependency_severities = [
        classify(parse_commits(commits, preset, skip_commit_types))
        for commits in dependency_commits
    ]
    updated_roots = [
        (root, dep_severity)
        for root, dep_severity in zip(dependency_roots, dependency_severities)
        if dep_severity > Severity.NONE
    ]

    decision = VersionDecision(previous_version=previous_version, previous_tag=last_tag)

    if release_type:
        version = _apply_release_as(previous_version, release_type, preid)
    elif severity > Severity.NONE:
        bump = _with_preid(severity.release_type or "patch", previous_version, preid)
        version = bump_version(previous_version, bump, preid)
    elif updated_roots:
        version = bump_version(
            previous_version, _with_preid("patch", previous_version, preid), preid
        )
    elif allow_empty_release:
        version = (
            bump_version(previous_version, "prerelease", preid)
            if preid
            else previous_version
        )
    else:
        return decision

    dependency_updates: list[DependencyUpdate] = []
    # Only recorded when dependencies alone triggered the release
    if severity == Severity.NONE and not release_type:
        for root, dep_severity in updated_roots:
            if sync_versions:
                dep_version = version
            else:
                dep_version = _bump_dependency(root, dep_severity, preid, workspace)
            dependency_updates.append(
                DependencyUpdate(name=root.name, version=dep_version)
            )

    return decision.model_copy(
        update={"version": version, "dependency_updates": dependency_updates}
    )


def _bump_dependency(
    root: DependencyRoot, severity: Severity, preid: str | None, workspace: Workspace
) -> str:
    """Next version of a dependency root, from its own manifest version."""
    try:
        current = workspace.read_version(root.name)
    except WorkspaceError as e:
        raise BumpCalculationError(
            f'Failed to read the version of dependency "{root.name}": {e}'
        ) from e
    if root.release_as and is_release_type(root.release_as):
        release_type = root.release_as
    else:
        release_type = severity.release_type or "patch"
    return bump_version(current, _with_preid(release_type, current, preid), preid)
