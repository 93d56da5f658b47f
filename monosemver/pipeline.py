"""Release pipeline: resolve deps → compute version → apply → push → targets.

This module orchestrates one release run of a workspace project:
1. Resolve the dependency roots whose commits also count
2. Compute the next version from commit history
3. Render the changelog for that version
4. Write manifests and changelog, commit and tag (per project or synced)
5. Push the tag and branch (unless dry run)
6. Run post-release targets with the release notes (unless dry run)

"Nothing changed" is a successful outcome that stops before step 4. An
empty release whose tag already exists skips steps 4 and 5. Any
error is reported through the observer and turned into a failed result.
"""

from __future__ import annotations

import asyncio

from .bump import compute_bump
from .changelog import calculate_changelog, get_changelog_path
from .config import ReleaseOptions
from .errors import DependencyResolutionError
from .executors import TargetExecutor, WorkspaceExecutor
from .graph import resolve_dependency_roots
from .logger import Observer, log_step, print_observer
from .models import DependencyRoot, RunResult, VersionDecision
from .shell import GitClient, try_push
from .targets import run_targets
from .templates import format_commit_message, format_tag, format_tag_prefix
from .version import CommonVersionOptions, version_project, version_workspace
from .workspace import UvWorkspace, Workspace


async def run_release(
    options: ReleaseOptions,
    *,
    project_name: str,
    workspace: Workspace,
    git: GitClient,
    executor: TargetExecutor,
    observer: Observer = print_observer,
) -> RunResult:
    """Execute one release run. Never raises; failures yield success=False."""
    try:
        dependency_roots = resolve_dependency_roots(
            project_name=project_name,
            release_as=options.release_as,
            track_deps=options.track_deps,
            workspace=workspace,
        )
    except DependencyResolutionError as e:
        log_step(
            observer,
            step="failure",
            level="error",
            message=f"Failed to determine dependencies: {e}",
            project_name=project_name,
        )
        return RunResult(success=False)

    try:
        return await _release(
            options,
            project_name=project_name,
            dependency_roots=dependency_roots,
            workspace=workspace,
            git=git,
            executor=executor,
            observer=observer,
        )
    except Exception as e:  # reported through the observer, never raised
        log_step(
            observer,
            step="failure",
            level="error",
            message=str(e) or repr(e),
            project_name=project_name,
        )
        return RunResult(success=False)


async def _release(
    options: ReleaseOptions,
    *,
    project_name: str,
    dependency_roots: list[DependencyRoot],
    workspace: Workspace,
    git: GitClient,
    executor: TargetExecutor,
    observer: Observer,
) -> RunResult:
    tag_prefix = format_tag_prefix(
        version_tag_prefix=options.version_tag_prefix,
        project_name=project_name,
        sync_versions=options.sync_versions,
    )
    project_root = workspace.project_root(project_name)
    decision = await compute_bump(
        preset=options.preset,
        project_root=project_root,
        dependency_roots=dependency_roots,
        tag_prefix=tag_prefix,
        release_type=options.release_as,
        preid=options.preid,
        sync_versions=options.sync_versions,
        allow_empty_release=options.allow_empty_release,
        skip_commit_types=options.skip_commit_types,
        project_name=project_name,
        git=git,
        workspace=workspace,
    )

    root = workspace.root if options.sync_versions else project_root
    # Joined with the already computed decision; the bump is not recomputed
    decision, changelog = await asyncio.gather(
        _echo(decision),
        calculate_changelog(
            decision,
            git=git,
            commit_path=root,
            changelog_path=get_changelog_path(root),
            preset=options.preset,
            skip_commit_types=options.skip_commit_types,
        ),
    )

    if decision.version is None:
        log_step(
            observer,
            step="nothing_changed",
            message="Nothing changed since last release.",
            project_name=project_name,
        )
        return RunResult(success=True)

    log_step(
        observer,
        step="calculate_version_success",
        message=f'Calculated new version "{decision.version}".',
        project_name=project_name,
    )

    version = decision.version
    tag = format_tag(tag_prefix=tag_prefix, version=version)
    common = CommonVersionOptions(
        workspace=workspace,
        git=git,
        executor=executor,
        observer=observer,
        project_name=project_name,
        project_root=project_root,
        new_version=version,
        changelog=changelog,
        changelog_header=options.changelog_header,
        tag=tag,
        commit_message=format_commit_message(
            project_name=project_name,
            commit_message_format=options.commit_message_format,
            version=version,
        ),
        dry_run=options.dry_run,
        no_verify=options.no_verify,
        skip_commit=options.skip_commit,
        dependency_updates=list(decision.dependency_updates),
        pre_commit_targets=list(options.pre_commit_targets),
        post_commit_targets=list(options.post_commit_targets),
    )

    # An empty release of an already tagged version has nothing to commit or tag
    already_tagged = decision.previous_tag == tag
    if already_tagged:
        log_step(
            observer,
            step="tag_exists",
            message=f'Tag "{tag}" already exists, skipped commit and tag.',
            project_name=project_name,
        )
        notes = changelog.content
    elif options.sync_versions:
        notes = await version_workspace(
            common, skip_root_changelog=options.skip_root_changelog
        )
    else:
        notes = await version_project(
            common, skip_project_changelog=options.skip_project_changelog
        )

    if options.dry_run:
        return RunResult(success=True)

    # Push before post targets
    if options.push and not already_tagged:
        try_push(
            git,
            tag=tag,
            branch=options.base_branch,
            no_verify=options.no_verify,
            remote=options.remote,
            project_name=project_name,
            observer=observer,
        )

    await run_targets(
        options.post_targets,
        {"notes": notes, "version": version, "projectName": project_name, "tag": tag},
        workspace=workspace,
        executor=executor,
        project_name=project_name,
        observer=observer,
    )
    return RunResult(success=True)


async def _echo(decision: VersionDecision) -> VersionDecision:
    return decision


def release(
    options: ReleaseOptions,
    project_name: str,
    *,
    workspace: Workspace | None = None,
    git: GitClient | None = None,
    executor: TargetExecutor | None = None,
    observer: Observer = print_observer,
) -> RunResult:
    """Synchronous entry point with uv workspace and git CLI defaults."""
    workspace = workspace or UvWorkspace.discover()
    return asyncio.run(
        run_release(
            options,
            project_name=project_name,
            workspace=workspace,
            git=git or GitClient(workspace.root),
            executor=executor or WorkspaceExecutor(workspace),
            observer=observer,
        )
    )
