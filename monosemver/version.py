"""Apply a computed version: manifests, changelog, commit and tag.

version_project handles independent per-project versioning;
version_workspace handles synchronized versioning with one workspace tag.
Both return the release notes. In dry-run mode nothing is written, no git
command mutates the repository and no target runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .changelog import write_changelog
from .errors import ManifestError, WorkspaceError
from .executors import TargetExecutor
from .logger import Observer, log_step
from .models import ChangelogResult, DependencyUpdate
from .shell import GitClient
from .targets import run_targets
from .workspace import Workspace


@dataclass(frozen=True)
class CommonVersionOptions:
    workspace: Workspace
    git: GitClient
    executor: TargetExecutor
    observer: Observer
    project_name: str
    project_root: Path
    new_version: str
    changelog: ChangelogResult
    changelog_header: str
    tag: str
    commit_message: str
    dry_run: bool = False
    no_verify: bool = False
    skip_commit: bool = False
    dependency_updates: list[DependencyUpdate] = field(default_factory=list)
    pre_commit_targets: list[str] = field(default_factory=list)
    post_commit_targets: list[str] = field(default_factory=list)

    @property
    def template_context(self) -> dict[str, str]:
        return {
            "notes": self.changelog.content,
            "version": self.new_version,
            "projectName": self.project_name,
            "tag": self.tag,
        }


def _log(options: CommonVersionOptions, step: str, message: str) -> None:
    log_step(
        options.observer, step=step, message=message, project_name=options.project_name
    )


def _write_manifest(options: CommonVersionOptions, name: str, version: str) -> Path:
    try:
        path = options.workspace.write_version(name, version)
    except (OSError, WorkspaceError) as e:
        raise ManifestError(f'Failed to update the version of "{name}": {e}') from e
    _log(options, "manifest_success", f'Updated "{name}" version to "{version}".')
    return path


async def _commit_and_tag(options: CommonVersionOptions, paths: list[Path]) -> None:
    """Run pre-commit targets, commit, tag, then run post-commit targets."""
    await run_targets(
        options.pre_commit_targets,
        options.template_context,
        workspace=options.workspace,
        executor=options.executor,
        project_name=options.project_name,
        observer=options.observer,
    )

    options.git.add(paths)
    if options.skip_commit:
        _log(options, "commit_skipped", "Skipped commit, changes left in the index.")
    else:
        options.git.commit(options.commit_message, no_verify=options.no_verify)
        _log(options, "commit_success", f'Committed "{options.commit_message}".')

    # No rollback: if tagging fails the commit above stays in place
    options.git.tag(options.tag, options.commit_message)
    _log(options, "tag_success", f'Tagged "{options.tag}".')

    await run_targets(
        options.post_commit_targets,
        options.template_context,
        workspace=options.workspace,
        executor=options.executor,
        project_name=options.project_name,
        observer=options.observer,
    )


def _dry_run(options: CommonVersionOptions) -> str:
    _log(
        options,
        "dry_run",
        f'Dry run: would release "{options.tag}" with:\n{options.changelog.content}',
    )
    return options.changelog.content


async def version_project(
    options: CommonVersionOptions, *, skip_project_changelog: bool = False
) -> str:
    """Release a single project and return its notes."""
    if options.dry_run:
        return _dry_run(options)

    paths = [_write_manifest(options, options.project_name, options.new_version)]

    if not skip_project_changelog:
        paths.append(write_changelog(options.changelog, options.changelog_header))
        _log(options, "changelog_success", f'Generated "{options.changelog.path}".')

    await _commit_and_tag(options, paths)
    return options.changelog.content


async def version_workspace(
    options: CommonVersionOptions, *, skip_root_changelog: bool = False
) -> str:
    """Release the project and its updated dependencies under one workspace tag."""
    if options.dry_run:
        return _dry_run(options)

    # Dependencies first so the project pins their new versions
    paths = [
        _write_manifest(options, update.name, update.version)
        for update in options.dependency_updates
    ]
    paths.append(_write_manifest(options, options.project_name, options.new_version))

    if not skip_root_changelog:
        paths.append(write_changelog(options.changelog, options.changelog_header))
        _log(options, "changelog_success", f'Generated "{options.changelog.path}".')

    await _commit_and_tag(options, paths)
    return options.changelog.content
