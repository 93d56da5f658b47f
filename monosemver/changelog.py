"""Changelog rendering.

Builds the markdown section for a release from the same commit range the
bump calculation used, and prepends it to CHANGELOG.md below the header.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from datetime import date as date_type
from pathlib import Path

from .commits import ParsedCommit, group_commits_by_type, parse_commits
from .errors import ChangelogError, GitOperationError
from .models import ChangelogResult, VersionDecision
from .shell import GitClient

DEFAULT_HEADER = (
    "# Changelog\n\n"
    "All notable changes to this project will be documented in this file."
)
CHANGELOG_FILE = "CHANGELOG.md"

SECTIONS = {
    "feat": "Features",
    "fix": "Bug Fixes",
    "perf": "Performance Improvements",
    "revert": "Reverts",
}


def get_changelog_path(root: Path | str) -> Path:
    return Path(root) / CHANGELOG_FILE


def _format_entry(pc: ParsedCommit) -> str:
    scope = f"**{pc.scope}:** " if pc.scope else ""
    sha = f" ({pc.short_sha})" if pc.sha else ""
    return f"* {scope}{pc.description}{sha}"


def _breaking_section(parsed: Sequence[ParsedCommit], preset: str) -> list[str]:
    breaking = [pc for pc in parsed if pc.is_breaking]
    if not breaking:
        return []
    title = "⚠ BREAKING CHANGES" if preset == "conventionalcommits" else "BREAKING CHANGES"
    lines = [f"### {title}", ""]
    for pc in breaking:
        scope = f"**{pc.scope}:** " if pc.scope else ""
        lines.extend(f"* {scope}{note}" for note in pc.breaking_notes)
    lines.append("")
    return lines


def render_changelog(
    decision: VersionDecision,
    parsed: Sequence[ParsedCommit],
    *,
    preset: str,
    release_date: date_type,
) -> str:
    """Render the markdown section for one release.

    Returns an empty string when there is no version to release.
    """
    if decision.version is None:
        return ""

    lines = [f"## {decision.version} ({release_date.isoformat()})", ""]
    breaking = _breaking_section(parsed, preset)

    # conventionalcommits lists breaking changes first, angular last
    if preset == "conventionalcommits":
        lines.extend(breaking)

    grouped = group_commits_by_type(parsed)
    for commit_type, title in SECTIONS.items():
        entries = grouped.get(commit_type, [])
        if entries:
            lines.extend([f"### {title}", ""])
            lines.extend(_format_entry(pc) for pc in entries)
            lines.append("")

    if decision.dependency_updates:
        lines.extend(["### Dependency Updates", ""])
        lines.extend(
            f"* `{update.name}` updated to version `{update.version}`"
            for update in decision.dependency_updates
        )
        lines.append("")

    if preset != "conventionalcommits":
        lines.extend(breaking)

    return "\n".join(lines).rstrip() + "\n"


async def calculate_changelog(
    decision: VersionDecision,
    *,
    git: GitClient,
    commit_path: Path,
    changelog_path: Path,
    preset: str,
    skip_commit_types: Sequence[str] = (),
    release_date: date_type | None = None,
) -> ChangelogResult:
    """Compute the changelog section for the decided version.

    Commits are read from the decision's previous tag to HEAD, which is the
    same range the bump calculation classified.

    Raises:
        ChangelogError: If the commit history cannot be read.
    """
    if decision.version is None:
        return ChangelogResult(path=str(changelog_path))

    try:
        commits = await asyncio.to_thread(
            git.commits_since, decision.previous_tag, commit_path
        )
    except GitOperationError as e:
        raise ChangelogError(f"Failed to read commits for the changelog: {e}") from e

    parsed = parse_commits(commits, preset, skip_commit_types)
    content = render_changelog(
        decision,
        parsed,
        preset=preset,
        release_date=release_date or date_type.today(),
    )
    return ChangelogResult(path=str(changelog_path), content=content)


def write_changelog(result: ChangelogResult, header: str = DEFAULT_HEADER) -> Path:
    """Insert the release section below the header, keeping earlier entries.

    Returns:
        Path of the written changelog file.
    """
    path = Path(result.path)
    header = header.strip()
    previous = path.read_text() if path.exists() else ""
    if previous.startswith(header):
        previous = previous[len(header) :]
    previous = previous.strip()

    parts = [header, result.content.strip()]
    if previous:
        parts.append(previous)
    try:
        path.write_text("\n\n".join(parts) + "\n")
    except OSError as e:
        raise ChangelogError(f"Could not write {path}: {e}") from e
    return path
