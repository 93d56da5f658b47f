"""CLI entry point for monosemver."""

from __future__ import annotations

from pathlib import Path

import click
from pydantic import ValidationError

from monosemver.config import load_options
from monosemver.errors import WorkspaceError
from monosemver.graph import topo_sort
from monosemver.pipeline import release
from monosemver.workspace import UvWorkspace


def _discover(root: str) -> UvWorkspace:
    try:
        return UvWorkspace.discover(Path(root))
    except WorkspaceError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(package_name="monosemver")
def cli() -> None:
    """Semantic versioning for uv workspaces, driven by conventional commits."""


@cli.command()
@click.argument("project")
@click.option("--root", type=click.Path(file_okay=False), default=".", show_default=True)
@click.option("--dry-run", is_flag=True, help="Compute without writing.")
@click.option("--push", is_flag=True, help="Push the tag and branch.")
@click.option("--remote", default=None, help="Remote to push to.")
@click.option("--base-branch", default=None, help="Branch to push.")
@click.option("--no-verify", is_flag=True, help="Skip git hooks.")
@click.option("--release-as", default=None, help="Release type or explicit version.")
@click.option("--preid", default=None, help="Prerelease identifier (e.g. beta).")
@click.option("--preset", default=None, help="Commit convention preset.")
@click.option("--sync-versions", is_flag=True, help="One version for all.")
@click.option("--track-deps", is_flag=True, help="Count dependency commits.")
@click.option("--skip-commit", is_flag=True, help="Tag without committing.")
@click.option("--allow-empty-release", is_flag=True)
@click.option("--tag-prefix", default=None, help="Tag prefix template.")
@click.option(
    "--post-target",
    "post_targets",
    multiple=True,
    help="project:target to run after release (repeatable).",
)
def version(project: str, root: str, post_targets: tuple[str, ...], **flags) -> None:
    """Compute and apply the next version of PROJECT."""
    workspace = _discover(root)
    # Unset flags keep the configured values
    overrides = {key: value for key, value in flags.items() if value not in (None, False)}
    if post_targets:
        overrides["post_targets"] = list(post_targets)

    try:
        options = load_options(workspace.root, overrides)
    except (ValidationError, WorkspaceError) as e:
        raise click.ClickException(f"Invalid options: {e}") from e

    result = release(options, project, workspace=workspace)
    if not result.success:
        raise SystemExit(1)


@cli.command()
@click.option("--root", type=click.Path(file_okay=False), default=".", show_default=True)
def graph(root: str) -> None:
    """Print workspace projects in dependency order."""
    workspace = _discover(root)
    try:
        order = topo_sort(workspace.projects)
    except RuntimeError as e:
        raise click.ClickException(str(e)) from e

    for name in order:
        info = workspace.projects[name]
        deps = f" → [{', '.join(info.deps)}]" if info.deps else ""
        click.echo(f"  {name} {info.version} ({info.path}){deps}")
