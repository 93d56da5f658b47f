"""Dependency graph utilities.

Provides topological sorting of workspace projects and resolution of the
dependency roots whose commits count toward a project's release.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .errors import DependencyResolutionError
from .models import DependencyRoot, ProjectInfo

if TYPE_CHECKING:
    from .workspace import Workspace


def topo_sort(projects: dict[str, ProjectInfo]) -> list[str]:
    """Topologically sort projects by their internal dependencies.

    Uses Kahn's algorithm to produce an order where dependencies come
    before dependents. Projects with no dependencies are sorted
    alphabetically for deterministic output.

    Raises:
        RuntimeError: If a dependency cycle is detected.

    Example:
        If A depends on B, and B depends on C:
        topo_sort({A, B, C}) → [C, B, A]
    """
    in_degree = {n: 0 for n in projects}
    reverse_deps: dict[str, list[str]] = {n: [] for n in projects}

    for name, info in projects.items():
        for dep in info.deps:
            # Only count dependencies within the projects being sorted
            if dep in projects:
                in_degree[name] += 1
                reverse_deps[dep].append(name)

    queue = sorted(n for n, d in in_degree.items() if d == 0)
    order: list[str] = []

    while queue:
        node = queue.pop(0)
        order.append(node)
        for dependent in sorted(reverse_deps[node]):
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                queue.append(dependent)

    if len(order) != len(projects):
        remaining = set(projects) - set(order)
        raise RuntimeError(f"Dependency cycle detected involving: {remaining}")

    return order


def transitive_deps(project_name: str, projects: dict[str, ProjectInfo]) -> set[str]:
    """Collect every project reachable through dependency edges.

    Raises:
        KeyError: If project_name or one of its dependencies is unknown.
    """
    seen: set[str] = set()
    queue = list(projects[project_name].deps)
    while queue:
        node = queue.pop(0)
        if node in seen or node == project_name:
            continue
        seen.add(node)
        queue.extend(projects[node].deps)
    return seen


def resolve_dependency_roots(
    *,
    project_name: str,
    release_as: str | None,
    track_deps: bool,
    workspace: Workspace,
) -> list[DependencyRoot]:
    """Return the upstream projects whose commits count toward this release.

    Roots are ordered dependencies-first. Only the project's own commits
    count when track_deps is False.

    Raises:
        DependencyResolutionError: If the graph lookup fails for any reason.
    """
    if not track_deps:
        return []

    try:
        projects = workspace.projects
        closure = transitive_deps(project_name, projects)
        subgraph = {name: projects[name] for name in closure | {project_name}}
        order = topo_sort(subgraph)
    except (KeyError, RuntimeError) as e:
        raise DependencyResolutionError(
            f'Failed to determine dependencies of "{project_name}": {e}'
        ) from e

    return [
        DependencyRoot(name=name, path=projects[name].path, release_as=release_as)
        for name in order
        if name in closure
    ]
