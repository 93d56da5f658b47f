"""Run downstream targets with templated options.

Targets run one at a time in the order given; the first failure stops the
remaining ones.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from .errors import ReleaseError, TargetExecutionError, TargetNotFoundError
from .executors import TargetExecutor
from .logger import Observer, log_step
from .models import TargetRef
from .templates import OptionNode, resolve_options
from .workspace import Workspace


def parse_target_string(target_string: str) -> TargetRef:
    """Parse "project:target[:configuration]" into a TargetRef.

    Raises:
        TargetNotFoundError: If the string does not name a project and target.
    """
    project, _, rest = target_string.partition(":")
    target, _, configuration = rest.partition(":")
    if not project or not target:
        raise TargetNotFoundError(
            f'Invalid target "{target_string}", expected "project:target[:configuration]".'
        )
    return TargetRef(project=project, target=target, configuration=configuration or None)


def _quoted(names: Sequence[str]) -> str:
    return ", ".join(f'"{name}"' for name in names)


def check_target_exists(ref: TargetRef, workspace: Workspace) -> None:
    """Fail unless both the project and its target exist.

    Raises:
        TargetNotFoundError: Listing the available projects or targets.
    """
    projects = workspace.projects
    project = projects.get(ref.project)
    if project is None:
        available = list(projects)
        raise TargetNotFoundError(
            f'The target project "{ref.project}" does not exist in your workspace. '
            f"Available projects: {_quoted(available)}.",
            available=available,
        )

    if ref.target not in project.targets:
        available = list(project.targets)
        raise TargetNotFoundError(
            f'The target name "{ref.target}" does not exist. '
            f'Available targets for "{ref.project}": {_quoted(available)}.',
            available=available,
        )


def read_target_options(ref: TargetRef, workspace: Workspace) -> dict[str, OptionNode]:
    """Return the target's options with the selected configuration applied."""
    target = workspace.projects[ref.project].targets[ref.target]
    options = dict(target.options)
    if ref.configuration:
        if ref.configuration not in target.configurations:
            raise TargetNotFoundError(
                f'The configuration "{ref.configuration}" does not exist for "{ref}". '
                f"Available configurations: {_quoted(list(target.configurations))}.",
                available=list(target.configurations),
            )
        options.update(target.configurations[ref.configuration])
    return options


async def run_target(
    target_string: str,
    template_context: Mapping[str, Any],
    *,
    workspace: Workspace,
    executor: TargetExecutor,
) -> None:
    ref = parse_target_string(target_string)
    check_target_exists(ref, workspace)

    try:
        options = resolve_options(read_target_options(ref, workspace), template_context)
        async for result in executor.run(ref, options):
            if not result.success:
                raise TargetExecutionError(str(ref))
    except ValidationError as e:
        raise ReleaseError(str(e)) from None


async def run_targets(
    targets: Sequence[str],
    template_context: Mapping[str, Any],
    *,
    workspace: Workspace,
    executor: TargetExecutor,
    project_name: str,
    observer: Observer,
) -> None:
    """Run targets sequentially, each one to completion before the next.

    Raises:
        TargetNotFoundError: If a project or target does not exist.
        TargetExecutionError: If a target reports a non-success result.
        ReleaseError: If a target's options fail validation.
    """
    for target_string in targets:
        await run_target(
            target_string, template_context, workspace=workspace, executor=executor
        )
        log_step(
            observer,
            step="run_target_success",
            message=f'Ran target "{target_string}".',
            project_name=project_name,
        )
