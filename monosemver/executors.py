"""Target executors.

An executor receives a target reference and its resolved options and
yields one or more TargetResult objects. The "command" executor runs a
subprocess; further executors can be registered in EXECUTORS.
"""

from __future__ import annotations

import asyncio
import os
import sys
from collections.abc import AsyncIterator, Callable
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field

from .errors import ReleaseError
from .models import TargetRef, TargetResult
from .workspace import Workspace


class TargetExecutor(Protocol):
    def run(
        self, ref: TargetRef, options: dict[str, Any]
    ) -> AsyncIterator[TargetResult]: ...


class CommandOptions(BaseModel):
    """Options accepted by the "command" executor.

    Attributes:
        command: Program to run.
        args: Arguments; non-string values are stringified.
        cwd: Working directory, relative to the workspace root.
        env: Extra environment variables.
    """

    model_config = ConfigDict(extra="forbid")

    command: str
    args: list[str | int | float | bool] = Field(default_factory=list)
    cwd: str | None = None
    env: dict[str, str | int | float | bool] = Field(default_factory=dict)


async def run_command(
    ref: TargetRef, options: dict[str, Any], root: Path
) -> AsyncIterator[TargetResult]:
    """Run a command target and yield a single result.

    A command that cannot be started yields a failed result.

    Raises:
        pydantic.ValidationError: If the options do not match CommandOptions.
    """
    opts = CommandOptions.model_validate(options)
    cwd = root / opts.cwd if opts.cwd else root
    env = {**os.environ, **{k: _stringify(v) for k, v in opts.env.items()}}
    print(f"\n  {ref}: {opts.command} {' '.join(_stringify(a) for a in opts.args)}")
    try:
        process = await asyncio.create_subprocess_exec(
            opts.command, *(_stringify(a) for a in opts.args), cwd=cwd, env=env
        )
    except OSError as e:
        print(f"ERROR: {ref}: could not start {opts.command!r}: {e}", file=sys.stderr)
        yield TargetResult(success=False)
        return
    returncode = await process.wait()
    yield TargetResult(success=returncode == 0)


def _stringify(value: str | int | float | bool) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


ExecutorFn = Callable[[TargetRef, dict[str, Any], Path], AsyncIterator[TargetResult]]

EXECUTORS: dict[str, ExecutorFn] = {"command": run_command}


class WorkspaceExecutor:
    """Dispatches targets to the executor named in their configuration."""

    def __init__(
        self, workspace: Workspace, executors: dict[str, ExecutorFn] | None = None
    ) -> None:
        self.workspace = workspace
        self.executors = executors if executors is not None else EXECUTORS

    def run(self, ref: TargetRef, options: dict[str, Any]) -> AsyncIterator[TargetResult]:
        target = self.workspace.get_project(ref.project).targets[ref.target]
        try:
            executor = self.executors[target.executor]
        except KeyError:
            raise ReleaseError(
                f'Unknown executor "{target.executor}" for target "{ref}". '
                f"Available executors: {', '.join(sorted(self.executors))}."
            ) from None
        return executor(ref, options, self.workspace.root)
