"""Tests for monosemver.targets."""

from __future__ import annotations

import pytest

from monosemver.errors import ReleaseError, TargetExecutionError, TargetNotFoundError
from monosemver.executors import WorkspaceExecutor
from monosemver.models import TargetConfig, TargetRef
from monosemver.targets import (
    check_target_exists,
    parse_target_string,
    read_target_options,
    run_targets,
)
from tests.fakes import EventRecorder, FakeExecutor, FakeWorkspace

CONTEXT = {"notes": "## 1.1.0", "version": "1.1.0", "projectName": "app", "tag": "app-1.1.0"}


async def _run(targets, workspace, executor, events) -> None:
    await run_targets(
        targets,
        CONTEXT,
        workspace=workspace,
        executor=executor,
        project_name="app",
        observer=events,
    )


class TestParseTargetString:
    def test_project_and_target(self) -> None:
        assert parse_target_string("app:deploy") == TargetRef(project="app", target="deploy")

    def test_with_configuration(self) -> None:
        ref = parse_target_string("app:deploy:production")
        assert ref.configuration == "production"
        assert str(ref) == "app:deploy"

    @pytest.mark.parametrize("value", ["app", ":deploy", "app:", ""])
    def test_malformed(self, value: str) -> None:
        with pytest.raises(TargetNotFoundError, match="Invalid target"):
            parse_target_string(value)


class TestCheckTargetExists:
    def test_unknown_project_lists_projects(self, workspace: FakeWorkspace) -> None:
        with pytest.raises(TargetNotFoundError) as exc_info:
            check_target_exists(TargetRef(project="ghost", target="build"), workspace)

        assert exc_info.value.available == ["app", "lib", "core", "tool"]
        assert '"ghost" does not exist' in str(exc_info.value)
        assert '"app", "lib", "core", "tool"' in str(exc_info.value)

    def test_unknown_target_lists_targets(self, workspace: FakeWorkspace) -> None:
        with pytest.raises(TargetNotFoundError) as exc_info:
            check_target_exists(TargetRef(project="app", target="build"), workspace)

        assert exc_info.value.available == ["deploy", "notify"]
        assert 'Available targets for "app"' in str(exc_info.value)


class TestReadTargetOptions:
    def test_configuration_overrides_options(self, workspace: FakeWorkspace) -> None:
        workspace.projects["app"].targets["deploy"] = TargetConfig(
            options={"command": "deploy", "args": ["staging"]},
            configurations={"production": {"args": ["production"]}},
        )

        options = read_target_options(parse_target_string("app:deploy:production"), workspace)

        assert options == {"command": "deploy", "args": ["production"]}

    def test_unknown_configuration(self, workspace: FakeWorkspace) -> None:
        with pytest.raises(TargetNotFoundError, match="configuration"):
            read_target_options(parse_target_string("app:deploy:nope"), workspace)


@pytest.mark.asyncio
class TestRunTargets:
    async def test_runs_in_order_with_resolved_options(
        self, workspace: FakeWorkspace, executor: FakeExecutor, events: EventRecorder
    ) -> None:
        await _run(["app:deploy", "app:notify"], workspace, executor, events)

        assert executor.runs == [
            ("app:deploy", {"command": "deploy", "args": ["app-1.1.0"]}),
            ("app:notify", {"command": "notify", "args": ["app@1.1.0"]}),
        ]
        assert events.steps == ["run_target_success", "run_target_success"]
        assert events.events[0].message == 'Ran target "app:deploy".'

    async def test_does_not_mutate_declared_options(
        self, workspace: FakeWorkspace, executor: FakeExecutor, events: EventRecorder
    ) -> None:
        await _run(["app:deploy"], workspace, executor, events)

        assert workspace.projects["app"].targets["deploy"].options["args"] == ["{{tag}}"]

    async def test_missing_project_fails_before_running(
        self, workspace: FakeWorkspace, executor: FakeExecutor, events: EventRecorder
    ) -> None:
        with pytest.raises(TargetNotFoundError, match="ghost"):
            await _run(["ghost:build", "app:deploy"], workspace, executor, events)

        assert executor.runs == []
        assert events.events == []

    async def test_failure_stops_remaining_targets(
        self, workspace: FakeWorkspace, events: EventRecorder
    ) -> None:
        executor = FakeExecutor(results={"app:deploy": [False]})

        with pytest.raises(TargetExecutionError) as exc_info:
            await _run(["app:deploy", "app:notify"], workspace, executor, events)

        assert exc_info.value.target == "app:deploy"
        assert str(exc_info.value) == 'Something went wrong with run-target "app:deploy".'
        assert executor.ran == ["app:deploy"]
        assert events.steps == []

    async def test_any_failed_result_fails_the_target(
        self, workspace: FakeWorkspace, events: EventRecorder
    ) -> None:
        executor = FakeExecutor(results={"app:deploy": [True, False, True]})

        with pytest.raises(TargetExecutionError):
            await _run(["app:deploy"], workspace, executor, events)

    async def test_multiple_successful_results(
        self, workspace: FakeWorkspace, events: EventRecorder
    ) -> None:
        executor = FakeExecutor(results={"app:deploy": [True, True]})

        await _run(["app:deploy"], workspace, executor, events)

        assert events.steps == ["run_target_success"]

    async def test_invalid_options_become_release_error(
        self, workspace: FakeWorkspace, events: EventRecorder
    ) -> None:
        workspace.projects["app"].targets["broken"] = TargetConfig(options={"args": ["x"]})
        executor = WorkspaceExecutor(workspace)

        with pytest.raises(ReleaseError, match="command"):
            await _run(["app:broken"], workspace, executor, events)

    async def test_missing_executable_names_the_target(
        self, workspace: FakeWorkspace, events: EventRecorder
    ) -> None:
        workspace.projects["app"].targets["deploy"] = TargetConfig(
            options={"command": "monosemver-no-such-binary"}
        )

        with pytest.raises(TargetExecutionError, match='"app:deploy"'):
            await _run(["app:deploy"], workspace, WorkspaceExecutor(workspace), events)

    async def test_empty_list_is_noop(
        self, workspace: FakeWorkspace, executor: FakeExecutor, events: EventRecorder
    ) -> None:
        await _run([], workspace, executor, events)

        assert executor.runs == []
