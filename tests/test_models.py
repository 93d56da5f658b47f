"""Tests for monosemver.models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from monosemver.models import DependencyRoot, ProjectInfo, TargetConfig, TargetRef


class TestProjectInfo:
    def test_create_with_required_fields(self) -> None:
        info = ProjectInfo(name="foo", path="packages/foo")
        assert info.version == "0.0.0"
        assert info.deps == []
        assert info.targets == {}

    def test_deps_is_mutable(self) -> None:
        info = ProjectInfo(name="foo", path="pkg")
        info.deps.append("bar")
        assert info.deps == ["bar"]

    def test_targets_are_validated(self) -> None:
        info = ProjectInfo.model_validate(
            {"name": "foo", "path": "pkg", "targets": {"build": {"options": {"command": "make"}}}}
        )
        assert info.targets["build"] == TargetConfig(options={"command": "make"})


class TestTargetRef:
    def test_str_omits_configuration(self) -> None:
        ref = TargetRef(project="app", target="deploy", configuration="production")
        assert str(ref) == "app:deploy"

    def test_frozen(self) -> None:
        ref = TargetRef(project="app", target="deploy")
        with pytest.raises(ValidationError):
            ref.target = "build"


def test_dependency_root_is_hashable() -> None:
    roots = {DependencyRoot(name="lib", path="packages/lib")} | {
        DependencyRoot(name="lib", path="packages/lib")
    }
    assert len(roots) == 1
