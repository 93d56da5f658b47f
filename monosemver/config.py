"""Release options.

Options come from [tool.monosemver] in the workspace root pyproject.toml,
overridden by command-line flags. Both camelCase and snake_case keys are
accepted.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel, to_snake

from .changelog import DEFAULT_HEADER
from .templates import DEFAULT_COMMIT_MESSAGE_FORMAT
from .toml import get_tool_table, load_pyproject
from .versions import RELEASE_TYPES, is_release_type, is_valid_version


class ReleaseOptions(BaseModel):
    """Normalized configuration for one release run."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True, extra="forbid"
    )

    push: bool = False
    remote: str = "origin"
    dry_run: bool = False
    track_deps: bool = False
    base_branch: str = "main"
    no_verify: bool = False
    sync_versions: bool = False
    skip_root_changelog: bool = False
    skip_project_changelog: bool = False
    release_as: str | None = Field(
        default=None, validation_alias=AliasChoices("releaseAs", "release_as", "version")
    )
    preid: str | None = None
    changelog_header: str = DEFAULT_HEADER
    version_tag_prefix: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "tagPrefix", "versionTagPrefix", "version_tag_prefix", "tag_prefix"
        ),
    )
    post_targets: list[str] = Field(default_factory=list)
    commit_message_format: str = DEFAULT_COMMIT_MESSAGE_FORMAT
    preset: str = "angular"
    allow_empty_release: bool = False
    skip_commit_types: list[str] = Field(default_factory=list)
    skip_commit: bool = False
    pre_commit_targets: list[str] = Field(default_factory=list)
    post_commit_targets: list[str] = Field(default_factory=list)

    @field_validator("preset", mode="before")
    @classmethod
    def _normalize_preset(cls, value: Any) -> Any:
        if value == "conventional":
            return "conventionalcommits"
        return value or "angular"

    @field_validator("changelog_header", mode="before")
    @classmethod
    def _default_header(cls, value: Any) -> Any:
        return value or DEFAULT_HEADER

    @field_validator("commit_message_format", mode="before")
    @classmethod
    def _default_commit_message(cls, value: Any) -> Any:
        return value or DEFAULT_COMMIT_MESSAGE_FORMAT

    @field_validator("release_as")
    @classmethod
    def _check_release_as(cls, value: str | None) -> str | None:
        if value is None or is_release_type(value) or is_valid_version(value):
            return value
        raise ValueError(
            f"must be one of {', '.join(RELEASE_TYPES)} or a valid semver version"
        )


def load_options(
    root: Path, overrides: Mapping[str, Any] | None = None
) -> ReleaseOptions:
    """Read [tool.monosemver] from root/pyproject.toml and apply overrides.

    Overrides whose value is None are ignored so unset CLI flags do not
    clobber configured values.
    """
    raw = get_tool_table(load_pyproject(root / "pyproject.toml"))
    # Per-project target declarations live in member manifests, not here
    raw.pop("targets", None)
    table = {to_snake(key): value for key, value in raw.items()}
    for key, value in (overrides or {}).items():
        if value is not None:
            table[to_snake(key)] = value
    # releaseAs takes precedence over version, tagPrefix over versionTagPrefix
    if "version" in table:
        table.setdefault("release_as", table.pop("version"))
    if "tag_prefix" in table:
        table["version_tag_prefix"] = table.pop("tag_prefix")
    return ReleaseOptions.model_validate(table)
