"""Commit message parsing against a convention preset.

Supports the "angular" and "conventionalcommits" presets. Both read the
``type(scope): description`` header and ``BREAKING CHANGE:`` footers; only
"conventionalcommits" also treats ``type!:`` as a breaking change.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import IntEnum

from pydantic import BaseModel, Field

from .errors import BumpCalculationError
from .models import Commit

PRESETS = ("angular", "conventionalcommits")

_HEADER_RE = re.compile(
    r"^(?P<type>[\w-]+)(?:\((?P<scope>[^()]*)\))?(?P<bang>!)?: (?P<description>.+)$"
)
_BREAKING_RE = re.compile(r"^BREAKING[ -]CHANGE:\s*(?P<note>.*)$", re.MULTILINE)


class Severity(IntEnum):
    """Bump level implied by a set of commits, ordered by impact."""

    NONE = 0
    PATCH = 1
    MINOR = 2
    MAJOR = 3

    @property
    def release_type(self) -> str | None:
        return {
            Severity.PATCH: "patch",
            Severity.MINOR: "minor",
            Severity.MAJOR: "major",
        }.get(self)


class ParsedCommit(BaseModel):
    """A commit message split into its conventional parts.

    Attributes:
        sha: Full commit hash.
        commit_type: The type prefix ("feat", "fix", ...) or None when the
                     header does not follow the convention.
        scope: Optional scope in parentheses.
        description: Header text after the colon, or the whole header.
        breaking_notes: Text of every breaking change note.
    """

    sha: str = ""
    commit_type: str | None = None
    scope: str | None = None
    description: str
    is_breaking: bool = False
    breaking_notes: list[str] = Field(default_factory=list)

    @property
    def is_conventional(self) -> bool:
        return self.commit_type is not None

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @classmethod
    def parse(cls, commit: Commit, preset: str) -> ParsedCommit:
        check_preset(preset)
        header, _, body = commit.message.strip().partition("\n")
        notes = [m.group("note").strip() for m in _BREAKING_RE.finditer(body)]

        match = _HEADER_RE.match(header.strip())
        if not match:
            return cls(
                sha=commit.sha,
                description=header.strip(),
                is_breaking=bool(notes),
                breaking_notes=notes,
            )

        description = match.group("description").strip()
        if match.group("bang") and preset == "conventionalcommits":
            # A "!" without footer uses the header text as the note
            notes = notes or [description]
        return cls(
            sha=commit.sha,
            commit_type=match.group("type").lower(),
            scope=match.group("scope") or None,
            description=description,
            is_breaking=bool(notes),
            breaking_notes=notes,
        )

    @property
    def severity(self) -> Severity:
        if self.is_breaking:
            return Severity.MAJOR
        if self.commit_type in ("feat", "feature"):
            return Severity.MINOR
        return Severity.PATCH


def check_preset(preset: str) -> None:
    if preset not in PRESETS:
        raise BumpCalculationError(
            f'Unknown commit convention preset "{preset}". '
            f"Available presets: {', '.join(PRESETS)}."
        )


def parse_commits(
    commits: Iterable[Commit],
    preset: str,
    skip_commit_types: Iterable[str] = (),
) -> list[ParsedCommit]:
    """Parse commits, dropping those whose type is listed in skip_commit_types."""
    skipped = set(skip_commit_types)
    parsed = (ParsedCommit.parse(c, preset) for c in commits)
    return [pc for pc in parsed if pc.commit_type not in skipped]


def classify(parsed: Iterable[ParsedCommit]) -> Severity:
    """Return the highest severity among the given commits.

    Any commit that survived filtering warrants at least a patch release.
    """
    return max((pc.severity for pc in parsed), default=Severity.NONE)


def group_commits_by_type(parsed: Iterable[ParsedCommit]) -> dict[str, list[ParsedCommit]]:
    grouped: dict[str, list[ParsedCommit]] = {}
    for pc in parsed:
        grouped.setdefault(pc.commit_type or "other", []).append(pc)
    return grouped
