"""Exception hierarchy for monosemver.

Every error raised during a release run derives from ReleaseError so the
controller can turn any of them into a failed RunResult.
"""

from __future__ import annotations


class ReleaseError(Exception):
    """Base class for all release failures."""


class WorkspaceError(ReleaseError):
    """The workspace layout or a project manifest could not be read."""


class ManifestError(ReleaseError):
    """A project manifest could not be written."""


class DependencyResolutionError(ReleaseError):
    """The dependency roots of a project could not be determined."""


class BumpCalculationError(ReleaseError):
    """Tag or commit history lookup failed while computing the next version."""


class ChangelogError(ReleaseError):
    """The changelog could not be rendered or written."""


class GitOperationError(ReleaseError):
    """A git command exited with a non-zero status."""

    def __init__(self, message: str, stderr: str = "") -> None:
        super().__init__(f"{message}\n{stderr}".rstrip())
        self.stderr = stderr


class TargetNotFoundError(ReleaseError):
    """A referenced project or target does not exist in the workspace."""

    def __init__(self, message: str, available: list[str] | None = None) -> None:
        super().__init__(message)
        self.available = available or []


class TargetExecutionError(ReleaseError):
    """A target's executor reported a non-success result."""

    def __init__(self, target: str) -> None:
        super().__init__(f'Something went wrong with run-target "{target}".')
        self.target = target
