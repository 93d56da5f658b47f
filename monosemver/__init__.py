"""monosemver: semantic versioning for projects in a uv workspace."""

from __future__ import annotations

from monosemver.config import ReleaseOptions, load_options
from monosemver.models import RunResult
from monosemver.pipeline import release, run_release

__all__ = [
    "ReleaseOptions",
    "RunResult",
    "load_options",
    "release",
    "run_release",
]
