"""Version parsing and bumping utilities.

Handles conversion between version strings and semver objects, with
special handling for incomplete version strings (e.g., "1.0" → "1.0.0"),
and implements the release types accepted by ``releaseAs``.
"""

from __future__ import annotations

import semver

RELEASE_TYPES = (
    "major",
    "minor",
    "patch",
    "premajor",
    "preminor",
    "prepatch",
    "prerelease",
)


def parse_version(version_str: str) -> semver.Version:
    """Parse a version string into a semver.Version object.

    Complete semver strings keep their prerelease and build parts.
    Incomplete versions are padded with zeros:
    - "1" → "1.0.0"
    - "1.2" → "1.2.0"
    """
    if semver.Version.is_valid(version_str):
        return semver.Version.parse(version_str)
    parts = version_str.split(".")
    # Pad with zeros to ensure we have at least 3 parts
    while len(parts) < 3:
        parts.append("0")
    return semver.Version.parse(".".join(parts[:3]))


def is_valid_version(version_str: str) -> bool:
    return semver.Version.is_valid(version_str)


def is_release_type(value: str) -> bool:
    return value in RELEASE_TYPES


def is_prerelease_type(value: str) -> bool:
    return value.startswith("pre")


def _first_prerelease(preid: str | None) -> str:
    return f"{preid}.0" if preid else "0"


def bump_version(version_str: str, release_type: str, preid: str | None = None) -> str:
    """Apply a release type to a version.

    Follows npm semver semantics: bumping a prerelease to its own release
    level finalizes it ("1.2.0-beta.1" + minor → "1.2.0"), and ``pre*``
    types start a new prerelease series identified by ``preid``.

    Examples:
        bump_version("1.2.3", "minor") → "1.3.0"
        bump_version("1.2.3", "premajor", "beta") → "2.0.0-beta.0"
        bump_version("2.0.0-beta.0", "prerelease", "beta") → "2.0.0-beta.1"
        bump_version("2.0.0-alpha.3", "prerelease", "beta") → "2.0.0-beta.0"

    Raises:
        ValueError: If release_type is not a known release type.
    """
    v = parse_version(version_str)

    if release_type == "major":
        if v.prerelease and v.minor == 0 and v.patch == 0:
            return str(v.finalize_version())
        return str(v.bump_major())
    if release_type == "minor":
        if v.prerelease and v.patch == 0:
            return str(v.finalize_version())
        return str(v.bump_minor())
    if release_type == "patch":
        if v.prerelease:
            return str(v.finalize_version())
        return str(v.bump_patch())
    if release_type == "premajor":
        return str(v.bump_major().replace(prerelease=_first_prerelease(preid)))
    if release_type == "preminor":
        return str(v.bump_minor().replace(prerelease=_first_prerelease(preid)))
    if release_type == "prepatch":
        return str(v.bump_patch().replace(prerelease=_first_prerelease(preid)))
    if release_type == "prerelease":
        if not v.prerelease:
            return str(v.bump_patch().replace(prerelease=_first_prerelease(preid)))
        if preid and not v.prerelease.startswith(f"{preid}."):
            # Switching identifier (alpha → beta) restarts the counter
            return str(v.replace(prerelease=_first_prerelease(preid), build=None))
        return str(v.bump_prerelease())

    raise ValueError(f"Unknown release type: {release_type!r}")
