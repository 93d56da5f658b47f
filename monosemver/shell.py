"""Shell and git utilities.

Provides a thin wrapper around ``git`` subprocess calls and the GitClient
used by the release pipeline to read history and to commit, tag and push.
"""

from __future__ import annotations

import subprocess
from collections.abc import Iterable
from pathlib import Path

from .errors import GitOperationError
from .logger import Observer, log_step
from .models import Commit
from .versions import is_valid_version, parse_version

# Field/record separators for machine-readable `git log` output
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"


def git(*args: str, cwd: Path | str | None = None, check: bool = True) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "status", "--short").
        cwd: Directory to run git in. Defaults to the current directory.
        check: If True (default), raise GitOperationError on non-zero exit.
               Set to False for commands that may legitimately fail.

    Returns:
        Stripped stdout from the git command.
    """
    result = subprocess.run(
        ["git", *args], cwd=cwd, capture_output=True, text=True, check=False
    )
    if check and result.returncode != 0:
        raise GitOperationError(
            f"git {' '.join(args)} failed with exit code {result.returncode}",
            stderr=result.stderr.strip(),
        )
    return result.stdout.strip()


class GitClient:
    """Version-control capability backed by the git CLI."""

    def __init__(self, cwd: Path | str | None = None) -> None:
        self.cwd = cwd

    def _git(self, *args: str, check: bool = True) -> str:
        return git(*args, cwd=self.cwd, check=check)

    def latest_tag(self, prefix: str) -> str | None:
        """Find the highest tag whose suffix after prefix is a semver version.

        Tags are compared with semver precedence, so "pkg-1.10.0" beats
        "pkg-1.9.0" and "pkg-1.0.0" beats "pkg-1.0.0-beta.1".
        Returns None if no matching tag exists yet.
        """
        tags = self._git("tag", "--list", f"{prefix}*")
        candidates = [
            tag for tag in tags.splitlines() if is_valid_version(tag[len(prefix) :])
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda tag: parse_version(tag[len(prefix) :]))

    def commits_since(self, ref: str | None, path: Path | str) -> list[Commit]:
        """Return commits after ref (all history when ref is None) touching path."""
        rev = f"{ref}..HEAD" if ref else "HEAD"
        output = self._git(
            "log", rev, f"--format=%H{_FIELD_SEP}%B{_RECORD_SEP}", "--", str(path)
        )
        commits: list[Commit] = []
        for record in output.split(_RECORD_SEP):
            record = record.strip()
            if not record:
                continue
            sha, _, message = record.partition(_FIELD_SEP)
            commits.append(Commit(sha=sha.strip(), message=message.strip()))
        return commits

    def add(self, paths: Iterable[Path | str]) -> None:
        self._git("add", *(str(p) for p in paths))

    def commit(self, message: str, *, no_verify: bool = False) -> None:
        args = ["commit", "-m", message]
        if no_verify:
            args.append("--no-verify")
        self._git(*args)

    def tag(self, name: str, message: str) -> None:
        """Create an annotated tag on HEAD."""
        self._git("tag", "-a", name, "-m", message)

    def push(self, *, remote: str, branch: str, tag: str, no_verify: bool = False) -> None:
        # --atomic: either both the branch and the tag land, or neither does
        args = ["push", "--atomic", remote, branch, tag]
        if no_verify:
            args.append("--no-verify")
        self._git(*args)


def try_push(
    git_client: GitClient,
    *,
    tag: str,
    branch: str | None,
    no_verify: bool,
    remote: str | None,
    project_name: str,
    observer: Observer,
) -> None:
    """Push the release tag and branch to a remote.

    Raises:
        GitOperationError: If remote or branch is missing, or the push fails.
    """
    if not remote or not branch:
        raise GitOperationError(
            "Missing option --remote or --baseBranch, both are required to push."
        )
    git_client.push(remote=remote, branch=branch, tag=tag, no_verify=no_verify)
    log_step(
        observer,
        step="push_success",
        message=f'Pushed to "{remote}" "{branch}".',
        project_name=project_name,
    )
